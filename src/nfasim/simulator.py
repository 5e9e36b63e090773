# Copyright 2026 The NFASim Authors. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE NFASIM AUTHORS ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL THE NFASIM AUTHORS OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of the NFASim authors.

"""
Builds a small sample automaton and prints its computation over an input
string, one position at a time.

Usage: python -m nfasim [-s STRING] [-v] [-a]

The sample automaton is over the alphabet ``{0, 1}`` with two states: ``s0``
(start) and ``s1`` (final). Every ``0`` leads to ``s0`` and every ``1`` leads
to ``s1``.
"""

import sys
from optparse import OptionParser

from loguru import logger

from nfasim.automata.fsa import NFA
from nfasim.errors import InvalidSymbolError

DEFAULT_STRING = "00110101010"
SEPARATOR = "-" * 15


def sample_nfa():
    """
    Creates the sample automaton.

    Returns:
        NFA: The automaton, in build mode.
    """
    nfa = NFA({"0", "1"})
    state0 = nfa.new_state("s0")
    state1 = nfa.new_state("s1")

    nfa.add_transition(state0, "0", state0)
    nfa.add_transition(state0, "1", state1)
    nfa.add_transition(state1, "0", state0)
    nfa.add_transition(state1, "1", state1)

    nfa.set_start_state(state0, True)
    nfa.set_final_state(state1, True)
    return nfa


def run_trace(nfa, string, stream=sys.stdout):
    """
    Runs ``nfa`` over ``string``, printing the position and current states
    before each step, and the verdict at the end.

    The automaton is stopped again before returning.

    Returns:
        bool: Whether the automaton ended on a final state.
    """
    nfa.start(string)
    try:
        while nfa.position() < len(string):
            print(SEPARATOR, file=stream)
            print("Position:", nfa.position(), file=stream)
            print(nfa.state_names(nfa.current_states()), file=stream)
            nfa.step()

        accepted = nfa.currently_on_final_state()
        print("Accepts!" if accepted else "Rejects!", file=stream)
    finally:
        nfa.stop()
    return accepted


def _parser():
    p = OptionParser(usage="%prog [options]")
    p.add_option(
        "-s",
        "--string",
        dest="string",
        metavar="STRING",
        help="Input string over the alphabet {0, 1}.",
        default=DEFAULT_STRING,
    )
    p.add_option(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Log each computed step to stderr.",
        default=False,
    )
    p.add_option(
        "-a",
        "--all",
        dest="show_all",
        action="store_true",
        help="Print the automaton and the cached trace after the run.",
        default=False,
    )
    return p


def main(argv=None, stream=sys.stdout):
    options, _ = _parser().parse_args(argv)

    if options.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")
        logger.enable("nfasim")

    nfa = sample_nfa()
    try:
        run_trace(nfa, options.string, stream=stream)
    except InvalidSymbolError as e:
        print("Error:", e, file=sys.stderr)
        return 2

    if options.show_all:
        print(SEPARATOR, file=stream)
        nfa.dump(stream=stream)
        nfa.start(options.string)
        if options.string:
            nfa.go_to_step(len(options.string) - 1)
        for position, states in enumerate(nfa.trace()):
            print(position, nfa.state_names(states), file=stream)
        nfa.stop()

    return 0
