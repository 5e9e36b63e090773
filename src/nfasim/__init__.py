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
nfasim - build a nondeterministic finite automaton and step through its
computation over an input string, forwards and backwards.

Example usage:
    >>> from nfasim import NFA
    >>> nfa = NFA("01")
    >>> s0 = nfa.new_state("s0")
    >>> nfa.add_transition(s0, "0", s0)
    True
    >>> nfa.set_start_state(s0, True)
    True
    >>> nfa.start("000")
    >>> nfa.step()
    >>> nfa.state_names(nfa.current_states())
    ['s0']

Logging goes through loguru and is disabled for this package by default;
call ``logger.enable("nfasim")`` to see it.
"""

from loguru import logger

from nfasim.automata.fsa import EPSILON, NFA, Marker, epsilon_closure
from nfasim.errors import (
    CacheConsistencyError,
    InvalidSymbolError,
    NFAError,
    OutOfBoundsError,
    UnknownStateError,
    WrongModeError,
)
from nfasim.version import __version__, versionstring

logger.disable("nfasim")

__all__ = [
    "NFA",
    "EPSILON",
    "Marker",
    "epsilon_closure",
    "NFAError",
    "WrongModeError",
    "UnknownStateError",
    "InvalidSymbolError",
    "OutOfBoundsError",
    "CacheConsistencyError",
    "__version__",
    "versionstring",
]
