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
The run session of an :class:`~nfasim.automata.fsa.NFA`.

A session exists only while its automaton is in run mode. It holds the input
string, the current position in it, the current state set, and a cache of the
state set at every position visited so far.
``steps[0]`` is the configuration the run starts in, and ``steps[i]`` is
reached from ``steps[i - 1]`` by consuming ``string[i]``, the symbol at the
new position. ``string[0]`` is never consumed, and the end position
``len(string)`` consumes nothing. The cache only grows at its end, one
position at a time, so moving backwards is always a lookup.
"""

from cached_property import cached_property
from loguru import logger

from nfasim.errors import CacheConsistencyError, OutOfBoundsError


class RunSession:
    """
    Steps an automaton over a fixed input string.

    Attributes:
        nfa (NFA): The automaton being run. Its graph must not change while
            the session exists.
        string: The input string.
        position (int): The current index into the string, from 0 up to
            ``len(string)``.
        current (frozenset): The states the automaton is in at ``position``.
        steps (list): The cached state sets, indexed by position.
    """

    def __init__(self, nfa, string):
        self.nfa = nfa
        self.string = string
        self.position = 0
        self.current = nfa.initial_states()
        self.steps = [self.current]

    def __repr__(self):
        return (
            f"<{type(self).__name__} {self.position}/{self.length}, "
            f"{len(self.steps)} cached>"
        )

    @cached_property
    def length(self):
        return len(self.string)

    def step(self):
        """
        Advances the position by one.

        Reaching the end of the string only moves the position. A position
        already in the cache is looked up. The position right after the cache
        is computed from the current states and the symbol at the new
        position, and appended to the cache.

        Raises:
            OutOfBoundsError: If the position is already at the end of the
                string.
            CacheConsistencyError: If the new position is more than one past
                the end of the cache.
        """
        position = self.position + 1
        if position > self.length:
            raise OutOfBoundsError(
                f"Position: {position}, Length: {self.length}", position
            )
        if position == self.length:
            # No symbol left to consume
            self.position = position
            return

        steps = self.steps
        if position < len(steps):
            self.current = steps[position]
            logger.trace("Position {} from cache", position)
        elif position == len(steps):
            symbol = self.string[position]
            self.current = self.nfa.next_state(self.current, symbol)
            steps.append(self.current)
            logger.debug(
                "Position {}: consumed {!r}, states {}",
                position,
                symbol,
                self.nfa.state_names(self.current),
            )
        else:
            raise CacheConsistencyError(
                f"Step cache ends at {len(steps) - 1} but position {position} "
                f"was requested"
            )
        self.position = position

    def go_to_step(self, step):
        """
        Moves to position ``step``, looking it up in the cache if it is there
        and stepping forward to it otherwise.

        Raises:
            OutOfBoundsError: If ``step`` is negative or not less than the
                length of the string.
            CacheConsistencyError: If ``step`` is behind the current position
                but missing from the cache.
        """
        if step < 0 or step >= self.length:
            raise OutOfBoundsError(f"Step: {step}, Length: {self.length}", step)

        steps = self.steps
        if step < len(steps):
            self.position = step
            self.current = steps[step]
            logger.trace("Position {} from cache", step)
            return

        if step < self.position:
            raise CacheConsistencyError(
                f"Position {step} is behind the current position "
                f"{self.position} but was never cached"
            )
        while self.position < step:
            self.step()
