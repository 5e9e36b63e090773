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
Exceptions raised by the automaton and its run session.

Every usage error derives from :class:`NFAError`, and most also from the closest
builtin exception so callers can catch either. :class:`CacheConsistencyError`
is the exception: it signals a broken internal invariant and is not an
:class:`NFAError`.
"""


class NFAError(Exception):
    """Base class for errors caused by using an automaton incorrectly."""


class WrongModeError(NFAError):
    """Raised when a build-mode operation is called while the automaton is
    running, or a run-mode operation is called while it is not.
    """


class UnknownStateError(NFAError, KeyError):
    """Raised when an operation refers to a state handle that is not a current
    member of the automaton.
    """

    def __init__(self, message, state=None):
        self.state = state
        super().__init__(message)

    def __str__(self):
        # KeyError would otherwise quote the message
        return str(self.args[0])


class InvalidSymbolError(NFAError, ValueError):
    """Raised when a transition key or an input string uses a symbol outside
    the automaton's alphabet.
    """

    def __init__(self, message, symbol=None):
        self.symbol = symbol
        super().__init__(message)


class OutOfBoundsError(NFAError, IndexError):
    """Raised when the run session is asked to move to a position outside the
    input string.
    """

    def __init__(self, message, position=None):
        self.position = position
        super().__init__(message)


class CacheConsistencyError(RuntimeError):
    """Raised when the run session's step cache is found to have a gap. This
    cannot happen through the public API and is not meant to be handled.
    """
