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

from functools import wraps

from nfasim.errors import WrongModeError

NFA_RUNNING = "NFA is currently running"
NFA_NOT_RUNNING = "NFA is not running"


# Decorators


def building(method):
    """
    Decorator for methods that change the structure of an automaton.

    The wrapped method may only be called while the automaton is in build
    mode. The parent object must have an ``is_running()`` method.

    Parameters:
    - method: The method to be wrapped.

    Returns:
    - The wrapped method.

    Raises:
    - WrongModeError: If the automaton is running when the method is called.

    Example usage:
    ```
    class MyAutomaton:
        @building
        def new_state(self, name):
            # Method implementation
    ```
    """

    @wraps(method)
    def building_wrapper(self, *args, **kwargs):
        if self.is_running():
            raise WrongModeError(NFA_RUNNING)
        return method(self, *args, **kwargs)

    return building_wrapper


def running(method):
    """Decorator for methods that step through or inspect a run session. The
    wrapped method raises WrongModeError unless the parent object's
    ``is_running()`` returns True.
    """

    @wraps(method)
    def running_wrapper(self, *args, **kwargs):
        if not self.is_running():
            raise WrongModeError(NFA_NOT_RUNNING)
        return method(self, *args, **kwargs)

    return running_wrapper
