import sys

from cached_property import cached_property
from loguru import logger

from nfasim.automata.run import RunSession
from nfasim.errors import InvalidSymbolError, OutOfBoundsError, UnknownStateError
from nfasim.util import building, running

INVALID_START_STATE = "Invalid start state"
INVALID_FINAL_STATE = "Invalid final state"
UNKNOWN_STATE = "Unknown state"

# Marker constants


class Marker:
    """
    Represents a marker object.

    Markers are used as transition keys that are not symbols of any alphabet.
    They compare by identity, so a marker can never collide with a real
    symbol.

    Attributes:
        name (str): The name of the marker.

    Example:
        >>> marker = Marker("EPSILON")
        >>> marker.name
        'EPSILON'
        >>> repr(marker)
        '<EPSILON>'
    """

    def __init__(self, name):
        """
        Initializes a new Marker object.

        Args:
            name (str): The name of the marker.
        """
        self.name = name

    def __repr__(self):
        return f"<{self.name}>"


EPSILON = Marker("EPSILON")


def _frozen_string(string):
    # Input strings are copied into an immutable sequence
    if isinstance(string, str):
        return string
    return tuple(string)


# Epsilon closure


def epsilon_closure(transitions, states):
    """
    Expands the given set of states by following epsilon transitions.

    Every state in ``states`` is part of its own closure (a path of zero
    epsilon transitions). A single visited set is shared across the whole
    traversal, so cycles of epsilon transitions terminate and no state is
    expanded twice. Nothing is memoized between calls.

    Args:
        transitions (dict): Maps each state to a dictionary of
            ``{key: set(destination states)}``.
        states (iterable): The states to expand. This is not modified.

    Returns:
        frozenset: The expanded set of states.

    Example:
        >>> table = {0: {EPSILON: {1}}, 1: {EPSILON: {0, 2}}, 2: {}}
        >>> sorted(epsilon_closure(table, {0}))
        [0, 1, 2]
    """
    closure = set(states)
    frontier = list(closure)
    while frontier:
        state = frontier.pop()
        trans = transitions.get(state)
        if trans and EPSILON in trans:
            new_states = trans[EPSILON].difference(closure)
            frontier.extend(new_states)
            closure.update(new_states)
    return frozenset(closure)


# Automaton


class NFA:
    """
    NFA (Non-Deterministic Finite Automaton) over a fixed alphabet, which can
    be built and then run over an input string one symbol at a time.

    An NFA is always in one of two modes. In build mode the graph can be
    changed: states created and removed, transitions added and removed, and
    the start and final sets replaced. Calling :meth:`start` enters run mode,
    in which the graph is frozen and only the stepping methods are legal until
    :meth:`stop` is called. Calling a method in the wrong mode raises
    :class:`~nfasim.errors.WrongModeError`.

    States are opaque integer handles returned by :meth:`new_state`. The
    automaton keeps each state's name and transition table, so a handle is
    only meaningful to the automaton that created it.

    The following always hold after a build-mode method returns, whether it
    succeeded or raised:

    - the start and final sets are subsets of the member states;
    - every transition destination is a member state;
    - every transition key is either a symbol of the alphabet or
      :data:`EPSILON`.

    Attributes:
        close_start_states (bool): If True, :meth:`start` seeds the run with
            the epsilon closure of the start states. By default the start
            states are used as they are and only the states reached by
            :meth:`step` are closed.

    Example:
        >>> nfa = NFA("01")
        >>> s0 = nfa.new_state("s0")
        >>> s1 = nfa.new_state("s1")
        >>> nfa.add_transition(s0, "1", s1)
        True
        >>> nfa.set_start_state(s0, True)
        True
        >>> nfa.set_final_state(s1, True)
        True
        >>> nfa.accepts("1")
        True
    """

    def __init__(self, alphabet, close_start_states=False):
        """
        Initializes an empty automaton in build mode.

        Args:
            alphabet (iterable): The symbols the automaton may consume. Any
                hashable objects may be used. The alphabet cannot be changed
                afterwards.
            close_start_states (bool): See the class attribute.

        Raises:
            InvalidSymbolError: If the alphabet contains :data:`EPSILON`.
        """
        alphabet = frozenset(alphabet)
        if EPSILON in alphabet:
            raise InvalidSymbolError(
                "EPSILON cannot be a member of the alphabet", EPSILON
            )

        self._alphabet = alphabet
        self.close_start_states = close_start_states

        self._statenum = 0
        self._names = {}
        self._transitions = {}
        self._start = set()
        self._final = set()
        self._session = None

    def __len__(self):
        return len(self._names)

    def __contains__(self, state):
        return state in self._names

    def __repr__(self):
        mode = "running" if self.is_running() else "building"
        return f"<{type(self).__name__} {len(self)} states, {mode}>"

    @cached_property
    def transition_keys(self):
        """The keys a transition may use: the alphabet plus EPSILON."""
        return self._alphabet | {EPSILON}

    # Alphabet

    def alphabet(self):
        return self._alphabet

    def in_alphabet(self, symbol):
        return symbol in self._alphabet

    def _invalid_symbols(self, string):
        alphabet = self._alphabet
        return (symbol for symbol in string if symbol not in alphabet)

    def is_over_alphabet(self, string):
        """Returns True if every symbol of ``string`` is in the alphabet."""
        for _ in self._invalid_symbols(string):
            return False
        return True

    # Validation helpers

    def _check_member(self, state, message=UNKNOWN_STATE):
        if state not in self._names:
            raise UnknownStateError(f"{message}: {state!r}", state)

    def _check_key(self, key):
        if key not in self.transition_keys:
            raise InvalidSymbolError(
                f"Transition via {key!r}, which is not in the alphabet", key
            )

    def _check_string(self, string):
        for symbol in self._invalid_symbols(string):
            raise InvalidSymbolError(
                f"Input string contains {symbol!r}, which is not in the alphabet",
                symbol,
            )

    def _check_table(self, state, table, members):
        """
        Checks a transition table against the alphabet and a member set.

        Args:
            state: The state owning the table, used in error messages.
            table (dict): ``{key: iterable(destinations)}``.
            members: A container of the states the destinations must belong
                to.

        Raises:
            InvalidSymbolError: If a key is neither a symbol nor EPSILON.
            UnknownStateError: If a destination is not in ``members``.
        """
        for key, dests in table.items():
            self._check_key(key)
            for dest in dests:
                if dest not in members:
                    raise UnknownStateError(
                        f"Transition to unknown state {dest!r} from {state!r} "
                        f"via {key!r}",
                        dest,
                    )

    # States

    def states(self):
        return frozenset(self._names)

    def has_state(self, state):
        return state in self._names

    def state_name(self, state):
        self._check_member(state)
        return self._names[state]

    def state_names(self, states):
        """
        Returns the sorted names of the given states.

        Args:
            states (iterable): Member state handles.

        Returns:
            list: The names, sorted.
        """
        return sorted(self.state_name(state) for state in states)

    @building
    def rename_state(self, state, name):
        self._check_member(state)
        self._names[state] = name

    @building
    def new_state(self, name, transitions=None):
        """
        Creates a new state and adds it to the automaton.

        Names do not have to be unique; the returned handle is what identifies
        the state.

        Args:
            name (str): The display name of the state.
            transitions (dict, optional): An initial transition table mapping
                keys (symbols or EPSILON) to iterables of existing member
                states.

        Returns:
            int: The handle of the new state.

        Raises:
            WrongModeError: If the automaton is running.
            InvalidSymbolError: If a key in ``transitions`` is not a valid
                transition key.
            UnknownStateError: If a destination in ``transitions`` is not a
                member state.

        Example:
            >>> nfa = NFA("ab")
            >>> a = nfa.new_state("a")
            >>> b = nfa.new_state("b", {"a": [a], EPSILON: [a]})
            >>> nfa.destinations(b, "a") == {a}
            True
        """
        table = {}
        if transitions:
            for key, dests in transitions.items():
                dests = set(dests)
                if dests:
                    table[key] = dests
            self._check_table(name, table, self._names)

        self._statenum += 1
        state = self._statenum
        self._names[state] = name
        self._transitions[state] = table
        logger.debug("Created state {} ({!r})", state, name)
        return state

    @building
    def remove_state(self, state):
        """
        Removes a state from the automaton.

        Every transition into the state is removed as well, and a key whose
        destination set becomes empty is dropped. The state also leaves the
        start and final sets.

        Args:
            state (int): The state to remove.

        Returns:
            bool: True if the state was a member, False otherwise.

        Raises:
            WrongModeError: If the automaton is running.
        """
        if state not in self._names:
            return False

        for table in self._transitions.values():
            for key in list(table):
                dests = table[key]
                dests.discard(state)
                if not dests:
                    del table[key]

        self._start.discard(state)
        self._final.discard(state)
        name = self._names.pop(state)
        del self._transitions[state]
        logger.debug("Removed state {} ({!r})", state, name)
        return True

    @building
    def set_states(self, states):
        """
        Replaces the member set with a subset of the current states.

        The transition table of every kept state is checked against the new
        member set first. If any kept state has a transition into a dropped
        state nothing is changed. On success the dropped states are forgotten
        and the start and final sets are cleared.

        Args:
            states (iterable): Handles of current member states to keep.

        Raises:
            WrongModeError: If the automaton is running.
            UnknownStateError: If a handle is not a current member, or a kept
                state has a transition to a dropped state.
        """
        states = set(states)
        for state in states:
            self._check_member(state)
        for state in states:
            self._check_table(state, self._transitions[state], states)

        for state in set(self._names) - states:
            del self._names[state]
            del self._transitions[state]
        self._start = set()
        self._final = set()

    # Transitions

    def transitions(self, state):
        """
        Returns a copy of a state's transition table.

        Args:
            state (int): A member state.

        Returns:
            dict: ``{key: frozenset(destinations)}``.

        Raises:
            UnknownStateError: If ``state`` is not a member.
        """
        self._check_member(state)
        return {key: frozenset(dests) for key, dests in self._transitions[state].items()}

    def destinations(self, state, key):
        self._check_member(state)
        return frozenset(self._transitions[state].get(key, ()))

    def triples(self):
        """
        Generates all (source state, key, destination state) triples in the
        NFA.

        Yields:
            tuple: A triple (source state, key, destination state).
        """
        for src, trans in self._transitions.items():
            for key, dests in trans.items():
                for dest in dests:
                    yield src, key, dest

    @building
    def add_transition(self, src, key, dest):
        """
        Adds a transition from ``src`` to ``dest`` via ``key``.

        Adding a transition that already exists has no effect.

        Args:
            src (int): The source state.
            key: A symbol of the alphabet, or EPSILON.
            dest (int): The destination state.

        Returns:
            bool: True if the transition was not already present.

        Raises:
            WrongModeError: If the automaton is running.
            UnknownStateError: If ``src`` or ``dest`` is not a member.
            InvalidSymbolError: If ``key`` is neither a symbol nor EPSILON.
        """
        self._check_member(src)
        self._check_member(dest)
        self._check_key(key)

        dests = self._transitions[src].setdefault(key, set())
        if dest in dests:
            return False
        dests.add(dest)
        return True

    @building
    def remove_transition(self, src, key, dest):
        """
        Removes the transition from ``src`` to ``dest`` via ``key``. If it
        was the last destination for ``key``, the key is removed too.

        Returns:
            bool: True if the transition existed.

        Raises:
            WrongModeError: If the automaton is running.
            UnknownStateError: If ``src`` is not a member.
        """
        self._check_member(src)

        table = self._transitions[src]
        dests = table.get(key)
        if not dests or dest not in dests:
            return False
        dests.remove(dest)
        if not dests:
            del table[key]
        return True

    # Start states

    def start_states(self):
        return frozenset(self._start)

    @building
    def set_start_states(self, states):
        """
        Replaces the set of start states.

        Raises:
            WrongModeError: If the automaton is running.
            UnknownStateError: If any of the states is not a member. The start
                set is left unchanged.
        """
        states = set(states)
        for state in states:
            self._check_member(state, INVALID_START_STATE)
        self._start = states

    def is_start_state(self, state):
        return state in self._start

    @building
    def add_start_state(self, state):
        self._check_member(state, INVALID_START_STATE)
        if state in self._start:
            return False
        self._start.add(state)
        return True

    @building
    def remove_start_state(self, state):
        if state not in self._start:
            return False
        self._start.remove(state)
        return True

    def set_start_state(self, state, flag):
        """
        Makes ``state`` a start state if ``flag`` is true, otherwise makes it
        not a start state.

        Returns:
            bool: True if the start set changed.
        """
        if flag:
            return self.add_start_state(state)
        return self.remove_start_state(state)

    # Final states

    def final_states(self):
        return frozenset(self._final)

    @building
    def set_final_states(self, states):
        """
        Replaces the set of final states.

        Raises:
            WrongModeError: If the automaton is running.
            UnknownStateError: If any of the states is not a member. The final
                set is left unchanged.
        """
        states = set(states)
        for state in states:
            self._check_member(state, INVALID_FINAL_STATE)
        self._final = states

    def is_final_state(self, state):
        return state in self._final

    @building
    def add_final_state(self, state):
        self._check_member(state, INVALID_FINAL_STATE)
        if state in self._final:
            return False
        self._final.add(state)
        return True

    @building
    def remove_final_state(self, state):
        if state not in self._final:
            return False
        self._final.remove(state)
        return True

    def set_final_state(self, state, flag):
        """
        Makes ``state`` a final state if ``flag`` is true, otherwise makes it
        not a final state.

        Returns:
            bool: True if the final set changed.
        """
        if flag:
            return self.add_final_state(state)
        return self.remove_final_state(state)

    def is_final(self, states):
        """
        Checks if any of the given states is a final state.

        Args:
            states (iterable): The set of states to check.

        Returns:
            bool: True if any of the states is a final state, False otherwise.
        """
        return not self._final.isdisjoint(states)

    # Simulation

    def epsilon_closure(self, states):
        """
        Returns every state reachable from ``states`` using only epsilon
        transitions, including ``states`` themselves.

        Raises:
            UnknownStateError: If any of the states is not a member.
        """
        states = set(states)
        for state in states:
            self._check_member(state)
        return epsilon_closure(self._transitions, states)

    def initial_states(self):
        """
        Returns the set of states a run starts from: the start states, or
        their epsilon closure if :attr:`close_start_states` is set.
        """
        if self.close_start_states:
            return epsilon_closure(self._transitions, self._start)
        return frozenset(self._start)

    def next_state(self, states, symbol):
        """
        Returns the set of states that can be reached from the given states
        by consuming ``symbol``, closed under epsilon transitions.

        States with no transition for ``symbol`` contribute nothing.

        Args:
            states (iterable): The set of states to start from.
            symbol: The symbol consumed.

        Returns:
            frozenset: The set of states that can be reached.
        """
        transitions = self._transitions
        dest_states = set()
        for state in states:
            xs = transitions.get(state)
            if xs and symbol in xs:
                dest_states.update(xs[symbol])
        return epsilon_closure(transitions, dest_states)

    def accepts(self, string):
        """
        Checks if a given string is accepted by the automaton.

        This consumes every symbol of ``string`` starting from
        :meth:`initial_states` and does not touch the run session, so it may
        be called in either mode.

        Args:
            string: A sequence of symbols.

        Returns:
            bool: True if the string is accepted, False otherwise.

        Raises:
            InvalidSymbolError: If the string contains a symbol outside the
                alphabet.
        """
        string = _frozen_string(string)
        self._check_string(string)
        states = self.initial_states()
        for symbol in string:
            states = self.next_state(states, symbol)
            if not states:
                break
        return self.is_final(states)

    def copy(self):
        """
        Returns an independent copy of the automaton's graph, in build mode.
        State handles are the same in the copy.
        """
        other = type(self)(self._alphabet, close_start_states=self.close_start_states)
        other._statenum = self._statenum
        other._names = dict(self._names)
        other._transitions = {
            state: {key: set(dests) for key, dests in table.items()}
            for state, table in self._transitions.items()
        }
        other._start = set(self._start)
        other._final = set(self._final)
        return other

    def dump(self, stream=sys.stdout):
        """
        Prints a textual representation of the NFA to the specified stream.

        Start states are prefixed with ``@`` and final state names are
        followed by ``*``. Each transition is printed on its own line below
        its source state.

        Args:
            stream (file): The stream to print the representation to.
                Defaults to sys.stdout.
        """
        names = self._names
        for src in sorted(names):
            beg = "@" if src in self._start else " "
            end = "*" if src in self._final else ""
            print(beg, names[src] + end, file=stream)
            xs = self._transitions[src]
            for key in sorted(xs, key=repr):
                for dest in sorted(xs[key]):
                    print("   ", key, "->", names[dest], file=stream)

    # Run mode

    def is_running(self):
        return self._session is not None

    @building
    def start(self, string):
        """
        Enters run mode with a fixed input string.

        The position is set to 0 and the current states to
        :meth:`initial_states`. Note that by default epsilon transitions out
        of the start states are not followed at position 0, while every
        state set reached by :meth:`step` is closed.

        The string is copied first (a ``str`` is kept as it is, anything else
        becomes a tuple), so changing the caller's sequence afterwards does
        not affect the run.

        Args:
            string: A sequence or iterable of symbols from the alphabet.

        Raises:
            WrongModeError: If the automaton is already running.
            InvalidSymbolError: If the string contains a symbol outside the
                alphabet. The automaton stays in build mode.
        """
        string = _frozen_string(string)
        self._check_string(string)
        self._session = RunSession(self, string)
        logger.debug("Started run over {!r}", string)

    @running
    def stop(self):
        """Leaves run mode and discards the run session."""
        self._session = None
        logger.debug("Stopped run")

    @running
    def step(self):
        """
        Advances the position by one, consuming the symbol at the new position.

        Raises:
            WrongModeError: If the automaton is not running.
            OutOfBoundsError: If the position is already at the end of the
                string.
        """
        self._session.step()

    @running
    def step_back(self):
        """
        Moves the position back by one. The previous state set is always in
        the cache, so nothing is recomputed.

        Raises:
            WrongModeError: If the automaton is not running.
            OutOfBoundsError: If the position is 0.
        """
        session = self._session
        if session.position == 0:
            raise OutOfBoundsError("Cannot step back from position 0", -1)
        session.go_to_step(session.position - 1)

    @running
    def go_to_step(self, step):
        """
        Moves to position ``step``.

        A cached position is looked up; a position past the cache is reached
        by stepping forward from the current position.

        Args:
            step (int): The target position, ``0 <= step < len(string)``.

        Raises:
            WrongModeError: If the automaton is not running.
            OutOfBoundsError: If ``step`` is outside the string.
        """
        self._session.go_to_step(step)

    @running
    def current_states(self):
        return self._session.current

    @running
    def position(self):
        return self._session.position

    @running
    def string(self):
        return self._session.string

    @running
    def cached_positions(self):
        return len(self._session.steps)

    @running
    def trace(self):
        """Returns the cached state sets, indexed by position."""
        return tuple(self._session.steps)

    @running
    def currently_on_final_state(self):
        return self.is_final(self._session.current)
