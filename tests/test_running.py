import pytest

from nfasim import (
    EPSILON,
    NFA,
    CacheConsistencyError,
    InvalidSymbolError,
    NFAError,
    OutOfBoundsError,
    WrongModeError,
)

STRING = "00110101010"


def binary_nfa():
    nfa = NFA({"0", "1"})
    s0 = nfa.new_state("s0")
    s1 = nfa.new_state("s1")
    nfa.add_transition(s0, "0", s0)
    nfa.add_transition(s0, "1", s1)
    nfa.add_transition(s1, "0", s0)
    nfa.add_transition(s1, "1", s1)
    nfa.set_start_state(s0, True)
    nfa.set_final_state(s1, True)
    return nfa, s0, s1


def branching_nfa():
    # Nondeterministic: "a" may stay in p or move to q, q leads through an
    # epsilon edge to r, and r accepts after a "b"
    nfa = NFA("ab")
    p = nfa.new_state("p")
    q = nfa.new_state("q")
    r = nfa.new_state("r")
    f = nfa.new_state("f")
    nfa.add_transition(p, "a", p)
    nfa.add_transition(p, "a", q)
    nfa.add_transition(p, "b", p)
    nfa.add_transition(q, EPSILON, r)
    nfa.add_transition(r, "b", f)
    nfa.add_transition(f, "a", f)
    nfa.set_start_states({p})
    nfa.set_final_states({f})
    return nfa


def reference_trace(nfa, string):
    # State set at each position, consuming string[i] to reach position i
    current = nfa.start_states()
    trace = [current]
    for symbol in string[1:]:
        moved = set()
        for state in current:
            moved |= nfa.destinations(state, symbol)
        current = nfa.epsilon_closure(moved)
        trace.append(current)
    return trace


def test_start():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    assert nfa.is_running()
    assert nfa.string() == STRING
    assert nfa.position() == 0
    assert nfa.current_states() == {s0}
    assert nfa.cached_positions() == 1
    assert not nfa.currently_on_final_state()


def test_start_twice():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    with pytest.raises(WrongModeError):
        nfa.start(STRING)


def test_start_invalid_string():
    nfa, s0, s1 = binary_nfa()
    with pytest.raises(InvalidSymbolError):
        nfa.start("0120")
    assert not nfa.is_running()
    nfa.new_state("s2")


def test_run_methods_rejected_when_not_running():
    nfa, s0, s1 = binary_nfa()
    for method in (
        nfa.stop,
        nfa.step,
        nfa.step_back,
        nfa.current_states,
        nfa.position,
        nfa.string,
        nfa.currently_on_final_state,
        nfa.trace,
        nfa.cached_positions,
    ):
        with pytest.raises(WrongModeError):
            method()
    with pytest.raises(WrongModeError):
        nfa.go_to_step(0)


def test_stop():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    nfa.go_to_step(5)
    nfa.stop()
    assert not nfa.is_running()
    with pytest.raises(WrongModeError):
        nfa.position()

    nfa.start("1")
    assert nfa.position() == 0
    assert nfa.cached_positions() == 1
    assert nfa.current_states() == {s0}


def test_sample_trace():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    assert nfa.current_states() == {s0}
    nfa.step()
    assert nfa.current_states() == {s0}

    nfa.go_to_step(0)
    seen = [nfa.current_states()]
    while nfa.position() < len(STRING) - 1:
        nfa.step()
        seen.append(nfa.current_states())

    expected = [{s1} if c == "1" else {s0} for c in STRING[1:]]
    assert seen == [{s0}] + expected
    assert seen == reference_trace(nfa, STRING)
    assert list(nfa.trace()) == seen


def test_sample_final_state():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    for _ in range(len(STRING)):
        nfa.step()
    assert nfa.position() == len(STRING)
    # The last symbol consumed is STRING[-1] == "0"
    assert nfa.current_states() == {s0}
    assert not nfa.currently_on_final_state()


def test_step_to_end_is_noop():
    nfa, s0, s1 = binary_nfa()
    nfa.start("0110")
    for _ in range(3):
        nfa.step()
    before = nfa.current_states()
    cached = nfa.cached_positions()

    nfa.step()
    assert nfa.position() == 4
    assert nfa.current_states() == before
    assert nfa.cached_positions() == cached

    with pytest.raises(OutOfBoundsError):
        nfa.step()
    assert nfa.position() == 4
    assert nfa.current_states() == before


def test_step_on_empty_string():
    nfa, s0, s1 = binary_nfa()
    nfa.start("")
    assert nfa.current_states() == {s0}
    with pytest.raises(OutOfBoundsError):
        nfa.step()
    with pytest.raises(OutOfBoundsError):
        nfa.go_to_step(0)
    assert nfa.position() == 0


def test_step_back():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    with pytest.raises(OutOfBoundsError):
        nfa.step_back()

    for position in range(len(STRING)):
        before = nfa.current_states()
        nfa.step()
        nfa.step_back()
        assert nfa.position() == position
        assert nfa.current_states() == before
        nfa.step()


def test_step_back_uses_cache():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    nfa.go_to_step(6)
    assert nfa.cached_positions() == 7
    for position in range(5, -1, -1):
        nfa.step_back()
        assert nfa.position() == position
    assert nfa.cached_positions() == 7
    assert nfa.current_states() == {s0}


def test_step_back_from_end():
    nfa, s0, s1 = binary_nfa()
    nfa.start("01")
    nfa.step()
    nfa.step()
    assert nfa.position() == 2
    nfa.step_back()
    assert nfa.position() == 1
    assert nfa.current_states() == {s1}


def test_go_to_step_bounds():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    with pytest.raises(OutOfBoundsError):
        nfa.go_to_step(len(STRING))
    with pytest.raises(OutOfBoundsError):
        nfa.go_to_step(-1)
    with pytest.raises(IndexError):
        nfa.go_to_step(100)
    assert nfa.position() == 0
    nfa.go_to_step(len(STRING) - 1)
    assert nfa.position() == len(STRING) - 1


def test_go_to_step_extends_cache():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    nfa.go_to_step(4)
    assert nfa.position() == 4
    assert nfa.cached_positions() == 5
    nfa.go_to_step(2)
    assert nfa.position() == 2
    assert nfa.cached_positions() == 5
    # Beyond the cache, from behind the frontier
    nfa.go_to_step(8)
    assert nfa.position() == 8
    assert nfa.cached_positions() == 9


def test_replay_is_deterministic():
    nfa = branching_nfa()
    string = "aababbaab"
    expected = reference_trace(nfa, string)

    for k in range(len(string)):
        nfa.start(string)
        nfa.go_to_step(k)
        jumped = nfa.current_states()
        nfa.stop()

        nfa.start(string)
        for _ in range(k):
            nfa.step()
        stepped = nfa.current_states()

        nfa.go_to_step(len(string) - 1)
        nfa.go_to_step(k)
        revisited = nfa.current_states()
        nfa.stop()

        assert jumped == stepped == revisited == expected[k]


def test_branching_trace():
    nfa = branching_nfa()
    p, q, r, f = sorted(nfa.states())
    nfa.start("babab")
    assert nfa.current_states() == {p}
    nfa.step()
    assert nfa.current_states() == {p, q, r}
    nfa.step()
    assert nfa.current_states() == {p, f}
    assert nfa.currently_on_final_state()
    nfa.step()
    assert nfa.current_states() == {p, q, r, f}
    nfa.step()
    assert nfa.current_states() == {p, f}
    nfa.step()
    assert nfa.position() == 5
    assert nfa.current_states() == {p, f}


def test_dead_run():
    nfa = NFA("ab")
    a = nfa.new_state("a")
    b = nfa.new_state("b")
    nfa.add_transition(a, "a", b)
    nfa.set_start_states({a})
    nfa.set_final_states({b})

    nfa.start("bba")
    nfa.step()
    assert nfa.current_states() == frozenset()
    nfa.step()
    assert nfa.current_states() == frozenset()
    assert not nfa.currently_on_final_state()


def test_start_states_not_closed_by_default():
    nfa = NFA("a")
    s = nfa.new_state("s")
    t = nfa.new_state("t")
    u = nfa.new_state("u")
    nfa.add_transition(s, EPSILON, t)
    nfa.add_transition(t, "a", u)
    nfa.add_transition(u, EPSILON, s)
    nfa.set_start_states({s})

    nfa.start("aa")
    assert nfa.current_states() == {s}
    nfa.step()
    # Nothing leaves s on "a" without first following the epsilon edge
    assert nfa.current_states() == frozenset()
    nfa.stop()

    closed = nfa.copy()
    closed.close_start_states = True
    closed.start("aa")
    assert closed.current_states() == {s, t}
    closed.step()
    assert closed.current_states() == {u, s, t}


def test_current_states_is_a_snapshot():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    states = nfa.current_states()
    with pytest.raises(AttributeError):
        states.add(s1)
    trace = nfa.trace()
    assert isinstance(trace, tuple)
    nfa.step()
    nfa.step()
    assert nfa.trace() != trace


def test_cache_gap_is_fatal():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    nfa.go_to_step(3)
    session = nfa._session

    # Position past the end of the cache
    del session.steps[2:]
    session.position = 2
    with pytest.raises(CacheConsistencyError):
        nfa.step()

    # Position ahead of an uncached position
    session.position = 5
    with pytest.raises(CacheConsistencyError):
        nfa.go_to_step(4)


def test_cache_error_is_not_usage_error():
    assert not issubclass(CacheConsistencyError, NFAError)
    assert issubclass(CacheConsistencyError, RuntimeError)


def test_step_consumes_symbol_at_new_position():
    nfa, s0, s1 = binary_nfa()
    nfa.start(STRING)
    nfa.go_to_step(2)
    # Position 2 is reached by consuming STRING[2] == "1"
    assert nfa.current_states() == {s1}
    nfa.go_to_step(4)
    assert nfa.current_states() == {s0}


def test_start_copies_input_sequence():
    nfa, s0, s1 = binary_nfa()
    symbols = ["0", "1", "1"]
    nfa.start(symbols)
    symbols[1] = "2"
    symbols.append("x")

    assert nfa.string() == ("0", "1", "1")
    assert nfa.string() is not symbols
    nfa.step()
    assert nfa.current_states() == {s1}
    nfa.step()
    assert nfa.current_states() == {s1}
    nfa.step()
    assert nfa.position() == 3
    with pytest.raises(OutOfBoundsError):
        nfa.step()


def test_start_accepts_iterator():
    nfa, s0, s1 = binary_nfa()
    nfa.start(iter("010"))
    assert nfa.string() == ("0", "1", "0")
    nfa.go_to_step(2)
    assert nfa.current_states() == {s0}
    nfa.stop()

    with pytest.raises(InvalidSymbolError):
        nfa.start(iter("012"))
    assert not nfa.is_running()
