from dataclasses import FrozenInstanceError

import pytest

from nameless import (
    App,
    Lam,
    Var,
    abstraction,
    application,
    free_indices,
    is_closed,
    is_normal_form,
    shift,
    size,
    substitute,
    variable,
)
from nameless.combinators import I, K, OMEGA, S

# ------------- Construction -------------


def test_constructors_build_variants():
    assert variable(1) == Var(1)
    assert abstraction(Var(1)) == Lam(Var(1))
    assert application(Var(1), Var(2)) == App(Var(1), Var(2))


def test_constructors_never_reject_dangling_indices():
    # free indices are a semantic property, not a structural one
    assert abstraction(variable(7)) == Lam(Var(7))
    assert variable(0).index == 0


def test_call_builds_application():
    assert I(K) == App(I, K)
    assert Var(1)(Var(2))(Var(3)) == App(App(Var(1), Var(2)), Var(3))


def test_terms_are_immutable_and_hashable():
    with pytest.raises(FrozenInstanceError):
        Lam(Var(1)).body = Var(2)  # type: ignore
    assert hash(Lam(Var(1))) == hash(Lam(Var(1)))
    assert len({Lam(Var(1)), Lam(Var(1)), Lam(Var(2))}) == 2


def test_str_is_nameless_form():
    assert str(S) == "λ λ λ 3 1 (2 1)"


# ------------- Shift -------------


def test_shift_free_var_is_bumped():
    assert shift(Var(1), 1) == Var(2)
    assert shift(Var(3), 2, cutoff=3) == Var(5)


def test_shift_below_cutoff_unchanged():
    assert shift(Var(1), 2, cutoff=2) == Var(1)
    assert shift(Var(2), 5, cutoff=3) == Var(2)


def test_shift_by_zero_returns_same_term():
    t = App(Var(2), Lam(App(Var(1), Var(3))))
    assert shift(t, 0) is t


def test_shift_lam_body_uses_cutoff_plus_one():
    assert shift(Lam(Var(1)), 5) == Lam(Var(1))
    assert shift(Lam(Var(2)), 1) == Lam(Var(3))
    assert shift(Lam(Lam(App(Var(2), Var(3)))), 1) == Lam(Lam(App(Var(2), Var(4))))


def test_shift_app_children_share_cutoff():
    assert shift(App(Var(2), Var(1)), 1, cutoff=2) == App(Var(3), Var(1))


def test_shift_negative_closes_a_binder():
    assert shift(App(Var(3), Var(2)), -1, cutoff=2) == App(Var(2), Var(1))
    assert shift(Lam(App(Var(1), Var(3))), -1) == Lam(App(Var(1), Var(2)))


@pytest.mark.parametrize("amount", [1, 2, 7])
@pytest.mark.parametrize("cutoff", [1, 2, 4])
def test_shift_then_unshift_is_identity(corpus, amount, cutoff):
    for t in corpus:
        assert shift(shift(t, amount, cutoff), -amount, cutoff) == t


# ------------- Substitute -------------


def test_substitute_matching_var():
    assert substitute(Var(1), 1, Var(5)) == Var(5)
    assert substitute(Var(3), 3, K) == K


def test_substitute_other_vars_untouched():
    assert substitute(Var(2), 1, K) == Var(2)
    assert substitute(App(Var(1), Var(2)), 2, K) == App(Var(1), K)


def test_substitute_bound_occurrence_untouched():
    assert substitute(Lam(Var(1)), 1, K) == Lam(Var(1))


def test_substitute_under_binder_shifts_replacement():
    # λ. 2  with 1 := 1  is  λ. 2, the replacement now points past the binder
    assert substitute(Lam(Var(2)), 1, Var(1)) == Lam(Var(2))
    assert substitute(Lam(Lam(App(Var(3), Var(1)))), 1, Var(4)) == Lam(
        Lam(App(Var(6), Var(1)))
    )


def test_substitute_closed_replacement_is_not_shifted():
    assert substitute(Lam(Lam(Var(3))), 1, S) == Lam(Lam(S))


# ------------- Queries -------------


def test_is_normal_form():
    assert is_normal_form(I)
    assert is_normal_form(S)
    assert is_normal_form(App(Var(1), Lam(Var(1))))
    assert not is_normal_form(App(I, I))
    assert not is_normal_form(OMEGA)
    assert not is_normal_form(Lam(App(Var(1), App(I, Var(1)))))


def test_free_indices():
    assert free_indices(K) == frozenset()
    assert free_indices(Lam(App(Var(1), Var(3)))) == {2}
    assert free_indices(App(Var(1), Lam(Lam(Var(4))))) == {1, 2}


def test_is_closed():
    assert is_closed(S)
    assert is_closed(OMEGA)
    assert not is_closed(Lam(Var(2)))


def test_size():
    assert size(Var(1)) == 1
    assert size(I) == 2
    assert size(S) == 10


def deep(n: int):
    term = Var(n + 1)
    for _ in range(n):
        term = Lam(App(Var(1), term))
    return term


def test_deep_terms():
    term = deep(3000)
    assert term == deep(3000)
    assert term != deep(2999)
    assert hash(term) == hash(deep(3000))
    assert repr(term).startswith("Lam(App(Var(1), Lam(")
    assert size(term) == 9001
    assert free_indices(term) == {1}
    assert not is_closed(term)
    assert is_normal_form(term)
    assert shift(shift(term, 3), -3) == term
    assert substitute(term, 1, I) == substitute(deep(3000), 1, I)
    assert free_indices(substitute(term, 1, I)) == frozenset()


def test_repr():
    assert repr(App(Lam(Var(1)), Var(2))) == "App(Lam(Var(1)), Var(2))"
