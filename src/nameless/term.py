"""
Lambda calculus term representation using De Bruijn indices.

The representation is nameless: a variable is the number of binders to cross
upward to reach the lambda that introduces it, starting at 1 for the nearest one.
Two terms are alpha-equivalent exactly when they are structurally equal, so no
renaming step is ever needed.

```
λx. x         =>  Lam(Var(1))
λx. λy. x     =>  Lam(Lam(Var(2)))
λx. y         =>  Lam(Var(2))        # y is free
```

An index larger than the number of enclosing lambdas is a free variable.

Terms can be thousands of levels deep (Church numerals are), so every
traversal here uses an explicit stack instead of recursion.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple, Union

__all__ = [
    "Term",
    "Var",
    "Lam",
    "App",
    "variable",
    "abstraction",
    "application",
    "is_normal_form",
    "shift",
    "substitute",
    "free_indices",
    "is_closed",
    "size",
]


class Term(ABC):
    """
    Base class for lambda calculus terms.

    Terms are immutable: every operation builds a new term and leaves
    its input untouched, so subterms can be shared freely.
    """

    def __call__(self, arg: Term) -> Term:
        """Apply this term to an argument"""
        return App(self, arg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        stack: List[Tuple[Term, Term]] = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a is b:
                continue
            if type(a) is not type(b):
                return False
            if isinstance(a, Var):
                if a.index != b.index:  # type: ignore[attr-defined]
                    return False
            elif isinstance(a, Lam):
                stack.append((a.body, b.body))  # type: ignore[attr-defined]
            else:
                assert isinstance(a, App) and isinstance(b, App)
                stack.append((a.arg, b.arg))
                stack.append((a.func, b.func))
        return True

    def __hash__(self) -> int:
        return hash(tuple(_tokens(self)))

    def __repr__(self) -> str:
        parts = []
        stack: List[Union[Term, str]] = [self]
        while stack:
            t = stack.pop()
            if isinstance(t, str):
                parts.append(t)
            elif isinstance(t, Var):
                parts.append(f"Var({t.index})")
            elif isinstance(t, Lam):
                parts.append("Lam(")
                stack.extend([")", t.body])
            else:
                assert isinstance(t, App)
                parts.append("App(")
                stack.extend([")", t.arg, ", ", t.func])
        return "".join(parts)

    def __str__(self) -> str:
        from .printer import print_debruijn

        return print_debruijn(self)

    def _repr_html_(self) -> str:
        from .display import to_svg

        return f"<div>{to_svg(self).as_str()}</div>"


@dataclass(frozen=True, eq=False, repr=False)
class Var(Term):
    """
    A variable reference.

    Attributes:
        index: number of binders crossed to reach the binding lambda,
               1 being the innermost one.
    """

    index: int


@dataclass(frozen=True, eq=False, repr=False)
class Lam(Term):
    """
    Lambda abstraction.

    The body refers to the variable bound here with `Var(1)`.

    Example:
        λx. x      =>  Lam(Var(1))           # identity function
        λx. λy. x  =>  Lam(Lam(Var(2)))      # const function
    """

    body: Term


@dataclass(frozen=True, eq=False, repr=False)
class App(Term):
    """
    Function application.

    Example:
        (λx. x) y  =>  App(Lam(Var(1)), Var(1))

    Attributes:
        func: The function being applied
        arg: The argument to apply
    """

    func: Term
    arg: Term


def _tokens(term: Term) -> Iterator[Union[int, str]]:
    """Pre-order walk: the index of each variable, "λ" and "@" for the other nodes."""
    stack = [term]
    while stack:
        t = stack.pop()
        if isinstance(t, Var):
            yield t.index
        elif isinstance(t, Lam):
            yield "λ"
            stack.append(t.body)
        else:
            assert isinstance(t, App)
            yield "@"
            stack.append(t.arg)
            stack.append(t.func)


def _with_depth(term: Term) -> Iterator[Tuple[Term, int]]:
    """Pre-order walk, with the number of lambdas enclosing each node."""
    stack = [(term, 0)]
    while stack:
        t, depth = stack.pop()
        yield t, depth
        if isinstance(t, Lam):
            stack.append((t.body, depth + 1))
        elif isinstance(t, App):
            stack.append((t.arg, depth))
            stack.append((t.func, depth))


def _map_vars(term: Term, leaf: Callable[[Var, int], Term]) -> Term:
    """
    Rebuild `term` with every variable replaced by `leaf(var, depth)`.

    Subterms that come back unchanged are reused as they are.
    """
    done: List[Term] = []
    stack: List[Tuple[Term, int, bool]] = [(term, 0, False)]
    while stack:
        t, depth, visited = stack.pop()
        if isinstance(t, Var):
            done.append(leaf(t, depth))
        elif isinstance(t, Lam):
            if visited:
                body = done.pop()
                done.append(t if body is t.body else Lam(body))
            else:
                stack.append((t, depth, True))
                stack.append((t.body, depth + 1, False))
        else:
            assert isinstance(t, App)
            if visited:
                arg = done.pop()
                func = done.pop()
                same = func is t.func and arg is t.arg
                done.append(t if same else App(func, arg))
            else:
                stack.append((t, depth, True))
                stack.append((t.arg, depth, False))
                stack.append((t.func, depth, False))
    return done[0]


def variable(index: int) -> Term:
    return Var(index)


def abstraction(body: Term) -> Term:
    return Lam(body)


def application(left: Term, right: Term) -> Term:
    return App(left, right)


def is_normal_form(term: Term) -> bool:
    """True iff no subterm has the shape `App(Lam(_), _)`."""
    stack = [term]
    while stack:
        t = stack.pop()
        if isinstance(t, Lam):
            stack.append(t.body)
        elif isinstance(t, App):
            if isinstance(t.func, Lam):
                return False
            stack.append(t.arg)
            stack.append(t.func)
    return True


def shift(term: Term, amount: int, cutoff: int = 1) -> Term:
    """
    Add `amount` to every variable index >= `cutoff`.

    The cutoff grows by one under each lambda, so only variables free
    with respect to the part of the term above `cutoff` are moved.
    `amount` may be negative when a binder is removed.
    """
    if amount == 0:
        return term

    def leaf(var: Var, depth: int) -> Term:
        if var.index >= cutoff + depth:
            return Var(var.index + amount)
        return var

    return _map_vars(term, leaf)


def substitute(term: Term, index: int, replacement: Term) -> Term:
    """
    Replace every free occurrence of `index` in `term` by `replacement`.

    Under `d` extra binders the occurrence is `index + d` and the replacement
    is shifted up by `d` so that its own free variables still point
    outside of `term`. Other indices are left unchanged.
    """
    shifted = {0: replacement}

    def leaf(var: Var, depth: int) -> Term:
        if var.index != index + depth:
            return var
        if depth not in shifted:
            shifted[depth] = shift(replacement, depth, 1)
        return shifted[depth]

    return _map_vars(term, leaf)


def free_indices(term: Term) -> frozenset[int]:
    """Free indices, relative to the top of the term."""
    return frozenset(
        t.index - depth
        for t, depth in _with_depth(term)
        if isinstance(t, Var) and t.index > depth
    )


def is_closed(term: Term) -> bool:
    return all(
        t.index <= depth for t, depth in _with_depth(term) if isinstance(t, Var)
    )


def size(term: Term) -> int:
    """Number of nodes in the term."""
    return sum(1 for _ in _tokens(term))
