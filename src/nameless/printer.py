"""Printers from nameless terms to lambda notation.

Both printers use the same layout, which the parser reads back:
lambda bodies extend to the right, applications associate to the left,
a lambda is parenthesised whenever it is applied or passed as an argument,
and an application is parenthesised when it is an argument.
"""

from __future__ import annotations

from itertools import count
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from .term import App, Lam, Term, Var

__all__ = ["print_debruijn", "print_named", "binder_names"]

NAMES = ("x", "y", "z", "w", "u", "v")


def _render(
    term: Term,
    lam: str,
    binder: Callable[[int], str],
    var: Callable[[int, int], str],
) -> str:
    parts: List[str] = []
    # pending work, popped from the end: literal text or a term at some depth
    stack: List[Union[str, Tuple[Term, int]]] = [(term, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        t, depth = item
        if isinstance(t, Var):
            parts.append(var(t.index, depth))
        elif isinstance(t, Lam):
            parts.append(f"{lam}{binder(depth)} ")
            stack.append((t.body, depth + 1))
        else:
            assert isinstance(t, App)
            wrap_func = isinstance(t.func, Lam)
            wrap_arg = isinstance(t.arg, (Lam, App))
            if wrap_func:
                parts.append("(")
            stack.extend(
                [
                    ")" if wrap_arg else "",
                    (t.arg, depth),
                    ") " if wrap_func else " ",
                    "(" if wrap_arg else "",
                    (t.func, depth),
                ]
            )
    return "".join(parts)


def print_debruijn(term: Term, lam: str = "λ") -> str:
    """
    Print `term` with its indices verbatim.

    ```
    print_debruijn(Lam(Lam(Lam(App(Var(2), App(App(Var(3), Var(2)), Var(1)))))))
    # 'λ λ λ 2 (3 2 1)'
    ```
    """
    return _render(term, lam, lambda depth: "", lambda index, depth: str(index))


def binder_names(exclude: Sequence[str] = ()) -> Iterator[str]:
    """Fresh names `x, y, z, w, u, v, x1, y1, ...`, skipping those in `exclude`."""
    excluded = set(exclude)
    for i in count():
        suffix = str(i // len(NAMES)) if i >= len(NAMES) else ""
        name = NAMES[i % len(NAMES)] + suffix
        if name not in excluded:
            yield name


def print_named(
    term: Term, free_names: Optional[Sequence[str]] = None, lam: str = "λ"
) -> str:
    """
    Print `term` with reconstructed variable names.

    The binder at depth `d` is always given the `d`-th name of `binder_names`,
    so no two binders on a path share a name. A free variable is printed with
    its name from `free_names` (position 1 is the innermost free variable)
    or, if there is none, as its raw index, which parses back to the same term.

    ```
    print_named(Lam(App(Var(1), Var(2))), ["f"])  # 'λx. x f'
    print_named(Lam(App(Var(1), Var(2))))         # 'λx. x 2'
    ```
    """
    free: List[str] = list(free_names or [])
    names: List[str] = []
    fresh = binder_names(free)

    def binder(depth: int) -> str:
        while len(names) <= depth:
            names.append(next(fresh))
        return f"{names[depth]}."

    def var(index: int, depth: int) -> str:
        if index <= depth:
            return names[depth - index] if index >= 1 else str(index)
        position = index - depth
        if position <= len(free):
            return free[position - 1]
        return str(index)

    return _render(term, lam, binder, var)
