"""Normal-order reduction engine.

The redex contracted by `step` is always the leftmost-outermost one:
an application whose function is a lambda is contracted before anything
inside it, and a function is searched before its argument. This strategy
reaches a normal form whenever one exists.

Terms may not have a normal form (`Ω = (λx. x x) (λx. x x)` reduces to itself
forever), so `reduce` and `trace` take a step budget and report whether a
normal form was reached instead of failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice
from typing import Iterator, List, NamedTuple, Optional, Tuple

import polars as pl

from .display import to_svg
from .nodes import find_redexes, to_nodes
from .term import App, Lam, Term, is_normal_form, shift, size, substitute

__all__ = [
    "DEFAULT_MAX_STEPS",
    "Reduction",
    "ReductionTrace",
    "contract",
    "step",
    "iterate",
    "reduce",
    "trace",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1000


class Reduction(NamedTuple):
    term: Term
    reached_normal_form: bool
    steps: int


def contract(redex: Term) -> Term:
    """
    Beta-reduce `App(Lam(body), arg)`.

    The argument is shifted under the vacated binder, substituted for it,
    and the remaining free indices of the body are shifted back down.
    """
    if not (isinstance(redex, App) and isinstance(redex.func, Lam)):
        raise ValueError(f"{redex} is not a redex")
    body = redex.func.body
    return shift(substitute(body, 1, shift(redex.arg, 1, 1)), -1, 1)


def step(term: Term) -> Optional[Term]:
    """
    Contract the leftmost-outermost redex of `term`.

    Returns None if `term` is already in normal form.
    """
    # pre-order walk, each entry keeps the position of its parent in `visited`
    visited: List[Tuple[Term, int, str]] = []
    stack: List[Tuple[Term, int, str]] = [(term, -1, "")]
    while stack:
        t, parent, side = stack.pop()
        visited.append((t, parent, side))
        here = len(visited) - 1
        if isinstance(t, App):
            # If I'm a redex, reduce me
            if isinstance(t.func, Lam):
                return _rebuild(visited, here, contract(t))
            # Otherwise try the function, then the argument
            stack.append((t.arg, here, "arg"))
            stack.append((t.func, here, "func"))
        elif isinstance(t, Lam):
            stack.append((t.body, here, "body"))
    return None


def _rebuild(visited: List[Tuple[Term, int, str]], i: int, new: Term) -> Term:
    """Put `new` in place of `visited[i]`, copying the nodes on the way up to the root."""
    _, parent, side = visited[i]
    while parent >= 0:
        old = visited[parent][0]
        if side == "body":
            new = Lam(new)
        elif side == "func":
            new = App(new, old.arg)
        else:
            new = App(old.func, new)
        _, parent, side = visited[parent]
    return new


def iterate(term: Term) -> Iterator[Term]:
    """
    Yield `term` and then every successive normal-order reduct.

    The chain stops after a normal form, and never stops for a divergent term.
    """
    while True:
        yield term
        term = step(term)
        if term is None:
            break


def _check_budget(max_steps: Optional[int]):
    if max_steps is not None and max_steps < 0:
        raise ValueError(f"max_steps must be non-negative, got {max_steps}")


def reduce(term: Term, max_steps: Optional[int] = DEFAULT_MAX_STEPS) -> Reduction:
    """
    Reduce `term` until it is in normal form or `max_steps` contractions
    were performed. With `max_steps=None` there is no limit.
    """
    _check_budget(max_steps)
    steps = 0
    while max_steps is None or steps < max_steps:
        reduct = step(term)
        if reduct is None:
            return Reduction(term, True, steps)
        term = reduct
        steps += 1
        logger.debug("step %d: %s", steps, term)

    logger.debug("step budget of %d exhausted", max_steps)
    return Reduction(term, is_normal_form(term), steps)


@dataclass(frozen=True)
class ReductionTrace:
    """Successive terms from a starting term to a normal form or a cutoff point."""

    terms: Tuple[Term, ...]
    reached_normal_form: bool

    @property
    def steps(self) -> int:
        return len(self.terms) - 1

    @property
    def start(self) -> Term:
        return self.terms[0]

    @property
    def final(self) -> Term:
        return self.terms[-1]

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(self.terms)

    def __getitem__(self, i: int) -> Term:
        return self.terms[i]

    def to_frame(self) -> pl.DataFrame:
        """One row per term: step number, nameless form, size and redex count."""
        return pl.DataFrame(
            {
                "step": list(range(len(self.terms))),
                "term": [str(t) for t in self.terms],
                "size": [size(t) for t in self.terms],
                "redexes": [len(find_redexes(to_nodes(t))) for t in self.terms],
            },
            schema={
                "step": pl.UInt32,
                "term": pl.String,
                "size": pl.UInt32,
                "redexes": pl.UInt32,
            },
        )

    def _repr_html_(self) -> str:
        return "".join(f"<div>{to_svg(t).as_str()}</div>" for t in self.terms)


def trace(term: Term, max_steps: Optional[int] = DEFAULT_MAX_STEPS) -> ReductionTrace:
    """Like `reduce`, but keep every intermediate term, the first and last included."""
    _check_budget(max_steps)
    limit = None if max_steps is None else max_steps + 1
    terms = tuple(islice(iterate(term), limit))
    reached = is_normal_form(terms[-1])
    if not reached:
        logger.debug("step budget of %d exhausted", max_steps)
    return ReductionTrace(terms, reached)
