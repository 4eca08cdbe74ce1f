"""Untyped lambda calculus with De Bruijn indices.

```
>>> from nameless import parse, reduce, print_named
>>> term, normal, steps = reduce(parse("(λx. x) ((λy. y) (λz. z))"))
>>> print_named(term)
'λx. x'
```
"""

from .nodes import find_redexes, find_variables, to_nodes
from .parser import ParseError, Parser, parse
from .printer import print_debruijn, print_named
from .reduce import (
    DEFAULT_MAX_STEPS,
    Reduction,
    ReductionTrace,
    contract,
    iterate,
    reduce,
    step,
    trace,
)
from .term import (
    App,
    Lam,
    Term,
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
    "DEFAULT_MAX_STEPS",
    "Reduction",
    "ReductionTrace",
    "contract",
    "step",
    "iterate",
    "reduce",
    "trace",
    "ParseError",
    "Parser",
    "parse",
    "print_debruijn",
    "print_named",
    "to_nodes",
    "find_redexes",
    "find_variables",
]
