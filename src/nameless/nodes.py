"""Tabular view of a term.

A term is flattened into a DataFrame with one row per node, in pre-order:

- A lambda row has no `ref`, `arg` nor `index`. Its body is the next row.
- An application row has an `arg`, the id of its argument.
  Its function is the next row.
- A variable row has an `index`, its De Bruijn index, and a `ref`,
  the id of the lambda it is bound to (null if the variable is free).

```
(λx. x) y   =>   id  ref   arg   index
                 0   null  3     null     # application
                 1   null  null  null     # lambda
                 2   1     null  1        # x
                 3   null  null  1        # y, free
```

Because ids follow pre-order, the redex with the smallest id is the
leftmost-outermost one.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import polars as pl
from polars import Schema, UInt32

from .term import App, Lam, Term, Var

__all__ = ["SCHEMA", "to_nodes", "find_redexes", "find_variables"]

SCHEMA = Schema(
    {
        "id": UInt32,
        "ref": UInt32,
        "arg": UInt32,
        "index": UInt32,
    },
)


def to_nodes(term: Term) -> pl.DataFrame:
    rows: List[list] = []
    # ids of the enclosing lambdas, outermost first
    context: List[int] = []
    # (term, number of enclosing lambdas, id of the application it is the argument of)
    stack: List[Tuple[Term, int, Optional[int]]] = [(term, 0, None)]
    while stack:
        t, depth, app = stack.pop()
        my_id = len(rows)
        del context[depth:]
        if app is not None:
            rows[app][2] = my_id
        if isinstance(t, Var):
            ref: Optional[int] = (
                context[-t.index] if 1 <= t.index <= len(context) else None
            )
            rows.append([my_id, ref, None, t.index])
        elif isinstance(t, Lam):
            rows.append([my_id, None, None, None])
            context.append(my_id)
            stack.append((t.body, depth + 1, None))
        else:
            assert isinstance(t, App)
            rows.append([my_id, None, None, None])
            stack.append((t.arg, depth, my_id))
            stack.append((t.func, depth, None))

    return pl.from_records(rows, schema=SCHEMA, orient="row")


def find_redexes(nodes: pl.DataFrame) -> pl.DataFrame:
    """
    Find all redexes: applications whose function is a lambda.

    Sorted by id, so the first row is the leftmost-outermost redex.
    """
    lambdas = nodes.filter(
        pl.col("arg").is_null(),
        pl.col("index").is_null(),
    ).select(lamb="id")
    return (
        nodes.filter(pl.col("arg").is_not_null())
        .with_columns(lamb=(pl.col("id") + 1).cast(UInt32))
        .join(lambdas, on="lamb", how="inner")
        .select(redex="id", lamb="lamb", arg="arg")
        .sort("redex")
    )


def find_variables(nodes: pl.DataFrame, lamb: int) -> pl.DataFrame:
    """
    Find all variables bound to a specific lambda.

    Args:
        lamb: the id of the lambda to consider
    """
    return nodes.filter(pl.col("ref") == lamb).select("id")
