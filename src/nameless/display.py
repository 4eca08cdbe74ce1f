"""Lambda diagrams of terms, drawn as SVG.

Lambdas are horizontal blue bars spanning the variables they bind.
Variables are red boxes with a gray line going up to their lambda,
or to the top edge when they are free. An application is an orange frame
around its function, with a black line to its argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

import polars as pl
import svg

from .nodes import to_nodes
from .term import Term

__all__ = ["Interval", "compute_layout", "draw", "to_svg"]


@dataclass(frozen=True)
class Interval:
    lo: int
    hi: int

    def __or__(self, other: Optional["Interval"]) -> "Interval":
        if other is None:
            return self
        return Interval(min(self.lo, other.lo), max(self.hi, other.hi))

    def shift(self, offset: int) -> "Interval":
        return Interval(self.lo + offset, self.hi + offset)


def compute_layout(
    nodes: pl.DataFrame,
) -> tuple[dict[int, Interval], dict[int, Interval]]:
    """
    Compute the horizontal and vertical extent of every node.

    Top-down pass for rows, then bottom-up pass for columns:
    each variable gets its own column, and every other node spans
    the columns of its subtree and of the variables it binds.
    """
    rows = list(nodes.select("id", "ref", "arg", "index").iter_rows())
    y = {0: Interval(0, 0)}
    x = {}
    args = nodes["arg"]

    for node, _ref, arg, index in rows:
        if index is not None:
            continue
        child = node + 1
        if arg is not None:
            y[child] = y[node].shift(0 if args[child] is None else 1)
            y[arg] = y[node]
        else:
            y[child] = y[node].shift(1)

    next_var_x = nodes.select(pl.col("index").count()).item()

    for node, ref, arg, index in reversed(rows):
        if index is not None:
            x[node] = Interval(next_var_x, next_var_x)
            next_var_x -= 1
            if ref is not None:
                x[ref] = x[node] | x.get(ref)
        else:
            child = node + 1
            x[node] = x[child] | x.get(node)
            y[node] = y[child] | y[node]
    return x, y


def draw(
    x: dict[int, Interval],
    y: dict[int, Interval],
    node: int,
    ref: Optional[int],
    arg: Optional[int],
    index: Optional[int],
) -> Iterable[svg.Element]:
    x_node = x[node]
    y_node = y[node]

    if arg is not None:
        yield svg.Rect(
            x=0.1 + x_node.lo,
            y=0.1 + y_node.lo,
            width=0.8 + x_node.hi - x_node.lo,
            height=0.8,
            fill="none",
            fill_opacity=0,
            stroke="orange",
            stroke_width=0.1,
        )
        x_arg = x[arg]
        y_arg = y[arg]
        yield svg.Line(
            x1=0.5 + x_node.hi,
            y1=0.5 + y_node.lo,
            x2=0.5 + x_arg.lo,
            y2=0.5 + y_arg.lo,
            stroke="black",
            stroke_width=0.05,
        )
        yield svg.Circle(cx=0.5 + x_node.hi, cy=0.5 + y_node.lo, r=0.1, fill="black")
        return

    yield svg.Rect(
        x=0.1 + x_node.lo,
        y=0.1 + y_node.lo,
        width=0.8 + x_node.hi - x_node.lo,
        height=0.8,
        fill="red" if index is not None else "blue",
        stroke="gray",
        stroke_width=0.05,
    )

    if index is not None:
        # free variables hang from the top edge
        y_top = y[ref].lo + 0.9 if ref is not None else -0.5
        yield svg.Line(
            x1=x_node.lo + 0.5,
            y1=y_node.lo + 0.1,
            x2=x_node.lo + 0.5,
            y2=y_top,
            stroke="gray" if ref is not None else "purple",
            stroke_width=0.2,
        )


def to_svg(term: Term, scale: int = 40) -> svg.SVG:
    """
    Draw `term`.

    Args:
        scale: prefered size in pixels of one row or column
    """
    nodes = to_nodes(term)
    x, y = compute_layout(nodes)
    elements: list[Any] = []
    for node, ref, arg, index in (
        nodes.select("id", "ref", "arg", "index").sort("id", descending=True).iter_rows()
    ):
        elements.extend(draw(x, y, node, ref, arg, index))

    width = max(i.hi for i in x.values()) + 2
    height = max(i.hi for i in y.values()) + 2
    return svg.SVG(
        xmlns="http://www.w3.org/2000/svg",
        viewBox=f"0 -1 {width} {height}",  # type: ignore
        style=f"max-height:{height * scale}px; max-width:{width * scale}px",
        elements=elements,
    )
