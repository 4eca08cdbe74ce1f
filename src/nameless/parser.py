"""Parser from lambda notation to nameless terms.

Grammar:

```
term        ::= abstraction | application
abstraction ::= LAMBDA NAME+ "." term     ; named binders, λx y. M = λx. λy. M
              | LAMBDA term               ; anonymous binder, λ λ 2 = λx. λy. x
application ::= atom+ [abstraction] | abstraction
atom        ::= INDEX | NAME | "(" term ")"
```

`LAMBDA` is either `λ` or a backslash. Applications associate to the left and
an abstraction body extends as far right as possible: `λx. x y` is `λx. (x y)`.

Names right after a `LAMBDA` are always binders and must be followed by a dot,
so `λx` alone is an error. The body of an anonymous binder therefore can't
start with a name: write `λ (x 1)` or `λ 1 x`.

Both styles can be mixed. An `INDEX` is a 1-based De Bruijn index used as is;
a `NAME` is resolved by counting the binders up to the nearest one with that
name. Anonymous binders count too, they just can't be referred to by name.
A name with no matching binder is free: it refers to a position in the
naming context, which is the caller's list of free names extended with
unknown names in order of first appearance.

Nesting is tracked with an explicit stack of open frames, so deeply nested
input doesn't hit the interpreter's recursion limit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from .term import App, Lam, Term, Var

__all__ = ["ParseError", "Parser", "parse", "tokenize"]

LAMBDAS = ("λ", "\\")

_TOKEN = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<lambda>[λ\\])"
    r"|(?P<dot>\.)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<index>[0-9]+)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_']*)"
)


class ParseError(ValueError):
    def __init__(self, message: str, position: int):
        super().__init__(f"{message} (at position {position})")
        self.message = message
        self.position = position


class Token(NamedTuple):
    kind: str
    text: str
    position: int


def tokenize(text: str) -> List[Token]:
    tokens = []
    position = 0
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None:
            raise ParseError(f"invalid character {text[position]!r}", position)
        if match.lastgroup != "space":
            tokens.append(Token(match.lastgroup, match.group(), position))
        position = match.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


@dataclass
class Frame:
    """
    A construct that has been opened but not closed yet.

    Attributes:
        kind: "root", "paren" or "lambda"
        position: where it was opened
        binders: number of lambdas a "lambda" frame stands for
        term: the application built so far inside the frame
    """

    kind: str
    position: int
    binders: int = 0
    term: Optional[Term] = None

    def push(self, term: Term):
        self.term = term if self.term is None else App(self.term, term)


class Parser:
    """
    Parser for a single piece of text.

    Attributes:
        free_names:
            The naming context of free variables. Position `p` (starting at 1)
            is the free variable written `Var(depth + p)` under `depth` binders.
            After `parse`, names met without a binder have been appended.
    """

    def __init__(self, text: str, free_names: Optional[Sequence[str]] = None):
        self.tokens = tokenize(text)
        self.pos = 0
        self.scope: List[Optional[str]] = []
        self.free_names: List[str] = list(free_names or [])

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    @staticmethod
    def describe(token: Token) -> str:
        if token.kind == "end":
            return "end of input"
        return repr(token.text)

    def parse(self) -> Term:
        frames = [Frame("root", 0)]
        while True:
            token = self.advance()

            if token.kind == "lambda":
                binders = self.parse_binders(token)
                frames.append(Frame("lambda", token.position, binders))

            elif token.kind == "lparen":
                if self.peek().kind == "rparen":
                    raise ParseError("empty parentheses", token.position)
                frames.append(Frame("paren", token.position))

            elif token.kind == "rparen":
                self.close_lambdas(frames)
                if frames[-1].kind != "paren":
                    raise ParseError("unmatched ')'", token.position)
                frame = frames.pop()
                frames[-1].push(frame.term)

            elif token.kind == "end":
                self.close_lambdas(frames)
                if frames[-1].kind == "paren":
                    raise ParseError("unmatched '('", frames[-1].position)
                if frames[-1].term is None:
                    raise ParseError("empty expression", token.position)
                return frames[-1].term

            elif token.kind == "index":
                index = int(token.text)
                if index < 1:
                    raise ParseError(f"index must be positive, got {token.text}", token.position)
                frames[-1].push(Var(index))

            elif token.kind == "name":
                frames[-1].push(Var(self.resolve(token.text)))

            else:
                raise ParseError(f"unexpected {self.describe(token)}", token.position)

    def parse_binders(self, lamb: Token) -> int:
        """Read the binder names after `lamb`, bring them in scope and return how many."""
        if self.peek().kind == "dot":
            raise ParseError("binder without a name", self.peek().position)

        names: List[Optional[str]] = []
        while self.peek().kind == "name":
            names.append(self.advance().text)
        if names:
            if self.peek().kind != "dot":
                raise ParseError("expected '.' after binder names", self.peek().position)
            self.advance()
        else:
            names = [None]

        if self.peek().kind in ("end", "rparen"):
            raise ParseError(f"missing body after {lamb.text!r}", self.peek().position)

        self.scope.extend(names)
        return len(names)

    def close_lambdas(self, frames: List[Frame]):
        """Close the lambda frames on top of the stack, their bodies end here."""
        while frames[-1].kind == "lambda":
            frame = frames.pop()
            body = frame.term
            for _ in range(frame.binders):
                body = Lam(body)
            del self.scope[-frame.binders :]
            frames[-1].push(body)

    def resolve(self, name: str) -> int:
        for i, bound in enumerate(reversed(self.scope)):
            if bound == name:
                return i + 1
        if name not in self.free_names:
            self.free_names.append(name)
        return len(self.scope) + self.free_names.index(name) + 1


def parse(text: str, free_names: Optional[Sequence[str]] = None) -> Term:
    """
    Parse `text` into a nameless term.

    Raises:
        ParseError: on the first syntax error.

    ```
    parse("λx. λy. x")    # Lam(Lam(Var(2)))
    parse("λ λ 2")        # Lam(Lam(Var(2)))
    parse("f x", ["x", "f"])  # App(Var(2), Var(1))
    ```
    """
    return Parser(text, free_names).parse()
