import random
from typing import List

import pytest

from nameless import App, Lam, Term, Var, is_closed


def random_term(rng: random.Random, budget: int, binders: int, free: int) -> Term:
    """A random term with at most `free` free variables at the top."""
    scope = binders + free
    choice = rng.random()
    if budget <= 1 or (scope and choice < 0.3):
        if scope == 0:
            return Lam(Var(1))
        return Var(rng.randint(1, scope))
    if choice < 0.6:
        return Lam(random_term(rng, budget - 1, binders + 1, free))
    left = rng.randint(1, budget - 1)
    return App(
        random_term(rng, left, binders, free),
        random_term(rng, budget - left, binders, free),
    )


def nested_abstractions(depth: int) -> Term:
    term: Term = App(Var(1), Var(depth))
    for _ in range(depth):
        term = Lam(term)
    return term


def nested_applications(depth: int) -> Term:
    term: Term = Var(1)
    for i in range(depth):
        term = App(Lam(term), Var(1)) if i % 2 else App(Var(1), Lam(term))
    return Lam(term)


def make_corpus(seed: int = 1234) -> List[Term]:
    rng = random.Random(seed)
    terms = [random_term(rng, rng.randint(1, 12), 0, 0) for _ in range(80)]
    terms += [random_term(rng, rng.randint(1, 12), 0, 3) for _ in range(40)]
    terms += [nested_abstractions(d) for d in (1, 10, 100, 2500)]
    terms += [nested_applications(d) for d in (1, 10, 60, 2000)]
    return terms


@pytest.fixture(scope="session")
def corpus() -> List[Term]:
    return make_corpus()


@pytest.fixture(scope="session")
def closed_corpus(corpus) -> List[Term]:
    return [t for t in corpus if is_closed(t)]
