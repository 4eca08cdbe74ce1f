"""Standard combinators.

https://en.wikipedia.org/wiki/Lambda_calculus#Standard_terms
"""

from .term import Lam, Var

__all__ = ["I", "K", "S", "IOTA", "B", "C", "W", "U", "OMEGA_SMALL", "OMEGA", "Y"]

# λx. x
I = Lam(Var(1))

# λx y. x
K = Lam(Lam(Var(2)))

# λx y z. x z (y z)
S = Lam(Lam(Lam(Var(3)(Var(1))(Var(2)(Var(1))))))

# λx. x S K, universal
IOTA = Lam(Var(1)(S)(K))

# λx y z. x (y z), composition
B = Lam(Lam(Lam(Var(3)(Var(2)(Var(1))))))

# λx y z. x z y, swap
C = Lam(Lam(Lam(Var(3)(Var(1))(Var(2)))))

# λx y. x y y, duplication
W = Lam(Lam(Var(2)(Var(1))(Var(1))))

# λx y. y (x x y), recursion: U U f reduces to f (U U f)
U = Lam(Lam(Var(1)(Var(2)(Var(2))(Var(1)))))

# ω = λx. x x
OMEGA_SMALL = Lam(Var(1)(Var(1)))

# Ω = ω ω, has no normal form
OMEGA = OMEGA_SMALL(OMEGA_SMALL)

# λg. (λx. g (x x)) (λx. g (x x))
Y = Lam(Lam(Var(2)(Var(1)(Var(1))))(Lam(Var(2)(Var(1)(Var(1))))))
