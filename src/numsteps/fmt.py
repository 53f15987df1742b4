# src/numsteps/fmt.py
from __future__ import annotations

import re
from collections.abc import Iterable

from numsteps.context import IntPair
from numsteps.dataio import message

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

MULT = " * "
CONG = " ≡ "
NOT_CONG = " ≢ "
PHI = "φ"
NOT_DIVIDES = " ∤ "
TIMES = "×"
SIGMA = "σ"
CIRC = " ∘ "

SEPARATOR = "-" * 20


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


# --- Sentences ---

def no_solution() -> str:
    return message("no_solution")


def infinite_solutions() -> str:
    return message("infinite_solutions")


# --- Small pieces ---

def power(base: int, exp: int) -> str:
    """'p^e', braced as 'p^{e}' once the exponent has two digits; '(-p)^e' for a negative base."""
    shown = f"({base})" if base < 0 else str(base)
    return f"{shown}^{{{exp}}}" if exp > 9 else f"{shown}^{exp}"


def gcd_pair(a: int, b: int) -> str:
    return f"({a}, {b})"


def gcd_equals(a: int, b: int) -> str:
    return f"({a}, {b}) = "


def phi(n: int | str) -> str:
    return f"{PHI}({n})"


def phi_equals(n: int) -> str:
    return f"{PHI}({n}) = "


def legendre(a: int, p: int) -> str:
    return f"({a}/{p})"


def legendre_equals(a: int, p: int) -> str:
    return f"({a}/{p}) = "


def mod_end(m: int) -> str:
    return f" (mod {m})"


def mod_pow_line_start(base: int, exp: int) -> str:
    """'base^exp ≡ '"""
    return power(base, exp) + CONG


def join_powers(factors: Iterable[IntPair]) -> str:
    return MULT.join(power(p, e) for p, e in factors)


def factorization_line(n: int, factors: Iterable[IntPair]) -> str:
    """'n = p1^e1 * p2^e2 * ...'"""
    return f"{n} = {join_powers(factors)}"


def cycle(c: Iterable[int]) -> str:
    return "(" + ", ".join(str(v) for v in c) + ")"


# --- Congruences ---

def linear_congruence(a: int, b: int, n: int, var: str = "x", index: int | None = None) -> str:
    """'a x ≡ b (mod n)' with the coefficient 1 left implicit and an optional subscript."""
    name = var if index is None else f"{var}_{index}"
    coef = "" if a == 1 else str(a)
    return f"{coef}{name}{CONG}{b}{mod_end(n)}"


def coefficient(n: int, absolute: bool) -> str:
    """' + n' / ' - n'; a unit coefficient is dropped unless `absolute`."""
    if n == 0:
        return ""
    sign = " + " if n > 0 else " - "
    if absolute or abs(n) != 1:
        return sign + str(abs(n))
    return sign


def binomial_congruence(a: int, exp: int, b: int, c: int, m: int, var: str = "x") -> str:
    """'a x^exp + b x + c ≡ 0 (mod m)', collapsing the degenerate forms."""
    if exp == 1:
        return linear_congruence(a + b, -c, m, var)
    if a == 0:
        return linear_congruence(b, -c, m, var)

    head = ("" if a == 1 else str(a)) + var + "^" + (f"{{{exp}}}" if exp > 9 else str(exp))
    if a == 1 and b == 0:
        return f"{head}{CONG}{-c}{mod_end(m)}"
    if b != 0:
        head += coefficient(b, False) + var
    head += coefficient(c, True)
    return f"{head}{CONG}0{mod_end(m)}"


def quadratic_congruence(a: int, m: int, var: str = "x") -> str:
    """'x^2 ≡ a (mod m)'"""
    return binomial_congruence(1, 2, 0, -a, m, var)
