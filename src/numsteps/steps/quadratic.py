# -----------------------------------------------------------------------------
#  quadratic.py
#  Legendre symbol, quadratic and binomial congruences
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from numsteps import algorithms as alg
from numsteps.context import UNIVERSAL, SolutionSet
from numsteps.dataio import message
from numsteps.fmt import (
    MULT,
    SEPARATOR,
    binomial_congruence,
    factorization_line,
    gcd_equals,
    infinite_solutions,
    legendre,
    legendre_equals,
    linear_congruence,
    mod_end,
    mod_pow_line_start,
    no_solution,
    phi_equals,
    quadratic_congruence,
)
from numsteps.registry import problem
from numsteps.steps.linear import linear_steps
from numsteps.trace import Trace
from numsteps.utility import InvalidArgument, positive_check

CATEGORY = "Quadratic and binomial congruences"


# --- Legendre symbol ---

def _legendre_done(a: int) -> bool:
    return abs(a) < 4 or alg.is_perfect_square(abs(a))


def _prime_power_symbols(a: int, p: int) -> tuple[list[str], list[int]]:
    """(q^e/p) per prime power of a; an odd e > 1 splits off the square q^(e-1)."""
    symbols: list[str] = []
    values: list[int] = []
    for q, e in alg.factorize(a):
        if e > 1 and e % 2 == 1:
            square = q ** (e - 1)
            symbols.append(legendre(square, p) + MULT + legendre(q, p))
            values += [alg.legendre_symbol(square, p), alg.legendre_symbol(q, p)]
        else:
            symbols.append(legendre(q ** e, p))
            values.append(alg.legendre_symbol(q ** e, p))
    return symbols, values


def legendre_steps(a: int, p: int) -> Trace:
    """
    (a/p): reduce a, flip an odd prime a < p by quadratic reciprocity
    (sign - when a ≡ p ≡ 3 (mod 4)), otherwise split a into prime powers.
    Continuation lines start with ' = '.
    """
    value = alg.legendre_symbol(a, p)
    trace = Trace()
    lead = legendre_equals(a, p)
    if a % p != a:
        a %= p
        trace.add(lead + legendre(a, p))
        lead = " = "

    sign = ""
    if not _legendre_done(a) and a < p and a != 2 and alg.is_prime(a):
        if a % 4 == 3 and p % 4 == 3:
            sign = "-"
        trace.add(lead + sign + legendre(p, a))
        lead = " = "
        a, p = p, a
        if a % p != a:
            a %= p
            trace.add(lead + sign + legendre(a, p))

    if not _legendre_done(a) and not alg.is_prime(a):
        symbols, values = _prime_power_symbols(a, p)
        trace.add(lead + sign + MULT.join(symbols))
        lead = " = "
        trace.add(lead + sign + MULT.join(f"({v})" if v < 0 else str(v) for v in values))

    trace.add(f"{lead}{value}")
    if a > 1 and alg.is_perfect_square(a):
        trace.add(message("perfect_square", a=a, root=isqrt(a)))
    return trace


def solve_legendre(a: int, p: int) -> SolutionSet:
    return SolutionSet.value(alg.legendre_symbol(a, p))


@problem(key="legendre", label="Legendre symbol", params=("a", "p"),
         category=CATEGORY, solve=solve_legendre,
         description="(a/p) for an odd prime p.")
def explain_legendre(a: int, p: int) -> str:
    return legendre_steps(a, p).text()


# --- Solution blocks ---

def add_solution(trace: Trace, solution: SolutionSet, var: str = "x", subscripts: bool = True) -> None:
    """Separator plus one 'x_i ≡ r (mod m)' line per residue, or the no-solution sentence."""
    if solution.is_empty:
        trace.add(no_solution())
        return
    if solution.is_infinite:
        trace.add(infinite_solutions())
        return
    trace.add(SEPARATOR)
    for i, r in enumerate(solution.residues, start=1):
        trace.add(linear_congruence(1, r, solution.modulus, var, i if subscripts else None))


def _prime_powers(m: int) -> list[int]:
    return [p ** e for p, e in alg.factorize(m)]


# --- x^2 ≡ a (mod m) ---

def quadratic_simple_steps(a: int, m: int, var: str = "x") -> Trace:
    """
    For m with 2-4 prime-power factors every odd prime factor is checked with
    the Legendre symbol first; a failing one ends the derivation. Above 13
    the per-factor congruences and their roots are shown before the result.
    """
    positive_check(m)
    trace = Trace()
    trace.add(quadratic_congruence(a, m, var))
    if a % m != a:
        a %= m
        trace.add(quadratic_congruence(a, m, var))

    solution = alg.quadratic_congruence_simple(a, m)
    if a == 0 or alg.is_power_of_2(m):
        add_solution(trace, solution, var)
        return trace

    factors = alg.factorize(m)
    if 1 < len(factors) < 5:
        for p, _ in factors:
            if p != 2 and alg.legendre_symbol(a, p) == -1:
                trace.add(SEPARATOR)
                trace.add(factorization_line(m, factors))
                trace.extend(legendre_steps(a, p))
                trace.add(no_solution())
                return trace
        if m > 13:
            trace.add(SEPARATOR)
            trace.add(factorization_line(m, factors))
            moduli = _prime_powers(m)
            for pe in moduli:
                trace.add(quadratic_congruence(a, pe, var))
            for pe in moduli:
                add_solution(trace, alg.quadratic_congruence_simple(a, pe), var, subscripts=False)

    add_solution(trace, solution, var)
    return trace


def solve_quadratic_simple(a: int, m: int) -> SolutionSet:
    return alg.quadratic_congruence_simple(a, m)


@problem(key="quadratic", label="Quadratic congruence x^2 ≡ a", params=("a", "m"),
         category=CATEGORY, solve=solve_quadratic_simple, aliases=("quad", "sqrt"),
         description="x^2 ≡ a (mod m).")
def explain_quadratic_simple(a: int, m: int) -> str:
    return quadratic_simple_steps(a, m).text()


# --- ax^2 + bx + c ≡ 0 (mod m) ---

def _quadratic_natural(a: int, b: int, c: int, m: int) -> Trace | None:
    """Solve modulo each of 2-4 prime powers of m; None for other moduli."""
    moduli = _prime_powers(m)
    if not 2 <= len(moduli) <= 4:
        return None
    trace = Trace()
    trace.add(SEPARATOR)
    for i, pe in enumerate(moduli):
        trace.add(binomial_congruence(a, 2, b, c, pe))
        ai, bi, ci = a % pe, b % pe, c % pe
        if (ai, bi, ci) != (a, b, c):
            trace.add(binomial_congruence(ai, 2, bi, ci, pe))
        add_solution(trace, alg.quadratic_congruence_general(ai, bi, ci, pe), subscripts=False)
        if i < len(moduli) - 1:
            trace.add(SEPARATOR)
    return trace


def _half_difference(t: int, b: int) -> str:
    shown = f"{t} - {b}" if b >= 0 else f"{t} + {-b}"
    return f"(t - b)/2 = ({shown})/2 = {(t - b) // 2}"


def quadratic_general_steps(a: int, b: int, c: int, m: int) -> Trace:
    """
    x^2 + c ≡ 0 goes to the x^2 ≡ a derivation. A modulus with
    2-4 prime-power factors is solved factor by factor; otherwise
    t = 2ax + b turns the congruence into t^2 ≡ D (mod 4m) with D = b^2 - 4ac.
    """
    positive_check(m)
    if not alg.is_coprime(a, m):
        raise InvalidArgument(f"({a}, {m}) must be 1")
    trace = Trace()
    trace.add(binomial_congruence(a, 2, b, c, m))
    if m == 1:
        trace.add(infinite_solutions())
        return trace

    if (a % m, b % m, c % m) != (a, b, c):
        a, b, c = a % m, b % m, c % m
        trace.add(binomial_congruence(a, 2, b, c, m))
    if a == 1 and b == 0:
        trace.extend(quadratic_simple_steps(-c, m))
        return trace

    solution = alg.quadratic_congruence_general(a, b, c, m)
    natural = _quadratic_natural(a, b, c, m)
    if natural is not None:
        trace.extend(natural)
        add_solution(trace, solution)
        return trace

    D = b * b - 4 * a * c
    trace.add(f"D = {D}")
    trace.add(SEPARATOR)
    trace.extend(quadratic_simple_steps(D, 4 * m, "t"))
    t_solutions = alg.quadratic_congruence_simple(D, 4 * m)
    if t_solutions.is_empty:
        return trace

    trace.add(SEPARATOR)
    generated = alg.quadratic_congruence_general_generate(t_solutions, m, b)
    for i, t in enumerate(generated):
        v = (t - b) // 2
        trace.add(_half_difference(t, b))
        trace.add(linear_congruence(a, v, m))
        partial = alg.linear_congruence(a, v, m)
        if partial.is_empty:
            trace.add(no_solution())
            return trace
        if partial == UNIVERSAL:
            continue
        solved = linear_congruence(1, partial.first, partial.second)
        if solved != trace.last:
            trace.add(solved)
        if i < len(generated) - 1:
            trace.add(SEPARATOR)
    add_solution(trace, solution)
    return trace


def solve_quadratic_general(a: int, b: int, c: int, m: int) -> SolutionSet:
    return alg.quadratic_congruence_general(a, b, c, m)


@problem(key="quadratic-general", label="Quadratic congruence ax^2 + bx + c ≡ 0",
         params=("a", "b", "c", "m"), category=CATEGORY, solve=solve_quadratic_general,
         aliases=("quadg",), description="ax^2 + bx + c ≡ 0 (mod m), (a, m) = 1.")
def explain_quadratic_general(a: int, b: int, c: int, m: int) -> str:
    return quadratic_general_steps(a, b, c, m).text()


# --- x^n ≡ a (mod m) ---

def _binomial_lemma(n: int, a: int, m: int, trace: Trace) -> bool:
    """
    With (a, m) = 1 and a primitive root modulo m, x^n ≡ a is solvable iff
    a^(φ(m)/d) ≡ 1 (mod m), d = (n, φ(m)). Other moduli pass unchecked.
    """
    if not alg.binomial_lemma_applies(a, m):
        return True
    phi_m = alg.euler_phi(m)
    d = alg.gcd(n, phi_m)
    test = alg.mod_pow(a, phi_m // d, m)
    if a % m != a:
        a %= m
        trace.add(binomial_congruence(1, n, 0, -a, m))
    trace.add(f"{gcd_equals(a, m)}1")
    trace.add(f"{phi_equals(m)}{phi_m}")
    trace.add(f"{gcd_equals(n, phi_m)}{d}")
    trace.add(f"{mod_pow_line_start(a, phi_m // d)}{test}{mod_end(m)}")
    trace.add(SEPARATOR)
    return test == 1


def binomial_steps(n: int, a: int, m: int) -> Trace:
    positive_check(n, m)
    if n == 1:
        return linear_steps(1, a, m)
    if n == 2:
        return quadratic_simple_steps(a, m)

    trace = Trace()
    trace.add(binomial_congruence(1, n, 0, -a, m))
    if m == 1:
        trace.add(infinite_solutions())
        return trace
    if a % m != a:
        a %= m
        trace.add(binomial_congruence(1, n, 0, -a, m))
    trace.add(SEPARATOR)
    if not _binomial_lemma(n, a, m, trace):
        trace.add(no_solution())
        return trace

    solution = alg.binomial_congruence(n, a, m)
    if solution.is_empty:
        factors = alg.factorize(m)
        trace.add(factorization_line(m, factors))
        for p, _ in factors:
            report = Trace()
            if not _binomial_lemma(n, a, p, report):
                trace.extend(report)
                break
        trace.add(no_solution())
        return trace

    for r in solution.residues:
        trace.add(linear_congruence(1, r, solution.modulus))
    return trace


def solve_binomial(n: int, a: int, m: int) -> SolutionSet:
    return alg.binomial_congruence(n, a, m)


@problem(key="binomial", label="Binomial congruence x^n ≡ a", params=("n", "a", "m"),
         category=CATEGORY, solve=solve_binomial, aliases=("root",),
         description="x^n ≡ a (mod m).")
def explain_binomial(n: int, a: int, m: int) -> str:
    return binomial_steps(n, a, m).text()

