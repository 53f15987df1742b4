# -----------------------------------------------------------------------------
#  totient.py
#  Euler's totient, element order in Zn× and modular powers
# -----------------------------------------------------------------------------

from __future__ import annotations

from numsteps import algorithms as alg
from numsteps.context import SolutionSet
from numsteps.dataio import message
from numsteps.fmt import (
    CONG,
    MULT,
    NOT_CONG,
    SEPARATOR,
    TIMES,
    factorization_line,
    join_powers,
    mod_end,
    mod_pow_line_start,
    phi,
    phi_equals,
    power,
)
from numsteps.registry import problem
from numsteps.trace import Trace
from numsteps.utility import InvalidArgument, not_less_than_check, not_negative_check, positive_check

CATEGORY = "Euler's totient and powers"


# --- φ(n) ---

def phi_steps(n: int) -> Trace:
    """Factorization, multiplicativity, then the product formula per prime power."""
    positive_check(n)
    trace = Trace()
    if n < 2:
        trace.add(f"{phi_equals(n)}{n}")
        return trace

    factors = alg.factorize(n)
    trace.add(factorization_line(n, factors))
    trace.add(phi_equals(n) + phi(join_powers(factors)))
    if len(factors) > 1:
        trace.add(phi_equals(n) + MULT.join(phi(power(p, e)) for p, e in factors))
    trace.add(phi_equals(n) + MULT.join(f"({p - 1}{MULT}{power(p, e - 1)})" for p, e in factors))
    trace.add(phi_equals(n) + MULT.join(str((p - 1) * p ** (e - 1)) for p, e in factors))
    if len(factors) > 1:
        trace.add(f"{phi_equals(n)}{alg.euler_phi(n)}")
    return trace


def solve_phi(n: int) -> SolutionSet:
    return SolutionSet.value(alg.euler_phi(n))


@problem(key="phi", label="Euler's totient", params=("n",),
         category=CATEGORY, solve=solve_phi, aliases=("totient",),
         description="φ(n) from the prime factorization.")
def explain_phi(n: int) -> str:
    return phi_steps(n).text()


# --- Element order in Zn× ---

def unit_group_line(n: int) -> str:
    """'Zn× = {1, 5, 7, 11}', or 'Zp× = Zp*' for a prime modulus."""
    not_less_than_check(n, 2)
    head = f"Z{n}{TIMES} = "
    if alg.is_prime(n):
        return f"{head}Z{n}*"
    return head + "{" + ", ".join(str(u) for u in alg.unit_group_elements(n)) + "}"


def element_order_steps(element: int, n: int) -> Trace:
    """
    Candidate orders are the divisors of φ(n); every divisor below the order
    gets an 'e^d ≢ 1' line before the first one that gives 1.
    """
    order = alg.unit_group_element_order(element, n)
    group_order = alg.euler_phi(n)
    candidates = alg.divisors(group_order)

    trace = Trace()
    if element % n != element:
        trace.add(f"{element}{CONG}{element % n}{mod_end(n)}")
        element %= n
    trace.add(unit_group_line(n))
    trace.add(f"{message('group_order')}{phi_equals(n)}{group_order}")
    trace.add(message("possible_orders") + "{" + ", ".join(str(d) for d in candidates) + "}")
    tail = f"1{mod_end(n)}"
    for d in candidates:
        if d == order:
            break
        trace.add(f"{power(element, d)}{NOT_CONG}{tail}")
    trace.add(f"{power(element, order)}{CONG}{tail}")
    trace.add(message("element_order", element=element, order=order))
    return trace


def solve_element_order(element: int, n: int) -> SolutionSet:
    return SolutionSet.value(alg.unit_group_element_order(element, n))


@problem(key="order", label="Element order in Zn×", params=("element", "n"),
         category=CATEGORY, solve=solve_element_order,
         description="Smallest k with element^k ≡ 1 (mod n).")
def explain_element_order(element: int, n: int) -> str:
    return element_order_steps(element, n).text()


# --- Modular power ---

def _shortcut(base: int, exp: int, mod: int) -> int | None:
    """Value of base^exp mod m when it needs no work (base already reduced)."""
    if mod == 1:
        return 0
    if base == 0:
        return 1 if exp == 0 else 0
    if base == 1 or exp == 0:
        return 1
    if base == mod - 1:
        return 1 if exp % 2 == 0 else mod - 1
    if exp == 1:
        return base
    return None


def mod_pow_steps(base: int, exp: int, mod: int) -> Trace:
    """
    base^exp mod m in up to three reductions, each used only when it changes
    the exponent: exponent mod φ(m) (coprime base), exponent mod the order
    of the base (skipped when the order is undefined) and splitting m into
    prime powers.
    """
    not_negative_check(exp)
    positive_check(mod)
    trace = Trace()
    start = mod_pow_line_start(base, exp)
    end = mod_end(mod)
    if base % mod != base:
        base %= mod
        trace.add(f"{start}{power(base, exp)}{end}")
        start = mod_pow_line_start(base, exp)

    value = _shortcut(base, exp, mod)
    if value is not None:
        trace.add(f"{CONG if trace else start}{value}{end}")
        return trace

    # continue with ' ≡ ...' instead of a fresh 'b^e ≡ ...'
    chained = False

    if alg.is_coprime(base, mod):
        phi_m = alg.euler_phi(mod)
        if exp >= phi_m:
            trace.add(f"{phi_equals(mod)}{phi_m}")
            trace.add(SEPARATOR)
            exp %= phi_m
            if exp in (0, 1):
                trace.add(f"{start}{1 if exp == 0 else base}{end}")
                return trace
            trace.add(f"{start}{power(base, exp)}{end}")
            start = mod_pow_line_start(base, exp)
            chained = True

    try:
        order = alg.unit_group_element_order(base, mod)
    except InvalidArgument:
        order = None
    if order is not None and exp >= order:
        q, r = divmod(exp, order)
        trailing = f"{power(base, r)}{MULT}" if r else ""
        body = f"({power(base, order)})^{{{q}}}" if q > 1 else power(base, order)
        trace.add(f"{CONG if chained else start}{trailing}{body}{end}")
        trace.add(f"{CONG}{trailing}{power(1, q)}{end}")
        exp = r
        if exp in (0, 1):
            trace.add(f"{CONG}{1 if exp == 0 else base}{end}")
            return trace
        trace.add(f"{CONG}{power(base, exp)}{end}")
        start = mod_pow_line_start(base, exp)
        chained = True

    factors = alg.factorize(mod)
    if len(factors) > 1:
        if len(trace) >= 2:
            trace.add(SEPARATOR)
        trace.add(factorization_line(mod, factors))
        trace.add(SEPARATOR)
        for p, e in factors:
            pe = p ** e
            trace.add(f"{start}{alg.mod_pow(base, exp, pe)}{mod_end(pe)}")
        trace.add(SEPARATOR)
        chained = False

    trace.add(f"{CONG if chained else start}{alg.mod_pow(base, exp, mod)}{end}")
    return trace


def solve_mod_pow(base: int, exp: int, mod: int) -> SolutionSet:
    return SolutionSet.value(alg.mod_pow(base, exp, mod))


@problem(key="modpow", label="Modular power", params=("base", "exp", "mod"),
         category=CATEGORY, solve=solve_mod_pow, aliases=("pow",),
         description="base^exp mod m with exponent reductions.")
def explain_mod_pow(base: int, exp: int, mod: int) -> str:
    return mod_pow_steps(base, exp, mod).text()
