# -----------------------------------------------------------------------------
#  linear.py
#  Linear congruences and systems of linear congruences
# -----------------------------------------------------------------------------

from __future__ import annotations

from numsteps import algorithms as alg
from numsteps.context import UNIVERSAL, Congruence, IntPair, SolutionSet
from numsteps.fmt import (
    CONG,
    NOT_DIVIDES,
    SEPARATOR,
    gcd_equals,
    infinite_solutions,
    mod_end,
    no_solution,
)
from numsteps.fmt import linear_congruence as congruence_line
from numsteps.registry import problem
from numsteps.steps.natural import natural_steps
from numsteps.trace import Trace
from numsteps.utility import list_check, positive_check

CATEGORY = "Linear congruences"


# --- single congruence ---

def _bezout_coefficient(a: int, n: int) -> int:
    """r with ar + ns = (a, n)."""
    if a > n:
        return alg.bezout(a, n)[1]
    return alg.bezout(n, a)[2]


def linear_steps(a: int, b: int, n: int) -> Trace:
    """
    ax ≡ b (mod n): reduce modulo n, settle the degenerate forms, try a
    natural derivation and fall back to the Bezout identity.
    """
    positive_check(n)
    trace = Trace()
    trace.add(congruence_line(a, b, n))
    original_a, original_b = a, b
    if Congruence(a, b, n).changes_on_normalize:
        a, b = a % n, b % n
        trace.add(congruence_line(a, b, n))

    if a == 1:
        return trace
    if a == 0:
        trace.add(infinite_solutions() if b == 0 else no_solution())
        return trace

    natural = natural_steps(original_a, original_b, n)
    if natural is not None:
        x, m = alg.linear_congruence(a, b, n)
        final = congruence_line(1, x, m)
        if natural.last != final:
            natural.add(final)
        return natural

    d = alg.gcd(a, n)
    if b % d != 0:
        trace.add(f"{gcd_equals(a, n)}{d}{NOT_DIVIDES}{b}")
        trace.add(no_solution())
        return trace
    trace.add(f"{gcd_equals(a, n)}{d} | {b}")
    trace.add(f"{d} = {a}r + {n}s")
    r = _bezout_coefficient(a, n)
    shifted = n // d
    x = (r * b // d) % shifted
    trace.add(f"r = {r}")
    trace.add(f"x{CONG}{b}r / {d}{mod_end(shifted)}")
    trace.add(congruence_line(1, x, shifted))
    return trace


def solve_linear(a: int, b: int, n: int) -> SolutionSet:
    return SolutionSet.from_pair(alg.linear_congruence(a, b, n))


@problem(key="linear", label="Linear congruence", params=("a", "b", "n"),
         category=CATEGORY, solve=solve_linear, aliases=("lin",),
         description="ax ≡ b (mod n).")
def explain_linear(a: int, b: int, n: int) -> str:
    return linear_steps(a, b, n).text()


# --- system of congruences ---

def _next_var(var: str) -> str:
    return chr(ord(var) + 1)


def system_steps(a_list: list[int], b_list: list[int], n_list: list[int]) -> Trace:
    """
    Fold a_i x ≡ b_i (mod n_i) one congruence at a time.

    The running solution x = X + M k is substituted into the next congruence,
    which is then solved for k (free variables k, l, m, ...). A congruence
    that holds for every value of the current variable leaves the solution
    unchanged and the substitution moves on to the next one.
    """
    count = len(a_list)
    positive_check(count)
    list_check(count, b_list, "b list")
    list_check(count, n_list, "n list")
    positive_check(*n_list)
    if count == 1:
        return linear_steps(a_list[0], b_list[0], n_list[0])

    trace = Trace()
    system = [Congruence(a, b, n) for a, b, n in zip(a_list, b_list, n_list)]
    for c in system:
        trace.add(congruence_line(c.a, c.b, c.n))
    trace.add(SEPARATOR)

    if any(c.changes_on_normalize for c in system):
        system = [c.normalized() for c in system]
        for c in system:
            trace.add(congruence_line(c.a, c.b, c.n))
        trace.add(SEPARATOR)

    a_s = [c.a for c in system]
    b_s = [c.b for c in system]
    n_s = [c.n for c in system]

    solution = IntPair()
    var = "k"
    for i in range(count):
        last = i == count - 1
        partial = alg.linear_congruence(a_s[i], b_s[i], n_s[i])
        if partial.is_empty:
            trace.add(no_solution())
            return trace

        if partial == UNIVERSAL:
            if solution.is_empty:
                if last:
                    trace.add(SEPARATOR)
                    trace.add(infinite_solutions())
                    return trace
                continue
        else:
            px, pm = partial
            if solution.is_empty:
                solution = partial
            else:
                nxt = _next_var(var)
                trace.add(f"{var} = {px} + {pm}{nxt}")
                x0, m0 = solution
                solution = IntPair(x0 + m0 * px, m0 * pm)
                var = nxt
            trace.add(f"x = {solution.first} + {solution.second}{var}")

        if not last:
            x0, m0 = solution
            a_next, b_next, n_next = a_s[i + 1], b_s[i + 1], n_s[i + 1]
            substituted = f"{x0} + {m0}{var}"
            if a_next != 1:
                substituted = f"{a_next}({substituted})"
            trace.add(SEPARATOR)
            trace.add(f"{substituted}{CONG}{b_next}{mod_end(n_next)}")
            b_s[i + 1] = b_next - a_next * x0
            a_s[i + 1] = a_next * m0
            trace.add(congruence_line(a_s[i + 1], b_s[i + 1], n_next, var))

    trace.add(congruence_line(1, solution.first, solution.second))
    return trace


def solve_system(count: int, a_list: list[int], b_list: list[int], n_list: list[int]) -> SolutionSet:
    list_check(count, a_list, "a list")
    return SolutionSet.from_pair(alg.linear_congruence_system(a_list, b_list, n_list))


@problem(key="system", label="System of linear congruences",
         params=("count", "a", "b", "n"), list_params=("a", "b", "n"),
         category=CATEGORY, solve=solve_system, aliases=("crt",),
         list_limit="LIMITS.MAX_SYSTEM",
         description="a_i x ≡ b_i (mod n_i) for i = 1..count.")
def explain_system(count: int, a_list: list[int], b_list: list[int], n_list: list[int]) -> str:
    list_check(count, a_list, "a list")
    return system_steps(list(a_list), list(b_list), list(n_list)).text()
