# -----------------------------------------------------------------------------
#  euclid.py
#  Greatest common divisor, Bezout coefficients and modular inverse
# -----------------------------------------------------------------------------

from __future__ import annotations

from numsteps import algorithms as alg
from numsteps.context import SolutionSet
from numsteps.fmt import MULT, gcd_equals, gcd_pair
from numsteps.registry import problem
from numsteps.steps.linear import linear_steps
from numsteps.trace import Span, Trace
from numsteps.utility import not_less_than_check, not_negative_check, positive_check

CATEGORY = "Euclidean algorithm"


# --- gcd ---

def gcd_steps(a: int, b: int) -> Trace:
    """
    Division lines 'a = q * b + r' down to a zero remainder. Negative or
    out-of-order inputs first get one '(a, b) = (|a|, |b|)' / swap line each.
    """
    trace = Trace()
    if a < 0 or b < 0:
        trace.add(gcd_equals(a, b) + gcd_pair(abs(a), abs(b)))
        a, b = abs(a), abs(b)
    if a < b:
        trace.add(gcd_equals(a, b) + gcd_pair(b, a))
        a, b = b, a

    first, second = a, b
    while b > 0:
        q, r = divmod(a, b)
        trace.add(f"{a} = {q}{MULT}{b} + {r}")
        a, b = b, r
    trace.add(gcd_equals(first, second) + str(a))
    return trace


def solve_gcd(a: int, b: int) -> SolutionSet:
    return SolutionSet.value(alg.gcd(a, b))


@problem(key="gcd", label="Greatest common divisor", params=("a", "b"),
         category=CATEGORY, solve=solve_gcd,
         description="(a, b) by the Euclidean algorithm.")
def explain_gcd(a: int, b: int) -> str:
    return gcd_steps(a, b).text()


# --- Bezout ---

def _euclid_rows(a: int, b: int) -> list[tuple[int, int, int, int]]:
    rows = []
    while b > 0:
        q, r = divmod(a, b)
        rows.append((a, q, b, r))
        a, b = b, r
    return rows


def _collected(d: int, s: int, a: int, t: int, b: int) -> tuple[str, dict[str, Span]]:
    """'d = s * a ± |t| * b' with a span on the b term."""
    head = f"{d} = {s}{MULT}{a}{' + ' if t >= 0 else ' - '}{abs(t)}{MULT}"
    return head + str(b), {"b": Span(len(head), len(str(b)))}


def bezout_steps(a: int, b: int) -> Trace:
    """
    Back substitution through the Euclidean algorithm for a >= b >= 0.

    Starting from the last non-zero remainder d = a_k - q_k * b_k, each
    earlier division row replaces the b term by '(a_j - q_j * b_j)' and the
    line is collected again as d = s * a_j ± t * b_j.
    """
    not_negative_check(a, b)
    not_less_than_check(a, b)
    trace = Trace()
    if b == 0:
        trace.add(f"{a} = 1{MULT}{a} + 0{MULT}{b}")
        trace.add("x = 1, y = 0")
        return trace

    rows = _euclid_rows(a, b)
    d = rows[-1][2]
    if len(rows) == 1:
        trace.add(f"{d} = 0{MULT}{a} + 1{MULT}{b}")
        trace.add("x = 0, y = 1")
        return trace

    ak, qk, bk, _ = rows[-2]
    head = f"{d} = {ak} - {qk}{MULT}"
    line = trace.add(head + str(bk), {"b": Span(len(head), len(str(bk)))})
    s, t = 1, -qk
    for aj, qj, bj, _ in reversed(rows[:-2]):
        trace.rewrite(line, "b", f"({aj} - {qj}{MULT}{bj})")
        s, t = t, s - t * qj
        text, spans = _collected(d, s, aj, t, bj)
        line = trace.add(text, spans)
    trace.add(f"x = {s}, y = {t}")
    return trace


def solve_bezout(a: int, b: int) -> SolutionSet:
    return SolutionSet.value(*alg.bezout(a, b))


@problem(key="bezout", label="Bezout coefficients", params=("a", "b"),
         category=CATEGORY, solve=solve_bezout,
         description="d = ax + by for a >= b >= 0.")
def explain_bezout(a: int, b: int) -> str:
    return bezout_steps(a, b).text()


# --- Modular inverse ---

def solve_inverse(a: int, n: int) -> SolutionSet:
    positive_check(n)
    return SolutionSet.from_pair(alg.linear_congruence(a, 1, n))


@problem(key="inverse", label="Modular inverse", params=("a", "n"),
         category=CATEGORY, solve=solve_inverse, aliases=("inv",),
         description="ax ≡ 1 (mod n).")
def explain_inverse(a: int, n: int) -> str:
    return linear_steps(a, 1, n).text()
