# -----------------------------------------------------------------------------
#  natural.py
#  "On paper" derivation of a linear congruence by small divisors
# -----------------------------------------------------------------------------

from __future__ import annotations

from numsteps import algorithms as alg
from numsteps.fmt import linear_congruence as congruence_line
from numsteps.trace import Trace

# Largest divisor the search will cancel by; divisors above it are never tried.
MAX_NATURAL_DIVISOR = 13


def natural_divisor(n: int) -> int:
    """
    Largest divisor of n in 2..MAX_NATURAL_DIVISOR, or 1 if there is none.
    Divisors are scanned in increasing order; the scan stops at the first one
    above MAX_NATURAL_DIVISOR.
    """
    if n == 0:
        return 1
    d = 1
    for di in alg.divisors(n)[1:]:
        if di > MAX_NATURAL_DIVISOR:
            break
        if di > d:
            d = di
    return d


def _divide(trace: Trace, a: int, b: int, n: int, d: int) -> tuple[int, int, int]:
    """Mark the last line '/÷d' and append the divided congruence."""
    trace.annotate_last(f"   /÷{d}")
    a //= d
    b //= d
    if n % d == 0:
        n //= d
    trace.add(congruence_line(a, b, n))
    return a, b, n


def natural_steps(a: int, b: int, n: int, trace: Trace | None = None) -> Trace | None:
    """
    Try to reach 'x ≡ r (mod t)' for ax ≡ b (mod n) using only cancellations.

    1. cancel a small common divisor of a and b (of the reduced pair on the
       first pass), by (n, d) when that is not 1;
    2. otherwise pick a small divisor d of a, shift b by nk with
       nk ≡ -b (mod d) and cancel d;
    3. on the first pass only: run once more on the result, then retry with
       a + n and with a - n when those have a small divisor.

    Returns the trace (a fresh one on the first pass, an extended copy of
    `trace` otherwise) or None when no natural derivation is found.
    """
    first_run = trace is None
    trace = Trace() if first_run else trace.copy()
    if first_run:
        trace.add(congruence_line(a, b, n))

    norm_a, norm_b = a % n, b % n
    d = 1
    if norm_b != 0:
        d = natural_divisor(alg.gcd(norm_a, norm_b))
    if d > 1 and first_run:
        if (norm_a, norm_b) != (a, b):
            trace.add(congruence_line(norm_a, norm_b, n))
        a, b = norm_a, norm_b
    else:
        d = natural_divisor(alg.gcd(a, b))

    g = alg.gcd(n, d)
    if g > 1:
        d = g
    if d > 1:
        a, b, n = _divide(trace, a, b, n, d)
        if a == 1:
            return trace

    # a has a small divisor d: make b + nk divisible by it as well
    d = natural_divisor(a)
    g = alg.gcd(n, d)
    if g > 1:
        d = g
    if d > 1:
        shift = alg.linear_congruence(n, -b, d)
        if not shift.is_empty:
            k = shift.first
            b += n * k
            if k != 0:
                trace.annotate_last(f"   /+{n * k}")
                trace.add(congruence_line(a, b, n))
            a, b, n = _divide(trace, a, b, n, d)
            if a == 1:
                return trace

    if first_run:
        rerun = natural_steps(a, b, n, trace)
        if rerun is not None and rerun.finished():
            return rerun

        for shifted in (a + n, a - n):
            if natural_divisor(shifted) > 1:
                branch = trace.copy()
                branch.add(congruence_line(shifted, b, n))
                retry = natural_steps(shifted, b, n, branch)
                if retry is not None and retry.finished():
                    return retry
    return None
