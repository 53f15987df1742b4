# -----------------------------------------------------------------------------
#  algorithms.py
#  Arithmetic kernel: exact number-theoretic computations on small integers
# -----------------------------------------------------------------------------

from __future__ import annotations

from itertools import product

import gmpy2
from sympy import divisors as _sympy_divisors
from sympy import factorint, isprime

from numsteps.context import EMPTY, UNIVERSAL, IntPair, SolutionSet
from numsteps.utility import (
    InvalidArgument,
    list_check,
    not_less_than_check,
    not_negative_check,
    positive_check,
)

# --- Basic helpers ---


def normalize(a: int, n: int) -> int:
    """Least non-negative residue of a modulo n (n > 0)."""
    positive_check(n)
    return a % n


def gcd(a: int, b: int) -> int:
    """Euclidean algorithm on |a|, |b|; gcd(0, 0) = 0."""
    a, b = abs(a), abs(b)
    if a < b:
        a, b = b, a
    while b > 0:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return abs(a) // gcd(a, b) * abs(b)


def is_coprime(a: int, b: int) -> bool:
    return gcd(a, b) == 1


def is_prime(n: int) -> bool:
    return n > 1 and bool(isprime(n))


def is_perfect_square(n: int) -> bool:
    return n >= 0 and bool(gmpy2.is_square(n))


def is_power_of_2(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def bezout(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended Euclidean algorithm for a >= b >= 0.
    Returns (d, x, y) with a*x + b*y = d = gcd(a, b).
    """
    not_negative_check(a, b)
    not_less_than_check(a, b)
    if b == 0:
        return a, 1, 0

    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r > 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    return old_r, old_x, old_y


def factorize(n: int) -> list[IntPair]:
    """
    Prime factorization as [(p1, e1), (p2, e2), ...] with p1 < p2 < ...
    n = 0 and n = 1 give [] (callers treat n < 2 as a base case).
    """
    not_negative_check(n)
    if n < 2:
        return []
    return [IntPair(int(p), int(e)) for p, e in sorted(factorint(n).items())]


def divisors(n: int) -> list[int]:
    """Positive divisors of |n| in increasing order (n != 0)."""
    if n == 0:
        raise InvalidArgument("0 has no finite list of divisors")
    return [int(d) for d in _sympy_divisors(abs(n))]


def common_divisors(a: int, b: int) -> list[int]:
    return divisors(gcd(a, b))


def euler_phi(n: int) -> int:
    """φ(n) = ∏ p^(e-1) * (p - 1) over the factorization of n."""
    positive_check(n)
    phi = 1
    for p, e in factorize(n):
        phi *= p ** (e - 1) * (p - 1)
    return phi


def mod_pow(base: int, exp: int, mod: int) -> int:
    """Square-and-multiply; base may be negative, mod = 1 gives 0."""
    not_negative_check(exp)
    positive_check(mod)
    if mod == 1:
        return 0
    base %= mod
    result = 1
    while exp > 0:
        if exp & 1:
            result = result * base % mod
        base = base * base % mod
        exp >>= 1
    return result


def inverse_mod(a: int, n: int) -> int:
    """x in [0, n) with a*x ≡ 1 (mod n); requires gcd(a, n) = 1."""
    positive_check(n)
    if not is_coprime(a, n):
        raise InvalidArgument(f"{a} is not invertible modulo {n}")
    pair = linear_congruence(a, 1, n)
    return 0 if pair == UNIVERSAL else pair.first


# --- Unit group Zn× ---


def unit_group_elements(n: int) -> list[int]:
    not_less_than_check(n, 2)
    return [i for i in range(1, n) if is_coprime(i, n)]


def unit_group_element_order(element: int, n: int) -> int:
    """
    Smallest d | φ(n) with element^d ≡ 1 (mod n).
    Raises InvalidArgument unless gcd(element, n) = 1.
    """
    not_less_than_check(n, 2)
    if not is_coprime(element, n):
        raise InvalidArgument(f"{element} is not a unit modulo {n}")
    for d in divisors(euler_phi(n)):
        if mod_pow(element, d, n) == 1:
            return d
    raise AssertionError("unreachable: element^φ(n) ≡ 1 for every unit")


def primitive_roots_exist(m: int) -> bool:
    """Primitive roots exist exactly for m = 1, 2, 4, p^k, 2p^k (p odd prime)."""
    positive_check(m)
    if m in (1, 2, 4):
        return True
    if m % 2 == 0:
        m //= 2
        if m % 2 == 0:
            return False
    return len(factorize(m)) == 1


def legendre_symbol(a: int, p: int) -> int:
    """(a/p) for an odd prime p by Euler's criterion: -1, 0 or 1."""
    if p == 2 or not is_prime(p):
        raise InvalidArgument(f"{p} is not an odd prime")
    a %= p
    if a == 0:
        return 0
    return 1 if mod_pow(a, (p - 1) // 2, p) == 1 else -1


# --- Linear congruences ---


def linear_congruence(a: int, b: int, n: int) -> IntPair:
    """
    Solve ax ≡ b (mod n).

    Returns EMPTY when (a, n) ∤ b, UNIVERSAL for 0x ≡ 0, otherwise
    (x, n / (a, n)) with x the least non-negative solution.
    """
    positive_check(n)
    a %= n
    b %= n
    if a == 0:
        return UNIVERSAL if b == 0 else EMPTY

    d = gcd(a, n)
    if b % d != 0:
        return EMPTY
    shifted = n // d
    if shifted == 1:
        return UNIVERSAL
    _, _, inv = bezout(shifted, a // d)
    return IntPair((inv * (b // d)) % shifted, shifted)


def linear_congruence_system(a_list: list[int], b_list: list[int], n_list: list[int]) -> IntPair:
    """
    Fold a_i x ≡ b_i (mod n_i) one congruence at a time: the running solution
    x = x0 + m0*k is substituted into the next congruence, which is solved for k.
    """
    count = len(a_list)
    positive_check(count)
    list_check(count, b_list, "b list")
    list_check(count, n_list, "n list")
    positive_check(*n_list)

    solution = EMPTY
    for a, b, n in zip(a_list, b_list, n_list):
        if not solution.is_empty:
            x0, m0 = solution
            b, a = b - a * x0, a * m0
        partial = linear_congruence(a, b, n)
        if partial.is_empty:
            return EMPTY
        if partial == UNIVERSAL:
            continue
        if solution.is_empty:
            solution = partial
        else:
            x0, m0 = solution
            solution = IntPair(x0 + m0 * partial.first, m0 * partial.second)

    return UNIVERSAL if solution.is_empty else solution


# --- Polynomial congruences via prime-power factors + CRT ---


def _crt_combine(per_factor: list[tuple[list[int], int]], m: int) -> SolutionSet:
    moduli = [pe for _, pe in per_factor]
    residues = set()
    for combo in product(*(roots for roots, _ in per_factor)):
        pair = linear_congruence_system([1] * len(combo), list(combo), moduli)
        residues.add(0 if pair == UNIVERSAL else pair.first % m)
    return SolutionSet.many(residues, m)


def _solve_by_prime_powers(holds, m: int) -> SolutionSet:
    """Roots of `holds(x, pe)` modulo each prime power of m, recombined modulo m."""
    if m == 1:
        return SolutionSet.many([0], 1)
    per_factor: list[tuple[list[int], int]] = []
    for p, e in factorize(m):
        pe = p ** e
        roots = [x for x in range(pe) if holds(x, pe)]
        if not roots:
            return SolutionSet.empty()
        per_factor.append((roots, pe))
    return _crt_combine(per_factor, m)


def quadratic_congruence_simple(a: int, m: int) -> SolutionSet:
    """x^2 ≡ a (mod m)."""
    positive_check(m)
    return _solve_by_prime_powers(lambda x, pe: (x * x - a) % pe == 0, m)


def quadratic_congruence_general(a: int, b: int, c: int, m: int) -> SolutionSet:
    """ax^2 + bx + c ≡ 0 (mod m) with (a, m) = 1."""
    positive_check(m)
    if not is_coprime(a, m):
        raise InvalidArgument(f"({a}, {m}) must be 1")
    return _solve_by_prime_powers(lambda x, pe: (a * x * x + b * x + c) % pe == 0, m)


def quadratic_congruence_general_generate(t_solutions: SolutionSet, m: int, b: int) -> list[int]:
    """
    Reduce the roots of t^2 ≡ D (mod 4m) modulo 2m and keep those with
    t ≡ b (mod 2), i.e. the values t = 2ax + b can take.
    """
    positive_check(m)
    if t_solutions.kind not in ("single", "many"):
        return []
    seen = sorted({t % (2 * m) for t in t_solutions.residues})
    return [t for t in seen if (t - b) % 2 == 0]


def binomial_lemma_applies(a: int, m: int) -> bool:
    """The power-residue test below decides solvability only for (a, m) = 1 and cyclic Zm×."""
    return m > 1 and is_coprime(a, m) and primitive_roots_exist(m)


def binomial_solvable(n: int, a: int, m: int) -> bool:
    """
    Necessary condition for x^n ≡ a (mod m): a^(φ(m)/d) ≡ 1 with d = (n, φ(m)).
    Moduli outside binomial_lemma_applies() pass unchecked.
    """
    positive_check(n, m)
    if not binomial_lemma_applies(a, m):
        return True
    phi_m = euler_phi(m)
    return mod_pow(a, phi_m // gcd(n, phi_m), m) == 1


def binomial_congruence(n: int, a: int, m: int) -> SolutionSet:
    """x^n ≡ a (mod m), n >= 1; the power-residue test runs before any search."""
    positive_check(n, m)
    if not binomial_solvable(n, a, m):
        return SolutionSet.empty()
    return _solve_by_prime_powers(lambda x, pe: (pow(x, n, pe) - a) % pe == 0, m)


# --- Permutations ---


def _permutation_check(perm: list[int]) -> None:
    if sorted(perm) != list(range(1, len(perm) + 1)):
        raise InvalidArgument(f"{perm} is not a permutation of 1..{len(perm)}")


def permutation_cycles(perm: list[int]) -> list[tuple[int, ...]]:
    """
    Disjoint non-trivial cycles of a permutation given in one-line form
    (perm[i-1] is the image of i), each starting at its smallest element.
    """
    _permutation_check(perm)
    seen: set[int] = set()
    cycles: list[tuple[int, ...]] = []
    for start in range(1, len(perm) + 1):
        if start in seen or perm[start - 1] == start:
            continue
        cycle = [start]
        seen.add(start)
        nxt = perm[start - 1]
        while nxt != start:
            cycle.append(nxt)
            seen.add(nxt)
            nxt = perm[nxt - 1]
        cycles.append(tuple(cycle))
    return cycles


def permutation_order(perm: list[int]) -> int:
    order = 1
    for cycle in permutation_cycles(perm):
        order = lcm(order, len(cycle))
    return order
