# tests/test_algorithms.py
"""
Kernel properties, checked against sympy where it has the same function.

Run: pytest -v
"""

from __future__ import annotations

import math

import pytest
from sympy.ntheory import legendre_symbol as sympy_legendre
from sympy.ntheory import n_order, totient

from numsteps import algorithms as alg
from numsteps.context import EMPTY, UNIVERSAL, IntPair, SolutionSet
from numsteps.utility import InvalidArgument

# ---------- gcd / Bezout -------------------------------------------------------

GCD_CASES = [(12, 18), (240, 46), (17, 5), (0, 9), (9, 0), (-12, 18), (1, 1), (1024, 768)]


@pytest.mark.parametrize("a,b", GCD_CASES, ids=[f"{a}_{b}" for a, b in GCD_CASES])
def test_gcd_matches_math(a, b):
    assert alg.gcd(a, b) == math.gcd(a, b)


BEZOUT_CASES = [(240, 46), (46, 46), (17, 5), (10, 0), (99, 78), (1, 1), (5, 1)]


@pytest.mark.parametrize("a,b", BEZOUT_CASES, ids=[f"{a}_{b}" for a, b in BEZOUT_CASES])
def test_bezout_identity(a, b):
    d, x, y = alg.bezout(a, b)
    assert d == math.gcd(a, b)
    assert a * x + b * y == d


def test_bezout_known_coefficients():
    assert alg.bezout(240, 46) == (2, -9, 47)
    assert alg.bezout(10, 0) == (10, 1, 0)


@pytest.mark.parametrize("a,b", [(3, 5), (-1, 0), (4, -2)], ids=["a<b", "negative_a", "negative_b"])
def test_bezout_rejects_bad_order_or_sign(a, b):
    with pytest.raises(InvalidArgument):
        alg.bezout(a, b)


# ---------- factorization / divisors / φ --------------------------------------

@pytest.mark.parametrize("n", [2, 12, 97, 360, 1001, 65536, 999983])
def test_factorization_product_and_order(n):
    factors = alg.factorize(n)
    primes = [p for p, _ in factors]
    assert primes == sorted(set(primes))
    assert all(e >= 1 for _, e in factors)
    assert math.prod(p ** e for p, e in factors) == n


@pytest.mark.parametrize("n", [0, 1])
def test_factorization_base_cases(n):
    assert alg.factorize(n) == []


def test_factorization_rejects_negative():
    with pytest.raises(InvalidArgument):
        alg.factorize(-4)


def test_divisors_and_common_divisors():
    assert alg.divisors(12) == [1, 2, 3, 4, 6, 12]
    assert alg.divisors(-12) == [1, 2, 3, 4, 6, 12]
    assert alg.common_divisors(12, 18) == [1, 2, 3, 6]
    with pytest.raises(InvalidArgument):
        alg.divisors(0)


@pytest.mark.parametrize("n,expected", [(1, 1), (12, 4), (17, 16), (36, 12), (100, 40)])
def test_euler_phi_known_values(n, expected):
    assert alg.euler_phi(n) == expected


@pytest.mark.parametrize("n", range(1, 60))
def test_euler_phi_matches_sympy(n):
    assert alg.euler_phi(n) == int(totient(n))


def test_predicates():
    assert alg.is_prime(97) and not alg.is_prime(1) and not alg.is_prime(91)
    assert alg.is_perfect_square(144) and not alg.is_perfect_square(143)
    assert alg.is_perfect_square(0) and not alg.is_perfect_square(-4)
    assert alg.is_power_of_2(64) and not alg.is_power_of_2(96) and not alg.is_power_of_2(0)
    assert alg.is_coprime(8, 15) and not alg.is_coprime(8, 12)
    assert alg.lcm(4, 6) == 12 and alg.lcm(0, 5) == 0
    assert alg.normalize(-3, 7) == 4


# ---------- powers, orders, symbols ------------------------------------------

POW_CASES = [(3, 200, 7), (2, 10, 1000), (-2, 3, 5), (5, 0, 13), (7, 5, 1), (0, 0, 9)]


@pytest.mark.parametrize("b,e,m", POW_CASES, ids=[f"{b}^{e}_mod_{m}" for b, e, m in POW_CASES])
def test_mod_pow_matches_builtin(b, e, m):
    assert alg.mod_pow(b, e, m) == pow(b, e, m)


def test_mod_pow_rejects_negative_exponent():
    with pytest.raises(InvalidArgument):
        alg.mod_pow(2, -1, 5)


@pytest.mark.parametrize("e,n", [(2, 7), (3, 7), (5, 12), (7, 20), (2, 9)])
def test_element_order_matches_sympy(e, n):
    assert alg.unit_group_element_order(e, n) == n_order(e, n)


def test_element_order_requires_unit():
    with pytest.raises(InvalidArgument):
        alg.unit_group_element_order(2, 4)


def test_unit_group_elements():
    assert alg.unit_group_elements(12) == [1, 5, 7, 11]
    with pytest.raises(InvalidArgument):
        alg.unit_group_elements(1)


@pytest.mark.parametrize("a,p", [(a, p) for p in (3, 7, 11, 23) for a in (-5, 0, 2, 5, 10, 22)])
def test_legendre_matches_sympy(a, p):
    assert alg.legendre_symbol(a, p) == sympy_legendre(a % p, p)


@pytest.mark.parametrize("p", [2, 9, 1])
def test_legendre_rejects_non_odd_prime(p):
    with pytest.raises(InvalidArgument):
        alg.legendre_symbol(3, p)


@pytest.mark.parametrize("m,expected", [(1, True), (2, True), (4, True), (9, True), (18, True),
                                        (8, False), (12, False), (15, False)])
def test_primitive_roots_exist(m, expected):
    assert alg.primitive_roots_exist(m) is expected


def test_inverse_mod():
    assert alg.inverse_mod(3, 7) == 5
    assert alg.inverse_mod(5, 1) == 0
    with pytest.raises(InvalidArgument):
        alg.inverse_mod(4, 8)


# ---------- linear congruences -----------------------------------------------

def test_linear_congruence_cases():
    assert alg.linear_congruence(4, 6, 10) == IntPair(4, 5)
    assert alg.linear_congruence(3, 1, 7) == IntPair(5, 7)
    assert alg.linear_congruence(0, 0, 5) == UNIVERSAL
    assert alg.linear_congruence(0, 3, 5) == EMPTY
    assert alg.linear_congruence(2, 1, 4) == EMPTY
    assert alg.linear_congruence(5, 5, 5) == UNIVERSAL


@pytest.mark.parametrize("a,b,n", [(a, b, n) for n in (6, 10, 12) for a in range(-3, 13, 4) for b in (1, 4, 6)])
def test_linear_congruence_solution_is_complete(a, b, n):
    pair = alg.linear_congruence(a, b, n)
    brute = [x for x in range(n) if (a * x - b) % n == 0]
    if pair.is_empty:
        assert brute == []
    elif pair == UNIVERSAL:
        assert brute == list(range(n))
    else:
        x, m = pair
        assert 0 <= x < m
        assert brute == [y for y in range(n) if y % m == x]


def test_linear_congruence_rejects_zero_modulus():
    with pytest.raises(InvalidArgument):
        alg.linear_congruence(1, 1, 0)


def test_linear_congruence_system():
    assert alg.linear_congruence_system([1, 1], [2, 3], [3, 5]) == IntPair(8, 15)
    assert alg.linear_congruence_system([1, 1, 1], [2, 3, 2], [3, 5, 7]) == IntPair(23, 105)
    assert alg.linear_congruence_system([1, 1], [0, 1], [2, 4]) == EMPTY
    assert alg.linear_congruence_system([0, 0], [0, 0], [3, 5]) == UNIVERSAL
    with pytest.raises(InvalidArgument):
        alg.linear_congruence_system([1, 1], [2], [3, 5])


# ---------- polynomial congruences -------------------------------------------

def test_quadratic_simple():
    assert alg.quadratic_congruence_simple(4, 7) == SolutionSet.many([2, 5], 7)
    assert alg.quadratic_congruence_simple(3, 7).is_empty
    assert alg.quadratic_congruence_simple(1, 15).residues == (1, 4, 11, 14)
    assert alg.quadratic_congruence_simple(1, 8).residues == (1, 3, 5, 7)


def test_quadratic_general():
    solution = alg.quadratic_congruence_general(1, 1, 1, 7)
    assert solution.residues == (2, 4)
    assert all((x * x + x + 1) % 7 == 0 for x in solution.residues)
    with pytest.raises(InvalidArgument):
        alg.quadratic_congruence_general(2, 1, 1, 4)


def test_quadratic_general_generate_keeps_parity_of_b():
    ts = alg.quadratic_congruence_simple(-3, 28)
    generated = alg.quadratic_congruence_general_generate(ts, 7, 1)
    assert generated and all(t % 2 == 1 for t in generated)
    assert all(0 <= t < 14 for t in generated)


def test_binomial_congruence():
    solution = alg.binomial_congruence(3, 1, 7)
    assert solution.residues == (1, 2, 4)
    assert alg.binomial_congruence(3, 3, 7).is_empty
    assert alg.binomial_congruence(1, 3, 7) == SolutionSet.many([3], 7)


@pytest.mark.parametrize("n,a,m,expected", [(3, 3, 7, False), (3, 1, 7, True), (2, 3, 8, True), (2, 2, 15, True),
                                           (2, 2, 4, True)],
                         ids=["non_residue", "residue", "non_cyclic_8", "non_cyclic_15", "not_coprime"])
def test_binomial_solvable(n, a, m, expected):
    assert alg.binomial_solvable(n, a, m) is expected


def test_binomial_lemma_applies_only_to_units_of_cyclic_groups():
    assert alg.binomial_lemma_applies(3, 7)
    assert not alg.binomial_lemma_applies(2, 4)
    assert not alg.binomial_lemma_applies(3, 8)
    assert not alg.binomial_lemma_applies(5, 1)
    assert alg.binomial_congruence(3, 5, 1).residues == (0,)


# ---------- permutations -----------------------------------------------------

def test_permutation_cycles_and_order():
    assert alg.permutation_cycles([2, 3, 1, 4]) == [(1, 2, 3)]
    assert alg.permutation_order([2, 3, 1, 4]) == 3
    assert alg.permutation_cycles([2, 1, 4, 5, 3]) == [(1, 2), (3, 4, 5)]
    assert alg.permutation_order([2, 1, 4, 5, 3]) == 6
    assert alg.permutation_order([1, 2, 3]) == 1


@pytest.mark.parametrize("perm", [[1, 1, 2], [0, 1], [2, 3]], ids=["repeat", "zero", "gap"])
def test_permutation_rejects_non_bijection(perm):
    with pytest.raises(InvalidArgument):
        alg.permutation_cycles(perm)


# ---------- solution sets ----------------------------------------------------

def test_solution_set_shapes():
    many = SolutionSet.many([5, 2], 7)
    assert many.residues == (2, 5)
    assert many.as_list() == [2, 5, 7]
    assert str(many) == "{2, 5} (mod 7)"
    assert many.contains(9) and not many.contains(3)
    assert SolutionSet.many([], 7).is_empty
    assert SolutionSet.from_pair(UNIVERSAL).is_infinite
    assert SolutionSet.from_pair(EMPTY).as_list() == []
    assert str(SolutionSet.value(2, -9, 47)) == "2, -9, 47"
