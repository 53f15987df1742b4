# -----------------------------------------------------------------------------
#  permutation.py
#  Cycle decomposition and order of a permutation
# -----------------------------------------------------------------------------

from __future__ import annotations

from numsteps import algorithms as alg
from numsteps.context import SolutionSet
from numsteps.fmt import CIRC, SIGMA, cycle
from numsteps.registry import problem
from numsteps.trace import Trace

CATEGORY = "Permutations"


def matrix_lines(perm: list[int]) -> list[str]:
    """
    Two-line form: positions over images, a position padded by one space when
    a single digit sits above a two-digit image.
    """
    top = ", ".join(
        (" " if i < 9 and image > 9 else "") + str(i + 1)
        for i, image in enumerate(perm)
    )
    return [f"({top})", cycle(perm)]


def permutation_steps(perm: list[int]) -> Trace:
    cycles = alg.permutation_cycles(perm)
    trace = Trace()
    for line in matrix_lines(perm):
        trace.add(line)

    if not cycles:
        trace.add(f"{SIGMA} = id")
        trace.add("k = 1")
        return trace

    trace.add(f"{SIGMA} = " + CIRC.join(cycle(c) for c in cycles))
    lengths = [len(c) for c in cycles]
    if len(lengths) > 1:
        listed = ", ".join(str(n) for n in lengths)
        trace.add(f"k = [{listed}] = {alg.permutation_order(perm)}")
    else:
        trace.add(f"k = {lengths[0]}")
    return trace


def solve_permutation(perm: list[int]) -> SolutionSet:
    return SolutionSet.value(alg.permutation_order(perm))


@problem(key="permutation", label="Permutation order", params=("perm",),
         list_params=("perm",), category=CATEGORY, solve=solve_permutation,
         aliases=("perm",), list_limit="LIMITS.MAX_PERMUTATION",
         description="Cycles of σ and the lcm of their lengths.")
def explain_permutation(perm: list[int]) -> str:
    return permutation_steps(list(perm)).text()
