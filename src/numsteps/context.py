from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any


@total_ordering
@dataclass(frozen=True)
class IntPair:
    """
    Ordered pair, e.g. (prime, exponent), (x, modulus) or (bezout x, bezout y).
    IntPair() with both sides unset is the "no solution / not computed" sentinel.
    """
    first: Any = None
    second: Any = None

    @property
    def is_empty(self) -> bool:
        return self.first is None and self.second is None

    def __lt__(self, other: IntPair) -> bool:
        if not isinstance(other, IntPair):
            return NotImplemented
        return (self.first, self.second) < (other.first, other.second)

    def __iter__(self):
        yield self.first
        yield self.second

    def __str__(self) -> str:
        return f"({self.first}, {self.second})"


EMPTY = IntPair()
UNIVERSAL = IntPair(0, 1)      # 0x ≡ 0: every integer is a solution


@dataclass(frozen=True)
class Congruence:
    a: int
    b: int
    n: int   # n > 0

    def normalized(self) -> Congruence:
        return Congruence(self.a % self.n, self.b % self.n, self.n)

    @property
    def changes_on_normalize(self) -> bool:
        return self.normalized() != self


@dataclass(frozen=True)
class SolutionSet:
    # --- kind is one of "empty" | "single" | "many" | "infinite" | "value" ---
    kind: str
    residues: tuple[int, ...] = ()
    modulus: int | None = None

    @classmethod
    def empty(cls) -> SolutionSet:
        return cls("empty")

    @classmethod
    def single(cls, x: int, m: int) -> SolutionSet:
        return cls("single", (int(x),), int(m))

    @classmethod
    def many(cls, residues, m: int) -> SolutionSet:
        rs = tuple(sorted(int(r) for r in residues))
        if not rs:
            return cls.empty()
        return cls("many", rs, int(m))

    @classmethod
    def infinite(cls) -> SolutionSet:
        return cls("infinite")

    @classmethod
    def from_pair(cls, pair: IntPair) -> SolutionSet:
        if pair.is_empty:
            return cls.empty()
        if pair == UNIVERSAL:
            return cls.infinite()
        return cls.single(pair.first, pair.second)

    @classmethod
    def value(cls, *vs: int) -> SolutionSet:
        """A plain numeric answer: gcd, φ(n), an order, a symbol, or (d, x, y)."""
        return cls("value", tuple(int(v) for v in vs))

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"

    @property
    def is_infinite(self) -> bool:
        return self.kind == "infinite"

    def as_list(self) -> list[int]:
        """Residues followed by the shared modulus; [] when there is no solution."""
        if self.kind in ("empty", "infinite"):
            return []
        return [*self.residues, *(() if self.modulus is None else (self.modulus,))]

    def contains(self, x: int) -> bool:
        if self.kind == "infinite":
            return True
        if self.kind in ("empty", "value"):
            return False
        return (x % self.modulus) in {r % self.modulus for r in self.residues}

    def __str__(self) -> str:
        if self.kind == "empty":
            return "∅"
        if self.kind == "infinite":
            return "ℤ"
        if self.kind == "value":
            return ", ".join(str(r) for r in self.residues)
        rs = ", ".join(str(r) for r in self.residues)
        return f"{{{rs}}} (mod {self.modulus})"
