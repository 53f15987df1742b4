# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re
import shutil
import sys
from collections.abc import Sequence

from numsteps.runtime import CFG


class UserInputError(Exception):
    pass


class InvalidArgument(ValueError):
    """A parameter lies outside the documented domain of a computation."""


# --- Argument checks (raise before any work is done) -------------------------

def positive_check(*values: int) -> None:
    for v in values:
        if v <= 0:
            raise InvalidArgument(f"expected a positive integer, got {v}")


def not_negative_check(*values: int) -> None:
    for v in values:
        if v < 0:
            raise InvalidArgument(f"expected a non-negative integer, got {v}")


def not_less_than_check(value: int, bound: int) -> None:
    if value < bound:
        raise InvalidArgument(f"expected an integer >= {bound}, got {value}")


def list_check(count: int, items: Sequence[int], name: str = "list") -> None:
    if len(items) != count:
        raise InvalidArgument(f"{name} has {len(items)} item(s), expected {count}")


# --- Input parsing -----------------------------------------------------------

_INT_RE = re.compile(r"^[+-]?\d[\d_]*$")


def parse_int(token: str, label: str = "parameter") -> int:
    """
    Parse one integer parameter and enforce the LIMITS.MAX_ABS_INT bound
    (inputs are small machine-sized integers, not arbitrary precision).
    """
    s = (token or "").strip()
    if not _INT_RE.match(s):
        raise UserInputError(f"Invalid input: {label} '{token}' is not an integer.")
    n = int(s.replace("_", ""))
    bound = int(CFG("LIMITS.MAX_ABS_INT", 999_999))
    if abs(n) > bound:
        raise UserInputError(f"Invalid input: {label} {n} is outside [-{bound}, {bound}].")
    return n


def parse_int_list(token: str, label: str = "list") -> list[int]:
    """Parse '1,2,3' or '1 2 3' into [1, 2, 3]."""
    parts = [p for p in re.split(r"[,\s;]+", (token or "").strip()) if p]
    if not parts:
        raise UserInputError(f"Invalid input: {label} is empty.")
    return [parse_int(p, label) for p in parts]


# --- Terminal helpers ----------------------------------------------------------

def clear_screen() -> None:
    try:
        if os.name == "nt":
            os.system("cls")
        else:
            sys.stdout.write("\033[H\033[2J")
            sys.stdout.flush()
    except Exception:
        pass


def get_terminal_width(default=80):
    """
    Return the terminal's character width if detected, else the default
    value (80 by default).
    """
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return default


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Validate output setting.
    - None / "" => ok (screen only)
    - path/to/file => must not point into the package or at a profile
    Returns the output_file, or raises ValueError.
    """
    if not output_file:
        return None
    name = os.path.basename(output_file.rstrip("/\\"))
    if not name:
        raise ValueError("output must name a file, not a directory")
    if name.lower().endswith((".py", ".toml")):
        raise ValueError(f"refusing to write into '{name}'")
    return output_file
