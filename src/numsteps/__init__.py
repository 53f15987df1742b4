from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("numsteps")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .algorithms import (
    bezout,
    binomial_congruence,
    euler_phi,
    gcd,
    legendre_symbol,
    linear_congruence,
    linear_congruence_system,
    mod_pow,
    permutation_order,
    quadratic_congruence_general,
    quadratic_congruence_simple,
    unit_group_element_order,
)
from .config import has_profile, load_settings, read_current_profile
from .registry import discover
from .runtime import APPLY, CFG
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "__version__",
    "bezout",
    "binomial_congruence",
    "discover",
    "euler_phi",
    "gcd",
    "has_profile",
    "legendre_symbol",
    "linear_congruence",
    "linear_congruence_system",
    "load_settings",
    "mod_pow",
    "permutation_order",
    "quadratic_congruence_general",
    "quadratic_congruence_simple",
    "read_current_profile",
    "unit_group_element_order",
    "workspace_dir"
]
