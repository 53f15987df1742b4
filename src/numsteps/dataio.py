# src/numsteps/dataio.py
from __future__ import annotations

from functools import lru_cache
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

from numsteps.runtime import CFG
from numsteps.workspace import workspace_dir

try:
    import tomllib as _toml  # py311+
except Exception:  # pragma: no cover
    import tomli as _toml  # type: ignore

MESSAGES_FILE = "messages.toml"

# Used when no catalogue can be read at all
_FALLBACK_MESSAGES: dict[str, str] = {
    "no_solution": "No solution exists.",
    "infinite_solutions": "There are infinitely many solutions.",
    "group_order": "Group order: ",
    "possible_orders": "Possible element orders: ",
    "element_order": "The order of element [{element}] is {order}.",
    "perfect_square": "{a} is the square of {root}.",
}


def data_path(rel: str) -> Path:
    """
    Resolve a data file path with override semantics:

      1) <Workspace>/data/<rel>  (if present)
      2) Packaged resource: numsteps/data/<rel>

    Returns a filesystem Path you can open.
    """
    rel = rel.lstrip("/\\")
    p = workspace_dir() / "data" / rel
    if p.exists():
        return p

    ref = pkg_files("numsteps") / "data" / rel
    # materialize to a real path (needed for zip/egg resources)
    with as_file(ref) as real:
        return Path(real)


@lru_cache(maxsize=8)
def _load_catalogue(path: Path) -> dict[str, dict[str, str]]:
    """
    Canonical format:

      [en]
      no_solution = "No solution exists."
      ...

      [cs]
      no_solution = "Neexistuje žádné řešení."
    """
    try:
        with path.open("rb") as f:
            doc = _toml.load(f)
    except FileNotFoundError:
        return {}

    out: dict[str, dict[str, str]] = {}
    for locale, table in doc.items():
        if not isinstance(table, dict):
            continue
        out[str(locale).lower()] = {str(k): str(v) for k, v in table.items() if isinstance(v, str)}
    return out


def load_messages(locale: str | None = None) -> dict[str, str]:
    """Return the message table for `locale` (default: TEXT.LOCALE), English keys filling gaps."""
    loc = (locale or CFG("TEXT.LOCALE", "en")).lower()
    catalogue = _load_catalogue(data_path(MESSAGES_FILE))
    merged = dict(_FALLBACK_MESSAGES)
    merged.update(catalogue.get("en", {}))
    merged.update(catalogue.get(loc, {}))
    return merged


def message(key: str, **fields: object) -> str:
    """
    Look up one locale-specific sentence. A profile may override any key
    directly in its [TEXT] table (upper-case key, e.g. TEXT.NO_SOLUTION).
    """
    override = CFG(f"TEXT.{key.upper()}", None)
    text = str(override) if override is not None else load_messages()[key]
    return text.format(**fields) if fields else text
