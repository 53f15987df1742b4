# src/numsteps/registry.py
from __future__ import annotations

import inspect
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

from numsteps.context import SolutionSet


@dataclass(frozen=True)
class ProblemFamily:
    key: str
    label: str
    category: str
    params: tuple[str, ...]               # positional parameter names, in call order
    list_params: tuple[str, ...]          # subset of params taking comma separated lists
    solve: Callable[..., SolutionSet]
    explain: Callable[..., str]
    description: str = ""
    aliases: tuple[str, ...] = ()
    list_limit: str | None = None        # CFG key bounding the length of list parameters

    def is_list_param(self, name: str) -> bool:
        return name in self.list_params

    def usage(self) -> str:
        parts = [f"<{p},...>" if p in self.list_params else f"<{p}>" for p in self.params]
        return " ".join([self.key, *parts])


# --------------------- Discovery → Index (immutable) ----------------------


@dataclass
class Index:
    families: dict[str, ProblemFamily]                          # key -> family
    categories: dict[str, list[str]] = field(default_factory=dict)   # category -> [keys]
    aliases: dict[str, str] = field(default_factory=dict)       # alias -> key

    def get(self, name: str) -> ProblemFamily | None:
        k = (name or "").strip().lower()
        return self.families.get(self.aliases.get(k, k))

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self):
        return iter(self.families.values())

    def __len__(self) -> int:
        return len(self.families)


# --- report of the discovery step (shown with --debug) ---
@dataclass
class DiscoveryReport:
    loaded: list[tuple[str, int]] = field(default_factory=list)            # (module.name, count)
    skipped_duplicates: list[tuple[str, str]] = field(default_factory=list)  # (key, module)
    module_keys: dict[str, list[str]] = field(default_factory=dict)        # module -> [keys]

    def lines(self) -> list[str]:
        out = [f"{mod}: {cnt} problem famil{'y' if cnt == 1 else 'ies'}" for mod, cnt in self.loaded]
        out += [f"duplicate key '{key}' in {mod} skipped" for key, mod in self.skipped_duplicates]
        return out


def _is_problem(obj) -> bool:
    return callable(obj) and getattr(obj, "__is_problem__", False)


def _collect_from_module(mod) -> list[Callable[..., str]]:
    return [o for _, o in inspect.getmembers(mod) if _is_problem(o)]


# ---------- Decorator (only tags the function; no side effects) ----------


def problem(*, key: str, label: str, params: tuple[str, ...], category: str,
            solve: Callable[..., SolutionSet], list_params: tuple[str, ...] = (),
            description: str = "", aliases: tuple[str, ...] = (),
            list_limit: str | None = None):
    """Tag an explain function as the entry point of a problem family."""
    def deco(fn: Callable[..., str]):
        fn.__is_problem__ = True
        fn.key = key
        fn.label = label
        fn.params = tuple(params)
        fn.list_params = tuple(list_params)
        fn.category = category
        fn.solve = solve
        fn.description = description
        fn.aliases = tuple(aliases)
        if list_limit is not None:
            fn.list_limit = list_limit
        return fn
    return deco


def _family_of(fn) -> ProblemFamily:
    return ProblemFamily(
        key=fn.key,
        label=fn.label,
        category=getattr(fn, "category", "General"),
        params=fn.params,
        list_params=fn.list_params,
        solve=fn.solve,
        explain=fn,
        description=getattr(fn, "description", ""),
        aliases=getattr(fn, "aliases", ()),
        list_limit=getattr(fn, "list_limit", None),
    )


def _step_modules() -> list[str]:
    pkg_dir = pkg_files("numsteps") / "steps"
    with as_file(pkg_dir) as real:
        return [
            f"numsteps.steps.{file.stem}"
            for file in sorted(Path(real).glob("*.py"))
            if file.name != "__init__.py"
        ]


def discover_with_report() -> tuple[Index, DiscoveryReport]:
    """Import every numsteps.steps module and index the tagged problem families."""
    report = DiscoveryReport()
    families: OrderedDict[str, ProblemFamily] = OrderedDict()
    categories: dict[str, list[str]] = {}
    aliases: dict[str, str] = {}

    for modname in _step_modules():
        mod = import_module(modname)
        found = 0
        for fn in _collect_from_module(mod):
            fam = _family_of(fn)
            if fam.key in families:
                report.skipped_duplicates.append((fam.key, modname))
                continue
            families[fam.key] = fam
            categories.setdefault(fam.category, []).append(fam.key)
            for alias in fam.aliases:
                aliases.setdefault(alias, fam.key)
            report.module_keys.setdefault(modname, []).append(fam.key)
            found += 1
        report.loaded.append((modname, found))

    return Index(families=families, categories=categories, aliases=aliases), report


def discover() -> Index:
    idx, _ = discover_with_report()
    return idx
