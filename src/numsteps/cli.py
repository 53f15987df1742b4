# src/numsteps/cli.py

"""
Numsteps - Number theory problems, solved step by step

Description:
    Computes the answer to a number theory problem (gcd, Bezout coefficients,
    inverses, totients, linear congruences and systems, element orders,
    modular powers, Legendre symbols, quadratic and binomial congruences,
    permutation orders) and prints the derivation that leads to it.

usage: see numsteps -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import time
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from numsteps import __version__ as _ver
from numsteps import config as CONFIG
from numsteps.context import SolutionSet
from numsteps.display import (
    print_profiles_with_descriptions,
    print_result,
    show_intro_help,
    show_problem_list,
)
from numsteps.output_manager import OutputManager
from numsteps.registry import Index, discover, discover_with_report
from numsteps.runtime import APPLY, CFG, ensure_runtime_deps
from numsteps.runtime import current as _rt_current
from numsteps.utility import (
    InvalidArgument,
    UserInputError,
    clear_screen,
    flatten_dotted,
    parse_int,
    parse_int_list,
    typename,
    validate_output_setting,
)
from numsteps.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("init", "list", "where", "profiles")


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"{Fore.BLUE}[debug]{Style.RESET_ALL} {msg}", file=sys.stderr)


# ---- problem parsing & solving ----

def parse_problem(index: Index, tokens: list[str]):
    """
    Map ['system', '2', '1,1', '2,3', '5,7'] to (family, [2, [1, 1], [2, 3], [5, 7]]).
    Integers are bounded by LIMITS.MAX_ABS_INT, lists by the family's list limit.
    """
    if not tokens:
        raise UserInputError("Invalid input: no problem given.")
    family = index.get(tokens[0])
    if family is None:
        raise UserInputError(f"Invalid input: unknown problem '{tokens[0]}'. Run 'numsteps list'.")

    params = tokens[1:]
    if len(params) != len(family.params):
        raise UserInputError(
            f"Invalid input: {family.key} takes {len(family.params)} parameter(s). "
            f"Usage: {family.usage()}"
        )

    limit = int(CFG(family.list_limit, 0) or 0) if family.list_limit else 0
    values: list = []
    for name, token in zip(family.params, params):
        if family.is_list_param(name):
            items = parse_int_list(token, name)
            if limit and len(items) > limit:
                raise UserInputError(
                    f"Invalid input: {name} has {len(items)} items, at most {limit} allowed."
                )
            values.append(items)
        else:
            values.append(parse_int(token, name))
    return family, values


def run_problem(index: Index, tokens: list[str], om, answer_only: bool = False) -> SolutionSet:
    """Parse, solve and explain one problem; domain errors surface as UserInputError."""
    family, values = parse_problem(index, tokens)
    try:
        t0 = time.perf_counter()
        answer = family.solve(*values)
        t1 = time.perf_counter()
        trace_text = "" if answer_only else family.explain(*values)
        t2 = time.perf_counter()
    except InvalidArgument as e:
        raise UserInputError(f"Invalid input: {e}.") from None

    _debug(f"{family.key}: solve {1000 * (t1 - t0):.2f} ms, explain {1000 * (t2 - t1):.2f} ms")
    print_result(family, values, answer, trace_text, om, answer_only=answer_only)
    return answer


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create workspace folders and copy packaged profiles and messages if missing.

      init overwrite
          Meant for developers. Requires environment variable NUMSTEPS_DEV=1.
          Copies all packaged profiles and message catalogues over the workspace.

      list
          List all problem families and their parameters.

      profiles
          List the available profiles.

      where
          Show the workspace and package paths.

    examples:
      numsteps gcd 240 46
      numsteps modpow 3 200 7
      numsteps system 3 1,1,1 2,3,2 3,5,7
      numsteps perm 2,3,1,5,4
    """)

    p = argparse.ArgumentParser(
        description="Numsteps — number theory problems, solved step by step",
        usage=(
            "numsteps [problem params...] [--profile P] [--answer-only] [--output OUTPUT] [--quiet] [--debug]\n"
            "       numsteps init | list | profiles | where\n"
            "       numsteps -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="problem params",
                   help="problem name followed by its parameters; no items starts interactive mode")
    p.add_argument("--profile", default=None, help="Profile to use (default: last used, then 'default')")
    p.add_argument("--answer-only", action="store_true", help="Print the answer without the derivation")
    p.add_argument("--output", default=None, help="Write results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output")
    p.add_argument("--debug", action="store_true", help="Show discovery, profile keys and timings")
    p.add_argument("--version", action="version", version=f"numsteps {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def configure_text_streams() -> None:
    # The derivation symbols (≡, φ, ∘) need UTF-8 on redirected output
    if os.environ.get("PYTHONIOENCODING"):
        return
    try:
        if not sys.stdout.isatty():
            enc = (sys.stdout.encoding or "").lower()
            if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
                sys.stdout.reconfigure(encoding="utf-8", errors="replace")
                sys.stderr.reconfigure(encoding="utf-8", errors="replace")
    except (AttributeError, OSError, ValueError):
        pass


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str) -> None:
    selected = CONFIG.load_settings(name)
    debug = _rt_current().debug
    APPLY(selected)
    # --debug wins over the profile's BEHAVIOUR.DEBUG
    _rt_current().debug = _rt_current().debug or debug

    if _rt_current().debug:
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        if selected._source:
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        print("[debug] profile keys (runtime value/type):", file=sys.stderr)
        flat = flatten_dotted(selected.as_dict())
        for k in sorted(flat, key=str.lower):
            runtime_val = CFG(k, None)
            print(f"        {k:.<40} {runtime_val!r} ({typename(runtime_val)})", file=sys.stderr)
        print(file=sys.stderr)


def _report_discovery() -> Index:
    index, rep = discover_with_report()
    print(f"[debug] discovered problem families: {len(index)}", file=sys.stderr)
    for line in rep.lines():
        print(f"[discovery] {line}", file=sys.stderr)
    if rep.skipped_duplicates:
        print(
            f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} {len(rep.skipped_duplicates)} duplicate key(s) skipped.",
            file=sys.stderr,
        )
    return index


def _run_command(name: str, items: list[str], index: Index) -> int:
    if name == "init":
        if len(items) == 2 and items[1] == "overwrite":
            if os.environ.get("NUMSTEPS_DEV") != "1":
                print("Refusing to overwrite: set NUMSTEPS_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}, data: {copied.get('data', 0)}")
        return 0
    if name == "list":
        show_problem_list(index)
        return 0
    if name == "profiles":
        print_profiles_with_descriptions()
        return 0
    # where
    print(f"Workspace: {workspace_dir()}")
    print(f"Package:   {pkg_files('numsteps')}")
    return 0


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps():
        return 1

    # First run seeds the workspace silently
    ensure_workspace_seeded()

    index = _report_discovery() if args.debug else discover()

    items = list(args.items)
    if items and items[0].lower() in COMMANDS and items[0].lower() not in index:
        return _run_command(items[0].lower(), items, index)

    if args.profile and not CONFIG.has_profile(args.profile):
        print(f"Unknown profile: '{args.profile}'")
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()))
        return 2

    profile_name = _select_profile_name(args.profile)
    if not CONFIG.has_profile(profile_name):
        profile_name = "default"
    _apply_profile(profile_name)

    # --- output routing (CLI --output overrides profile OUTPUT_FILE) ---
    try:
        cli_output_target = validate_output_setting(args.output)
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    def make_output_manager(name: str | None = None) -> OutputManager:
        # read OUTPUT_FILE from runtime each time so profile switches take effect
        target = cli_output_target if cli_output_target is not None else CFG("OUTPUT.OUTPUT_FILE", None)
        return OutputManager(output_file=target, quiet=args.quiet, name=name)

    # --- one-shot problem path ---
    if items:
        om = make_output_manager(" ".join(items))
        try:
            run_problem(index, items, om, answer_only=args.answer_only)
        finally:
            om.close()
        return 0

    return _repl(index, profile_name, make_output_manager, args.answer_only)


# ---- REPL ----
def _repl(index: Index, profile_name: str, make_output_manager, answer_only: bool) -> int:
    if not _rt_current().debug:
        clear_screen()
    print(f"{Fore.YELLOW}{Style.BRIGHT}Numsteps v{_ver} — Number theory, step by step{Style.RESET_ALL}")

    current_profile = profile_name
    while True:
        try:
            prompt = f"\nProfile: {current_profile} — Enter a problem, command or profile (h=Help, q=Quit): "
            user_input = input(prompt).strip()

            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break

            if low in {"h", "help"}:
                show_intro_help(index)
                continue

            if low in {"l", "list"}:
                show_problem_list(index)
                continue

            if low in {"p", "profiles"}:
                print_profiles_with_descriptions()
                continue

            if low.startswith("debug"):
                parts = low.split()
                rt = _rt_current()
                if len(parts) == 1 or parts[1] == "status":
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif parts[1] == "on":
                    rt.debug = True
                    print("Debug mode enabled for this session.")
                elif parts[1] == "off":
                    rt.debug = False
                    print("Debug mode disabled for this session.")
                else:
                    print("Usage: DEBUG [on|off|status]")
                continue

            tokens = user_input.split()
            if tokens[0] in index:
                om = make_output_manager(user_input)
                try:
                    run_problem(index, tokens, om, answer_only=answer_only)
                except UserInputError as e:
                    _print_user_error(str(e))
                finally:
                    om.close()
                continue

            # treat as profile switch
            if CONFIG.has_profile(user_input):
                try:
                    _apply_profile(user_input)
                    CONFIG.write_current_profile(user_input)
                    current_profile = user_input
                    print(f"Applied profile: {current_profile}")
                except (UserInputError, OSError) as e:
                    print(f"{Fore.RED}Failed to load profile {Style.RESET_ALL}'{user_input}': {e}", file=sys.stderr)
                continue

            print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
            continue
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
