# src/numsteps/display.py
from __future__ import annotations

from colorama import Fore, Style

from numsteps import __version__
from numsteps.config import list_profiles_with_descriptions, read_current_profile
from numsteps.context import SolutionSet
from numsteps.registry import Index, ProblemFamily
from numsteps.runtime import CFG
from numsteps.utility import clear_screen, get_terminal_width


def paint(text: str, *codes: str) -> str:
    """Wrap text in colorama codes unless DISPLAY.COLOR is off."""
    if not CFG("DISPLAY.COLOR", True) or not codes:
        return text
    return "".join(codes) + text + Style.RESET_ALL


def _screen_header() -> str:
    return paint(f"Numsteps v{__version__} — Number theory, step by step", Fore.YELLOW, Style.BRIGHT)


def problem_header(family: ProblemFamily, values: list) -> str:
    shown = " ".join(",".join(map(str, v)) if isinstance(v, list) else str(v) for v in values)
    return paint(f"{family.label}: {family.key} {shown}", Fore.YELLOW, Style.BRIGHT)


def format_answer(answer: SolutionSet) -> str:
    return paint("Answer:", Fore.GREEN, Style.BRIGHT) + f" {answer}"


def print_result(family: ProblemFamily, values: list, answer: SolutionSet, trace_text: str,
                 om, answer_only: bool = False) -> None:
    """Header, derivation lines and the answer, all through the output manager."""
    if answer_only:
        om.write(str(answer))
        return
    om.write(problem_header(family, values))
    om.write("-" * min(get_terminal_width(), 60))
    for line in trace_text.splitlines():
        om.write(line)
    om.write(format_answer(answer))


def _list_lines(index: Index) -> list[str]:
    lines: list[str] = []
    for cat in sorted(index.categories, key=str.lower):
        lines.append(paint(f"{cat}:", Fore.CYAN))
        for key in index.categories[cat]:
            fam = index.families[key]
            left = "  " + paint(fam.usage(), Fore.GREEN)
            if fam.aliases:
                left += f" (also: {', '.join(fam.aliases)})"
            lines.append(f"{left} — {fam.description}" if fam.description else left)
        lines.append("")
    return lines


def show_problem_list(index: Index, om=None) -> None:
    title = paint(f"Available problem families: {len(index)}", Fore.YELLOW)
    out = om.write if om else print
    out(title)
    out()
    for line in _list_lines(index):
        out(line)


def show_intro_help(index: Index, om=None) -> None:
    out = om.write if om else print
    intro_lines = [
        "",
        paint("Welcome to Numsteps", Fore.GREEN),
        "-" * 70,
        "Every answer comes with the derivation a student would write down:",
        "Euclid's algorithm, back substitution, reduction of exponents, and so on.",
        "",
        paint("Usage in interactive mode:", Fore.MAGENTA, Style.BRIGHT),
        " • Enter a problem followed by its parameters, e.g.  gcd 240 46",
        "   List parameters are comma separated, e.g.  system 2 1,1 2,3 5,7",
        "",
        " • Valid commands are:",
        "   debug on|off|status to switch debug mode on, off or show current status.",
        "   h or help           to show this help screen.",
        "   l or list           to list all problem families.",
        "   p                   to show a list of available profiles.",
        "   q or quit           to quit Numsteps.",
        "",
        " • Enter a profile name to switch to that profile.",
        "",
        paint("Tips:", Fore.CYAN),
        " • For command-line options, run: numsteps -h or --help",
        "",
    ]
    clear_screen()
    out(_screen_header())
    for line in intro_lines:
        out(line)
    show_problem_list(index, om)


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return

    current = read_current_profile()
    lines = []
    for name, desc in pairs:
        mark = "🡆" if current and name == current else " "
        lines.append(f"{mark} {name:13} — {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))
