# tests/test_cli.py
"""
Registry discovery, profiles, output routing and the command line entry point.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from numsteps import config
from numsteps.cli import main, parse_problem, run_problem
from numsteps.dataio import message
from numsteps.output_manager import OutputManager, resolve_output_path, split_filename
from numsteps.fmt import power
from numsteps.runtime import APPLY, CFG, current, ensure_runtime_deps
from numsteps.utility import UserInputError, parse_int, parse_int_list
from numsteps.workspace import workspace_dir

FAMILIES = ["gcd", "bezout", "inverse", "phi", "order", "modpow", "linear", "system",
            "legendre", "quadratic", "quadratic-general", "binomial", "permutation"]


# ---------- registry -----------------------------------------------------------

def test_discovery_finds_every_family(index):
    assert sorted(f.key for f in index) == sorted(FAMILIES)


@pytest.mark.parametrize("alias,key", [("inv", "inverse"), ("CRT", "system"), ("perm", "permutation"),
                                       ("pow", "modpow"), ("quadg", "quadratic-general")])
def test_aliases_resolve(index, alias, key):
    assert index.get(alias).key == key


def test_usage_marks_list_parameters(index):
    assert index.get("system").usage() == "system <count> <a,...> <b,...> <n,...>"
    assert index.get("gcd").usage() == "gcd <a> <b>"


def test_every_family_is_in_a_category(index):
    keys = [k for ks in index.categories.values() for k in ks]
    assert sorted(keys) == sorted(FAMILIES)


# ---------- parsing ----------------------------------------------------------

def test_parse_int_bounds():
    assert parse_int("1_000") == 1000
    assert parse_int("-42") == -42
    with pytest.raises(UserInputError):
        parse_int("12a")
    with pytest.raises(UserInputError):
        parse_int("1000000")


def test_parse_int_list():
    assert parse_int_list("1,2, 3") == [1, 2, 3]
    with pytest.raises(UserInputError):
        parse_int_list(",")


def test_parse_problem_lists(index):
    family, values = parse_problem(index, ["crt", "2", "1,1", "2,3", "3,5"])
    assert family.key == "system"
    assert values == [2, [1, 1], [2, 3], [3, 5]]


@pytest.mark.parametrize("tokens", [["nosuch", "1"], ["gcd", "1"], ["perm", ",".join(str(i) for i in range(1, 30))]],
                         ids=["unknown", "arity", "list_limit"])
def test_parse_problem_rejects(index, tokens):
    APPLY(config.load_settings("default"))
    with pytest.raises(UserInputError):
        parse_problem(index, tokens)


def test_run_problem_writes_trace_and_answer(index):
    om = OutputManager(quiet=True)
    answer = run_problem(index, ["gcd", "12", "18"], om)
    out = om.getvalue()
    assert str(answer) == "6"
    assert "18 = 1 * 12 + 6\n" in out
    assert "Answer:" in out


def test_run_problem_domain_error_is_user_error(index):
    with pytest.raises(UserInputError):
        run_problem(index, ["legendre", "3", "8"], OutputManager(quiet=True))


# ---------- profiles & messages -----------------------------------------------

def test_profiles_are_seeded():
    assert {"default", "czech", "plain"} <= set(config.list_all_profiles())
    settings = config.load_settings("czech")
    assert settings.as_dict()["TEXT"]["LOCALE"] == "cs"


def test_locale_switches_messages():
    assert message("no_solution") == "No solution exists."
    APPLY(config.load_settings("czech"))
    assert CFG("TEXT.LOCALE") == "cs"
    assert message("no_solution") == "Neexistuje žádné řešení."


def test_apply_accepts_loaded_profile_and_plain_dict():
    APPLY(config.load_settings("czech"))
    assert current().profile_name == "czech"
    APPLY({"BEHAVIOUR": {"DEBUG": True}, "TEXT": {"LOCALE": "en"}})
    assert current().profile_name == "default"
    assert current().debug is True
    assert CFG("TEXT.LOCALE") == "en"
    assert CFG("TEXT.MISSING", "x") == "x"


def test_runtime_deps_present():
    assert ensure_runtime_deps() is True


@pytest.mark.parametrize("base,exp,expected", [(3, 2, "3^2"), (-3, 2, "(-3)^2"), (-2, 10, "(-2)^{10}")],
                         ids=["positive", "negative_base", "negative_base_braced"])
def test_power_parenthesizes_negative_base(base, exp, expected):
    assert power(base, exp) == expected


def test_current_profile_roundtrip():
    config.write_current_profile("plain.toml")
    assert config.read_current_profile() == "plain"


def test_bad_locale_is_rejected(isolated_workspace):
    (isolated_workspace / "profiles" / "broken.toml").write_text('[TEXT]\nLOCALE = "xx"\n', encoding="utf-8")
    with pytest.raises(UserInputError):
        config.load_settings("broken")


# ---------- output ----------------------------------------------------------

def test_split_filename_is_filesystem_safe():
    assert split_filename("system 2 1,1 2,3 3,5") == "system_2_1_1_2_3_3_5.txt"


def test_relative_output_resolves_in_workspace(tmp_path):
    assert resolve_output_path("out.txt", str(tmp_path)) == str(tmp_path / "out.txt")


def test_output_file_has_no_colour():
    om = OutputManager(output_file="results/", quiet=True, name="gcd 4 6")
    om.write("\x1b[32mAnswer:\x1b[0m 2")
    om.close()
    assert (workspace_dir() / "results" / "gcd_4_6.txt").read_text(encoding="utf-8") == "Answer: 2\n"


# ---------- entry point ------------------------------------------------------

def test_main_answer_only(capsys):
    assert main(["modpow", "3", "200", "7", "--answer-only"]) == 0
    assert capsys.readouterr().out.strip() == "2"


def test_main_prints_derivation(capsys):
    assert main(["gcd", "12", "18"]) == 0
    assert "18 = 1 * 12 + 6" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["gcd", "x", "1"], ["order", "2", "4"], ["nosuch"]],
                         ids=["not_an_integer", "not_a_unit", "unknown_problem"])
def test_main_user_errors_exit_2(argv, capsys):
    assert main(argv) == 2
    assert capsys.readouterr().err


def test_main_unknown_profile(capsys):
    assert main(["gcd", "1", "2", "--profile", "nosuch"]) == 2


def test_main_where(capsys):
    assert main(["where"]) == 0
    assert str(workspace_dir()) in capsys.readouterr().out
