# tests/test_trace.py
from __future__ import annotations

import pytest

from numsteps.trace import Edit, Span, Trace


def test_text_terminates_every_line():
    trace = Trace()
    trace.add("a")
    trace.add("b")
    assert trace.text() == "a\nb\n"
    assert Trace().text() == ""


def test_annotate_last_records_an_edit():
    trace = Trace()
    trace.add("3x ≡ 1 (mod 7)")
    trace.annotate_last("   /+14")
    assert trace.last == "3x ≡ 1 (mod 7)   /+14"
    assert trace.edits == [Edit(0, 14, 0, "   /+14")]


def test_annotate_empty_trace_fails():
    with pytest.raises(IndexError):
        Trace().annotate_last("   /÷2")


def test_rewrite_appends_and_moves_spans():
    trace = Trace()
    line = trace.add("2 = 6 - 1 * 4", {"b": Span(12, 1), "a": Span(4, 1)})
    new = trace.rewrite(line, "b", "(10 - 1 * 6)")
    assert new == 1
    assert trace[0] == "2 = 6 - 1 * 4"
    assert trace[1] == "2 = 6 - 1 * (10 - 1 * 6)"
    assert trace.lines[1].spans["b"] == Span(12, 12)
    assert trace.lines[1].spans["a"] == Span(4, 1)
    assert trace.edits[-1] == Edit(0, 12, 1, "(10 - 1 * 6)")


def test_copy_is_independent():
    trace = Trace()
    trace.add("x")
    branch = trace.copy()
    branch.add("y")
    branch.annotate_last("!")
    assert len(trace) == 1 and trace.edits == []
    assert list(branch) == ["x", "y!"]


def test_extend_shifts_edit_lines():
    head = Trace()
    head.add("first")
    tail = Trace()
    tail.add("second")
    tail.annotate_last(" note")
    head.extend(tail)
    assert list(head) == ["first", "second note"]
    assert head.edits == [Edit(1, 6, 0, " note")]


@pytest.mark.parametrize("text,expected", [
    ("x ≡ 5 (mod 7)", True),
    ("3x ≡ 15 (mod 7)", False),
    ("2k ≡ 1 (mod 4)", False),
    ("(x + 1)", True),
], ids=["implicit", "coefficient", "no_variable", "parenthesized"])
def test_finished(text, expected):
    trace = Trace()
    trace.add(text)
    assert trace.finished() is expected
