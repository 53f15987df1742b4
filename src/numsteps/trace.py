# src/numsteps/trace.py
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Span:
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class Edit:
    """One in-place amendment: `length` chars at `start` of `line` became `replacement`."""
    line: int
    start: int
    length: int
    replacement: str


@dataclass
class TraceLine:
    text: str
    spans: dict[str, Span] = field(default_factory=dict)


@dataclass
class Trace:
    """
    Append-only derivation buffer.

    Lines are stored without their newline; `text()` terminates every line.
    Named spans let later steps amend a known sub-expression instead of
    searching for it, and every amendment is kept in `edits`.
    """
    lines: list[TraceLine] = field(default_factory=list)
    edits: list[Edit] = field(default_factory=list)

    # --- building ---

    def add(self, text: str, spans: Mapping[str, Span] | None = None) -> int:
        self.lines.append(TraceLine(text, dict(spans or {})))
        return len(self.lines) - 1

    def extend(self, other: Trace) -> None:
        offset = len(self.lines)
        self.lines.extend(TraceLine(ln.text, dict(ln.spans)) for ln in other.lines)
        self.edits.extend(
            Edit(e.line + offset, e.start, e.length, e.replacement) for e in other.edits
        )

    def annotate_last(self, note: str) -> None:
        """Append a side note (e.g. '   /÷3') to the last line."""
        if not self.lines:
            raise IndexError("cannot annotate an empty trace")
        index = len(self.lines) - 1
        last = self.lines[index]
        self.edits.append(Edit(index, len(last.text), 0, note))
        last.text += note

    def rewrite(self, index: int, span_name: str, replacement: str,
                spans: Mapping[str, Span] | None = None) -> int:
        """
        Replace the named span of line `index` and append the result as a new line.
        Spans after the edit are shifted; `spans` (relative to the replacement)
        are added to the new line. Returns the index of the new line.
        """
        source = self.lines[index]
        target = source.spans[span_name]
        text = source.text[:target.start] + replacement + source.text[target.end:]
        delta = len(replacement) - target.length

        moved: dict[str, Span] = {}
        for name, s in source.spans.items():
            if name == span_name:
                moved[name] = Span(target.start, len(replacement))
            elif s.end <= target.start:
                moved[name] = s
            elif s.start >= target.end:
                moved[name] = Span(s.start + delta, s.length)
        for name, s in (spans or {}).items():
            moved[name] = Span(target.start + s.start, s.length)

        self.edits.append(Edit(index, target.start, target.length, replacement))
        return self.add(text, moved)

    def copy(self) -> Trace:
        return Trace(
            [TraceLine(ln.text, dict(ln.spans)) for ln in self.lines],
            list(self.edits),
        )

    # --- reading ---

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return (ln.text for ln in self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index].text

    @property
    def last(self) -> str | None:
        return self.lines[-1].text if self.lines else None

    def text(self) -> str:
        return "".join(ln.text + "\n" for ln in self.lines)

    def finished(self, var: str = "x") -> bool:
        """True once the last occurrence of `var` has an implicit coefficient 1."""
        body = self.text()
        i = body.rfind(var)
        if i < 0:
            return False
        return i == 0 or not body[i - 1].isdigit()
