# output_manager.py

import os
import re
import sys

from numsteps.fmt import strip_ansi
from numsteps.workspace import workspace_dir

_SAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._=-]+")


def resolve_output_path(path: str, workspace_root: str) -> str:
    """
    Resolve user-provided output path.

    Rules:
    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")

    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(workspace_root, str(path)))


def split_filename(name: str, ext: str = ".txt") -> str:
    """'modpow 3 200 7' -> 'modpow_3_200_7.txt' (filesystem safe)."""
    stem = _SAFE_CHARS_RE.sub("_", name.strip()).strip("._-=") or "output"
    return stem + ext


class OutputManager:
    """
    Handles all printing/output, including to screen and/or file.

    Usage:
        # Split mode (one file per problem):
        om = OutputManager(output_file="results/", name="gcd 12 18")
        om.write("Hello")   # prints and buffers; file written on close()
        om.close()

        # Single file (append all runs to one file):
        om = OutputManager(output_file="results/all.txt")
        om.write("Hello")   # prints and appends
        om.close()
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, name: str | None = None):
        """
        Parameters:
            output_file:
                None or ""       => screen only
                "." or "./"      => per-problem files in the workspace
                endswith "/"     => per-problem files in specified dir
                path/to/file.txt => append all runs to this file
            quiet: if True, no output to screen (only to file)
            name: problem invocation, used for the filename in per-problem mode
        """
        self.quiet = quiet
        self.output_file = output_file or ""
        self.name = name
        self._buffer: list[str] = []

        self._mode: str = "none"     # "none" | "split" | "single"
        self._split_path: str | None = None
        self._single_path: str | None = None

        if self.output_file in (".", "./") or self.output_file.endswith(("/", "\\")):
            if not name:
                raise ValueError("A problem name must be provided when outputting to a directory.")
            directory = resolve_output_path(self.output_file, str(workspace_dir()))
            os.makedirs(directory, exist_ok=True)
            self._mode = "split"
            self._split_path = os.path.join(directory, split_filename(name))

        elif self.output_file:
            path = resolve_output_path(self.output_file, str(workspace_dir()))
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._mode = "single"
            self._single_path = path

    @property
    def target(self) -> str | None:
        return self._split_path or self._single_path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured)."""
        text = sep.join(str(a) for a in args) + end
        self._buffer.append(text)

        if not self.quiet:
            print(text, end="")

        if self._mode == "single" and self._single_path:
            try:
                with open(self._single_path, "a", encoding="utf-8") as fh:
                    fh.write(strip_ansi(text))
            except OSError as e:
                self._warn(self._single_path, e)
                self._mode = "none"

    def getvalue(self) -> str:
        """Returns everything written (with color codes)."""
        return "".join(self._buffer)

    def _warn(self, path: str, e: Exception) -> None:
        print(f"[WARNING] Could not write output file: {path} ({type(e).__name__}: {e})", file=sys.stderr)

    def close(self) -> None:
        """Write the buffer in per-problem mode; separate runs by a blank line in single-file mode."""
        if self._mode == "split" and self._split_path and self._buffer:
            try:
                with open(self._split_path, "w", encoding="utf-8") as fh:
                    fh.write(strip_ansi("".join(self._buffer)))
            except OSError as e:
                self._warn(self._split_path, e)
            self._buffer.clear()
            return

        if self._mode == "single" and self._single_path and self._buffer:
            try:
                with open(self._single_path, "a", encoding="utf-8") as fh:
                    fh.write("\n")
            except OSError as e:
                self._warn(self._single_path, e)
            self._buffer.clear()
