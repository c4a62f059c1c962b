"""Shared utility functions for idd-scaffold.

Provides async command execution, detached background launches, JSON
output, identifier helpers, and Rich-based console reporting with an
elapsed-time prefix on every message.
"""

from __future__ import annotations

import asyncio
import json
import subprocess
import time
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and wait for it to finish.

    There is no timeout; the call returns when the process exits.

    Args:
        cmd: Executable and its arguments.
        cwd: Working directory for the child process.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.

    Raises:
        OSError: If the executable cannot be launched.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


def spawn_detached(
    cmd: list[str],
    cwd: str | Path | None = None,
) -> subprocess.Popen | None:
    """Launch *cmd* in the background and return without waiting.

    Best-effort and unobserved: the child runs in its own session with its
    output discarded, nobody waits on it, and its exit status is never
    checked.  A launch failure is reported as a warning and ``None`` is
    returned instead of raising.
    """
    try:
        return subprocess.Popen(
            cmd,
            cwd=str(cwd) if cwd else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        print_warning(escape(f"Could not launch `{' '.join(cmd)}`: {exc}"))
        return None


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def camel_case_hyphenated(identifier: str) -> str:
    """Turn a hyphenated package name into a camelCase identifier.

    The first segment is kept as-is; every following segment gets its first
    character upper-cased.  Empty segments (``a--b``) contribute nothing.

    Examples::

        camel_case_hyphenated("gulp") -> "gulp"
        camel_case_hyphenated("gulp-sass") -> "gulpSass"
        camel_case_hyphenated("a-b-c") -> "aBC"
    """
    parts = identifier.split("-")
    if len(parts) == 1:
        return identifier
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* as pretty-printed JSON with a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time precisely, picking the largest sensible unit.

    Examples::

        format_elapsed(0.0000004) -> "400 ns"
        format_elapsed(0.0123)    -> "12.300 ms"
        format_elapsed(3.7)       -> "3.700 s"
        format_elapsed(65.2)      -> "1 m 5.200 s"
    """
    if seconds < 0:
        seconds = 0.0

    if seconds < 1e-6:
        return f"{round(seconds * 1e9)} ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f} μs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f} ms"
    if seconds < 60:
        return f"{seconds:.3f} s"

    minutes = int(seconds // 60)
    return f"{minutes} m {seconds - minutes * 60:.3f} s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class ElapsedLogger:
    """Console reporter that prefixes each message with the time since start.

    Progress and warnings go to *out* (stdout by default); errors go to
    *err* (stderr by default).  The clock starts when the logger is created
    (or on :meth:`restart`).
    """

    def __init__(self, out: Console | None = None, err: Console | None = None) -> None:
        self.console = out or console
        self.err_console = err or err_console
        self._start = time.monotonic()

    def restart(self) -> None:
        self._start = time.monotonic()

    @property
    def elapsed(self) -> float:
        """Seconds since the clock was started."""
        return time.monotonic() - self._start

    def prefix(self) -> str:
        return f"[{format_elapsed(self.elapsed)}]"

    def log(self, *parts: Any) -> None:
        self._emit(self.console, "blue", parts)

    def warning(self, *parts: Any) -> None:
        self._emit(self.console, "yellow", parts)

    def error(self, *parts: Any) -> None:
        self._emit(self.err_console, "bold red", parts)

    def _emit(self, out: Console, style: str, parts: tuple[Any, ...]) -> None:
        message = " ".join(str(p) for p in parts)
        out.print(
            f"{escape(self.prefix())} {escape(message)}",
            style=style,
            highlight=False,
        )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
