"""
Progress line sinks.

Commands never print. They hand each user-facing line to a sink, so the
same engine can feed a terminal, a test, or an embedding GUI.
"""

from __future__ import annotations

import sys
from typing import Callable, Literal

from pydantic import BaseModel


class ProgressLine(BaseModel):
    """One user-facing output line."""

    text: str
    stream: Literal["out", "err"] = "out"


Sink = Callable[[ProgressLine], None]


def console_sink(line: ProgressLine) -> None:
    """Write "out" lines to stdout and "err" lines to stderr."""
    stream = sys.stderr if line.stream == "err" else sys.stdout
    print(line.text, file=stream, flush=True)


def null_sink(line: ProgressLine) -> None:
    """Discard everything."""


class CollectingSink:
    """Sink that keeps every line in memory."""

    def __init__(self):
        self.lines: list[ProgressLine] = []

    def __call__(self, line: ProgressLine) -> None:
        self.lines.append(line)

    @property
    def out(self) -> list[str]:
        return [line.text for line in self.lines if line.stream == "out"]

    @property
    def err(self) -> list[str]:
        return [line.text for line in self.lines if line.stream == "err"]


class LineEmitter:
    """Small convenience wrapper around a sink."""

    def __init__(self, sink: Sink | None = None):
        self.sink = sink or null_sink

    def out(self, text: str) -> None:
        self.sink(ProgressLine(text=text, stream="out"))

    def err(self, text: str) -> None:
        self.sink(ProgressLine(text=text, stream="err"))
