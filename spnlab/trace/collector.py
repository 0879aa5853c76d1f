"""Collect print-state blocks out of streamed terminal output."""
from __future__ import annotations

import re
from typing import List, Optional

from spnlab.config import load_settings

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(value: str) -> str:
    return _ANSI.sub("", value)


class PrintStateCollector:
    """Incremental splitter for ``### print-state begin`` / ``end`` blocks.

    Chunks may cut lines anywhere; the unterminated tail is buffered until the
    next ``feed``. Each completed block is returned once, as trimmed lines with
    colour codes removed.
    """

    def __init__(self, begin_marker: Optional[str] = None, end_marker: Optional[str] = None):
        settings = load_settings()
        self.begin_marker = begin_marker or settings.print_state_begin
        self.end_marker = end_marker or settings.print_state_end
        self.reset()

    def reset(self) -> None:
        self.collecting = False
        self.buffer = ""
        self.lines: List[str] = []

    def feed(self, chunk: str) -> List[List[str]]:
        parts = (self.buffer + chunk.replace("\r", "")).split("\n")
        self.buffer = parts.pop()

        completed: List[List[str]] = []
        for line in parts:
            if not self.collecting and self.begin_marker in line:
                self.collecting = True
                self.lines = []
                continue
            if self.collecting and self.end_marker in line:
                completed.append(list(self.lines))
                self.collecting = False
                self.lines = []
                continue
            if self.collecting:
                self.lines.append(strip_ansi(line).strip())
        return completed
