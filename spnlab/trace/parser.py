"""Decode printed per-round cipher state into active bit sets.

Each line is one round, one hex digit per nibble, ``-`` for an inactive
nibble. Columns that hold ``x`` in any line are dropped from every line
before decoding, so masking is a property of the whole trace.

Research / education only.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Sequence

import numpy as np

from spnlab.layout.errors import InvalidCharacter, NoColumns, UnevenLineLengths

logger = logging.getLogger(__name__)

_ALPHABET = re.compile(r"^[0-9a-fA-FxX-]+$")


@dataclass(frozen=True)
class TraceFrame:
    round_index: int
    active_bits: FrozenSet[int]
    block_size: int


@dataclass(frozen=True)
class TraceResult:
    frames: List[TraceFrame] = field(default_factory=list)
    inferred_block_size: int = 0

    @property
    def per_round_active_bits(self) -> List[List[int]]:
        return [sorted(f.active_bits) for f in self.frames]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "highlights": self.per_round_active_bits,
            "inferred_block_size": self.inferred_block_size,
        }


def _nibble_value(ch: str) -> int:
    return 0 if ch == "-" else int(ch, 16)


def decode_state_line(chars: Sequence[str], reverse_nibbles: bool = False) -> FrozenSet[int]:
    """Active bits of one already-masked line; bit ``b`` of nibble ``n`` is ``b + 4n``."""
    nibbles = [_nibble_value(c) for c in chars]
    if reverse_nibbles:
        nibbles.reverse()

    active = set()
    for n, value in enumerate(nibbles):
        for b in range(4):
            if value & (1 << b):
                active.add(b + 4 * n)
    return frozenset(active)


def parse_trace(lines: Sequence[str], reverse_nibbles: bool = False) -> TraceResult:
    if not lines:
        return TraceResult()

    trimmed = [ln.strip() for ln in lines]
    if len({len(ln) for ln in trimmed}) != 1:
        raise UnevenLineLengths("All state lines must have the same length.")
    if not trimmed[0]:
        raise NoColumns("State lines are empty.")
    for ln in trimmed:
        if not _ALPHABET.match(ln):
            raise InvalidCharacter("State lines must contain only 0-9, a-f, -, or x.")

    grid = np.array([list(ln) for ln in trimmed])
    masked = np.isin(grid, ["x", "X"]).any(axis=0)
    kept = grid[:, ~masked]
    if kept.shape[1] == 0:
        raise NoColumns("No columns remain after removing x columns.")

    frames: List[TraceFrame] = []
    for r, row in enumerate(kept):
        chars = row.tolist()
        frames.append(TraceFrame(
            round_index=r,
            active_bits=decode_state_line(chars, reverse_nibbles),
            block_size=len(chars) * 4,
        ))

    block_size = min(f.block_size for f in frames)
    logger.debug(
        "Parsed %d trace line(s): %d masked column(s), block size %d",
        len(frames), int(masked.sum()), block_size,
    )
    return TraceResult(frames=frames, inferred_block_size=block_size)
