"""Block permutation helpers: validation, inversion and sequential round layouts.

All permutations are destination indexed: the bit at position ``i`` moves to
position ``perm[i]``.

Research / education only.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, TypeVar

from .errors import DuplicatePosition, IndivisibleBlock, NotBijective, OutOfRange, SizeMismatch
from .spec import CipherLayout, RoundLayout, RoundSBox

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_permutation(permutation: Sequence[int], block_size: int) -> List[int]:
    """Return a 0-based copy of ``permutation`` after checking it is a bijection.

    If any entry equals ``block_size`` the whole table is read as 1-based.
    This is a heuristic: a 1-based table whose largest entry is missing
    cannot be told apart from a broken 0-based one.
    """
    if len(permutation) != block_size:
        raise SizeMismatch(
            f"Permutation should contain {block_size} positions, received {len(permutation)}"
        )

    one_based = any(v == block_size for v in permutation)
    if one_based:
        logger.debug("Permutation contains %d; treating it as 1-based", block_size)
    adjusted = [v - 1 for v in permutation] if one_based else list(permutation)

    seen = set()
    for value in adjusted:
        if value < 0 or value >= block_size:
            raise OutOfRange(f"Permutation position {value} is outside of 0..{block_size - 1}")
        if value in seen:
            raise DuplicatePosition(f"Permutation repeats position {value}")
        seen.add(value)

    return adjusted


def invert_permutation(permutation: Sequence[int]) -> List[int]:
    n = len(permutation)
    inverse = [-1] * n
    for index, target in enumerate(permutation):
        if not 0 <= target < n:
            raise NotBijective("Permutation is not a bijection and cannot be inverted")
        inverse[target] = index

    if any(v == -1 for v in inverse):
        raise NotBijective("Permutation is not a bijection and cannot be inverted")
    return inverse


def apply_permutation(values: Sequence[T], permutation: Sequence[int]) -> List[T]:
    nxt = list(values)
    for index, position in enumerate(permutation):
        nxt[position] = values[index]
    return nxt


def generate_sequential_rounds(
    block_size: int,
    sbox_size: int,
    number_of_rounds: int,
    permutation: Sequence[int],
) -> List[RoundLayout]:
    """Group each round's bits into consecutive S-boxes.

    The running bit order follows the wires through the P-box, so round ``r``
    groups the bits that physically arrive at its S-box inputs. No
    permutation is applied after the last round.
    """
    if sbox_size <= 0 or block_size % sbox_size != 0:
        raise IndivisibleBlock("Block size must be divisible by the S-Box size to build sequential layout")

    boxes_per_round = block_size // sbox_size
    bit_order = list(range(block_size))
    rounds: List[RoundLayout] = []

    for r in range(number_of_rounds):
        s_boxes = [
            RoundSBox(
                id=f"S{r + 1}.{b + 1}",
                bit_indexes=tuple(bit_order[b * sbox_size:(b + 1) * sbox_size]),
            )
            for b in range(boxes_per_round)
        ]
        rounds.append(RoundLayout(name=f"Round {r + 1}", s_boxes=tuple(s_boxes)))

        if r < number_of_rounds - 1:
            bit_order = apply_permutation(bit_order, permutation)

    return rounds


def sanitize_layout(layout: CipherLayout) -> CipherLayout:
    """Normalize the P-box and fill in sequential rounds when none are given."""
    p_box = normalize_permutation(layout.p_box, layout.block_size)
    rounds = layout.rounds
    if rounds is None:
        rounds = tuple(
            generate_sequential_rounds(layout.block_size, layout.s_box.size, layout.number_of_rounds, p_box)
        )
    return layout.model_copy(update={"p_box": tuple(p_box), "rounds": rounds})
