from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .errors import (
    MalformedRoundLayout,
    MissingOrDuplicateBits,
    OutOfRange,
    RoundLayoutErrors,
    SizeMismatch,
    SPNLayoutError,
)
from .numbers import is_decimal, parse_number_list
from .permutation import generate_sequential_rounds, normalize_permutation
from .spec import MAX_SBOX_BITS, CipherLayout, LayoutForm, RoundLayout, RoundSBox, SBoxDefinition

logger = logging.getLogger(__name__)


def _parse_int_field(value: str, label: str, errs: List[str]) -> Optional[int]:
    if not value.strip():
        errs.append(f"Please enter a value for {label}")
        return None
    if not is_decimal(value):
        errs.append(f'"{value}" is not a valid number for {label}')
        return None
    return int(value.strip(), 10)


def _parse_round_line(line: str, round_index: int, block_size: int, sbox_size: int) -> RoundLayout:
    label = f"Round {round_index + 1}"
    layout_part = line

    if ":" in line:
        # Anything after a second colon is ignored
        left, right = line.split(":", 2)[:2]
        if not right.strip():
            raise MalformedRoundLayout("Round layout label must be followed by bit groups")
        label = left.strip() or label
        layout_part = right

    groups = [g.strip() for g in layout_part.split("|") if g.strip()]
    if not groups:
        raise MalformedRoundLayout("Each round needs at least one S-Box group")

    s_boxes: List[RoundSBox] = []
    for index, group in enumerate(groups):
        bits = parse_number_list(group)
        if len(bits) != sbox_size:
            raise SizeMismatch(f"S-Box {index + 1} for round {round_index + 1} must have {sbox_size} bits")
        for bit in bits:
            if bit < 0 or bit >= block_size:
                raise OutOfRange(f"Bit index {bit} is outside 0..{block_size - 1}")
        s_boxes.append(RoundSBox(id=f"R{round_index + 1}S{index + 1}", bit_indexes=tuple(bits)))

    all_bits = [b for box in s_boxes for b in box.bit_indexes]
    if len(all_bits) != block_size:
        raise MissingOrDuplicateBits(f"Round {round_index + 1} must describe exactly {block_size} bits in total")
    if len(set(all_bits)) != block_size:
        raise MissingOrDuplicateBits(f"Round {round_index + 1} must cover every bit exactly once")

    return RoundLayout(name=label, s_boxes=tuple(s_boxes))


def parse_round_layouts(
    text: str,
    block_size: int,
    sbox_size: int,
    number_of_rounds: int,
) -> Optional[List[RoundLayout]]:
    """Parse ``label: g1 | g2 | ...`` lines, one per round.

    A single line is reused for every round. Problems on every line are
    gathered and raised together as ``RoundLayoutErrors``.
    """
    if not text.strip():
        return None

    raw_lines = [ln.strip() for ln in text.strip().splitlines() if ln.strip()]
    lines = raw_lines * number_of_rounds if len(raw_lines) == 1 and number_of_rounds > 1 else raw_lines

    if len(lines) != number_of_rounds:
        raise MalformedRoundLayout("Provide one layout per round or a single line to reuse for every round")

    rounds: List[RoundLayout] = []
    problems: List[SPNLayoutError] = []
    for idx, line in enumerate(lines):
        try:
            rounds.append(_parse_round_line(line, idx, block_size, sbox_size))
        except SPNLayoutError as e:
            problems.append(e)

    if problems:
        raise RoundLayoutErrors(problems)
    return rounds


def validate_form(form: LayoutForm) -> Tuple[Optional[CipherLayout], List[str]]:
    """Turn raw form fields into a ``CipherLayout``.

    Every field is checked independently and all problems are reported; the
    layout is returned only when there are none.
    """
    errs: List[str] = []

    block_size = _parse_int_field(form.block_size, "block size", errs)
    sbox_size = _parse_int_field(form.s_box_size, "S-Box size", errs)
    rounds = _parse_int_field(form.number_of_rounds, "round count", errs)

    sbox_table: Optional[List[int]] = None
    try:
        sbox_table = parse_number_list(form.s_box_table_text)
    except SPNLayoutError as e:
        errs.append(str(e))

    if sbox_size is not None and sbox_size > MAX_SBOX_BITS:
        errs.append(f"S-Box size must be at most {MAX_SBOX_BITS} bits")
    elif sbox_size is not None and sbox_size > 0 and sbox_table is not None:
        expected = 1 << sbox_size
        if len(sbox_table) != expected:
            errs.append(f"S-Box table should contain {expected} entries for {sbox_size}-bit input")

    p_box: Optional[List[int]] = None
    try:
        p_box = parse_number_list(form.p_box_table_text)
    except SPNLayoutError as e:
        errs.append(str(e))

    sizes_positive = (
        block_size is not None and sbox_size is not None and rounds is not None
        and block_size > 0 and 0 < sbox_size <= MAX_SBOX_BITS and rounds > 0
    )

    round_layouts: Optional[List[RoundLayout]] = None
    if sizes_positive:
        try:
            round_layouts = parse_round_layouts(form.round_layout_text, block_size, sbox_size, rounds)
        except RoundLayoutErrors as e:
            errs.extend(str(p) for p in e.errors)
        except SPNLayoutError as e:
            errs.append(str(e))

    if block_size is not None and block_size <= 0:
        errs.append("Block size must be at least 1 bit")
    if sbox_size is not None and sbox_size <= 0:
        errs.append("S-Box size must be at least 1 bit")
    if rounds is not None and rounds <= 0:
        errs.append("Round count must be at least 1")

    normalized: Optional[List[int]] = None
    if block_size is not None and block_size > 0 and p_box is not None:
        if len(p_box) != block_size:
            errs.append(f"Permutation must list {block_size} positions")
        else:
            try:
                normalized = normalize_permutation(p_box, block_size)
            except SPNLayoutError as e:
                errs.append(str(e))

    if sizes_positive and normalized is not None and round_layouts is None and not form.round_layout_text.strip():
        try:
            round_layouts = generate_sequential_rounds(block_size, sbox_size, rounds, normalized)
        except SPNLayoutError as e:
            errs.append(str(e))

    if errs:
        logger.debug("Layout form rejected with %d error(s)", len(errs))
        return None, errs

    layout = CipherLayout(
        block_size=block_size,
        s_box=SBoxDefinition(size=sbox_size, table=tuple(sbox_table)),
        p_box=tuple(normalized),
        number_of_rounds=rounds,
        apply_final_permutation=form.apply_final_permutation,
        rounds=tuple(round_layouts),
    )
    return layout, []
