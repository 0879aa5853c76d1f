import random

import pytest

from spnlab.layout.errors import (
    DuplicatePosition,
    IndivisibleBlock,
    NotBijective,
    OutOfRange,
    SizeMismatch,
)
from spnlab.layout.permutation import (
    apply_permutation,
    generate_sequential_rounds,
    invert_permutation,
    normalize_permutation,
    sanitize_layout,
)
from spnlab.layout.spec import CipherLayout, SBoxDefinition


def _random_perm(n: int, seed: int):
    rng = random.Random(seed)
    p = list(range(n))
    rng.shuffle(p)
    return p


# ---------------------------------------------------------------------------
# normalize_permutation
# ---------------------------------------------------------------------------

def test_one_based_and_zero_based_normalize_identically():
    zero = [1, 0, 3, 2]
    one = [v + 1 for v in zero]
    assert normalize_permutation(one, 4) == normalize_permutation(zero, 4) == zero


def test_normalize_returns_copy():
    perm = [0, 1, 2]
    out = normalize_permutation(perm, 3)
    out[0] = 99
    assert perm == [0, 1, 2]


def test_size_mismatch():
    with pytest.raises(SizeMismatch, match="should contain 4 positions, received 3"):
        normalize_permutation([0, 1, 2], 4)


def test_out_of_range():
    with pytest.raises(OutOfRange, match="outside of 0..3"):
        normalize_permutation([0, 1, 5, 2], 4)


def test_one_based_heuristic_is_all_or_nothing():
    # Contains 4, so every entry is shifted and 0 becomes -1
    with pytest.raises(OutOfRange, match="-1"):
        normalize_permutation([4, 0, 1, 2], 4)


def test_duplicate_position():
    with pytest.raises(DuplicatePosition, match="repeats position 0"):
        normalize_permutation([0, 0, 1, 2], 4)


# ---------------------------------------------------------------------------
# invert / apply
# ---------------------------------------------------------------------------

def test_invert_small():
    assert invert_permutation([2, 0, 1]) == [1, 2, 0]


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_double_inverse_is_identity(seed):
    p = _random_perm(32, seed)
    assert invert_permutation(invert_permutation(p)) == p


@pytest.mark.parametrize("seed", [4, 5])
def test_apply_then_inverse_restores_order(seed):
    p = _random_perm(16, seed)
    values = [f"b{i}" for i in range(16)]
    moved = apply_permutation(values, p)
    assert apply_permutation(moved, invert_permutation(p)) == values


def test_apply_is_destination_indexed():
    # bit at position i moves to position p[i]
    assert apply_permutation(["a", "b", "c"], [2, 0, 1]) == ["b", "c", "a"]


@pytest.mark.parametrize("perm", [[0, 0, 1], [0, 5, 1], [-1, 0, 1]])
def test_invert_rejects_non_bijection(perm):
    with pytest.raises(NotBijective):
        invert_permutation(perm)


# ---------------------------------------------------------------------------
# generate_sequential_rounds
# ---------------------------------------------------------------------------

SWAP_PAIRS = [1, 0, 3, 2, 5, 4, 7, 6]


def test_sequential_rounds_partition_every_round():
    rounds = generate_sequential_rounds(8, 4, 3, SWAP_PAIRS)
    assert len(rounds) == 3
    for rnd in rounds:
        bits = rnd.bits()
        assert sorted(bits) == list(range(8))
        assert all(len(box.bit_indexes) == 4 for box in rnd.s_boxes)


def test_sequential_rounds_follow_the_permutation():
    rounds = generate_sequential_rounds(8, 4, 3, SWAP_PAIRS)
    assert [b.bit_indexes for b in rounds[0].s_boxes] == [(0, 1, 2, 3), (4, 5, 6, 7)]
    assert [b.bit_indexes for b in rounds[1].s_boxes] == [(1, 0, 3, 2), (5, 4, 7, 6)]
    assert [b.bit_indexes for b in rounds[2].s_boxes] == [(0, 1, 2, 3), (4, 5, 6, 7)]


def test_sequential_round_names_and_ids():
    rounds = generate_sequential_rounds(8, 4, 3, SWAP_PAIRS)
    assert [r.name for r in rounds] == ["Round 1", "Round 2", "Round 3"]
    assert [b.id for b in rounds[2].s_boxes] == ["S3.1", "S3.2"]


def test_longer_layout_extends_shorter_one():
    p = _random_perm(16, 9)
    short = generate_sequential_rounds(16, 4, 2, p)
    longer = generate_sequential_rounds(16, 4, 3, p)
    assert longer[:2] == short


def test_indivisible_block():
    with pytest.raises(IndivisibleBlock):
        generate_sequential_rounds(10, 4, 1, list(range(10)))


# ---------------------------------------------------------------------------
# sanitize_layout
# ---------------------------------------------------------------------------

def test_sanitize_fills_rounds():
    layout = CipherLayout(
        block_size=8,
        s_box=SBoxDefinition(size=4, table=tuple(range(16))),
        p_box=tuple(SWAP_PAIRS),
        number_of_rounds=2,
    )
    assert layout.rounds is None
    clean = sanitize_layout(layout)
    assert len(clean.rounds) == 2
    assert clean.rounds == tuple(generate_sequential_rounds(8, 4, 2, SWAP_PAIRS))
