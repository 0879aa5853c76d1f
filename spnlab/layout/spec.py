from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Largest S-box width whose table can be listed in a form
MAX_SBOX_BITS = 16


class SBoxDefinition(BaseModel):
    """Substitution table: entry ``i`` is the output for input ``i``."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(..., gt=0, le=MAX_SBOX_BITS, description="Bits consumed and produced by the S-box")
    table: Tuple[int, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _table_length(self) -> "SBoxDefinition":
        expected = 1 << self.size
        if len(self.table) != expected:
            raise ValueError(f"S-Box table should contain {expected} entries for {self.size}-bit input")
        return self


class RoundSBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    bit_indexes: Tuple[int, ...]


class RoundLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    s_boxes: Tuple[RoundSBox, ...]

    def bits(self) -> Tuple[int, ...]:
        return tuple(b for box in self.s_boxes for b in box.bit_indexes)


class CipherLayout(BaseModel):
    """A validated SPN layout.

    The structure only describes wiring: which bits enter which S-box in each
    round and where the P-box sends every bit. It says nothing about the key
    schedule and is never executed.
    """

    model_config = ConfigDict(frozen=True)

    block_size: int = Field(..., gt=0)
    s_box: SBoxDefinition
    # Bit at position i moves to position p_box[i]
    p_box: Tuple[int, ...]
    number_of_rounds: int = Field(..., gt=0)
    apply_final_permutation: bool = Field(default=False)
    rounds: Optional[Tuple[RoundLayout, ...]] = Field(
        default=None,
        description="Explicit S-box grouping per round; derived sequentially when absent",
    )

    @model_validator(mode="after")
    def _structure(self) -> "CipherLayout":
        full = set(range(self.block_size))
        if len(self.p_box) != self.block_size:
            raise ValueError(f"Permutation must list {self.block_size} positions")
        if set(self.p_box) != full:
            raise ValueError("Permutation is not a bijection over the block")

        if self.rounds is not None:
            if len(self.rounds) != self.number_of_rounds:
                raise ValueError("Round layout count must match number_of_rounds")
            for idx, rnd in enumerate(self.rounds):
                bits = rnd.bits()
                if len(bits) != self.block_size or set(bits) != full:
                    raise ValueError(f"Round {idx + 1} must cover every bit exactly once")
        return self


class LayoutForm(BaseModel):
    """Raw textual form fields, exactly as a user typed them.

    Serializes with camelCase keys (``blockSize``, ``sBoxTableText``, ...) so
    it can travel inside the visualizer handoff payload.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    block_size: str = ""
    s_box_size: str = ""
    number_of_rounds: str = ""
    s_box_table_text: str = ""
    p_box_table_text: str = ""
    apply_final_permutation: bool = False
    round_layout_text: str = ""
