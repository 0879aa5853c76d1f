"""Network model: the stage/wire graph of an SPN layout.

The model is what a renderer consumes. Each stage lists the original bit
identifiers ordered by their physical position at that point of the
network; connections join every position of a stage to the adjacent stage;
S-box shapes give the position extent each S-box covers.

Research / education only.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from .permutation import apply_permutation, generate_sequential_rounds
from .spec import CipherLayout, RoundLayout

logger = logging.getLogger(__name__)

StageKind = Literal["input", "substitution", "permutation", "output"]


def connection_key(from_stage: str, to_stage: str, position: int) -> str:
    return f"{from_stage}->{to_stage}#{position}"


@dataclass(frozen=True)
class Stage:
    id: str
    kind: StageKind
    label: str
    bits: Tuple[int, ...]
    round_index: Optional[int] = None


@dataclass(frozen=True)
class Connection:
    """One wire between adjacent stages.

    ``position`` is the index inside the source stage's ordering and is what
    the key is built from; ``bit`` is whichever logical bit currently travels
    on the wire.
    """
    key: str
    from_stage: str
    to_stage: str
    position: int
    bit: int
    to_position: int


@dataclass(frozen=True)
class SBoxShape:
    id: str
    label: str
    stage_id: str
    round_index: int
    top: int       # smallest physical position covered
    bottom: int    # largest physical position covered

    @property
    def span(self) -> int:
        return self.bottom - self.top + 1


@dataclass
class NetworkModel:
    block_size: int
    stages: List[Stage] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    sbox_shapes: List[SBoxShape] = field(default_factory=list)

    def stage(self, stage_id: str) -> Stage:
        for s in self.stages:
            if s.id == stage_id:
                return s
        raise KeyError(f"Unknown stage: {stage_id}")

    def stage_ids(self) -> List[str]:
        return [s.id for s in self.stages]

    def connection_keys(self) -> List[str]:
        return [c.key for c in self.connections]

    def position_of(self, stage_id: str, bit: int) -> Optional[int]:
        try:
            return self.stage(stage_id).bits.index(bit)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_size": self.block_size,
            "stages": [asdict(s) for s in self.stages],
            "connections": [asdict(c) for c in self.connections],
            "sbox_shapes": [asdict(s) for s in self.sbox_shapes],
        }


def _build_stages(layout: CipherLayout) -> List[Stage]:
    bit_order = list(range(layout.block_size))
    stages = [Stage(id="input", kind="input", label="Input bits", bits=tuple(bit_order))]
    rounds = layout.rounds or ()

    for r in range(layout.number_of_rounds):
        name = rounds[r].name if r < len(rounds) else f"Round {r + 1}"
        # Substitution changes values, never positions.
        stages.append(Stage(
            id=f"substitution-{r}",
            kind="substitution",
            label=f"{name} · S-Box",
            bits=tuple(bit_order),
            round_index=r,
        ))

        should_permute = layout.apply_final_permutation or r < layout.number_of_rounds - 1
        if should_permute:
            bit_order = apply_permutation(bit_order, layout.p_box)
            stages.append(Stage(
                id=f"permutation-{r}",
                kind="permutation",
                label="Permutation · P-Box",
                bits=tuple(bit_order),
                round_index=r,
            ))

    stages.append(Stage(id="output", kind="output", label="Output bits", bits=tuple(bit_order)))
    return stages


def _positions(stage: Stage) -> Dict[int, int]:
    return {bit: pos for pos, bit in enumerate(stage.bits)}


def _build_connections(stages: List[Stage]) -> List[Connection]:
    out: List[Connection] = []
    for src, dst in zip(stages, stages[1:]):
        dst_pos = _positions(dst)
        for position, bit in enumerate(src.bits):
            to_position = dst_pos.get(bit)
            if to_position is None:
                continue
            out.append(Connection(
                key=connection_key(src.id, dst.id, position),
                from_stage=src.id,
                to_stage=dst.id,
                position=position,
                bit=bit,
                to_position=to_position,
            ))
    return out


def _build_sbox_shapes(stages: List[Stage], rounds: Tuple[RoundLayout, ...]) -> List[SBoxShape]:
    shapes: List[SBoxShape] = []
    by_round = {s.round_index: s for s in stages if s.kind == "substitution"}

    for r, rnd in enumerate(rounds):
        stage = by_round.get(r)
        if stage is None:
            continue
        pos = _positions(stage)
        for box in rnd.s_boxes:
            found = [pos[b] for b in box.bit_indexes if b in pos]
            if not found:
                continue
            shapes.append(SBoxShape(
                id=f"{stage.id}-{box.id}",
                label=box.id,
                stage_id=stage.id,
                round_index=r,
                top=min(found),
                bottom=max(found),
            ))
    return shapes


def build_network(layout: CipherLayout) -> NetworkModel:
    rounds = layout.rounds
    if rounds is None:
        rounds = tuple(generate_sequential_rounds(
            layout.block_size, layout.s_box.size, layout.number_of_rounds, layout.p_box,
        ))

    stages = _build_stages(layout.model_copy(update={"rounds": rounds}))
    model = NetworkModel(
        block_size=layout.block_size,
        stages=stages,
        connections=_build_connections(stages),
        sbox_shapes=_build_sbox_shapes(stages, rounds),
    )
    logger.debug(
        "Built network: %d stages, %d connections, %d S-box shapes",
        len(model.stages), len(model.connections), len(model.sbox_shapes),
    )
    return model
