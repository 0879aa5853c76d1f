"""Payloads exchanged with the surrounding tool.

- ``VisualizerHandoff``: form fields plus per-round highlight bits, used to
  open a second visualizer with the state of the first.
- S-box lookup: the compiled artifact lists its S-boxes under
  ``components.sboxes``; only the first one is used to prefill the form.

Research / education only.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from spnlab.layout.spec import LayoutForm
from spnlab.trace.parser import TraceResult


class VisualizerHandoff(BaseModel):
    config: LayoutForm
    highlights: List[List[int]] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str) -> "VisualizerHandoff":
        return cls.model_validate_json(data)


class SBoxInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    output_width: int
    value: List[int] = Field(default_factory=list)


def prepare_handoff(form: LayoutForm, highlights: Sequence[Sequence[int]]) -> VisualizerHandoff:
    """Bundle form and highlights; a blank round count becomes the highlight count."""
    if not form.number_of_rounds.strip() and highlights:
        form = form.model_copy(update={"number_of_rounds": str(len(highlights))})
    return VisualizerHandoff(config=form, highlights=[list(h) for h in highlights])


def prefill_form_from_trace(form: LayoutForm, result: TraceResult, keep_block_size: bool = False) -> LayoutForm:
    update = {"number_of_rounds": str(len(result.frames))}
    if not keep_block_size and result.inferred_block_size:
        update["block_size"] = str(result.inferred_block_size)
    return form.model_copy(update=update)


def read_sbox_info(artifact: Mapping[str, Any]) -> Optional[SBoxInfo]:
    sboxes = (artifact.get("components") or {}).get("sboxes") or []
    if not sboxes:
        return None
    first = sboxes[0]
    return SBoxInfo(output_width=first["output_width"], value=list(first.get("value") or []))


def apply_sbox_info(form: LayoutForm, info: SBoxInfo) -> LayoutForm:
    update = {"s_box_size": str(info.output_width)}
    if info.value:
        update["s_box_table_text"] = ", ".join(str(v) for v in info.value)
    return form.model_copy(update=update)
