"""Human-readable layout summary for CLI and Streamlit display."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from .spec import CipherLayout


def pad_binary(value: int, width: int) -> str:
    return format(value, "b").zfill(width)


def format_sbox_table(table: Sequence[int], sbox_size: int) -> List[Dict[str, str]]:
    """Rows of ``{"input", "output"}`` as zero-padded binary strings."""
    return [
        {"input": pad_binary(i, sbox_size), "output": pad_binary(v, sbox_size)}
        for i, v in enumerate(table)
    ]


@dataclass
class LayoutSummary:
    block_size: int
    number_of_rounds: int
    sbox_size: int
    apply_final_permutation: bool
    permutation_text: str
    sbox_rows: List[Dict[str, str]] = field(default_factory=list)
    round_names: List[str] = field(default_factory=list)

    @classmethod
    def from_layout(cls, layout: CipherLayout) -> "LayoutSummary":
        return cls(
            block_size=layout.block_size,
            number_of_rounds=layout.number_of_rounds,
            sbox_size=layout.s_box.size,
            apply_final_permutation=layout.apply_final_permutation,
            permutation_text=", ".join(str(p) for p in layout.p_box),
            sbox_rows=format_sbox_table(layout.s_box.table, layout.s_box.size),
            round_names=[r.name for r in (layout.rounds or ())],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_summary(self) -> str:
        lines = [
            "Cipher summary",
            "=" * 40,
            f"Block size:  {self.block_size} bits",
            f"Rounds:      {self.number_of_rounds}",
            f"S-Box size:  {self.sbox_size} bits",
            f"Final perm:  {'yes' if self.apply_final_permutation else 'no'}",
            f"Permutation: {self.permutation_text}",
        ]
        if self.sbox_rows:
            lines.append("\nS-Box table (input -> output)")
            for row in self.sbox_rows:
                lines.append(f"  {row['input']} -> {row['output']}")
        return "\n".join(lines)
