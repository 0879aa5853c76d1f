"""Map per-round active bits onto wire keys of a network model.

Round 0 bits light the input wires. A bit ``b`` active at round ``r > 0``
lights the wire entering round ``r``'s substitution stage at position ``b``,
and the wire that fed it into the previous permutation, found through the
inverse permutation.

Style output is declarative: callers receive ``(selector, style)`` rules and
apply them to whatever surface they render on.

Research / education only.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from spnlab.config import load_settings
from spnlab.layout.errors import OutOfRange
from spnlab.layout.network import NetworkModel, build_network, connection_key
from spnlab.layout.permutation import invert_permutation
from spnlab.layout.spec import CipherLayout

logger = logging.getLogger(__name__)

_CSS_UNSAFE = re.compile(r"([^A-Za-z0-9_-])")


@dataclass(frozen=True)
class HighlightPolicy:
    # Drop bits outside the block instead of rejecting the trace
    ignore_out_of_range_bits: bool = True

    @classmethod
    def from_settings(cls) -> "HighlightPolicy":
        return cls(ignore_out_of_range_bits=load_settings().ignore_out_of_range_bits)


def correlate(
    per_round_active_bits: Sequence[Iterable[int]],
    model: NetworkModel,
    inverse_per_round: Sequence[Sequence[int]],
    policy: Optional[HighlightPolicy] = None,
) -> Set[str]:
    """Return the connection keys to highlight.

    ``inverse_per_round[r - 1]`` is the inverse of the permutation applied
    after round ``r - 1``. Keys that do not exist in ``model`` are dropped.
    """
    policy = policy or HighlightPolicy()
    block_size = model.block_size
    known = set(model.connection_keys())
    keys: Set[str] = set()

    for r, bits in enumerate(per_round_active_bits):
        inverse = inverse_per_round[r - 1] if 0 < r <= len(inverse_per_round) else None
        if r > 0 and inverse is None:
            logger.warning("No inverse permutation for round %d; backward wires skipped", r)

        for b in bits:
            if b < 0 or b >= block_size:
                if policy.ignore_out_of_range_bits:
                    logger.debug("Skipping out-of-range bit %d in round %d", b, r)
                    continue
                raise OutOfRange(f"Highlight bit {b} in round {r} is outside 0..{block_size - 1}")

            if r == 0:
                keys.add(connection_key("input", "substitution-0", b))
                continue

            keys.add(connection_key(f"permutation-{r - 1}", f"substitution-{r}", b))
            if inverse is not None:
                keys.add(connection_key(f"substitution-{r - 1}", f"permutation-{r - 1}", inverse[b]))

    dropped = keys - known
    if dropped:
        logger.debug("Dropping %d highlight key(s) with no matching wire", len(dropped))
    return keys & known


def highlight_layout(
    per_round_active_bits: Sequence[Iterable[int]],
    layout: CipherLayout,
    model: Optional[NetworkModel] = None,
    policy: Optional[HighlightPolicy] = None,
) -> Set[str]:
    """``correlate`` using the layout's own P-box inverse for every round."""
    model = model or build_network(layout)
    inverse = invert_permutation(layout.p_box)
    return correlate(per_round_active_bits, model, [inverse] * len(per_round_active_bits), policy)


@dataclass(frozen=True)
class ConnectionStyle:
    stroke: Optional[str] = None
    stroke_width: Optional[str] = None
    stroke_dasharray: Optional[str] = None
    opacity: Optional[float] = None

    @classmethod
    def highlight(cls) -> "ConnectionStyle":
        s = load_settings()
        return cls(stroke=s.highlight_stroke, stroke_width=s.highlight_stroke_width)

    def to_css(self) -> Dict[str, str]:
        props = {
            "stroke": self.stroke,
            "stroke-width": self.stroke_width,
            "stroke-dasharray": self.stroke_dasharray,
            "opacity": None if self.opacity is None else str(self.opacity),
        }
        return {k: v for k, v in props.items() if v is not None}


@dataclass(frozen=True)
class HighlightRule:
    selector: str
    style: Dict[str, str]

    def to_css(self) -> str:
        body = "".join(f"  {k}: {v};\n" for k, v in self.style.items())
        return f"{self.selector} {{\n{body}}}"


def css_id_selector(key: str) -> str:
    return "#" + _CSS_UNSAFE.sub(r"\\\1", key)


def connection_styles(keys: Iterable[str], style: Optional[ConnectionStyle] = None) -> Dict[str, ConnectionStyle]:
    style = style or ConnectionStyle.highlight()
    return {k: style for k in sorted(keys)}


def render_highlight_rules(keys: Iterable[str], style: Optional[ConnectionStyle] = None) -> List[HighlightRule]:
    styles = connection_styles(keys, style)
    return [HighlightRule(selector=css_id_selector(k), style=s.to_css()) for k, s in styles.items()]


def render_stylesheet(rules: Iterable[HighlightRule]) -> str:
    return "\n".join(r.to_css() for r in rules)


@dataclass
class HighlightSheet:
    """One visualization's applied rule set.

    ``replace`` always clears the previous set before writing the new one.
    """
    rules: List[HighlightRule] = field(default_factory=list)

    def clear(self) -> None:
        self.rules = []

    def replace(self, rules: Iterable[HighlightRule]) -> str:
        self.clear()
        self.rules = list(rules)
        return self.css

    @property
    def css(self) -> str:
        return render_stylesheet(self.rules)
