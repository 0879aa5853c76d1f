"""Trace ingestion: print-state collection, decoding and wire highlighting."""

from .parser import TraceFrame, TraceResult, decode_state_line, parse_trace
from .collector import PrintStateCollector, strip_ansi
from .highlight import (
    ConnectionStyle,
    HighlightPolicy,
    HighlightRule,
    HighlightSheet,
    connection_styles,
    correlate,
    css_id_selector,
    highlight_layout,
    render_highlight_rules,
    render_stylesheet,
)

__all__ = [
    "TraceFrame",
    "TraceResult",
    "decode_state_line",
    "parse_trace",
    "PrintStateCollector",
    "strip_ansi",
    "ConnectionStyle",
    "HighlightPolicy",
    "HighlightRule",
    "HighlightSheet",
    "connection_styles",
    "correlate",
    "css_id_selector",
    "highlight_layout",
    "render_highlight_rules",
    "render_stylesheet",
]
