from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Trace decoding
    reverse_nibbles: bool = Field(default=False, description="Read printed state right-to-left")
    ignore_out_of_range_bits: bool = Field(default=True)
    print_state_begin: str = Field(default="### print-state begin")
    print_state_end: str = Field(default="### print-state end")

    # Highlight style
    highlight_stroke: str = Field(default="#e53e3e")
    highlight_stroke_width: str = Field(default="2px")

    # Paths / logging
    project_root: str = Field(default=os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))
    runs_dir: str = Field(default="runs")
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        reverse_nibbles=_bool("SPNLAB_REVERSE_NIBBLES", False),
        ignore_out_of_range_bits=_bool("SPNLAB_IGNORE_OUT_OF_RANGE_BITS", True),
        print_state_begin=os.getenv("SPNLAB_PRINT_STATE_BEGIN", "### print-state begin"),
        print_state_end=os.getenv("SPNLAB_PRINT_STATE_END", "### print-state end"),
        highlight_stroke=os.getenv("SPNLAB_HIGHLIGHT_STROKE", "#e53e3e"),
        highlight_stroke_width=os.getenv("SPNLAB_HIGHLIGHT_STROKE_WIDTH", "2px"),
        runs_dir=os.getenv("SPNLAB_RUNS_DIR", "runs"),
        log_level=os.getenv("SPNLAB_LOG_LEVEL", "INFO").upper(),
    )
