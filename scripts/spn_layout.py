"""CLI entry point: validate an SPN layout, build its network and highlight a trace.

Usage:
    python scripts/spn_layout.py --form form.json
    python scripts/spn_layout.py --block-size 16 --sbox-size 4 --rounds 4 \\
        --sbox "Eh 4 Dh 1 2 Fh Bh 8 3 Ah 6 Ch 5 9 0 7" --pbox "0 4 8 12 1 5 9 13 2 6 10 14 3 7 11 15"
    python scripts/spn_layout.py --form form.json --trace states.txt --save

Research / education only.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from spnlab.config import Settings, load_settings
from spnlab.handoff import apply_sbox_info, prepare_handoff, read_sbox_info
from spnlab.layout import LayoutForm, LayoutSummary, build_network, validate_form
from spnlab.layout.errors import TraceParseError
from spnlab.trace import HighlightPolicy, highlight_layout, parse_trace, render_highlight_rules, render_stylesheet
from spnlab.utils.repro import make_run_dir, read_json, write_json, write_text

logger = logging.getLogger("spn_layout")


def _form_from_args(args: argparse.Namespace) -> LayoutForm:
    base = LayoutForm.model_validate(read_json(args.form)) if args.form else LayoutForm()
    update = {
        "block_size": args.block_size,
        "s_box_size": args.sbox_size,
        "number_of_rounds": args.rounds,
        "s_box_table_text": args.sbox,
        "p_box_table_text": args.pbox,
        "round_layout_text": args.round_layout,
    }
    update = {k: v for k, v in update.items() if v is not None}
    if args.final_permutation:
        update["apply_final_permutation"] = True
    return base.model_copy(update=update)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SPN layout validator and wiring/trace highlighter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--form", type=str, default=None, help="JSON file with form fields (camelCase or snake_case)")
    parser.add_argument("--block-size", type=str, default=None)
    parser.add_argument("--sbox-size", type=str, default=None)
    parser.add_argument("--rounds", type=str, default=None)
    parser.add_argument("--sbox", type=str, default=None, help="S-box table text")
    parser.add_argument("--pbox", type=str, default=None, help="P-box table text (0- or 1-based)")
    parser.add_argument("--round-layout", type=str, default=None, help="Explicit round layout text")
    parser.add_argument("--final-permutation", action="store_true", help="Apply permutation after the last round")
    parser.add_argument(
        "--artifact", type=str, default=None,
        help="Compiled artifact JSON; its first S-box prefills S-box size and table",
    )
    parser.add_argument("--trace", type=str, default=None, help="Text file of printed state lines, one per round")
    parser.add_argument(
        "--reverse-nibbles", action=argparse.BooleanOptionalAction, default=settings.reverse_nibbles,
        help="Read the state digits right to left (default from SPNLAB_REVERSE_NIBBLES)",
    )
    parser.add_argument("--strict-bits", action="store_true", help="Reject highlight bits outside the block")
    parser.add_argument("--save", action="store_true", help="Write layout, network and highlights to a run directory")
    parser.add_argument("--output-dir", type=str, default=settings.runs_dir)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    form = _form_from_args(args)
    if args.artifact:
        info = read_sbox_info(read_json(args.artifact))
        if info is None:
            logger.warning("Artifact %s lists no S-box", args.artifact)
        else:
            form = apply_sbox_info(form, info)

    layout, errs = validate_form(form)
    if layout is None:
        print("Configuration issues:", file=sys.stderr)
        for e in errs:
            print(f"  - {e}", file=sys.stderr)
        return 1

    print(LayoutSummary.from_layout(layout).to_summary())
    model = build_network(layout)
    print(f"\nStages: {' -> '.join(model.stage_ids())}")
    print(f"Connections: {len(model.connections)}, S-box shapes: {len(model.sbox_shapes)}")

    trace = None
    css = ""
    if args.trace:
        lines = [ln for ln in Path(args.trace).read_text(encoding="utf-8").splitlines() if ln.strip()]
        try:
            trace = parse_trace(lines, reverse_nibbles=args.reverse_nibbles)
        except TraceParseError as e:
            print(f"Failed to parse print-state block: {e}", file=sys.stderr)
            return 2
        if trace.inferred_block_size != layout.block_size:
            logger.warning(
                "Trace block size %d differs from layout block size %d",
                trace.inferred_block_size, layout.block_size,
            )
        policy = HighlightPolicy(ignore_out_of_range_bits=not args.strict_bits)
        keys = highlight_layout(trace.per_round_active_bits, layout, model, policy)
        css = render_stylesheet(render_highlight_rules(keys))
        for idx, bits in enumerate(trace.per_round_active_bits):
            print(f"Round {idx}: {', '.join(str(b) for b in bits)}")
        print(f"Highlighted wires: {len(keys)}")

    if args.save:
        paths = make_run_dir(args.output_dir, "spn_layout")
        write_json(paths.layout_json, layout.model_dump())
        write_json(paths.network_json, model.to_dict())
        if trace is not None:
            write_json(paths.trace_json, trace.to_dict())
            write_text(paths.highlights_css, css)
        handoff = prepare_handoff(form, trace.per_round_active_bits if trace else [])
        write_text(paths.handoff_json, handoff.to_json())
        print(f"\nSaved run to {paths.run_dir}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
