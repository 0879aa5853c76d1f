from __future__ import annotations

import json

import streamlit as st

from spnlab.config import load_settings
from spnlab.handoff import apply_sbox_info, prefill_form_from_trace, prepare_handoff, read_sbox_info
from spnlab.layout import LayoutForm, LayoutSummary, build_network, validate_form
from spnlab.layout.errors import TraceParseError
from spnlab.trace import (
    HighlightPolicy,
    HighlightSheet,
    highlight_layout,
    parse_trace,
    render_highlight_rules,
)


st.set_page_config(page_title="SPN Visualizer", layout="wide")

settings = load_settings()

st.title("SPN Visualizer: layout, wiring and trace highlights")
st.caption("Configure an SPN cipher and inspect its substitution and permutation structure.")

DEFAULT_FORM = LayoutForm(
    block_size="16",
    s_box_size="4",
    number_of_rounds="4",
    s_box_table_text="0xE, 4, 0xD, 1, 2, 0xF, 0xB, 8, 3, 0xA, 6, 0xC, 5, 9, 0, 7",
    p_box_table_text="0, 4, 8, 12, 1, 5, 9, 13, 2, 6, 10, 14, 3, 7, 11, 15",
)

if "form" not in st.session_state:
    st.session_state["form"] = DEFAULT_FORM
if "highlight_sheet" not in st.session_state:
    st.session_state["highlight_sheet"] = HighlightSheet()

# ---------- Sidebar: trace + artifact ----------
st.sidebar.header("Print-state trace")
trace_text = st.sidebar.text_area("State lines (one per round)", height=180, placeholder="----1---\n--x-2---")
reverse = st.sidebar.checkbox("Reverse nibble order", value=settings.reverse_nibbles)
strict_bits = st.sidebar.checkbox("Reject out-of-range bits", value=not settings.ignore_out_of_range_bits)
keep_block_size = st.sidebar.checkbox("Keep my block size when prefilling", value=False)

st.sidebar.header("Compiled artifact")
artifact_file = st.sidebar.file_uploader("Artifact JSON", type=["json"])
if artifact_file is not None and st.sidebar.button("Fill S-Box from artifact"):
    info = read_sbox_info(json.loads(artifact_file.getvalue().decode("utf-8")))
    if info is None:
        st.sidebar.error("Artifact lists no S-Box.")
    else:
        st.session_state["form"] = apply_sbox_info(st.session_state["form"], info)

trace = None
if not trace_text.strip():
    st.session_state["highlight_sheet"].clear()
else:
    lines = [ln for ln in trace_text.splitlines() if ln.strip()]
    try:
        trace = parse_trace(lines, reverse_nibbles=reverse)
    except TraceParseError as e:
        # Previous highlights stay as they were.
        st.sidebar.error(f"Failed to parse print-state block: {e}")
    else:
        st.sidebar.success(f"{len(trace.frames)} round(s), inferred block size {trace.inferred_block_size}")
        if st.sidebar.button("Prefill form from trace"):
            st.session_state["form"] = prefill_form_from_trace(st.session_state["form"], trace, keep_block_size)

# ---------- Main: form ----------
form: LayoutForm = st.session_state["form"]

st.subheader("1) Configuration")
col1, col2, col3 = st.columns(3)
with col1:
    block_size = st.text_input("Block size (bits)", value=form.block_size)
with col2:
    sbox_size = st.text_input("S-Box size (bits)", value=form.s_box_size)
with col3:
    rounds = st.text_input("Rounds", value=form.number_of_rounds)

sbox_text = st.text_area("S-Box table", value=form.s_box_table_text, height=80,
                         help="Comma or space separated values. Example: 0xE, 4, 0xD, 1, ...")
pbox_text = st.text_area("P-Box permutation", value=form.p_box_table_text, height=80,
                         help="Bit positions after permutation (0-based or 1-based).")
layout_text = st.text_area(
    "Round layout (optional)", value=form.round_layout_text, height=80,
    help="One line per round. Separate S-Boxes with | and bits with commas. Example: 0,1,2,3 | 4,5,6,7",
)
final_perm = st.checkbox("Apply permutation after the last round", value=form.apply_final_permutation)

form = LayoutForm(
    block_size=block_size,
    s_box_size=sbox_size,
    number_of_rounds=rounds,
    s_box_table_text=sbox_text,
    p_box_table_text=pbox_text,
    apply_final_permutation=final_perm,
    round_layout_text=layout_text,
)
st.session_state["form"] = form

layout, errs = validate_form(form)

if errs:
    st.error("Configuration issues:\n- " + "\n- ".join(errs))
    st.info("Enter a valid configuration to render the network.")
    st.stop()

summary = LayoutSummary.from_layout(layout)
model = build_network(layout)

st.subheader("2) Cipher summary")
s1, s2 = st.columns(2)
with s1:
    st.write(f"**Block size:** {summary.block_size} bits")
    st.write(f"**Rounds:** {summary.number_of_rounds}")
    st.write(f"**S-Box size:** {summary.sbox_size} bits")
    st.write(f"**Permutation:** {summary.permutation_text}")
with s2:
    st.write("**S-Box table**")
    st.table(summary.sbox_rows)

st.subheader("3) Network model")
st.write(" → ".join(model.stage_ids()))
with st.expander("Stages", expanded=False):
    st.table([{"id": s.id, "label": s.label, "bits": ", ".join(map(str, s.bits))} for s in model.stages])
with st.expander("S-Box shapes", expanded=False):
    st.table([
        {"id": sh.id, "stage": sh.stage_id, "top": sh.top, "bottom": sh.bottom}
        for sh in model.sbox_shapes
    ])

st.subheader("4) Highlights")
sheet: HighlightSheet = st.session_state["highlight_sheet"]
if trace is not None:
    policy = HighlightPolicy(ignore_out_of_range_bits=not strict_bits)
    try:
        keys = highlight_layout(trace.per_round_active_bits, layout, model, policy)
    except ValueError as e:
        st.error(f"Failed to compute highlight bits: {e}")
    else:
        sheet.replace(render_highlight_rules(keys))
        for idx, bits in enumerate(trace.per_round_active_bits):
            st.text(f"Round {idx}: {', '.join(map(str, bits))}")

if sheet.rules:
    st.code(sheet.css, language="css")
else:
    st.write("No highlight bits detected yet.")

handoff = prepare_handoff(form, trace.per_round_active_bits if trace else [])
st.download_button(
    "Download visualizer handoff",
    data=handoff.to_json(),
    file_name="spn_handoff.json",
    mime="application/json",
)
