import pytest

from spnlab.layout.errors import InvalidCharacter, NoColumns, TraceParseError, UnevenLineLengths
from spnlab.trace.collector import PrintStateCollector, strip_ansi
from spnlab.trace.parser import decode_state_line, parse_trace


# ---------------------------------------------------------------------------
# parse_trace
# ---------------------------------------------------------------------------

def test_one_nibble_per_character():
    result = parse_trace(["1000", "0001"])
    assert result.per_round_active_bits == [[0], [12]]
    assert result.inferred_block_size == 16
    assert [f.round_index for f in result.frames] == [0, 1]


def test_masked_columns_are_dropped_from_every_line():
    result = parse_trace(["-x-1", "-x-2"])
    # Remaining "--1" / "--2": three nibbles
    assert result.per_round_active_bits == [[8], [9]]
    assert result.inferred_block_size == 12


def test_mask_in_one_line_applies_to_all():
    result = parse_trace(["1x", "23"])
    assert result.per_round_active_bits == [[0], [1]]
    assert result.inferred_block_size == 4


def test_mask_is_case_insensitive():
    with pytest.raises(NoColumns):
        parse_trace(["x1", "2X"])


@pytest.mark.parametrize(
    "ch,bits",
    [("-", []), ("0", []), ("1", [0]), ("A", [1, 3]), ("f", [0, 1, 2, 3])],
)
def test_nibble_decoding(ch, bits):
    assert parse_trace([ch]).per_round_active_bits == [bits]


def test_reverse_nibbles():
    assert parse_trace(["1---"]).per_round_active_bits == [[0]]
    assert parse_trace(["1---"], reverse_nibbles=True).per_round_active_bits == [[12]]


def test_decode_state_line():
    assert decode_state_line(list("3-8")) == frozenset({0, 1, 11})


def test_lines_are_trimmed():
    result = parse_trace(["  12 ", "34"])
    assert result.inferred_block_size == 8


def test_empty_trace():
    result = parse_trace([])
    assert result.frames == []
    assert result.inferred_block_size == 0


def test_uneven_lines():
    with pytest.raises(UnevenLineLengths):
        parse_trace(["123", "12"])


def test_invalid_character():
    with pytest.raises(InvalidCharacter):
        parse_trace(["12g4"])


def test_all_empty_lines():
    with pytest.raises(NoColumns):
        parse_trace(["", "  "])


def test_trace_errors_share_a_base():
    for exc in (UnevenLineLengths, InvalidCharacter, NoColumns):
        assert issubclass(exc, TraceParseError)


def test_to_dict():
    assert parse_trace(["8-"]).to_dict() == {"highlights": [[3]], "inferred_block_size": 8}


# ---------------------------------------------------------------------------
# PrintStateCollector
# ---------------------------------------------------------------------------

def test_collector_yields_completed_blocks():
    c = PrintStateCollector()
    assert c.feed("noise\n### print-state begin\n\x1b[31m12\x1b[0m\n") == []
    assert c.feed("  34 \n### print-state end\nmore") == [["12", "34"]]
    assert c.buffer == "more"
    assert c.collecting is False


def test_collector_handles_split_lines():
    c = PrintStateCollector()
    assert c.feed("### print-st") == []
    assert c.feed("ate begin\r\nab") == []
    assert c.feed("cd\r\n### print-state end\n") == [["abcd"]]


def test_collector_multiple_blocks_in_one_chunk():
    c = PrintStateCollector()
    chunk = "### print-state begin\n1\n### print-state end\n### print-state begin\n2\n### print-state end\n"
    assert c.feed(chunk) == [["1"], ["2"]]


def test_collector_custom_markers():
    c = PrintStateCollector(begin_marker="<<", end_marker=">>")
    assert c.feed("<<\nff\n>>\n") == [["ff"]]


def test_strip_ansi():
    assert strip_ansi("\x1b[1;32mok\x1b[0m") == "ok"
