import pytest

from spnlab.config import load_settings
from spnlab.trace.highlight import ConnectionStyle, HighlightPolicy


@pytest.fixture
def fresh_settings(monkeypatch):
    for name in (
        "SPNLAB_IGNORE_OUT_OF_RANGE_BITS",
        "SPNLAB_HIGHLIGHT_STROKE",
        "SPNLAB_REVERSE_NIBBLES",
        "SPNLAB_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield monkeypatch
    load_settings.cache_clear()


def test_defaults(fresh_settings):
    s = load_settings()
    assert s.reverse_nibbles is False
    assert s.ignore_out_of_range_bits is True
    assert s.print_state_begin == "### print-state begin"
    assert s.log_level == "INFO"


def test_environment_overrides(fresh_settings):
    fresh_settings.setenv("SPNLAB_IGNORE_OUT_OF_RANGE_BITS", "no")
    fresh_settings.setenv("SPNLAB_HIGHLIGHT_STROKE", "#000")
    fresh_settings.setenv("SPNLAB_REVERSE_NIBBLES", "yes")
    fresh_settings.setenv("SPNLAB_LOG_LEVEL", "debug")

    assert HighlightPolicy.from_settings().ignore_out_of_range_bits is False
    assert ConnectionStyle.highlight().stroke == "#000"
    assert load_settings().reverse_nibbles is True
    assert load_settings().log_level == "DEBUG"
