import importlib.util
from pathlib import Path

import pytest

from spnlab.config import Settings

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "spn_layout.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("spn_layout_cli", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.parametrize("default", [False, True])
def test_reverse_nibbles_follows_settings(cli, default):
    args = cli.build_parser(Settings(reverse_nibbles=default)).parse_args([])
    assert args.reverse_nibbles is default


def test_no_reverse_nibbles_overrides_enabled_default(cli):
    args = cli.build_parser(Settings(reverse_nibbles=True)).parse_args(["--no-reverse-nibbles"])
    assert args.reverse_nibbles is False


def test_reverse_nibbles_flag(cli):
    args = cli.build_parser(Settings()).parse_args(["--reverse-nibbles"])
    assert args.reverse_nibbles is True


def test_main_reports_oversized_sbox(cli, capsys):
    code = cli.main([
        "--block-size", "8", "--sbox-size", "20000", "--rounds", "2",
        "--sbox", "1 2 3", "--pbox", "1 0 3 2 5 4 7 6",
    ])
    assert code == 1
    assert "S-Box size must be at most 16 bits" in capsys.readouterr().err


def test_main_prints_summary_for_valid_form(cli, capsys):
    code = cli.main([
        "--block-size", "8", "--sbox-size", "4", "--rounds", "2",
        "--sbox", "14 4 13 1 2 15 11 8 3 10 6 12 5 9 0 7", "--pbox", "1 0 3 2 5 4 7 6",
    ])
    assert code == 0
    assert "input -> substitution-0" in capsys.readouterr().out
