import pytest

from spnlab.layout.errors import EmptyToken, InvalidNumberToken, SPNLayoutError
from spnlab.layout.numbers import parse_number_list, parse_number_token


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1, 2, 3", [1, 2, 3]),
        ("Ah", [10]),
        ("0xF, 2", [15, 2]),
        ("FFh 0x10 16", [255, 16, 16]),
        ("1;2 3\n4\t5", [1, 2, 3, 4, 5]),
        ("  , 5 ,; ", [5]),
        ("7 7 7", [7, 7, 7]),
        ("0XaB, 1eH", [0xAB, 0x1E]),
        ("-3, +4", [-3, 4]),
        ("007", [7]),
    ],
)
def test_parse_number_list(text, expected):
    assert parse_number_list(text) == expected


def test_blank_text_is_empty_list():
    assert parse_number_list("") == []
    assert parse_number_list("  \n ") == []


@pytest.mark.parametrize("token", ["12abc", "0x", "h", "1.5", "0xAh", "zz"])
def test_invalid_tokens(token):
    with pytest.raises(InvalidNumberToken, match="Unable to parse number token"):
        parse_number_list(f"1, {token}")


@pytest.mark.parametrize("token", ["", "   "])
def test_empty_token(token):
    with pytest.raises(EmptyToken):
        parse_number_token(token)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_number_token("nope")
    assert issubclass(EmptyToken, SPNLayoutError)
