"""Free-form integer list parsing (decimal, 0x-prefixed hex, h-suffixed hex)."""
from __future__ import annotations

import re
from typing import List

from .errors import EmptyToken, InvalidNumberToken

_SEPARATORS = re.compile(r"[\s,;]+")
_HEX_SUFFIX = re.compile(r"^([+-]?)([0-9a-f]+)h$")
_HEX_PREFIX = re.compile(r"^([+-]?)0x([0-9a-f]+)$")
_DECIMAL = re.compile(r"^[+-]?[0-9]+$")


def parse_number_token(token: str) -> int:
    """Parse one token; ``Ah`` and ``0xA`` are both 10."""
    if not token or not token.strip():
        raise EmptyToken("Encountered empty numeric token")

    normalized = token.strip().lower()

    m = _HEX_SUFFIX.match(normalized) or _HEX_PREFIX.match(normalized)
    if m:
        sign, digits = m.groups()
        value = int(digits, 16)
        return -value if sign == "-" else value

    if _DECIMAL.match(normalized):
        return int(normalized, 10)

    raise InvalidNumberToken(f'Unable to parse number token "{token}"')


def parse_number_list(text: str) -> List[int]:
    tokens = [t.strip() for t in _SEPARATORS.split(text.strip())]
    return [parse_number_token(t) for t in tokens if t]


def is_decimal(text: str) -> bool:
    """True for an optionally signed run of ASCII digits."""
    return bool(_DECIMAL.match(text.strip()))
