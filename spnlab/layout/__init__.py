"""Layout modelling: parsing, validation and the stage/wire network model."""

from .errors import (
    SPNLayoutError,
    InvalidNumberToken,
    EmptyToken,
    SizeMismatch,
    OutOfRange,
    DuplicatePosition,
    NotBijective,
    IndivisibleBlock,
    MalformedRoundLayout,
    MissingOrDuplicateBits,
    RoundLayoutErrors,
)
from .numbers import parse_number_list, parse_number_token
from .permutation import (
    apply_permutation,
    generate_sequential_rounds,
    invert_permutation,
    normalize_permutation,
    sanitize_layout,
)
from .spec import CipherLayout, LayoutForm, RoundLayout, RoundSBox, SBoxDefinition
from .validator import parse_round_layouts, validate_form
from .network import Connection, NetworkModel, SBoxShape, Stage, build_network, connection_key
from .summary import LayoutSummary, format_sbox_table

__all__ = [
    "SPNLayoutError",
    "InvalidNumberToken",
    "EmptyToken",
    "SizeMismatch",
    "OutOfRange",
    "DuplicatePosition",
    "NotBijective",
    "IndivisibleBlock",
    "MalformedRoundLayout",
    "MissingOrDuplicateBits",
    "RoundLayoutErrors",
    "parse_number_list",
    "parse_number_token",
    "apply_permutation",
    "generate_sequential_rounds",
    "invert_permutation",
    "normalize_permutation",
    "sanitize_layout",
    "CipherLayout",
    "LayoutForm",
    "RoundLayout",
    "RoundSBox",
    "SBoxDefinition",
    "parse_round_layouts",
    "validate_form",
    "Connection",
    "NetworkModel",
    "SBoxShape",
    "Stage",
    "build_network",
    "connection_key",
    "LayoutSummary",
    "format_sbox_table",
]
