"""Alphabet-aware text normalization.

A Python library for tokenizing, sorting, recasing and stripping accents from
text written in custom or historical orthographies, driven by an alphabet
table.
"""

__version__ = "0.1.0"

from .alphabet import (
    LOWER,
    NEUTRAL,
    UPPER,
    Alphabet,
    SymbolDefinition,
    as_alphabet,
    audit_alphabet,
    get_sort_base,
    get_symbol_info,
    get_symbols,
    remove_symbol_accent,
    replace_winmac,
    set_case,
    sort_key,
    sort_value,
    sorted_by_alphabet,
    split_symbols,
    strip_accents,
    to_lower_case,
    to_upper_case,
    zero_pad,
)
from .data_loader import clear_cache, list_alphabets, load_alphabet
from .errors import (
    AlphabetError,
    AmbiguousCaseError,
    AmbiguousUnaccentedFormError,
    InvalidAlphabetError,
    NoUnaccentedFormError,
    UnknownSymbolError,
    UnmappedCaseError,
)

__all__ = [
    "Alphabet",
    "SymbolDefinition",
    "LOWER",
    "UPPER",
    "NEUTRAL",
    "as_alphabet",
    "audit_alphabet",
    "get_symbols",
    "split_symbols",
    "zero_pad",
    "get_symbol_info",
    "get_sort_base",
    "sort_value",
    "sort_key",
    "sorted_by_alphabet",
    "replace_winmac",
    "set_case",
    "to_upper_case",
    "to_lower_case",
    "remove_symbol_accent",
    "strip_accents",
    "load_alphabet",
    "list_alphabets",
    "clear_cache",
    "AlphabetError",
    "InvalidAlphabetError",
    "UnknownSymbolError",
    "UnmappedCaseError",
    "AmbiguousCaseError",
    "AmbiguousUnaccentedFormError",
    "NoUnaccentedFormError",
    "__version__",
]
