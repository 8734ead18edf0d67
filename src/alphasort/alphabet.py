"""Alphabet-table interpreter.

An alphabet is an ordered table of symbol definitions. Each row names a
symbol (possibly several characters long), an optional legacy "winmac"
pattern, a primary sort rank, an accent rank and a case value. Everything
here is a pure function of the table and the input text:

* ``split_symbols`` tokenizes text with a greedy longest match.
* ``sort_value`` builds an opaque key that sorts in alphabet order.
* ``set_case`` / ``to_upper_case`` / ``to_lower_case`` recase text.
* ``strip_accents`` maps accented symbols to their base form.
* ``replace_winmac`` rewrites legacy byte sequences to canonical symbols.
"""

import logging
import re
from functools import lru_cache, partial
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .errors import (
    AmbiguousCaseError,
    AmbiguousUnaccentedFormError,
    InvalidAlphabetError,
    NoUnaccentedFormError,
    UnknownSymbolError,
    UnmappedCaseError,
)

logger = logging.getLogger(__name__)

LOWER = 0
UPPER = 1
NEUTRAL = -1

SORT_BASE_WIDTH = 2
MAX_SORT_BASE = 10 ** SORT_BASE_WIDTH - 1

_CASE_NAMES = {LOWER: "lowercase", UPPER: "uppercase", NEUTRAL: "case-neutral"}


class SymbolDefinition(NamedTuple):
    """One row of an alphabet table."""

    symbol: str
    legacy_pattern: Optional[str]
    sort_base: int
    accent_rank: int
    case_value: int


Alphabet = Tuple[SymbolDefinition, ...]
AlphabetLike = Union[Alphabet, Iterable[Sequence]]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _make_definition(row: Sequence, index: Optional[int]) -> SymbolDefinition:
    """Validate a raw table row and build a SymbolDefinition from it.

    Args:
        row: Five-element row ``[symbol, legacy_pattern, sort_base,
            accent_rank, case_value]``
        index: Position of the row in the table, used in error messages

    Returns:
        The validated definition

    Raises:
        InvalidAlphabetError: If any field has the wrong type or range
    """
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise InvalidAlphabetError(f"row must be a sequence, got {type(row).__name__}", index)
    if len(row) != 5:
        raise InvalidAlphabetError(f"row must have 5 fields, got {len(row)}", index)

    symbol, pattern, sort_base, accent_rank, case_value = row

    if not isinstance(symbol, str) or not symbol:
        raise InvalidAlphabetError("symbol must be a non-empty string", index)

    # An empty pattern means "no legacy encoding"
    if not pattern:
        pattern = None
    elif not isinstance(pattern, str):
        raise InvalidAlphabetError("legacy pattern must be a string or null", index)
    else:
        try:
            re.compile(pattern)
        except re.error as e:
            raise InvalidAlphabetError(
                f"invalid legacy pattern {pattern!r} for \"{symbol}\": {e}", index
            ) from e

    if not _is_int(sort_base) or not 0 <= sort_base <= MAX_SORT_BASE:
        raise InvalidAlphabetError(
            f"sort base for \"{symbol}\" must be an integer in [0, {MAX_SORT_BASE}]",
            index,
        )
    if not _is_int(accent_rank):
        raise InvalidAlphabetError(f"accent rank for \"{symbol}\" must be an integer", index)
    if not _is_int(case_value) or case_value not in _CASE_NAMES:
        raise InvalidAlphabetError(
            f"case value for \"{symbol}\" must be one of -1, 0, 1", index
        )

    return SymbolDefinition(symbol, pattern, sort_base, accent_rank, case_value)


def as_alphabet(rows: AlphabetLike) -> Alphabet:
    """Build an immutable alphabet from table rows.

    Rows may be lists, tuples or SymbolDefinition instances. A value that is
    already a tuple of SymbolDefinition is returned unchanged.

    Args:
        rows: Iterable of five-element rows

    Returns:
        Tuple of validated SymbolDefinition records, in table order

    Raises:
        InvalidAlphabetError: If a row is malformed
    """
    if isinstance(rows, tuple) and all(isinstance(r, SymbolDefinition) for r in rows):
        return rows

    alphabet = tuple(_make_definition(row, i) for i, row in enumerate(rows))
    logger.debug("Built alphabet of %d symbols", len(alphabet))
    return alphabet


def get_symbols(alphabet: AlphabetLike) -> List[str]:
    """Return the symbols of an alphabet in table order."""
    return [definition.symbol for definition in as_alphabet(alphabet)]


@lru_cache(maxsize=64)
def _prefix_index(symbols: Tuple[str, ...]) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Return (every non-empty prefix of every symbol, the symbols themselves)."""
    prefixes = set()
    for symbol in symbols:
        for end in range(1, len(symbol) + 1):
            prefixes.add(symbol[:end])
    return frozenset(prefixes), frozenset(symbols)


def split_symbols(alphabet: AlphabetLike, text: str) -> List[str]:
    """Split a string into alphabet symbols, longest match first.

    The scan keeps a buffer that grows while it is still the start of some
    symbol. When the next character cannot extend it, the buffer is emitted
    and the character starts a new buffer. There is no backtracking, so a
    buffer that cannot be extended must already be a complete symbol.

    Args:
        alphabet: Alphabet table
        text: Text to tokenize

    Returns:
        Tokens whose concatenation is exactly ``text``

    Raises:
        UnknownSymbolError: If a character cannot start a symbol, or the scan
            stops on a prefix that is not itself a symbol
    """
    alphabet = as_alphabet(alphabet)
    prefixes, complete = _prefix_index(tuple(get_symbols(alphabet)))

    tokens: List[str] = []
    buffer = ""

    def flush() -> None:
        if buffer not in complete:
            raise UnknownSymbolError(buffer, text)
        tokens.append(buffer)

    for ch in text:
        if buffer + ch in prefixes:
            buffer += ch
            continue
        if buffer:
            flush()
        if ch not in prefixes:
            raise UnknownSymbolError(ch, text)
        buffer = ch

    if buffer:
        flush()
    return tokens


def zero_pad(min_length: int, value) -> str:
    """Left-pad ``value`` with zeros to at least ``min_length`` characters.

    Longer values are returned unaltered.
    """
    return str(value).rjust(min_length, "0")


def get_symbol_info(alphabet: AlphabetLike, symbol: str) -> SymbolDefinition:
    """Return the first definition of ``symbol`` in table order.

    Raises:
        UnknownSymbolError: If the alphabet has no such symbol
    """
    for definition in as_alphabet(alphabet):
        if definition.symbol == symbol:
            return definition
    raise UnknownSymbolError(symbol)


def get_sort_base(alphabet: AlphabetLike, symbol: str) -> int:
    """Return the primary sort rank of ``symbol``."""
    return get_symbol_info(alphabet, symbol).sort_base


def sort_value(alphabet: AlphabetLike, text: str) -> str:
    """Create a key that sorts according to the rules of the alphabet.

    Each symbol contributes its sort base as two zero-padded digits. Plain
    string comparison of two keys follows the alphabet's collation. The key
    cannot be turned back into the original text, so it is only useful as an
    index or sort key.

    Args:
        alphabet: Alphabet table
        text: Text to build a key for

    Returns:
        Digit string, two characters per symbol
    """
    alphabet = as_alphabet(alphabet)
    return "".join(
        zero_pad(SORT_BASE_WIDTH, get_sort_base(alphabet, symbol))
        for symbol in split_symbols(alphabet, text)
    )


def sort_key(alphabet: AlphabetLike) -> Callable[[str], str]:
    """Return a ``key=`` function for ``sorted`` bound to ``alphabet``."""
    return partial(sort_value, as_alphabet(alphabet))


def sorted_by_alphabet(alphabet: AlphabetLike, words: Iterable[str]) -> List[str]:
    """Sort ``words`` in alphabet order. Ties keep their input order."""
    return sorted(words, key=sort_key(alphabet))


def replace_winmac(alphabet: AlphabetLike, text: str) -> str:
    """Replace legacy "winmac" sequences with the proper alphabet symbols.

    Patterns are applied one after another in table order, each to the output
    of the previous one, so overlapping patterns resolve as the table author
    ordered them.
    """
    for definition in as_alphabet(alphabet):
        if definition.legacy_pattern:
            # Substitute literally; symbols are never treated as templates
            text = re.sub(
                definition.legacy_pattern,
                lambda _match, s=definition.symbol: s,
                text,
                flags=re.MULTILINE,
            )
    return text


def _case_candidates(
    alphabet: Alphabet, definition: SymbolDefinition, target_case: int
) -> List[str]:
    return [
        other.symbol
        for other in alphabet
        if other.sort_base == definition.sort_base
        and other.accent_rank == definition.accent_rank
        and other.case_value in (target_case, NEUTRAL)
    ]


def set_case(alphabet: AlphabetLike, text: str, target_case: int) -> str:
    """Convert every symbol in ``text`` to the requested case.

    A symbol is converted to the row sharing its sort base and accent rank
    with the target case value. Case-neutral rows match either case, so
    symbols without case pass through unchanged.

    Args:
        alphabet: Alphabet table
        text: Text to convert
        target_case: ``UPPER`` (1) or ``LOWER`` (0)

    Returns:
        Recased text

    Raises:
        ValueError: If ``target_case`` is not 0 or 1
        UnknownSymbolError: If ``text`` has symbols outside the alphabet
        UnmappedCaseError: If a symbol has no form in the target case
        AmbiguousCaseError: If a symbol has several forms in the target case
    """
    if not _is_int(target_case) or target_case not in (LOWER, UPPER):
        raise ValueError(f"target case must be 0 or 1, got {target_case!r}")

    alphabet = as_alphabet(alphabet)
    result = []
    for symbol in split_symbols(alphabet, text):
        candidates = _case_candidates(
            alphabet, get_symbol_info(alphabet, symbol), target_case
        )
        if not candidates:
            raise UnmappedCaseError(symbol, target_case)
        if len(candidates) > 1:
            raise AmbiguousCaseError(symbol, target_case, candidates)
        result.append(candidates[0])
    return "".join(result)


def to_upper_case(alphabet: AlphabetLike, text: str) -> str:
    """Convert every symbol in ``text`` to uppercase."""
    return set_case(alphabet, text, UPPER)


def to_lower_case(alphabet: AlphabetLike, text: str) -> str:
    """Convert every symbol in ``text`` to lowercase."""
    return set_case(alphabet, text, LOWER)


def remove_symbol_accent(
    alphabet: AlphabetLike, definition: Union[SymbolDefinition, Sequence]
) -> str:
    """Return the unaccented form of a symbol, keeping its case.

    Raises:
        NoUnaccentedFormError: If the table has no unaccented sibling
        AmbiguousUnaccentedFormError: If the table has several
    """
    if not isinstance(definition, SymbolDefinition):
        definition = _make_definition(definition, None)
    if definition.accent_rank == 0:
        return definition.symbol

    candidates = [
        other.symbol
        for other in as_alphabet(alphabet)
        if other.sort_base == definition.sort_base
        and other.accent_rank == 0
        and other.case_value == definition.case_value
    ]
    if not candidates:
        raise NoUnaccentedFormError(definition.symbol)
    if len(candidates) > 1:
        raise AmbiguousUnaccentedFormError(definition.symbol, candidates)
    return candidates[0]


def strip_accents(alphabet: AlphabetLike, text: str) -> str:
    """Remove accents from every alphabet symbol in ``text``."""
    alphabet = as_alphabet(alphabet)
    return "".join(
        remove_symbol_accent(alphabet, get_symbol_info(alphabet, symbol))
        for symbol in split_symbols(alphabet, text)
    )


def audit_alphabet(alphabet: AlphabetLike) -> List[str]:
    """Check a table for rows that would make lookups fail.

    Reports duplicate symbols, missing or ambiguous case pairs, accented
    symbols without a base form, and multi-character symbols whose shorter
    prefixes are not symbols (the tokenizer cannot back out of those).

    Args:
        alphabet: Alphabet table

    Returns:
        Human-readable problems, empty when the table is consistent
    """
    alphabet = as_alphabet(alphabet)
    problems: List[str] = []
    _, complete = _prefix_index(tuple(get_symbols(alphabet)))

    first_row: Dict[str, int] = {}
    for i, definition in enumerate(alphabet):
        if definition.symbol in first_row:
            problems.append(
                f'Row {i}: duplicate symbol "{definition.symbol}" '
                f"(first defined at row {first_row[definition.symbol]})"
            )
        else:
            first_row[definition.symbol] = i

    reported = set()
    for definition in alphabet:
        for target_case in (LOWER, UPPER):
            key = (definition.sort_base, definition.accent_rank, target_case)
            if key in reported:
                continue
            candidates = _case_candidates(alphabet, definition, target_case)
            if len(candidates) == 1:
                continue
            reported.add(key)
            name = _CASE_NAMES[target_case]
            if not candidates:
                problems.append(f'No {name} form for "{definition.symbol}"')
            else:
                listed = ", ".join(f'"{c}"' for c in candidates)
                problems.append(
                    f'Ambiguous {name} form for "{definition.symbol}": {listed}'
                )

    for definition in alphabet:
        try:
            remove_symbol_accent(alphabet, definition)
        except (NoUnaccentedFormError, AmbiguousUnaccentedFormError) as e:
            problems.append(str(e))

    dead_ends = set()
    for symbol in first_row:
        for end in range(1, len(symbol)):
            prefix = symbol[:end]
            if prefix not in complete and prefix not in dead_ends:
                dead_ends.add(prefix)
                problems.append(
                    f'Dead-end prefix "{prefix}" of "{symbol}" is not a symbol'
                )

    if problems:
        logger.debug("Alphabet audit found %d problem(s)", len(problems))
    return problems
