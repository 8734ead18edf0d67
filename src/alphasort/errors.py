"""Exceptions raised by alphasort.

Every error here signals malformed input text or a malformed alphabet table.
None of them are transient, so callers should not retry.
"""

from typing import Optional, Sequence


class AlphabetError(ValueError):
    """Base class of all exceptions raised intentionally by alphasort."""


class InvalidAlphabetError(AlphabetError):
    """Raised when an alphabet table row is malformed."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"Row {index}: {message}"
        super().__init__(message)


class UnknownSymbolError(AlphabetError):
    """Raised when text contains a character or symbol the alphabet lacks."""

    def __init__(self, symbol: str, text: Optional[str] = None):
        self.symbol = symbol
        self.text = text
        if text is None:
            message = f'Unknown symbol: "{symbol}"'
        else:
            message = f'Unknown symbol "{symbol}" in "{text}"'
        super().__init__(message)


class UnmappedCaseError(AlphabetError):
    """Raised when no symbol exists in the requested case."""

    def __init__(self, symbol: str, target_case: int):
        self.symbol = symbol
        self.target_case = target_case
        super().__init__(
            f'No matching character found for "{symbol}" (case {target_case})'
        )


class AmbiguousCaseError(AlphabetError):
    """Raised when more than one symbol exists in the requested case."""

    def __init__(self, symbol: str, target_case: int, candidates: Sequence[str]):
        self.symbol = symbol
        self.target_case = target_case
        self.candidates = tuple(candidates)
        listed = ", ".join(f'"{c}"' for c in self.candidates)
        super().__init__(
            f'Multiple matching characters found for "{symbol}" '
            f"(case {target_case}): {listed}"
        )


class NoUnaccentedFormError(AlphabetError):
    """Raised when an accented symbol has no unaccented sibling."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f'No matching symbol without accents for "{symbol}"')


class AmbiguousUnaccentedFormError(AlphabetError):
    """Raised when an accented symbol has more than one unaccented sibling."""

    def __init__(self, symbol: str, candidates: Sequence[str]):
        self.symbol = symbol
        self.candidates = tuple(candidates)
        listed = ", ".join(f'"{c}"' for c in self.candidates)
        super().__init__(
            f'Multiple matching symbols without accents for "{symbol}": {listed}'
        )
