"""Alphabet table loading.

Reads alphabet tables from JSON files with validation and caching. A table is
a JSON array whose entries are either five-element arrays::

    ["a", null, 1, 0, 0]

or objects::

    {"symbol": "a", "legacy_pattern": null, "sort_base": 1,
     "accent_rank": 0, "case_value": 0}
"""

import json
import logging
import os
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Dict, List, Union

from .alphabet import Alphabet, as_alphabet
from .errors import InvalidAlphabetError

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "ALPHASORT_DATA_DIR"
DEFAULT_ALPHABET_ENV = "ALPHASORT_ALPHABET"
DEFAULT_ALPHABET = "demo"

_FIELDS = ("symbol", "legacy_pattern", "sort_base", "accent_rank", "case_value")


def default_alphabet_name() -> str:
    """Name of the alphabet used when none is given explicitly."""
    return os.getenv(DEFAULT_ALPHABET_ENV) or DEFAULT_ALPHABET


def _packaged_data_dir() -> Path:
    return Path(str(files("alphasort") / "data"))


def _search_dirs() -> List[Path]:
    dirs = []
    env_dir = os.getenv(DATA_DIR_ENV)
    if env_dir:
        dirs.append(Path(env_dir))
    dirs.append(_packaged_data_dir())
    return dirs


def _get_alphabet_path(name_or_path: Union[str, Path]) -> Path:
    """Resolve an alphabet name or file path.

    Lookup order:

    1. ``name_or_path`` itself, if it is an existing file and has a
       ``.json`` suffix or a directory part
    2. ``<name>.json`` in the directory named by ``ALPHASORT_DATA_DIR``
    3. ``<name>.json`` among the alphabets packaged with alphasort

    Args:
        name_or_path: Alphabet name such as ``"demo"`` or a path to a JSON file

    Returns:
        Path to the alphabet file

    Raises:
        FileNotFoundError: If nothing matches
    """
    candidate = Path(name_or_path)
    # A bare name such as "demo" is never read from the working directory
    looks_like_path = candidate.suffix == ".json" or str(name_or_path) != candidate.name
    if looks_like_path and candidate.is_file():
        return candidate

    filename = candidate.name if candidate.suffix == ".json" else f"{candidate.name}.json"
    for directory in _search_dirs():
        path = directory / filename
        if path.is_file():
            return path

    raise FileNotFoundError(f"Alphabet not found: {name_or_path}")


def _row_from_entry(entry, index: int) -> list:
    """Turn one JSON entry into a positional table row."""
    if isinstance(entry, list):
        return entry
    if isinstance(entry, dict):
        missing = [field for field in _FIELDS if field not in entry and field != "legacy_pattern"]
        if missing:
            raise InvalidAlphabetError(f"missing field(s): {', '.join(missing)}", index)
        return [entry.get(field) for field in _FIELDS]
    raise InvalidAlphabetError(
        f"entry must be an array or an object, got {type(entry).__name__}", index
    )


def parse_alphabet(data) -> Alphabet:
    """Build an alphabet from decoded JSON data.

    Raises:
        InvalidAlphabetError: If the data is not a list of valid rows
    """
    if not isinstance(data, list):
        raise InvalidAlphabetError(f"alphabet must be a list, got {type(data).__name__}")
    return as_alphabet(_row_from_entry(entry, i) for i, entry in enumerate(data))


@lru_cache(maxsize=16)
def _load_alphabet_cached(filepath_str: str, mtime: float) -> Alphabet:
    """Cached loader for an alphabet file.

    Args:
        filepath_str: String path to the alphabet file
        mtime: File modification time (for cache invalidation)

    Returns:
        The validated alphabet
    """
    filepath = Path(filepath_str)

    logger.info(f"Loading alphabet from {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidAlphabetError(f"Invalid JSON in {filepath}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidAlphabetError(f"Encoding error reading {filepath}: {e}") from e

    try:
        alphabet = parse_alphabet(data)
    except InvalidAlphabetError as e:
        raise InvalidAlphabetError(f"{filepath}: {e}") from e

    logger.info(f"Loaded {len(alphabet)} symbols")
    return alphabet


def load_alphabet(name_or_path: Union[str, Path, None] = None) -> Alphabet:
    """Load an alphabet table by name or path.

    Results are cached until the file's modification time changes.

    Args:
        name_or_path: Alphabet name or JSON file path. Defaults to
            ``ALPHASORT_ALPHABET`` or the bundled ``demo`` alphabet.

    Returns:
        The validated alphabet

    Raises:
        FileNotFoundError: If the alphabet cannot be found
        InvalidAlphabetError: If the file is not a valid alphabet table
    """
    if name_or_path is None:
        name_or_path = default_alphabet_name()

    filepath = _get_alphabet_path(name_or_path)
    mtime = os.path.getmtime(filepath)
    return _load_alphabet_cached(str(filepath.resolve()), mtime)


def list_alphabets() -> Dict[str, Path]:
    """Return available alphabet names mapped to their files.

    Alphabets in ``ALPHASORT_DATA_DIR`` shadow packaged ones of the same name.
    """
    found: Dict[str, Path] = {}
    for directory in _search_dirs():
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*.json")):
            found.setdefault(path.stem, path)
    return dict(sorted(found.items()))


def clear_cache() -> None:
    """Clear the alphabet cache.

    Useful for testing or when alphabet files are replaced externally.
    """
    _load_alphabet_cached.cache_clear()
    logger.info("Alphabet cache cleared")
