"""Process-wide settings of fixed_money.

The only setting is the division precision: number of fractional digits kept by
`FixedDecimal.div` (and everything built on it) when a quotient does not divide exactly.

Writes are serialized with a lock, reads are not. A scoped override made with
`division_precision` is process-wide, not thread-local, so do not use it from
concurrent threads that expect different precisions.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Iterator

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DIVISION_PRECISION: int = 20
DIVISION_PRECISION_ENV_VAR: str = "FIXED_MONEY_DIVISION_PRECISION"

_division_precision: int = DEFAULT_DIVISION_PRECISION
_settings_lock = Lock()


def get_division_precision() -> int:
    """Return the number of fractional digits used by `div` when it does not divide exactly."""
    return _division_precision


def set_division_precision(precision: int) -> None:
    """Set the process-wide division precision.

    Args:
        precision: Non-negative number of fractional digits.

    Raises:
        ValueError: If $precision is not a non-negative int.
    """
    global _division_precision

    # Raise: precision must be a plain non-negative integer
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
        raise ValueError(f"Cannot call `set_division_precision` because $precision ({precision!r}) is not a non-negative int")

    with _settings_lock:
        previous = _division_precision
        _division_precision = precision

    if previous != precision:
        logger.info(f"Division precision changed from {previous} to {precision}")


@contextmanager
def division_precision(precision: int) -> Iterator[int]:
    """Temporarily override the division precision.

    Examples:
        >>> with division_precision(3):
        ...     str(FixedDecimal(2).div(FixedDecimal(3)))
        '0.667'
    """
    previous = get_division_precision()
    set_division_precision(precision)
    try:
        yield precision
    finally:
        set_division_precision(previous)


def load_settings(dotenv_path: str | Path | None = None) -> int:
    """Load settings from the environment (and an optional .env file).

    Values already present in the process environment win over the .env file.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches for one.

    Returns:
        Division precision in effect after loading.

    Raises:
        ValueError: If the environment variable is set but is not a non-negative integer.
    """
    load_dotenv(dotenv_path)

    raw_value = os.environ.get(DIVISION_PRECISION_ENV_VAR)
    if raw_value is None or not raw_value.strip():
        return get_division_precision()

    try:
        precision = int(raw_value.strip())
    except ValueError as e:
        raise ValueError(f"Cannot call `load_settings` because ${DIVISION_PRECISION_ENV_VAR} ('{raw_value}') is not an integer") from e

    set_division_precision(precision)
    return precision
