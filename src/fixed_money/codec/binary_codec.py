"""Binary layout of Money.

    bytes [0:3)   currency code, 3 ASCII characters
    bytes [3:7)   exponent, signed 32-bit big-endian
    bytes [7:11)  length N of the coefficient blob, unsigned 32-bit big-endian
    bytes [11:)   coefficient, N bytes of big-endian two's complement

Currency codes must be exactly 3 ASCII characters; longer codes cannot be encoded.
"""
from __future__ import annotations

import logging
import struct

from fixed_money.domain.monetary.currency_registry import DEFAULT_REGISTRY, CurrencyRegistry
from fixed_money.domain.monetary.money import Money
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal
from fixed_money.exceptions import InsufficientDataError, MalformedPayloadError

logger = logging.getLogger(__name__)

CODE_SIZE = 3
_HEADER = struct.Struct(">3si")
_BLOB_LENGTH = struct.Struct(">I")

# Anything shorter cannot even hold the header plus one byte of payload
MIN_PAYLOAD_SIZE = 8


def _coefficient_to_bytes(coefficient: int) -> bytes:
    # One spare bit for the sign; zero still takes one byte
    size = (coefficient.bit_length() + 8) // 8
    return coefficient.to_bytes(size, byteorder="big", signed=True)


def encode_money(money: Money) -> bytes:
    """Encode $money into the binary layout.

    Raises:
        ValueError: If the currency code is not exactly 3 ASCII characters.
    """
    code = money.currency.code
    try:
        code_bytes = code.encode("ascii")
    except UnicodeEncodeError as e:
        raise ValueError(f"Cannot call `encode_money` because currency code '{code}' is not ASCII") from e

    # Raise: the layout has a fixed-size code field
    if len(code_bytes) != CODE_SIZE:
        raise ValueError(f"Cannot call `encode_money` because currency code '{code}' is not {CODE_SIZE} characters long")

    blob = _coefficient_to_bytes(money.coefficient)
    return _HEADER.pack(code_bytes, money.exponent) + _BLOB_LENGTH.pack(len(blob)) + blob


def decode_money(data: bytes, registry: CurrencyRegistry | None = None) -> Money:
    """Decode Money from the binary layout.

    A currency code missing from $registry does not fail the decode; default metadata keyed by
    that code is used instead (see `Currency.default_for`).

    Raises:
        InsufficientDataError: If $data is shorter than 8 bytes.
        MalformedPayloadError: If the coefficient blob is truncated or has trailing bytes.
    """
    data = bytes(data)

    # Raise: not enough data for the header
    if len(data) < MIN_PAYLOAD_SIZE:
        raise InsufficientDataError(f"Not enough data - only found [{len(data)}] bytes", fallback=Money.zero())

    code_bytes, exponent = _HEADER.unpack_from(data, 0)
    offset = _HEADER.size

    # Raise: blob length prefix must be complete and match the rest of the payload
    if len(data) < offset + _BLOB_LENGTH.size:
        raise MalformedPayloadError(f"Cannot decode Money because the coefficient length is truncated ({len(data)} bytes)", fallback=Money.zero())
    (blob_length,) = _BLOB_LENGTH.unpack_from(data, offset)
    offset += _BLOB_LENGTH.size
    blob = data[offset:]
    if blob_length == 0 or len(blob) != blob_length:
        raise MalformedPayloadError(f"Cannot decode Money because the coefficient blob has {len(blob)} bytes, expected {blob_length}", fallback=Money.zero())

    code = code_bytes.decode("ascii", errors="replace")
    currency = (registry or DEFAULT_REGISTRY).lookup(code)
    coefficient = int.from_bytes(blob, byteorder="big", signed=True)

    return Money(FixedDecimal(coefficient, exponent), currency)
