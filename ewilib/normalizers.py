"""
Normalizers
***********

Bring already validated values into the single form the wallets pass to their backends.
"""

import re
from typing import Optional

from .common import (
    HEX_PREFIX,
    PATH_DELIMITER,
    PATH_HEADER_KEY,
    PATH_SPLITTER,
)


def parse_leading_int(value: str) -> Optional[int]:
    """
    Parse the leading digits of a string, ignoring anything after them.

    e.g.: "60" -> 60, " 1x" -> 1, "x1" -> None
    """
    match = re.match(r"\s*([+-]?[0-9]+)", value)
    if match is None:
        return None
    return int(match.group(1))


def derivation_path_normalizer(derivation_path: str) -> str:
    """
    Remove whitespace around the path's parts and lowercase the header key.

    e.g.: " M/44'/ 60'/0'/0 / 1" -> "m/44'/60'/0'/0/1"
    """
    parts = []
    for part in derivation_path.strip().split(PATH_DELIMITER):
        parts.append(PATH_SPLITTER.join(piece.strip() for piece in part.split(PATH_SPLITTER)))
    if parts[0][:1].lower() == PATH_HEADER_KEY:
        parts[0] = PATH_HEADER_KEY + parts[0][1:]
    return PATH_DELIMITER.join(parts)


def hex_sequence_normalizer(hex_sequence: str, prefix: bool = True) -> str:
    """
    Add or remove the ``0x`` prefix of a hex string.

    :param hex_sequence: The hex string, with or without prefix
    :param prefix: Whether the result should be prefixed
    """
    value = hex_sequence[2:] if hex_sequence[:2].lower() == HEX_PREFIX else hex_sequence
    if prefix:
        return HEX_PREFIX + value
    return value


def address_normalizer(address: str, prefix: bool = True) -> str:
    """
    Add or remove the ``0x`` prefix of an address.
    """
    return hex_sequence_normalizer(address, prefix)


def multiple_of_two_hex_value_normalizer(hex_sequence: str) -> str:
    """
    Left pad an unprefixed hex string with a zero so it holds whole bytes.

    e.g.: "abc" -> "0abc"
    """
    value = hex_sequence_normalizer(hex_sequence, prefix=False)
    if len(value) % 2:
        return "0" + value
    return value
