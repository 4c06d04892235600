"""
Utilities
*********

The arbitrary precision integer type used for transaction amounts, and the randomness source used
for new key material.
"""

from decimal import Decimal
import secrets
from typing import Union

from eth_utils import from_wei, to_wei

from .errors import BadArgumentError


class BigNumber(int):
    """
    An arbitrary precision integer that is explicitly marked as an amount.

    Python integers do not lose precision, but they are also used for nonces and indexes which must stay
    below :data:`~ewilib.common.MAX_SAFE_INTEGER`.
    Values meant to be arbitrary precision are wrapped in this type so that
    :func:`~ewilib.validators.big_number_validator` can tell them apart.
    Arithmetic returns plain :class:`int`; wrap the result again with :func:`big_number` if needed.
    """

    def __repr__(self) -> str:
        return "BigNumber({})".format(int(self))

    def to_wei(self, unit: str = "ether") -> "BigNumber":
        """
        Interpret this number as an amount of ``unit`` and convert it to wei.
        """
        return BigNumber(to_wei(int(self), unit))

    def from_wei(self, unit: str = "ether") -> Union[int, Decimal]:
        """
        Interpret this number as an amount of wei and convert it to ``unit``.
        """
        return from_wei(int(self), unit)

    def to_gwei(self) -> Union[int, Decimal]:
        return self.from_wei("gwei")


def big_number(value: Union[int, str, bytes]) -> BigNumber:
    """
    Create a :class:`BigNumber`.

    :param value: An integer, a decimal string, a ``0x`` prefixed hex string, or big endian bytes
    :return: The wrapped number
    :raises: BadArgumentError: if the value cannot be converted
    """
    if isinstance(value, BigNumber):
        return value
    if isinstance(value, bool):
        raise BadArgumentError("Cannot create a big number from a boolean: {}".format(value))
    if isinstance(value, int):
        return BigNumber(value)
    if isinstance(value, (bytes, bytearray)):
        return BigNumber(int.from_bytes(value, byteorder="big"))
    if isinstance(value, str):
        try:
            if value.lower().startswith("0x"):
                return BigNumber(int(value, 16))
            return BigNumber(int(value, 10))
        except ValueError:
            pass
    raise BadArgumentError("Cannot create a big number from: {!r}".format(value))


def get_random_values(size: int) -> bytes:
    """
    Get cryptographically strong random bytes.

    :param size: The number of bytes
    :return: The random bytes
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise BadArgumentError("The number of random bytes must be a positive integer: {!r}".format(size))
    return secrets.token_bytes(size)
