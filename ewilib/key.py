#!/usr/bin/env python3
# Copyright (c) 2020 The EWI developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Derivation Paths
****************

Classes and utilities for working with Ethereum BIP 44 derivation paths.
"""

from dataclasses import dataclass, replace
from typing import (
    List,
    Optional,
)

from .common import (
    Chain,
    PATH_ACCOUNT,
    PATH_CHANGE,
    PATH_COIN_MAINNET,
    PATH_DELIMITER,
    PATH_HARDENED,
    PATH_HEADER_KEY,
    PATH_PURPOSE,
    PATH_SPLITTER,
)
from ._validation import Reason
from .errors import (
    FormatError,
    RangeError,
)
from .normalizers import (
    derivation_path_normalizer,
    parse_leading_int,
)
from .validators import derivation_path_validator


HARDENED_FLAG = 1 << 31


def H_(x: int) -> int:
    """
    Shortcut function that "hardens" a number in a BIP44 path.
    """
    return x | HARDENED_FLAG

def is_hardened(i: int) -> bool:
    """
    Returns whether an index is hardened
    """
    return i & HARDENED_FLAG != 0


def parse_path(nstr: str) -> List[int]:
    """
    Convert BIP32 path string to list of uint32 integers with hardened flags.
    Several conventions are supported to set the hardened flag: -1, 1', 1h

    e.g.: "44'/60'/0'/0/1" -> [0x8000002c, 0x8000003c, 0x80000000, 0, 1]

    :param nstr: path string
    :return: list of integers
    """
    if not nstr:
        return []

    n = nstr.split("/")

    # m/a/b/c => a/b/c
    if n[0].lower() == "m":
        n = n[1:]

    def str_to_harden(x: str) -> int:
        if x.startswith("-"):
            i = abs(int(x))
            hardened = True
        elif x.endswith(("h", "H", "'")):
            i = int(x[:-1])
            hardened = True
        else:
            i = int(x)
            hardened = False
        if not 0 <= i < HARDENED_FLAG:
            raise ValueError("Path element out of range", x)
        return H_(i) if hardened else i

    try:
        return [str_to_harden(x) for x in n]
    except Exception:
        raise ValueError("Invalid BIP32 path", nstr)


@dataclass(frozen=True)
class DerivationPath(object):
    """
    An Ethereum BIP 44 derivation path: ``m/44'/<coin_type>'/<account>'/<change>[/<index>]``.

    The purpose, coin type and account are hardened, the change and index are not.
    Instances are immutable, use :meth:`child` to get the path of another address.
    Every level must fit in 31 bits, the hardened flag being the 32nd.

    :raises: RangeError: if a level is negative or does not fit in 31 bits
    """
    coin_type: int = PATH_COIN_MAINNET
    account: int = PATH_ACCOUNT
    change: int = PATH_CHANGE
    index: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("coin_type", "account", "change", "index"):
            value = getattr(self, name)
            if value is not None and not 0 <= value < HARDENED_FLAG:
                raise RangeError(
                    "Derivation path {} must be between 0 and {}, got {}".format(name, HARDENED_FLAG - 1, value),
                    Reason.INDEX_OUT_OF_RANGE,
                )

    @classmethod
    def from_string(cls, path: str) -> 'DerivationPath':
        """
        Validate and parse a derivation path string

        :param path: The derivation path, e.g. ``m/44'/60'/0'/0/0``
        :raises: FormatError: if the path is not a valid Ethereum derivation path
        :raises: RangeError: if the account, change or index does not fit in 31 bits
        """
        if isinstance(path, str):
            path = derivation_path_normalizer(path)
        derivation_path_validator(path)
        parts = path.split(PATH_DELIMITER)
        change_index = [int(x) for x in parts[3].split(PATH_SPLITTER)]
        coin_type = parse_leading_int(parts[1])
        if coin_type is None:
            raise FormatError("Invalid coin type in derivation path {}".format(path), Reason.BAD_COIN_TYPE)
        return cls(
            coin_type=coin_type,
            account=int(parts[2]),
            change=change_index[0],
            index=change_index[1] if len(change_index) > 1 else None,
        )

    @classmethod
    def default(cls, chain: Chain = Chain.MAIN, account: int = PATH_ACCOUNT, index: Optional[int] = None) -> 'DerivationPath':
        """
        The standard path for the chain, e.g. ``m/44'/60'/0'/0``
        """
        return cls(coin_type=chain.coin_type, account=account, index=index)

    @property
    def chain(self) -> Chain:
        return Chain.MAIN if self.coin_type == PATH_COIN_MAINNET else Chain.TEST

    def base(self) -> 'DerivationPath':
        """
        This path without the address index.
        """
        return replace(self, index=None)

    def child(self, index: int) -> 'DerivationPath':
        """
        The path of the address at ``index`` under this path's change level.
        """
        return replace(self, index=index)

    def to_string(self, header: bool = True) -> str:
        """
        Serialize the path

        :param header: Whether to start the path with ``m/``. Ledger devices expect paths without it.
        """
        s = "{}{}/{}{}/{}{}/{}".format(
            PATH_PURPOSE, PATH_HARDENED,
            self.coin_type, PATH_HARDENED,
            self.account, PATH_HARDENED,
            self.change,
        )
        if self.index is not None:
            s += "/{}".format(self.index)
        if header:
            s = PATH_HEADER_KEY + "/" + s
        return s

    def to_list(self) -> List[int]:
        """
        The path as a list of integers with hardened flags, as Trezor devices expect it.
        """
        return parse_path(self.to_string())

    def __str__(self) -> str:
        return self.to_string()
