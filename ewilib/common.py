"""
Common Classes and Utilities
****************************
"""

import os

from enum import Enum

from typing import Union


#: The build environment. ``development`` attaches the debug helper to :mod:`ewilib`.
ENV = os.environ.get("EWI_ENV", "production").lower()

#: Placeholder used in error messages when the offending value is empty or missing
UNDEFINED = "undefined"

#: Largest integer exactly representable by an IEEE 754 double (``2**53 - 1``)
MAX_SAFE_INTEGER = 9007199254740991

#: Maximum length of hex sequences and messages accepted for signing
SEQUENCE_MAX_LENGTH = 1024

HEX_PREFIX = "0x"

# Derivation path conventions
PATH_HEADER_KEY = "m"
PATH_PURPOSE = 44
PATH_COIN_MAINNET = 60
PATH_COIN_TESTNET = 1
PATH_ACCOUNT = 0
PATH_CHANGE = 0
PATH_DELIMITER = "'/"
PATH_SPLITTER = "/"
PATH_HARDENED = "'"

MATCH_DIGITS = r"[0-9]+"
MATCH_ADDRESS = r"(0x)?[0-9a-fA-F]{40}"
MATCH_HEX_STRING = r"(0x)?[0-9a-fA-F]*"

#: Number of addresses fetched when a wallet is opened from a seed or a device
ADDRESS_COUNT = 10


class Chain(Enum):
    """
    The Ethereum network to use
    """
    MAIN = 0 #: Ethereum Mainnet
    TEST = 1 #: Any testnet (coin type 1 in derivation paths)

    def __str__(self) -> str:
        return str(self.name).lower()

    def __repr__(self) -> str:
        return str(self)

    @staticmethod
    def argparse(s: str) -> Union['Chain', str]:
        try:
            return Chain[s.upper()]
        except KeyError:
            return s

    @property
    def coin_type(self) -> int:
        """
        The BIP 44 coin type used for derivation paths on this chain.
        """
        return PATH_COIN_MAINNET if self == Chain.MAIN else PATH_COIN_TESTNET

    @property
    def chain_id(self) -> int:
        """
        The default EIP-155 chain id used when a transaction does not set one.
        Testnets use Sepolia.
        """
        return 1 if self == Chain.MAIN else 11155111


class WalletType(Enum):
    """
    Whether the keys live in memory or on a device
    """
    SOFTWARE = "software"
    HARDWARE = "hardware"

    def __str__(self) -> str:
        return self.value


class WalletSubtype(Enum):
    """
    The backend that handles a wallet instance
    """
    SOFTWARE = "ethereumtx-software"
    TREZOR = "trezor"
    LEDGER = "ledger"

    def __str__(self) -> str:
        return self.value

    @property
    def wallet_type(self) -> WalletType:
        if self == WalletSubtype.SOFTWARE:
            return WalletType.SOFTWARE
        return WalletType.HARDWARE
