"""
Debug Helpers
*************

Introspection helpers attached to :mod:`ewilib` as ``ewilib.debug`` when ``EWI_ENV`` is ``development``.
They never expose key material.
"""

import logging
from typing import (
    Any,
    Dict,
)

from .commands import VALIDATORS
from .common import ENV
from .wallet import EthereumWallet


def enable_logging(level: int = logging.DEBUG) -> None:
    """
    Print the library's log messages on stderr.
    """
    logger = logging.getLogger("ewilib")
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    logger.setLevel(level)


def describe(wallet: EthereumWallet) -> Dict[str, Any]:
    """
    Summarize an opened wallet: its descriptor, chain and addresses.
    """
    result: Dict[str, Any] = wallet.descriptor.to_dict()
    result["chain"] = str(wallet.chain)
    result["address"] = wallet.address
    result["addresses"] = wallet.addresses
    return result


def environment() -> Dict[str, Any]:
    return {
        "environment": ENV,
        "validators": sorted(VALIDATORS),
    }
