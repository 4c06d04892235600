#! /usr/bin/env python3

"""
Commands
********

The functions in this module are the primary way to interact with wallets.
Each function that takes a ``wallet`` uses an :class:`~ewilib.wallet.EthereumWallet`
and returns a dictionary that can be serialized to JSON.

Wallets can be opened using :func:`~get_wallet` or the ``open_wallet`` function of a module in :mod:`ewilib.wallets`.

Note that this documentation does not specify every exception that can be raised.
Many exceptions are raised by the wallets themselves, please see their documentation.
"""

import importlib
import logging
from types import ModuleType
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Union,
)

from .errors import (
    BadArgumentError,
    UnknownWalletError,
)
from .validators import (
    address_validator,
    big_number_validator,
    derivation_path_validator,
    hex_sequence_validator,
    message_validator,
    safe_integer_validator,
)
from .wallet import EthereumWallet


logger = logging.getLogger(__name__)

WALLET_TYPES = ["software", "trezor", "ledger"]

VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "derivation_path": derivation_path_validator,
    "safe_integer": safe_integer_validator,
    "big_number": big_number_validator,
    "address": address_validator,
    "hex_sequence": hex_sequence_validator,
    "message": message_validator,
}


def get_wallet_module(wallet_type: str) -> ModuleType:
    """
    Import the module implementing a wallet backend.

    :param wallet_type: One of :data:`WALLET_TYPES`
    :raises: UnknownWalletError: if the wallet type is not known
    """
    if not isinstance(wallet_type, str) or wallet_type.lower() not in WALLET_TYPES:
        raise UnknownWalletError('Unknown wallet type specified: {}'.format(wallet_type))
    return importlib.import_module('.wallets.' + wallet_type.lower(), __package__)


def get_wallet(wallet_type: str, **kwargs: Any) -> EthereumWallet:
    """
    Open a wallet of the given type.

    :param wallet_type: ``software``, ``trezor`` or ``ledger``
    :param kwargs: The arguments of the backend's ``open_wallet`` function
    :return: The opened wallet
    :raises: UnknownWalletError: if the wallet type is not known
    """
    module = get_wallet_module(wallet_type)
    logger.debug("Opening a %s wallet", wallet_type)
    wallet: EthereumWallet = module.open_wallet(**kwargs)
    return wallet


def getaddress(wallet: EthereumWallet, display: bool = False) -> Dict[str, Any]:
    """
    Get the active address of the wallet.

    :param wallet: The wallet
    :param display: Whether to show the address on the device
    :return: A dictionary containing the address and its derivation path
    """
    return {
        "address": wallet.get_address(display),
        "derivation_path": wallet.derivation_path,
    }


def getaddresses(wallet: EthereumWallet) -> Dict[str, Any]:
    """
    Get every address of the wallet.
    """
    return {"addresses": wallet.addresses}


def signtx(wallet: EthereumWallet, tx: Mapping[str, Any]) -> Dict[str, Union[str, int]]:
    """
    Sign a transaction with the active address.

    :param wallet: The wallet
    :param tx: The transaction, see :meth:`~ewilib.transaction.TransactionRequest.from_dict`
    :return: A dictionary containing the ``0x`` prefixed raw transaction, its hash and the signature values
    """
    return wallet.sign_transaction(tx).to_dict()


def signmessage(wallet: EthereumWallet, message: str) -> Dict[str, str]:
    """
    Sign a message with the active address.

    :return: A dictionary containing the ``0x`` prefixed signature
    """
    return {"signature": wallet.sign_message(message)}


def verifymessage(wallet: EthereumWallet, message: str, signature: str) -> Dict[str, bool]:
    """
    Check that a message was signed by the active address.

    :return: A dictionary containing whether the signature is valid
    """
    return {"valid": wallet.verify_message(message, signature)}


def validate(kind: str, value: Any) -> Dict[str, bool]:
    """
    Run one of the validators.

    :param kind: The validator to run, a key of :data:`VALIDATORS`
    :param value: The value to check
    :return: A dictionary saying the value is valid
    :raises: ValidationError: if the value is not valid
    :raises: BadArgumentError: if the kind is not known
    """
    if kind not in VALIDATORS:
        raise BadArgumentError('Unknown validator: {}'.format(kind))
    return {"valid": VALIDATORS[kind](value)}
