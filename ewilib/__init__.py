"""
Ethereum Wallet Interface
*************************

``ewilib`` gives one interface to software, Trezor and Ledger Ethereum wallets.

Wallets are opened with the ``open_wallet`` function of their module, which can be looked up by name in :data:`wallets`::

    from ewilib import wallets
    wallet = wallets["software"].open_wallet(mnemonic="...")
"""

from types import ModuleType
from typing import (
    Iterator,
    Mapping,
)

from .common import ENV
from .commands import WALLET_TYPES, get_wallet_module
from . import utils

__version__ = '1.0.0'

about = {
    "name": "ewi",
    "version": __version__,
    "environment": ENV,
}


class WalletModules(Mapping[str, ModuleType]):
    """
    The wallet backend modules by name. A backend is only imported when it is first looked up.
    """

    def __getitem__(self, name: str) -> ModuleType:
        if name not in WALLET_TYPES:
            raise KeyError(name)
        return get_wallet_module(name)

    def __iter__(self) -> Iterator[str]:
        return iter(WALLET_TYPES)

    def __len__(self) -> int:
        return len(WALLET_TYPES)


wallets = WalletModules()

# Only the attribute is gated, ``import ewilib.debug`` works in any environment
if ENV == "development":
    from . import debug

__all__ = [
    "about",
    "utils",
    "wallets",
]
