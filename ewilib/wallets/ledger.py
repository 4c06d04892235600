"""
Ledger Wallets
**************

Ledger devices are reached through a :class:`LedgerTransport`. The default transport uses
``ledgereth`` and is installed with the ``ledger`` extra.
Ledger devices take derivation paths without the ``m/`` header.
"""

import logging
from typing import (
    Optional,
    Tuple,
    Union,
)

from typing_extensions import Protocol

from ..common import (
    ADDRESS_COUNT,
    Chain,
    WalletSubtype,
)
from ..errors import UnavailableActionError
from ..key import DerivationPath
from ..transaction import (
    SignedTransaction,
    TransactionRequest,
    eip155_v,
)
from ..wallet import (
    HardwareWallet,
    device_exception,
    exclusive,
    get_derivation_path,
    signature_to_hex,
)


logger = logging.getLogger(__name__)


class LedgerTransport(Protocol):
    """
    The device operations a :class:`LedgerWallet` needs, with paths given as strings such as ``44'/60'/0'/0/0``.
    Signatures are returned as ``(v, r, s)`` integers.
    """

    def get_address(self, path: str, display: bool) -> str:
        ...

    def sign_transaction(
        self,
        path: str,
        nonce: int,
        gas_price: int,
        gas_limit: int,
        to: str,
        value: int,
        data: bytes,
        chain_id: int,
    ) -> Tuple[int, int, int]:
        ...

    def sign_message(self, path: str, message: bytes) -> Tuple[int, int, int]:
        ...

    def close(self) -> None:
        ...


class LedgerWallet(HardwareWallet):
    subtype = WalletSubtype.LEDGER

    @exclusive
    @device_exception
    def _fetch_address(self, path: DerivationPath, display: bool = False) -> str:
        logger.debug("Fetching the address at %s", path)
        return self.transport.get_address(path.to_string(header=False), display)

    @exclusive
    @device_exception
    def _sign_transaction(self, tx: TransactionRequest) -> SignedTransaction:
        logger.debug("Signing a transaction with %s", self.derivation_path)
        v, r, s = self.transport.sign_transaction(
            self.active_path.to_string(header=False),
            tx.nonce,
            tx.gas_price,
            tx.gas_limit,
            tx.to,
            tx.value,
            tx.data,
            tx.chain_id,
        )
        if v in (0, 1, 27, 28):
            v = eip155_v(v, tx.chain_id)
        return SignedTransaction(tx.serialize(v, r, s), v, r, s)

    @exclusive
    @device_exception
    def _sign_message(self, message: str) -> str:
        logger.debug("Signing a message with %s", self.derivation_path)
        v, r, s = self.transport.sign_message(self.active_path.to_string(header=False), message.encode("utf-8"))
        return signature_to_hex(v, r, s)

    @device_exception
    def _close(self) -> None:
        self.transport.close()


def open_wallet(
    derivation_path: Optional[Union[str, DerivationPath]] = None,
    address_count: int = ADDRESS_COUNT,
    chain: Chain = Chain.MAIN,
    transport: Optional[LedgerTransport] = None,
) -> LedgerWallet:
    """
    Open a wallet on the first Ledger device found, with the Ethereum app open.

    :param derivation_path: The path of the active address. Defaults to the standard path of the chain with index 0.
    :param address_count: How many consecutive addresses to fetch from the device, starting at the index of the path
    :param chain: The chain the wallet will be used on
    :param transport: An already opened transport
    :return: The opened wallet
    :raises: UnavailableActionError: if no transport is given and the ``ledger`` extra is not installed
    """
    path = get_derivation_path(derivation_path, chain)
    if transport is None:
        try:
            from ..transports.ledger import LedgerDeviceTransport
        except ImportError as e:
            raise UnavailableActionError("Ledger support is not installed, install ewi[ledger]") from e
        transport = LedgerDeviceTransport.open()
    try:
        return LedgerWallet(transport, path, address_count, chain)
    except Exception:
        transport.close()
        raise
