"""
Trezor Wallets
**************

Trezor devices are reached through a :class:`TrezorTransport`. The default transport uses
``trezorlib`` and is installed with the ``trezor`` extra.
"""

import logging
from typing import (
    List,
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
from ..errors import (
    DeviceFailureError,
    UnavailableActionError,
)
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


class TrezorTransport(Protocol):
    """
    The device operations a :class:`TrezorWallet` needs, with paths given as lists of integers.
    """

    def get_address(self, address_n: List[int], show_display: bool) -> str:
        ...

    def sign_transaction(
        self,
        address_n: List[int],
        nonce: int,
        gas_price: int,
        gas_limit: int,
        to: str,
        value: int,
        data: bytes,
        chain_id: int,
    ) -> Tuple[int, bytes, bytes]:
        ...

    def sign_message(self, address_n: List[int], message: bytes) -> bytes:
        ...

    def close(self) -> None:
        ...


class TrezorWallet(HardwareWallet):
    subtype = WalletSubtype.TREZOR

    @exclusive
    @device_exception
    def _fetch_address(self, path: DerivationPath, display: bool = False) -> str:
        logger.debug("Fetching the address at %s", path)
        return self.transport.get_address(path.to_list(), display)

    @exclusive
    @device_exception
    def _sign_transaction(self, tx: TransactionRequest) -> SignedTransaction:
        logger.debug("Signing a transaction with %s", self.derivation_path)
        v, r, s = self.transport.sign_transaction(
            self.active_path.to_list(),
            tx.nonce,
            tx.gas_price,
            tx.gas_limit,
            tx.to,
            tx.value,
            tx.data,
            tx.chain_id,
        )
        # Older firmwares only return the recovery bit
        if v <= 1:
            v = eip155_v(v, tx.chain_id)
        r_int = int.from_bytes(r, byteorder="big")
        s_int = int.from_bytes(s, byteorder="big")
        return SignedTransaction(tx.serialize(v, r_int, s_int), v, r_int, s_int)

    @exclusive
    @device_exception
    def _sign_message(self, message: str) -> str:
        logger.debug("Signing a message with %s", self.derivation_path)
        signature = self.transport.sign_message(self.active_path.to_list(), message.encode("utf-8"))
        if len(signature) != 65:
            raise DeviceFailureError("Trezor returned a {} byte signature".format(len(signature)))
        return signature_to_hex(
            signature[64],
            int.from_bytes(signature[:32], byteorder="big"),
            int.from_bytes(signature[32:64], byteorder="big"),
        )

    @device_exception
    def _close(self) -> None:
        self.transport.close()


def open_wallet(
    device_path: Optional[str] = None,
    derivation_path: Optional[Union[str, DerivationPath]] = None,
    address_count: int = ADDRESS_COUNT,
    chain: Chain = Chain.MAIN,
    transport: Optional[TrezorTransport] = None,
) -> TrezorWallet:
    """
    Open a wallet on a Trezor device.

    :param device_path: The transport path of the device, e.g. ``webusb:001:1``. The first device found is used if not given.
    :param derivation_path: The path of the active address. Defaults to the standard path of the chain with index 0.
    :param address_count: How many consecutive addresses to fetch from the device, starting at the index of the path
    :param chain: The chain the wallet will be used on
    :param transport: An already opened transport. ``device_path`` is ignored when it is given.
    :return: The opened wallet
    :raises: UnavailableActionError: if no transport is given and the ``trezor`` extra is not installed
    """
    path = get_derivation_path(derivation_path, chain)
    if transport is None:
        try:
            from ..transports.trezor import TrezorDeviceTransport
        except ImportError as e:
            raise UnavailableActionError("Trezor support is not installed, install ewi[trezor]") from e
        transport = TrezorDeviceTransport.open(device_path)
    try:
        return TrezorWallet(transport, path, address_count, chain)
    except Exception:
        transport.close()
        raise
