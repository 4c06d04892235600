"""
Ethereum Wallet Interface
*************************

The :class:`EthereumWallet` is the class which all of the specific wallet implementations subclass.
:class:`HardwareWallet` adds the device session handling shared by the Trezor and Ledger wallets.
"""

from dataclasses import dataclass
from functools import wraps
import logging
import threading
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_checksum_address

from .common import (
    Chain,
    WalletSubtype,
    WalletType,
)
from .errors import (
    BadArgumentError,
    DeviceBusyError,
    DeviceConnectionError,
    DeviceFailureError,
    DeviceTimeoutError,
    EWIError,
    ValidationError,
)
from .key import (
    DerivationPath,
    HARDENED_FLAG,
)
from .normalizers import (
    address_normalizer,
    hex_sequence_normalizer,
)
from .transaction import (
    SignedTransaction,
    TransactionRequest,
    eip155_v,
    validate_field,
)
from .validators import (
    address_validator,
    hex_sequence_validator,
    message_validator,
    safe_integer_validator,
)


logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65


@dataclass(frozen=True)
class WalletDescriptor(object):
    """
    Identifies which backend handles a wallet and which key it uses.

    ``derivation_path`` is ``None`` for wallets opened from a bare private key.
    """
    subtype: WalletSubtype
    derivation_path: Optional[str]

    @property
    def type(self) -> WalletType:
        return self.subtype.wallet_type

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "type": str(self.type),
            "subtype": str(self.subtype),
            "derivation_path": self.derivation_path,
        }


def get_derivation_path(derivation_path: Optional[Union[str, DerivationPath]], chain: Chain) -> DerivationPath:
    """
    Resolve the derivation path given to a wallet factory.

    :param derivation_path: A path string, a :class:`~ewilib.key.DerivationPath` or ``None`` for the standard path of the chain
    :param chain: The chain the wallet will be used on
    :return: The path of the active address, with the index defaulting to 0
    :raises: FormatError: if the path string is not valid
    """
    if isinstance(derivation_path, DerivationPath):
        path = derivation_path
    elif derivation_path is None:
        path = DerivationPath.default(chain)
    else:
        path = DerivationPath.from_string(derivation_path)
    if path.index is None:
        path = path.child(0)
    return path


def signature_to_hex(v: int, r: int, s: int) -> str:
    """
    Serialize a message signature as ``0x`` prefixed ``r || s || v`` with ``v`` being 27 or 28.
    """
    signature = r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big") + bytes([eip155_v(v, None)])
    return hex_sequence_normalizer(signature.hex())


class EthereumWallet(object):
    """
    A wallet that has already been opened.

    This abstract class defines the methods that every wallet offers. Subclasses implement
    :meth:`_sign_transaction` and :meth:`_sign_message`; the public methods validate their input
    before calling them.
    """

    subtype: WalletSubtype

    def __init__(
        self,
        addresses: Sequence[str],
        derivation_path: Optional[DerivationPath] = None,
        chain: Chain = Chain.MAIN,
    ) -> None:
        """
        :param addresses: The addresses this wallet can sign for. The first one is the active address
            and address ``i`` is derived ``i`` indices after it
        :param derivation_path: The path of the first address, ``None`` for a bare private key
        :param chain: The chain this wallet will be used on
        """
        if not addresses:
            raise BadArgumentError("A wallet needs at least one address")
        self.chain = chain
        self._addresses: Tuple[str, ...] = tuple(self._checked_address(a) for a in addresses)
        self._base_path = derivation_path.base() if derivation_path is not None else None
        self._first_index = 0
        if derivation_path is not None and derivation_path.index is not None:
            self._first_index = derivation_path.index
        self._select(0)

    def _checked_address(self, address: Any) -> str:
        address_validator(address)
        return to_checksum_address(address_normalizer(address))

    def _path_at(self, index: int) -> Optional[DerivationPath]:
        if self._base_path is None:
            return None
        return self._base_path.child(self._first_index + index)

    def _select(self, index: int) -> None:
        if index >= len(self._addresses):
            raise BadArgumentError("Address index {} is out of range, this wallet has {} addresses".format(index, len(self._addresses)))
        self._index = index
        path = self._path_at(index)
        self._descriptor = WalletDescriptor(self.subtype, str(path) if path is not None else None)

    @property
    def descriptor(self) -> WalletDescriptor:
        return self._descriptor

    @property
    def type(self) -> WalletType:
        return self._descriptor.type

    @property
    def derivation_path(self) -> Optional[str]:
        return self._descriptor.derivation_path

    @property
    def addresses(self) -> List[str]:
        """
        Every address this wallet can sign for.
        """
        return list(self._addresses)

    @property
    def address(self) -> str:
        """
        The active address.
        """
        return self._addresses[self._index]

    def get_address(self, display: bool = False) -> str:
        """
        Get the active address.

        :param display: Whether to show the address on the device for the user to compare.
            Only hardware wallets can display addresses.
        :return: The ``0x`` prefixed, checksummed address
        """
        if display:
            raise BadArgumentError("{} wallets cannot display addresses".format(self.subtype))
        return self.address

    def set_default_address(self, index: int) -> str:
        """
        Make another of the wallet's addresses the active one.

        :param index: The position of the address in :attr:`addresses`, counted from the path the wallet was opened with
        :return: The new active address
        :raises: InvalidFieldError: if the index is not a safe integer
        :raises: BadArgumentError: if the wallet does not have that many addresses
        """
        validate_field("index", safe_integer_validator, index)
        self._select(int(index))
        return self.address

    def sign_transaction(self, tx: Mapping[str, Any]) -> SignedTransaction:
        """
        Sign a transaction with the active address.

        :param tx: The transaction, see :meth:`~ewilib.transaction.TransactionRequest.from_dict`
        :return: The signed transaction
        :raises: InvalidFieldError: if a field of the transaction is not valid. Nothing is sent to the backend then.
        """
        request = TransactionRequest.from_dict(tx, self.chain)
        return self._sign_transaction(request)

    def sign_message(self, message: str) -> str:
        """
        Sign a message with the active address, using ``personal_sign`` (EIP-191).

        :param message: The message to sign
        :return: The ``0x`` prefixed 65 byte signature
        :raises: InvalidFieldError: if the message is not valid
        """
        validate_field("message", message_validator, message)
        return self._sign_message(message)

    def verify_message(self, message: str, signature: str) -> bool:
        """
        Check that a message was signed by the active address.

        :param message: The signed message
        :param signature: The ``0x`` prefixed signature returned by :meth:`sign_message`
        :return: Whether the signature is valid and made by the active address
        """
        validate_field("message", message_validator, message)
        validate_field("signature", hex_sequence_validator, signature)
        signature_hex = hex_sequence_normalizer(signature, prefix=False)
        if len(signature_hex) != 2 * SIGNATURE_LENGTH:
            return False
        raw_signature = bytes.fromhex(signature_hex)
        try:
            signer = Account.recover_message(encode_defunct(text=message), signature=raw_signature)
        except (ValueError, TypeError):
            logger.debug("Could not recover the signer of the message", exc_info=True)
            return False
        return signer.lower() == self.address.lower()

    def close(self) -> None:
        """
        Release the backend. The wallet cannot be used afterwards.
        """
        pass

    def _sign_transaction(self, tx: TransactionRequest) -> SignedTransaction:
        raise NotImplementedError("The EthereumWallet base class "
                                  "does not implement this method")

    def _sign_message(self, message: str) -> str:
        raise NotImplementedError("The EthereumWallet base class "
                                  "does not implement this method")


def device_exception(f: Callable[..., Any]) -> Any:
    """
    Map errors raised by a device transport into :class:`~ewilib.errors.EWIError`.
    The original exception is kept as the cause.
    """
    @wraps(f)
    def func(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except EWIError:
            raise
        except TimeoutError as e:
            raise DeviceTimeoutError("{} timed out".format(f.__name__)) from e
        except ConnectionError as e:
            raise DeviceConnectionError("Device disconnected: {}".format(e)) from e
        except ValueError as e:
            raise BadArgumentError(str(e)) from e
        except Exception as e:
            raise DeviceFailureError("{} failed: {}".format(f.__name__, e)) from e
    return func


def exclusive(f: Callable[..., Any]) -> Any:
    """
    Allow only one operation at a time on a device session.
    An overlapping call fails with :class:`~ewilib.errors.DeviceBusyError` instead of waiting.
    """
    @wraps(f)
    def func(self: "HardwareWallet", *args: Any, **kwargs: Any) -> Any:
        if not self._session_lock.acquire(blocking=False):
            raise DeviceBusyError("{} is busy with another operation".format(self.subtype))
        try:
            return f(self, *args, **kwargs)
        finally:
            self._session_lock.release()
    return func


class HardwareWallet(EthereumWallet):
    """
    A wallet whose keys live on a device reached through a transport.

    The transport belongs to this wallet only. Operations on it are serialized: a call made while another
    one is waiting for the device raises :class:`~ewilib.errors.DeviceBusyError`.
    """

    def __init__(
        self,
        transport: Any,
        derivation_path: DerivationPath,
        address_count: int,
        chain: Chain = Chain.MAIN,
    ) -> None:
        """
        :param transport: The device transport
        :param derivation_path: The path of the active address. ``address_count`` consecutive addresses
            starting at its index are fetched from the device.
        :param address_count: How many addresses to fetch
        :param chain: The chain this wallet will be used on
        """
        validate_field("address_count", safe_integer_validator, address_count)
        self.transport = transport
        self._session_lock = threading.Lock()
        base = derivation_path.base()
        self._device_base = base
        first = derivation_path.index or 0
        count = min(int(address_count), HARDENED_FLAG - first)
        logger.debug("Fetching %d addresses from %s", count, base.child(first))
        addresses = [self._fetch_address(base.child(first + i)) for i in range(count)]
        super().__init__(addresses, base.child(first), chain)

    def _checked_address(self, address: Any) -> str:
        try:
            return super()._checked_address(address)
        except ValidationError as e:
            raise DeviceFailureError("{} returned an invalid address: {}".format(self.subtype, e.get_msg())) from e

    @property
    def active_path(self) -> DerivationPath:
        return self._device_base.child(self._first_index + self._index)

    def get_address(self, display: bool = False) -> str:
        """
        Get the active address.

        :param display: Whether to fetch the address from the device again and show it on its screen.
        :raises: DeviceFailureError: if the device shows a different address than the one fetched when opening
        """
        if not display:
            return self.address
        address = self._checked_address(self._fetch_address(self.active_path, display=True))
        if address != self.address:
            raise DeviceFailureError("{} displayed {} instead of {}".format(self.subtype, address, self.address))
        return address

    @exclusive
    def close(self) -> None:
        logger.debug("Closing %s session", self.subtype)
        self._close()

    def _fetch_address(self, path: DerivationPath, display: bool = False) -> str:
        raise NotImplementedError("The HardwareWallet base class "
                                  "does not implement this method")

    def _close(self) -> None:
        raise NotImplementedError("The HardwareWallet base class "
                                  "does not implement this method")
