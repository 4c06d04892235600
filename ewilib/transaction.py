"""
Transactions
************

:class:`TransactionRequest` validates the transaction given by the caller before any wallet backend sees it.
Wallets return a :class:`SignedTransaction`.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Union,
)

from eth_utils import keccak, to_checksum_address
import rlp

from .common import Chain
from .errors import (
    InvalidFieldError,
    ValidationError,
)
from .normalizers import (
    address_normalizer,
    hex_sequence_normalizer,
    multiple_of_two_hex_value_normalizer,
)
from .utils import BigNumber
from .validators import (
    address_validator,
    big_number_validator,
    hex_sequence_validator,
    safe_integer_validator,
)


# Accepted spellings of each field
FIELD_ALIASES = {
    "nonce": ("nonce",),
    "gas_price": ("gas_price", "gasPrice"),
    "gas_limit": ("gas_limit", "gasLimit", "gas"),
    "to": ("to",),
    "value": ("value",),
    "data": ("data", "input_data", "inputData"),
    "chain_id": ("chain_id", "chainId"),
}

REQUIRED_FIELDS = ("nonce", "gas_price", "gas_limit", "to")


def validate_field(field: str, validator: Callable[[Any], bool], value: Any) -> None:
    """
    Run a validator on a request field, naming the field in the error.

    :raises: InvalidFieldError: with the validation error as its cause
    """
    try:
        validator(value)
    except ValidationError as e:
        raise InvalidFieldError(field, e.get_msg()) from e


def amount_validator(amount: Any) -> bool:
    """
    Amounts are either :class:`~ewilib.utils.BigNumber` instances or safe integers.
    """
    if isinstance(amount, BigNumber):
        return big_number_validator(amount)
    return safe_integer_validator(amount)


def _get_field(tx: Mapping[str, Any], field: str) -> Any:
    for alias in FIELD_ALIASES[field]:
        if alias in tx:
            return tx[alias]
    return None


@dataclass(frozen=True)
class TransactionRequest(object):
    """
    A validated legacy (EIP-155) Ethereum transaction, ready to be signed.

    ``to`` is a checksummed, ``0x`` prefixed address. ``data`` is raw bytes.
    """
    nonce: int
    gas_price: int
    gas_limit: int
    to: str
    value: int
    data: bytes
    chain_id: int

    @classmethod
    def from_dict(cls, tx: Mapping[str, Any], chain: Chain = Chain.MAIN) -> 'TransactionRequest':
        """
        Validate every field of a transaction.

        :param tx: The transaction. Must have ``nonce``, ``gas_price``, ``gas_limit`` and ``to``.
            ``value`` defaults to 0, ``data`` to empty and ``chain_id`` to the chain's id.
            camelCase names (``gasPrice``, ``gasLimit`` or ``gas``, ``inputData``, ``chainId``) are accepted too.
        :param chain: The chain used for the default ``chain_id``
        :raises: InvalidFieldError: if a field is missing or fails validation
        """
        if not isinstance(tx, Mapping):
            raise InvalidFieldError("transaction", "Transaction is not a mapping: {!r}".format(tx))
        for field in REQUIRED_FIELDS:
            if _get_field(tx, field) is None:
                raise InvalidFieldError(field, "Field is required")

        nonce = _get_field(tx, "nonce")
        gas_price = _get_field(tx, "gas_price")
        gas_limit = _get_field(tx, "gas_limit")
        to = _get_field(tx, "to")
        value = _get_field(tx, "value")
        data = _get_field(tx, "data")
        chain_id = _get_field(tx, "chain_id")
        if value is None:
            value = 0
        if data is None:
            data = ""
        if chain_id is None:
            chain_id = chain.chain_id

        validate_field("nonce", safe_integer_validator, nonce)
        validate_field("gas_price", amount_validator, gas_price)
        validate_field("gas_limit", amount_validator, gas_limit)
        validate_field("to", address_validator, to)
        validate_field("value", amount_validator, value)
        validate_field("data", hex_sequence_validator, data)
        validate_field("chain_id", safe_integer_validator, chain_id)

        return cls(
            nonce=int(nonce),
            gas_price=int(gas_price),
            gas_limit=int(gas_limit),
            to=to_checksum_address(address_normalizer(to)),
            value=int(value),
            data=bytes.fromhex(multiple_of_two_hex_value_normalizer(data)),
            chain_id=int(chain_id),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        The transaction in the form used by ``eth_account`` and JSON-RPC.
        """
        return {
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "to": self.to,
            "value": self.value,
            "data": hex_sequence_normalizer(self.data.hex()),
            "chainId": self.chain_id,
        }

    def serialize(self, v: int, r: Union[int, bytes], s: Union[int, bytes]) -> bytes:
        """
        RLP serialize this transaction with a signature.

        :param v: The recovery id, already including the EIP-155 chain id
        :param r: The signature's r value, as an integer or big endian bytes
        :param s: The signature's s value, as an integer or big endian bytes
        :return: The raw signed transaction
        """
        if isinstance(r, bytes):
            r = int.from_bytes(r, byteorder="big")
        if isinstance(s, bytes):
            s = int.from_bytes(s, byteorder="big")
        return rlp.encode([
            self.nonce,
            self.gas_price,
            self.gas_limit,
            bytes.fromhex(address_normalizer(self.to, prefix=False)),
            self.value,
            self.data,
            v,
            r,
            s,
        ])


@dataclass(frozen=True)
class SignedTransaction(object):
    """
    A signed transaction as returned by every wallet.
    """
    raw_transaction: bytes
    v: int
    r: int
    s: int

    @property
    def hash(self) -> bytes:
        """
        The transaction hash.
        """
        return keccak(self.raw_transaction)

    def to_dict(self) -> Dict[str, Union[str, int]]:
        return {
            "raw": hex_sequence_normalizer(self.raw_transaction.hex()),
            "hash": hex_sequence_normalizer(self.hash.hex()),
            "v": self.v,
            "r": hex(self.r),
            "s": hex(self.s),
        }


def eip155_v(recovery_id: int, chain_id: Optional[int]) -> int:
    """
    Convert a signature recovery id (0, 1, 27 or 28) to an EIP-155 ``v``.
    """
    if recovery_id >= 27:
        recovery_id -= 27
    if chain_id is None:
        return recovery_id + 27
    return recovery_id + 35 + 2 * chain_id
