"""
Software Wallets
****************

Wallets whose keys are held in memory, opened from a private key or a BIP 39 mnemonic.
"""

import logging
from typing import (
    Any,
    List,
    Optional,
    Union,
)

from eth_account import Account
from eth_account.hdaccount import (
    Language,
    Mnemonic,
    key_from_seed,
    seed_from_mnemonic,
)
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError as EthValidationError

from ..common import (
    ADDRESS_COUNT,
    Chain,
    WalletSubtype,
)
from ..errors import (
    BadArgumentError,
    UnavailableActionError,
)
from ..key import (
    DerivationPath,
    HARDENED_FLAG,
)
from ..normalizers import hex_sequence_normalizer
from ..transaction import (
    SignedTransaction,
    TransactionRequest,
    validate_field,
)
from ..utils import get_random_values
from ..validators import (
    hex_sequence_validator,
    safe_integer_validator,
)
from ..wallet import (
    EthereumWallet,
    get_derivation_path,
    signature_to_hex,
)


logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 64

# Entropy bits to mnemonic word counts
MNEMONIC_STRENGTHS = {
    128: 12,
    160: 15,
    192: 18,
    224: 21,
    256: 24,
}


class SoftwareWallet(EthereumWallet):
    """
    A wallet holding its private keys in memory and signing with ``eth_account``.
    """

    subtype = WalletSubtype.SOFTWARE

    def __init__(
        self,
        accounts: List[LocalAccount],
        derivation_path: Optional[DerivationPath] = None,
        chain: Chain = Chain.MAIN,
        mnemonic: Optional[str] = None,
    ) -> None:
        self._accounts = accounts
        self._mnemonic = mnemonic
        super().__init__([a.address for a in accounts], derivation_path, chain)

    @property
    def mnemonic(self) -> Optional[str]:
        """
        The mnemonic this wallet was opened from, ``None`` for wallets opened from a private key.
        """
        return self._mnemonic

    @property
    def private_key(self) -> str:
        """
        The ``0x`` prefixed private key of the active address.
        """
        return hex_sequence_normalizer(bytes(self._account.key).hex())

    @property
    def _account(self) -> LocalAccount:
        return self._accounts[self._index]

    def _sign_transaction(self, tx: TransactionRequest) -> SignedTransaction:
        signed = Account.sign_transaction(tx.to_dict(), self._account.key)
        return SignedTransaction(bytes(signed.raw_transaction), signed.v, signed.r, signed.s)

    def _sign_message(self, message: str) -> str:
        signed = Account.sign_message(encode_defunct(text=message), self._account.key)
        return signature_to_hex(signed.v, signed.r, signed.s)


def _account_from_key(private_key: Any) -> LocalAccount:
    validate_field("private_key", hex_sequence_validator, private_key)
    key = hex_sequence_normalizer(private_key, prefix=False)
    if len(key) != PRIVATE_KEY_LENGTH:
        raise BadArgumentError("Private key must be {} hex characters".format(PRIVATE_KEY_LENGTH))
    try:
        return Account.from_key(key)
    except (EthValidationError, ValueError) as e:
        raise BadArgumentError("Invalid private key: {}".format(e)) from e


def _accounts_from_mnemonic(mnemonic: str, passphrase: str, path: DerivationPath, address_count: int) -> List[LocalAccount]:
    try:
        seed = seed_from_mnemonic(mnemonic, passphrase)
    except (EthValidationError, ValueError) as e:
        raise BadArgumentError("Invalid mnemonic: {}".format(e)) from e
    base = path.base()
    first = path.index or 0
    count = min(address_count, HARDENED_FLAG - first)
    logger.debug("Deriving %d addresses from %s", count, base.child(first))
    return [Account.from_key(key_from_seed(seed, str(base.child(first + i)))) for i in range(count)]


def open_wallet(
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    passphrase: str = "",
    derivation_path: Optional[Union[str, DerivationPath]] = None,
    address_count: int = ADDRESS_COUNT,
    chain: Chain = Chain.MAIN,
) -> SoftwareWallet:
    """
    Open a software wallet.

    Exactly one of ``private_key`` and ``mnemonic`` must be given.

    :param private_key: A 64 character hex private key, optionally ``0x`` prefixed
    :param mnemonic: A BIP 39 mnemonic
    :param passphrase: The BIP 39 passphrase of the mnemonic
    :param derivation_path: The path of the active address. Defaults to the standard path of the chain with index 0.
        Only used with a mnemonic.
    :param address_count: How many consecutive addresses to derive from the mnemonic, starting at the index of the path
    :param chain: The chain the wallet will be used on
    :return: The opened wallet
    :raises: BadArgumentError: if the key material is missing, conflicting or invalid
    """
    if (private_key is None) == (mnemonic is None):
        raise BadArgumentError("Exactly one of a private key or a mnemonic must be provided")

    if private_key is not None:
        if derivation_path is not None:
            raise BadArgumentError("A derivation path cannot be used with a private key")
        return SoftwareWallet([_account_from_key(private_key)], chain=chain)

    if not isinstance(mnemonic, str):
        raise BadArgumentError("The mnemonic must be a string")
    validate_field("address_count", safe_integer_validator, address_count)
    path = get_derivation_path(derivation_path, chain)
    accounts = _accounts_from_mnemonic(" ".join(mnemonic.split()), passphrase, path, int(address_count))
    return SoftwareWallet(accounts, path, chain, mnemonic=" ".join(mnemonic.split()))


def create(chain: Chain = Chain.MAIN, strength: int = 128, address_count: int = ADDRESS_COUNT) -> SoftwareWallet:
    """
    Create a new software wallet from a freshly generated mnemonic.

    The mnemonic is available as :attr:`SoftwareWallet.mnemonic`.

    :param chain: The chain the wallet will be used on
    :param strength: The entropy of the mnemonic in bits: 128, 160, 192, 224 or 256
    :param address_count: How many consecutive addresses to derive
    """
    if strength not in MNEMONIC_STRENGTHS:
        raise BadArgumentError("Mnemonic strength must be one of {}".format(sorted(MNEMONIC_STRENGTHS)))
    try:
        mnemonic = Mnemonic(Language.ENGLISH).to_mnemonic(get_random_values(strength // 8))
    except (EthValidationError, ValueError) as e:
        raise UnavailableActionError("Could not generate a mnemonic: {}".format(e)) from e
    return open_wallet(mnemonic=mnemonic, address_count=address_count, chain=chain)
