"""
Ledger Transport
****************

:class:`~ewilib.wallets.ledger.LedgerTransport` implemented with ``ledgereth``.
"""

from functools import wraps
import logging
from typing import (
    Any,
    Callable,
    Tuple,
)

from ledgereth.accounts import get_account_by_path
from ledgereth.comms import init_dongle
from ledgereth.exceptions import (
    LedgerAppNotOpened,
    LedgerCancel,
    LedgerError,
    LedgerLocked,
    LedgerNotFound,
)
from ledgereth.messages import sign_message
from ledgereth.transactions import create_transaction

from ..errors import (
    ActionCanceledError,
    DeviceConnectionError,
    DeviceFailureError,
    DeviceNotReadyError,
    DeviceTimeoutError,
    UnavailableActionError,
)


logger = logging.getLogger(__name__)


def ledger_exception(f: Callable[..., Any]) -> Any:
    @wraps(f)
    def func(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except LedgerCancel as e:
            raise ActionCanceledError('{} canceled'.format(f.__name__)) from e
        except LedgerNotFound as e:
            raise DeviceConnectionError('No Ledger device found') from e
        except LedgerLocked as e:
            raise DeviceNotReadyError('Ledger device is locked') from e
        except LedgerAppNotOpened as e:
            raise DeviceNotReadyError('The Ethereum app is not open on the Ledger device') from e
        except TimeoutError as e:
            raise DeviceTimeoutError('{} timed out'.format(f.__name__)) from e
        except LedgerError as e:
            raise DeviceFailureError(str(e)) from e
    return func


class LedgerDeviceTransport(object):
    """
    A session with one Ledger device running the Ethereum app.
    """

    def __init__(self, dongle: Any) -> None:
        self.dongle = dongle

    @classmethod
    @ledger_exception
    def open(cls) -> 'LedgerDeviceTransport':
        return cls(init_dongle())

    @ledger_exception
    def get_address(self, path: str, display: bool) -> str:
        if display:
            raise UnavailableActionError("Ledger devices cannot display addresses through ledgereth")
        return get_account_by_path(path, dongle=self.dongle).address

    @ledger_exception
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
        signed = create_transaction(
            destination=to,
            amount=value,
            gas=gas_limit,
            nonce=nonce,
            data=data,
            gas_price=gas_price,
            chain_id=chain_id,
            sender_path=path,
            dongle=self.dongle,
        )
        return signed.v, signed.r, signed.s

    @ledger_exception
    def sign_message(self, path: str, message: bytes) -> Tuple[int, int, int]:
        signed = sign_message(message, sender_path=path, dongle=self.dongle)
        return signed.v, signed.r, signed.s

    @ledger_exception
    def close(self) -> None:
        self.dongle.close()
