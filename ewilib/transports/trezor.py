"""
Trezor Transport
****************

:class:`~ewilib.wallets.trezor.TrezorTransport` implemented with ``trezorlib``.
"""

from functools import wraps
import logging
from typing import (
    Any,
    Callable,
    List,
    Optional,
    Tuple,
)

from trezorlib import ethereum
from trezorlib.client import TrezorClient
from trezorlib.exceptions import (
    Cancelled,
    PinException,
    TrezorFailure,
)
from trezorlib.transport import (
    TransportException,
    get_transport,
)
from trezorlib.ui import ClickUI
from usb1 import USBErrorNoDevice, USBErrorTimeout

from ..errors import (
    ActionCanceledError,
    BadArgumentError,
    DeviceConnectionError,
    DeviceFailureError,
    DeviceTimeoutError,
)


logger = logging.getLogger(__name__)


def trezor_exception(f: Callable[..., Any]) -> Any:
    @wraps(f)
    def func(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except (Cancelled, PinException) as e:
            raise ActionCanceledError('{} canceled'.format(f.__name__)) from e
        except (USBErrorNoDevice, TransportException) as e:
            raise DeviceConnectionError('Device disconnected') from e
        except (USBErrorTimeout, TimeoutError) as e:
            raise DeviceTimeoutError('{} timed out'.format(f.__name__)) from e
        except TrezorFailure as e:
            raise DeviceFailureError(str(e)) from e
        except ValueError as e:
            raise BadArgumentError(str(e)) from e
    return func


class TrezorDeviceTransport(object):
    """
    A session with one Trezor device.
    """

    def __init__(self, client: TrezorClient) -> None:
        self.client = client

    @classmethod
    @trezor_exception
    def open(cls, device_path: Optional[str] = None) -> 'TrezorDeviceTransport':
        """
        Connect to a device, prompting for the PIN and passphrase on the terminal when needed.

        :param device_path: The transport path of the device. The first device found is used if not given.
        """
        transport = get_transport(device_path)
        logger.debug("Connecting to Trezor at %s", transport.get_path())
        return cls(TrezorClient(transport, ui=ClickUI()))

    @trezor_exception
    def get_address(self, address_n: List[int], show_display: bool) -> str:
        return ethereum.get_address(self.client, address_n, show_display=show_display)

    @trezor_exception
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
        return ethereum.sign_tx(
            self.client,
            n=address_n,
            nonce=nonce,
            gas_price=gas_price,
            gas_limit=gas_limit,
            to=to,
            value=value,
            data=data,
            chain_id=chain_id,
        )

    @trezor_exception
    def sign_message(self, address_n: List[int], message: bytes) -> bytes:
        return ethereum.sign_message(self.client, address_n, message).signature

    @trezor_exception
    def close(self) -> None:
        self.client.close()
