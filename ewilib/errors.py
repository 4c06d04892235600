"""
Errors and Error Codes
**********************

EWI has several possible Exceptions with corresponding error codes.

:class:`~ewilib.wallet.EthereumWallet` methods, the validators in :mod:`~ewilib.validators`
and :mod:`~ewilib.commands` functions will generally raise an exception that is a subclass of :class:`EWIError`.
The EWI command line tool will convert these exceptions into a dictionary containing the error message and error code.
These look like ``{"error": "<msg>", "code": <code>}``.
"""

from typing import Any, Dict, Iterator, Optional
from contextlib import contextmanager

import logging

# Error codes
NO_WALLET_TYPE = -1 #: Wallet type was not specified
MISSING_ARGUMENTS = -2 #: Arguments are missing
DEVICE_CONN_ERROR = -3 #: Error connecting to the device
UNKNOWN_WALLET_TYPE = -4 #: Wallet type is unknown
BAD_ARGUMENT = -7 #: Bad, malformed, or conflicting argument was provided
UNAVAILABLE_ACTION = -9 #: Function is not available for this wallet
DEVICE_NOT_READY = -12 #: Device is not ready
UNKNOWN_ERROR = -13 #: An unknown error occurred
ACTION_CANCELED = -14 #: Action was canceled by the user
DEVICE_BUSY = -15 #: Device is busy
HELP_TEXT = -17 #: Help text was requested by the user
INVALID_FORMAT = -19 #: A value does not have the expected format
OUT_OF_RANGE = -20 #: A numeric value or a sequence length is out of range
WRONG_INSTANCE = -21 #: A value is not of the expected type
DEVICE_TIMEOUT = -22 #: The device transport timed out
INVALID_FIELD = -23 #: A field of a request failed validation

logger = logging.getLogger(__name__)

# Exceptions
class EWIError(Exception):
    """
    Generic exception type produced by EWI
    Subclassed by specific Errors to have Exceptions that have specific error codes.

    Contains a message and error code.
    """
    def __init__(self, msg: str, code: int) -> None:
        """
        Create an exception with the message and error code

        :param msg: The error message
        :param code: The error code
        """
        Exception.__init__(self, msg)
        self.code = code
        self.msg = msg

    def get_code(self) -> int:
        """
        Get the error code for this Error

        :return: The error code
        """
        return self.code

    def get_msg(self) -> str:
        """
        Get the error message for this Error

        :return: The error message
        """
        return self.msg

    def __str__(self) -> str:
        return self.msg

class ValidationError(EWIError):
    """
    Raised by the validators when a value fails a validation rule.

    :attr:`reason` holds the :class:`~ewilib.validators.Reason` of the failed rule,
    or ``None`` when the rule sequence itself could not be evaluated.
    """
    def __init__(self, msg: str, code: int = BAD_ARGUMENT, reason: Optional[Any] = None) -> None:
        EWIError.__init__(self, msg, code)
        self.reason = reason

class FormatError(ValidationError):
    """
    :class:`ValidationError` for :data:`INVALID_FORMAT`
    """
    def __init__(self, msg: str, reason: Optional[Any] = None):
        ValidationError.__init__(self, msg, INVALID_FORMAT, reason)

class RangeError(ValidationError):
    """
    :class:`ValidationError` for :data:`OUT_OF_RANGE`
    """
    def __init__(self, msg: str, reason: Optional[Any] = None):
        ValidationError.__init__(self, msg, OUT_OF_RANGE, reason)

class InstanceError(ValidationError):
    """
    :class:`ValidationError` for :data:`WRONG_INSTANCE`
    """
    def __init__(self, msg: str, reason: Optional[Any] = None):
        ValidationError.__init__(self, msg, WRONG_INSTANCE, reason)

class InvalidFieldError(EWIError):
    """
    :class:`EWIError` for :data:`INVALID_FIELD`

    Raised by wallets when a field of a transaction or message request fails validation.
    The validation error is kept as ``__cause__``.
    """
    def __init__(self, field: str, msg: str):
        """
        :param field: The name of the offending field
        :param msg: The validation error message
        """
        EWIError.__init__(self, "Invalid '{}' field: {}".format(field, msg), INVALID_FIELD)
        self.field = field

class UnavailableActionError(EWIError):
    """
    :class:`EWIError` for :data:`UNAVAILABLE_ACTION`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, UNAVAILABLE_ACTION)

class DeviceNotReadyError(EWIError):
    """
    :class:`EWIError` for :data:`DEVICE_NOT_READY`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, DEVICE_NOT_READY)

class UnknownWalletError(EWIError):
    """
    :class:`EWIError` for :data:`UNKNOWN_WALLET_TYPE`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, UNKNOWN_WALLET_TYPE)

class BadArgumentError(EWIError):
    """
    :class:`EWIError` for :data:`BAD_ARGUMENT`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, BAD_ARGUMENT)

class DeviceFailureError(EWIError):
    """
    :class:`EWIError` for :data:`UNKNOWN_ERROR`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, UNKNOWN_ERROR)

class ActionCanceledError(EWIError):
    """
    :class:`EWIError` for :data:`ACTION_CANCELED`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, ACTION_CANCELED)

class DeviceConnectionError(EWIError):
    """
    :class:`EWIError` for :data:`DEVICE_CONN_ERROR`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, DEVICE_CONN_ERROR)

class DeviceBusyError(EWIError):
    """
    :class:`EWIError` for :data:`DEVICE_BUSY`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, DEVICE_BUSY)

class DeviceTimeoutError(EWIError):
    """
    :class:`EWIError` for :data:`DEVICE_TIMEOUT`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        EWIError.__init__(self, msg, DEVICE_TIMEOUT)

@contextmanager
def handle_errors(
    msg: Optional[str] = None,
    result: Optional[Dict[str, Any]] = None,
    code: int = UNKNOWN_ERROR,
    debug: bool = False,
) -> Iterator[None]:
    """
    Context manager to catch all Exceptions and EWIErrors to return them as dictionaries containing the error message and code.

    :param msg: Error message prefix. Attached to the beginning of each error message
    :param result: The dictionary to put the resulting error in
    :param code: The default error code to use for Exceptions
    :param debug: Whether to also log the traceback for debugging purposes
    """
    if result is None:
        result = {}

    if msg is None:
        msg = ""
    else:
        msg = msg + " "

    try:
        yield

    except EWIError as e:
        result['error'] = msg + e.get_msg()
        result['code'] = e.get_code()
    except Exception as e:
        result['error'] = msg + str(e)
        result['code'] = code
        if debug:
            logger.exception("Unhandled error")
