"""
Validators
**********

Validators check a single untrusted value before it is used by a wallet.
Each validator returns ``True`` when the value is valid and raises a
:class:`~ewilib.errors.ValidationError` otherwise. The error's ``reason`` is a :class:`Reason`
identifying which rule failed, and its message names the offending value.

Validators accept values of any type, rejecting the wrong types is their first job.

Address checksums and ICAP addresses are not validated.
"""

import re
from typing import (
    Any,
    Dict,
    List,
)

from ._validation import (
    Reason,
    ValidationRule,
    assert_truth,
    object_to_error_string,
    validate_sequence,
)
from .common import (
    MATCH_ADDRESS,
    MATCH_DIGITS,
    MATCH_HEX_STRING,
    MAX_SAFE_INTEGER,
    PATH_COIN_MAINNET,
    PATH_COIN_TESTNET,
    PATH_DELIMITER,
    PATH_HEADER_KEY,
    PATH_PURPOSE,
    PATH_SPLITTER,
    SEQUENCE_MAX_LENGTH,
    UNDEFINED,
)
from .errors import FormatError
from .normalizers import parse_leading_int
from .utils import BigNumber

__all__ = [
    "MESSAGES",
    "Reason",
    "address_validator",
    "big_number_validator",
    "derivation_path_validator",
    "hex_sequence_validator",
    "message_validator",
    "safe_integer_validator",
]


MESSAGES: Dict[str, Dict[str, str]] = {
    "derivation_path": {
        "generic_error": "Could not validate the derivation path",
        "not_string": "Derivation path is not a string",
        "not_valid_parts": "Derivation path is not composed of the correct number of parts",
        "not_valid_header_key": "Derivation path header key is not valid",
        "not_valid_purpose": "Derivation path purpose is not valid",
        "not_valid_coin": "Derivation path coin type is not valid",
        "not_valid_account": "Derivation path account is not in the correct format",
        "not_valid_change_index": "Derivation path change and/or index are not in the correct format",
        "not_valid_account_index": "Derivation path has too many account indexes",
    },
    "safe_integer": {
        "generic_error": "Could not validate the integer",
        "not_number": "Integer is not a number",
        "not_positive": "Integer is not positive",
        "not_safe": "Integer is not safe",
    },
    "big_number": {
        "generic_error": "Could not validate the big number",
        "not_big_number": "Value is not a big number instance",
    },
    "address": {
        "generic_error": "Could not validate the address",
        "not_string": "Address is not a string",
        "not_length": "Address length is not correct",
        "not_format": "Address is not in the correct format",
    },
    "hex_sequence": {
        "generic_error": "Could not validate the hex sequence",
        "not_string": "Hex sequence is not a string",
        "not_format": "Hex sequence is not in the correct format",
        "too_big": "Hex sequence is bigger than {} characters".format(SEQUENCE_MAX_LENGTH),
    },
    "message": {
        "generic_error": "Could not validate the message",
        "not_string": "Message is not a string",
        "too_big": "Message is bigger than {} characters".format(SEQUENCE_MAX_LENGTH),
    },
}


def _matches(pattern: str, value: str) -> bool:
    return re.fullmatch(pattern, value) is not None


def derivation_path_validator(derivation_path: Any) -> bool:
    """
    Validate an Ethereum BIP 44 derivation path.

    The path is split into four parts on ``'/``: the header with the purpose (``m/44``),
    the coin type (``60`` for mainnet, ``1`` for testnets), the account, and the change
    with an optional address index. E.g. ``m/44'/60'/0'/0/0`` or ``m/44'/1'/0'/0``.

    :param derivation_path: The derivation path to check
    :return: ``True`` if the derivation path is valid
    :raises: FormatError: if the derivation path is not valid
    """
    messages = MESSAGES["derivation_path"]
    generic_message = "{}: {}".format(messages["generic_error"], derivation_path or UNDEFINED)
    try:
        parts: List[str] = derivation_path.split(PATH_DELIMITER)
    except (AttributeError, TypeError) as e:
        raise FormatError(
            "{}: {}".format(messages["not_string"], derivation_path or UNDEFINED),
            Reason.NOT_STRING,
        ) from e
    coin_type = parse_leading_int(parts[1]) if len(parts) > 1 else None

    # Checked on its own so the sequence below can index the parts safely
    assert_truth(
        ValidationRule(
            len(parts) == 4,
            ["{}: [".format(messages["not_valid_parts"]), *parts, "]"],
            Reason.WRONG_PART_COUNT,
        ),
        generic_message,
    )

    header = parts[0].split(PATH_SPLITTER)
    change_index = parts[3].split(PATH_SPLITTER)
    validation_sequence = [
        ValidationRule(
            lambda: header[0].lower() == PATH_HEADER_KEY,
            ["{}:".format(messages["not_valid_header_key"]), parts[0] or UNDEFINED],
            Reason.BAD_HEADER,
        ),
        ValidationRule(
            lambda: len(header) > 1 and parse_leading_int(header[1]) == PATH_PURPOSE,
            ["{}:".format(messages["not_valid_purpose"]), parts[0] or UNDEFINED],
            Reason.BAD_PURPOSE,
        ),
        ValidationRule(
            lambda: coin_type in (PATH_COIN_MAINNET, PATH_COIN_TESTNET),
            ["{}:".format(messages["not_valid_coin"]), parts[1] or UNDEFINED],
            Reason.BAD_COIN_TYPE,
        ),
        ValidationRule(
            lambda: _matches(MATCH_DIGITS, parts[2]),
            ["{}:".format(messages["not_valid_account"]), parts[2] or UNDEFINED],
            Reason.BAD_ACCOUNT_FORMAT,
        ),
        ValidationRule(
            lambda: all(_matches(MATCH_DIGITS, value) for value in change_index),
            ["{}:".format(messages["not_valid_change_index"]), parts[3] or UNDEFINED],
            Reason.BAD_CHANGE_INDEX_FORMAT,
        ),
        ValidationRule(
            lambda: len(change_index) <= 2,
            ["{}:".format(messages["not_valid_account_index"]), parts[3] or UNDEFINED],
            Reason.TOO_MANY_INDICES,
        ),
    ]
    return validate_sequence(validation_sequence, generic_message)


def _is_number(value: Any) -> bool:
    # bool is an int subclass and BigNumber is not a primitive
    return isinstance(value, (int, float)) and not isinstance(value, (bool, BigNumber))


def _is_safe_integer(value: Any) -> bool:
    if isinstance(value, float) and not value.is_integer():
        return False
    return abs(value) <= MAX_SAFE_INTEGER


def safe_integer_validator(integer: Any) -> bool:
    """
    Validate that a number is a positive integer that is not above :data:`~ewilib.common.MAX_SAFE_INTEGER`.

    Used for nonces, gas values and indexes. Strings are rejected even when they hold a number.

    :param integer: The integer to validate
    :return: ``True`` if the integer is safe and positive
    :raises: InstanceError: if the value is not a number
    :raises: RangeError: if the number is negative or not a safe integer
    """
    messages = MESSAGES["safe_integer"]
    validation_sequence = [
        ValidationRule(
            lambda: _is_number(integer),
            "{}: {}".format(messages["not_number"], integer),
            Reason.NOT_NUMBER,
        ),
        ValidationRule(
            lambda: integer >= 0,
            "{}: {}".format(messages["not_positive"], integer),
            Reason.NOT_POSITIVE,
        ),
        ValidationRule(
            lambda: _is_safe_integer(integer),
            "{}: {}".format(messages["not_safe"], integer),
            Reason.NOT_SAFE,
        ),
    ]
    return validate_sequence(
        validation_sequence,
        "{}: {}".format(messages["generic_error"], integer),
    )


def big_number_validator(big_number: Any) -> bool:
    """
    Validate that a value is a :class:`~ewilib.utils.BigNumber`.

    :param big_number: The big number to check
    :return: ``True`` if the value is a big number
    :raises: InstanceError: if it is anything else, including plain integers and numeric strings
    """
    messages = MESSAGES["big_number"]
    serialized = object_to_error_string(big_number)
    validation_sequence = [
        ValidationRule(
            lambda: isinstance(big_number, BigNumber),
            "{}: {}".format(messages["not_big_number"], serialized),
            Reason.NOT_BIG_NUMBER,
        ),
    ]
    return validate_sequence(
        validation_sequence,
        "{}: {}".format(messages["generic_error"], serialized),
    )


def address_validator(address: Any) -> bool:
    """
    Validate an Ethereum address: 40 hex characters, optionally ``0x`` prefixed.

    :param address: The address to check
    :return: ``True`` if the address has a valid format
    :raises: FormatError: if it is not a string, has the wrong length, or is not hex
    """
    messages = MESSAGES["address"]
    validation_sequence = [
        ValidationRule(
            lambda: isinstance(address, str),
            "{}: {}".format(messages["not_string"], object_to_error_string(address)),
            Reason.NOT_STRING,
        ),
        # A correctly sized address with bad characters gets the more specific format error
        ValidationRule(
            lambda: len(address) in (40, 42),
            "{}: {}".format(messages["not_length"], address or UNDEFINED),
            Reason.WRONG_LENGTH,
        ),
        ValidationRule(
            lambda: _matches(MATCH_ADDRESS, address),
            "{}: {}".format(messages["not_format"], address or UNDEFINED),
            Reason.BAD_PATTERN,
        ),
    ]
    return validate_sequence(
        validation_sequence,
        "{}: {}".format(messages["generic_error"], address or UNDEFINED),
    )


def hex_sequence_validator(hex_sequence: Any) -> bool:
    """
    Validate a hex string, optionally ``0x`` prefixed, of at most
    :data:`~ewilib.common.SEQUENCE_MAX_LENGTH` characters (prefix included).

    :param hex_sequence: The hex string to check
    :return: ``True`` if the string is valid
    :raises: FormatError: if it is not a string or not hex
    :raises: RangeError: if it is too long
    """
    messages = MESSAGES["hex_sequence"]
    validation_sequence = [
        ValidationRule(
            lambda: isinstance(hex_sequence, str),
            "{}: {}".format(messages["not_string"], object_to_error_string(hex_sequence)),
            Reason.NOT_STRING,
        ),
        ValidationRule(
            lambda: len(hex_sequence) <= SEQUENCE_MAX_LENGTH,
            "{}: {}".format(messages["too_big"], hex_sequence or UNDEFINED),
            Reason.TOO_BIG,
        ),
        ValidationRule(
            lambda: _matches(MATCH_HEX_STRING, hex_sequence),
            "{}: {}".format(messages["not_format"], hex_sequence or UNDEFINED),
            Reason.BAD_PATTERN,
        ),
    ]
    return validate_sequence(
        validation_sequence,
        "{}: {}".format(messages["generic_error"], hex_sequence or UNDEFINED),
    )


def message_validator(message: Any) -> bool:
    """
    Validate a message to be signed: any string of at most
    :data:`~ewilib.common.SEQUENCE_MAX_LENGTH` characters.

    :param message: The message to check
    :return: ``True`` if the message is valid
    :raises: FormatError: if it is not a string
    :raises: RangeError: if it is too long
    """
    messages = MESSAGES["message"]
    validation_sequence = [
        ValidationRule(
            lambda: isinstance(message, str),
            "{}: {}".format(messages["not_string"], object_to_error_string(message)),
            Reason.NOT_STRING,
        ),
        ValidationRule(
            lambda: len(message) <= SEQUENCE_MAX_LENGTH,
            "{}: {}".format(messages["too_big"], message or UNDEFINED),
            Reason.TOO_BIG,
        ),
    ]
    return validate_sequence(
        validation_sequence,
        "{}: {}".format(messages["generic_error"], message or UNDEFINED),
    )
