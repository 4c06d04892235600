"""
Validation Sequences
********************

Validators in :mod:`~ewilib.validators` describe their checks as an ordered list of
:class:`ValidationRule`. :func:`validate_sequence` evaluates them in order and stops at the
first failing rule, so structural checks (is it a string?) must come before content checks
(does it match a pattern?).
"""

from enum import Enum
import json
import logging
from typing import (
    Any,
    Callable,
    NamedTuple,
    Optional,
    Sequence,
    Type,
    Union,
)

from .common import UNDEFINED
from .errors import (
    FormatError,
    InstanceError,
    RangeError,
    ValidationError,
)


logger = logging.getLogger(__name__)

HIGH = "high" #: A failing rule raises
LOW = "low" #: A failing rule only logs a warning


class Reason(Enum):
    """
    The category of a failed validation rule
    """
    NOT_STRING = "not-a-string"
    WRONG_PART_COUNT = "wrong-part-count"
    BAD_HEADER = "bad-header"
    BAD_PURPOSE = "bad-purpose"
    BAD_COIN_TYPE = "bad-coin-type"
    BAD_ACCOUNT_FORMAT = "bad-account-format"
    BAD_CHANGE_INDEX_FORMAT = "bad-change-index-format"
    TOO_MANY_INDICES = "too-many-indices"
    NOT_NUMBER = "not-a-number"
    NOT_POSITIVE = "not-positive"
    NOT_SAFE = "not-safe"
    NOT_BIG_NUMBER = "not-big-number"
    WRONG_LENGTH = "wrong-length"
    BAD_PATTERN = "bad-pattern"
    TOO_BIG = "too-big"
    INDEX_OUT_OF_RANGE = "index-out-of-range"

    def __str__(self) -> str:
        return self.value

    @property
    def error(self) -> Type[ValidationError]:
        """
        The exception class raised for this category.
        """
        if self in (Reason.NOT_POSITIVE, Reason.NOT_SAFE, Reason.TOO_BIG, Reason.INDEX_OUT_OF_RANGE):
            return RangeError
        if self in (Reason.NOT_NUMBER, Reason.NOT_BIG_NUMBER):
            return InstanceError
        return FormatError


Message = Union[str, Sequence[str]]


class ValidationRule(NamedTuple):
    """
    A single check of a validation sequence.

    ``expression`` is either a boolean or a zero argument callable returning one.
    Callables are only evaluated once every rule before them passed.
    """
    expression: Union[bool, Callable[[], bool]]
    message: Message
    reason: Reason
    level: str = HIGH


def join_message(message: Message) -> str:
    """
    Join message fragments into a single string.
    """
    if isinstance(message, str):
        return message
    return " ".join(str(fragment) for fragment in message)


def object_to_error_string(value: Any) -> str:
    """
    Serialize any value so it can be shown in an error message.

    Falls back to :data:`~ewilib.common.UNDEFINED` for ``None`` and for values that cannot be serialized safely,
    like containers that reference themselves.
    """
    if value is None:
        return UNDEFINED
    try:
        return json.dumps(value, default=repr)
    except (TypeError, ValueError, RecursionError):
        return UNDEFINED


def assert_truth(rule: ValidationRule, context: Optional[str] = None) -> bool:
    """
    Evaluate a single rule.

    :param rule: The rule to evaluate
    :param context: A generic message appended to the rule message when the rule fails
    :return: Whether the rule passed. Only ``low`` level rules can return ``False``
    :raises: ValidationError: if a ``high`` level rule fails
    """
    expression = rule.expression
    if callable(expression):
        expression = expression()
    if expression:
        return True

    message = join_message(rule.message)
    if rule.level == LOW:
        logger.warning(message)
        return False
    if context:
        message = "{}. {}".format(message, context)
    raise rule.reason.error(message, rule.reason)


def validate_sequence(rules: Sequence[ValidationRule], generic_message: str) -> bool:
    """
    Evaluate rules in order, failing on the first one that does not pass.

    :param rules: The ordered rules
    :param generic_message: Message naming the validated value, appended to the failing rule's message.
        Raised on its own if ``rules`` is empty or contains something that is not a :class:`ValidationRule`
    :return: ``True`` if no ``high`` level rule failed
    :raises: ValidationError: if a rule failed or the rules are malformed
    """
    if (
        not isinstance(rules, (list, tuple))
        or not rules
        or not all(isinstance(rule, ValidationRule) for rule in rules)
    ):
        raise ValidationError(generic_message)
    for rule in rules:
        assert_truth(rule, generic_message)
    return True
