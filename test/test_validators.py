#! /usr/bin/env python3

from ewilib.errors import (
    FormatError,
    InstanceError,
    RangeError,
    ValidationError,
    INVALID_FORMAT,
    OUT_OF_RANGE,
    WRONG_INSTANCE,
)
from ewilib.utils import big_number
from ewilib.validators import (
    Reason,
    address_validator,
    big_number_validator,
    derivation_path_validator,
    hex_sequence_validator,
    message_validator,
    safe_integer_validator,
)

import unittest

class TestDerivationPathValidator(unittest.TestCase):
    def assertReason(self, path, error, reason):
        with self.assertRaises(error) as cm:
            derivation_path_validator(path)
        self.assertEqual(cm.exception.reason, reason)
        return cm.exception

    def test_valid(self):
        for path in ["m/44'/60'/0'/0", "m/44'/1'/0'/0", "m/44'/60'/0'/0/0", "m/44'/60'/3'/1/12", "M/44'/60'/0'/0"]:
            with self.subTest(path=path):
                self.assertTrue(derivation_path_validator(path))
                # No side effects
                self.assertTrue(derivation_path_validator(path))

    def test_bad_header(self):
        e = self.assertReason("x/44'/60'/0'/0", FormatError, Reason.BAD_HEADER)
        self.assertIn("x/44", e.get_msg())
        self.assertEqual(e.get_code(), INVALID_FORMAT)

    def test_bad_purpose(self):
        self.assertReason("m/49'/60'/0'/0", FormatError, Reason.BAD_PURPOSE)
        self.assertReason("m'/60'/0'/0", FormatError, Reason.BAD_PURPOSE)

    def test_bad_coin_type(self):
        e = self.assertReason("m/44'/99'/0'/0", FormatError, Reason.BAD_COIN_TYPE)
        self.assertIn("99", e.get_msg())

    def test_bad_account(self):
        self.assertReason("m/44'/60'/a'/0", FormatError, Reason.BAD_ACCOUNT_FORMAT)

    def test_bad_change_index(self):
        self.assertReason("m/44'/60'/0'/0/x", FormatError, Reason.BAD_CHANGE_INDEX_FORMAT)

    def test_too_many_indices(self):
        self.assertReason("m/44'/60'/0'/0/1/2", FormatError, Reason.TOO_MANY_INDICES)

    def test_wrong_part_count(self):
        e = self.assertReason("m/44'/60'/0", FormatError, Reason.WRONG_PART_COUNT)
        self.assertIn("m/44", e.get_msg())
        self.assertReason("", FormatError, Reason.WRONG_PART_COUNT)

    def test_not_string(self):
        e = self.assertReason(None, FormatError, Reason.NOT_STRING)
        self.assertIn("undefined", e.get_msg())
        self.assertReason(44, FormatError, Reason.NOT_STRING)

    def test_message_includes_generic_context(self):
        e = self.assertReason("m/44'/99'/0'/0", FormatError, Reason.BAD_COIN_TYPE)
        self.assertIn("Could not validate the derivation path: m/44'/99'/0'/0", e.get_msg())

class TestSafeIntegerValidator(unittest.TestCase):
    def test_valid(self):
        for value in [0, 1, 9007199254740991, 5.0]:
            with self.subTest(value=value):
                self.assertTrue(safe_integer_validator(value))

    def test_not_safe(self):
        with self.assertRaises(RangeError) as cm:
            safe_integer_validator(9007199254740992)
        self.assertEqual(cm.exception.reason, Reason.NOT_SAFE)
        self.assertEqual(cm.exception.get_code(), OUT_OF_RANGE)
        with self.assertRaises(RangeError):
            safe_integer_validator(1.5)
        with self.assertRaises(RangeError):
            safe_integer_validator(float("inf"))

    def test_not_positive(self):
        with self.assertRaises(RangeError) as cm:
            safe_integer_validator(-1)
        self.assertEqual(cm.exception.reason, Reason.NOT_POSITIVE)

    def test_not_a_number(self):
        for value in ["5", None, True, [1], big_number(5)]:
            with self.subTest(value=value):
                with self.assertRaises(InstanceError) as cm:
                    safe_integer_validator(value)
                self.assertEqual(cm.exception.reason, Reason.NOT_NUMBER)
                self.assertEqual(cm.exception.get_code(), WRONG_INSTANCE)

class TestBigNumberValidator(unittest.TestCase):
    def test_valid(self):
        self.assertTrue(big_number_validator(big_number(2 ** 80)))
        self.assertTrue(big_number_validator(big_number("0x10")))

    def test_invalid(self):
        for value in [5, "5", None, {"a": 1}]:
            with self.subTest(value=value):
                with self.assertRaises(InstanceError) as cm:
                    big_number_validator(value)
                self.assertEqual(cm.exception.reason, Reason.NOT_BIG_NUMBER)

    def test_message_serializes_value(self):
        with self.assertRaises(InstanceError) as cm:
            big_number_validator({"a": 1})
        self.assertIn('{"a": 1}', cm.exception.get_msg())
        with self.assertRaises(InstanceError) as cm:
            big_number_validator(None)
        self.assertIn("undefined", cm.exception.get_msg())

    def test_self_referencing_value(self):
        value = []
        value.append(value)
        with self.assertRaises(InstanceError) as cm:
            big_number_validator(value)
        self.assertIn("undefined", cm.exception.get_msg())

class TestAddressValidator(unittest.TestCase):
    def test_valid(self):
        self.assertTrue(address_validator("0x" + "a" * 40))
        self.assertTrue(address_validator("A" * 40))
        self.assertTrue(address_validator("0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"))

    def test_wrong_length(self):
        with self.assertRaises(FormatError) as cm:
            address_validator("a" * 41)
        self.assertEqual(cm.exception.reason, Reason.WRONG_LENGTH)
        with self.assertRaises(FormatError) as cm:
            address_validator("")
        self.assertEqual(cm.exception.reason, Reason.WRONG_LENGTH)
        self.assertIn("undefined", cm.exception.get_msg())

    def test_bad_pattern(self):
        with self.assertRaises(FormatError) as cm:
            address_validator("0x" + "g" * 40)
        self.assertEqual(cm.exception.reason, Reason.BAD_PATTERN)
        with self.assertRaises(FormatError) as cm:
            address_validator("ab" + "a" * 40)
        self.assertEqual(cm.exception.reason, Reason.BAD_PATTERN)

    def test_not_string(self):
        with self.assertRaises(FormatError) as cm:
            address_validator(b"a" * 40)
        self.assertEqual(cm.exception.reason, Reason.NOT_STRING)

class TestHexSequenceValidator(unittest.TestCase):
    def test_valid(self):
        for value in ["", "0x", "0xdeadBEEF", "abc", "0x" + "f" * 1022]:
            with self.subTest(value=value):
                self.assertTrue(hex_sequence_validator(value))

    def test_too_big(self):
        for value in ["0x" + "f" * 1024, "0x" + "f" * 1023, "z" * 1025]:
            with self.subTest(length=len(value)):
                with self.assertRaises(RangeError) as cm:
                    hex_sequence_validator(value)
                self.assertEqual(cm.exception.reason, Reason.TOO_BIG)

    def test_bad_pattern(self):
        with self.assertRaises(FormatError) as cm:
            hex_sequence_validator("0xhello")
        self.assertEqual(cm.exception.reason, Reason.BAD_PATTERN)

    def test_not_string(self):
        with self.assertRaises(FormatError) as cm:
            hex_sequence_validator(12)
        self.assertEqual(cm.exception.reason, Reason.NOT_STRING)

class TestMessageValidator(unittest.TestCase):
    def test_valid(self):
        for value in ["hello", "", "not hex at all!", "x" * 1024]:
            with self.subTest(length=len(value)):
                self.assertTrue(message_validator(value))

    def test_too_big(self):
        with self.assertRaises(RangeError) as cm:
            message_validator("x" * 1025)
        self.assertEqual(cm.exception.reason, Reason.TOO_BIG)

    def test_not_string(self):
        with self.assertRaises(FormatError) as cm:
            message_validator(None)
        self.assertEqual(cm.exception.reason, Reason.NOT_STRING)
        self.assertIsInstance(cm.exception, ValidationError)

if __name__ == "__main__":
    unittest.main()
