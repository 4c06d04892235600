#! /usr/bin/env python3

from ewilib._cli import (
    parse_transaction,
    process_commands,
)
from ewilib.errors import (
    BadArgumentError,
    BAD_ARGUMENT,
    INVALID_FIELD,
    INVALID_FORMAT,
    NO_WALLET_TYPE,
    OUT_OF_RANGE,
    WRONG_INSTANCE,
)
from ewilib.utils import BigNumber

from eth_account import Account

import json
import unittest
from unittest import mock

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
MNEMONIC = "test test test test test test test test test test test junk"

class TestCLI(unittest.TestCase):
    def run_with_secret(self, args, secrets):
        with mock.patch("ewilib._cli.getpass.getpass", side_effect=secrets):
            return process_commands(args)

    def test_validate(self):
        self.assertEqual(process_commands(["validate", "address", ADDRESS]), {"valid": True})
        self.assertEqual(process_commands(["validate", "derivation_path", "m/44'/60'/0'/0/0"]), {"valid": True})
        self.assertEqual(process_commands(["validate", "safe_integer", "5"]), {"valid": True})
        self.assertEqual(process_commands(["validate", "big_number", "0x10"]), {"valid": True})

    def test_validate_failures(self):
        result = process_commands(["validate", "address", "0x1234"])
        self.assertEqual(result["code"], INVALID_FORMAT)
        self.assertIn("0x1234", result["error"])
        self.assertEqual(process_commands(["validate", "safe_integer", "-1"])["code"], OUT_OF_RANGE)
        self.assertEqual(process_commands(["validate", "safe_integer", "five"])["code"], WRONG_INSTANCE)
        self.assertEqual(process_commands(["validate", "big_number", "five"])["code"], BAD_ARGUMENT)
        self.assertEqual(process_commands(["validate", "message", "x" * 1025])["code"], OUT_OF_RANGE)

    def test_no_wallet_type(self):
        self.assertEqual(process_commands(["getaddress"])["code"], NO_WALLET_TYPE)

    def test_software_needs_secret(self):
        self.assertEqual(process_commands(["-t", "software", "getaddress"])["code"], BAD_ARGUMENT)

    def test_getaddress_private_key(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "getaddress"], [PRIVATE_KEY])
        self.assertEqual(result, {"address": ADDRESS, "derivation_path": None})

    def test_private_key_with_path(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--path", "m/44'/60'/0'/0/0", "getaddress"], [PRIVATE_KEY])
        self.assertEqual(result["code"], BAD_ARGUMENT)

    def test_getaddress_mnemonic(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--address-index", "1", "getaddress"], [MNEMONIC, ""])
        self.assertEqual(result, {"address": "0x70997970C51812dc3A010C7d01b50e0d17dc79C8", "derivation_path": "m/44'/60'/0'/0/1"})

    def test_address_index(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--address-index", "5000", "--address-count", "1", "getaddresses"], [MNEMONIC, ""])
        self.assertEqual(len(result["addresses"]), 1)
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--address-index", "-1", "getaddress"], [MNEMONIC, ""])
        self.assertEqual(result["code"], OUT_OF_RANGE)
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--address-index", "1", "getaddress"], [PRIVATE_KEY])
        self.assertEqual(result["code"], BAD_ARGUMENT)

    def test_getaddresses(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--address-count", "2", "getaddresses"], [MNEMONIC, ""])
        self.assertEqual(len(result["addresses"]), 2)

    def test_bad_path(self):
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "--path", "m/44'/99'/0'/0", "getaddress"], [MNEMONIC, ""])
        self.assertEqual(result["code"], INVALID_FORMAT)

    def test_signtx(self):
        tx = json.dumps({
            "nonce": 0,
            "gas_price": "20000000000",
            "gas_limit": 21000,
            "to": ADDRESS,
            "value": "1000000000000000000",
            "chain_id": 1,
        })
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "signtx", tx], [PRIVATE_KEY])
        self.assertEqual(Account.recover_transaction(result["raw"]), ADDRESS)

    def test_signtx_invalid(self):
        tx = json.dumps({"nonce": -1, "gas_price": 1, "gas_limit": 21000, "to": ADDRESS})
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "signtx", tx], [PRIVATE_KEY])
        self.assertEqual(result["code"], INVALID_FIELD)
        self.assertIn("nonce", result["error"])
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "signtx", "{not json"], [PRIVATE_KEY])
        self.assertEqual(result["code"], BAD_ARGUMENT)

    def test_signmessage_verifymessage(self):
        signature = self.run_with_secret(["-t", "software", "--stdin-secret", "signmessage", "hello"], [PRIVATE_KEY])["signature"]
        result = self.run_with_secret(["-t", "software", "--stdin-secret", "verifymessage", "hello", signature], [PRIVATE_KEY])
        self.assertEqual(result, {"valid": True})

    def test_missing_hardware_support(self):
        with mock.patch.dict("sys.modules", {"ewilib.transports.ledger": None}):
            result = process_commands(["-t", "ledger", "getaddress"])
        self.assertIn("ewi[ledger]", result["error"])

class TestParseTransaction(unittest.TestCase):
    def test_amounts(self):
        tx = parse_transaction('{"value": "0x10", "gasPrice": 5, "gas": "21000", "nonce": 1, "data": "0x"}')
        self.assertIsInstance(tx["value"], BigNumber)
        self.assertIsInstance(tx["gasPrice"], BigNumber)
        self.assertEqual(tx["gas"], 21000)
        self.assertNotIsInstance(tx["nonce"], BigNumber)
        self.assertEqual(tx["data"], "0x")

    def test_not_an_object(self):
        with self.assertRaises(BadArgumentError):
            parse_transaction("[1, 2]")

if __name__ == "__main__":
    unittest.main()
