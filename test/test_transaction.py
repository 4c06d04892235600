#! /usr/bin/env python3

from ewilib.common import Chain
from ewilib.errors import (
    InvalidFieldError,
    RangeError,
    ValidationError,
    INVALID_FIELD,
)
from ewilib.transaction import (
    SignedTransaction,
    TransactionRequest,
    eip155_v,
)
from ewilib.utils import big_number

from eth_account import Account
from eth_utils import keccak
import rlp

import unittest

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TO = "0x3535353535353535353535353535353535353535"

def make_tx(**kwargs):
    tx = {
        "nonce": 9,
        "gas_price": big_number(20 * 10 ** 9),
        "gas_limit": 21000,
        "to": TO,
        "value": big_number(10 ** 18),
    }
    tx.update(kwargs)
    return tx

class TestTransactionRequest(unittest.TestCase):
    def test_from_dict(self):
        request = TransactionRequest.from_dict(make_tx(data="0xabc"))
        self.assertEqual(request.nonce, 9)
        self.assertEqual(request.gas_price, 20 * 10 ** 9)
        self.assertEqual(request.value, 10 ** 18)
        self.assertEqual(request.data, bytes.fromhex("0abc"))
        self.assertEqual(request.chain_id, 1)
        self.assertEqual(request.to, TO)

    def test_defaults(self):
        tx = make_tx()
        del tx["value"]
        request = TransactionRequest.from_dict(tx, Chain.TEST)
        self.assertEqual(request.value, 0)
        self.assertEqual(request.data, b"")
        self.assertEqual(request.chain_id, Chain.TEST.chain_id)

    def test_aliases(self):
        tx = {
            "nonce": 0,
            "gasPrice": 1,
            "gas": 21000,
            "to": TO[2:],
            "inputData": "0x01",
            "chainId": 5,
        }
        request = TransactionRequest.from_dict(tx)
        self.assertEqual(request.gas_price, 1)
        self.assertEqual(request.gas_limit, 21000)
        self.assertEqual(request.data, b"\x01")
        self.assertEqual(request.chain_id, 5)
        self.assertTrue(request.to.startswith("0x"))

    def test_checksums_address(self):
        request = TransactionRequest.from_dict(make_tx(to="0x2c7536e3605d9c16a7a3d7b1898e529396a65c23"))
        self.assertEqual(request.to, "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23")

    def test_missing_field(self):
        tx = make_tx()
        del tx["nonce"]
        with self.assertRaises(InvalidFieldError) as cm:
            TransactionRequest.from_dict(tx)
        self.assertEqual(cm.exception.field, "nonce")
        self.assertEqual(cm.exception.get_code(), INVALID_FIELD)

    def test_invalid_fields(self):
        for field, value in [
            ("nonce", -1),
            ("nonce", "1"),
            ("gas_price", 2 ** 60),
            ("gas_limit", 1.5),
            ("to", "0x1234"),
            ("value", "100"),
            ("data", "0xzz"),
            ("chain_id", True),
        ]:
            with self.subTest(field=field, value=value):
                with self.assertRaises(InvalidFieldError) as cm:
                    TransactionRequest.from_dict(make_tx(**{field: value}))
                self.assertEqual(cm.exception.field, field)
                self.assertIn(field, cm.exception.get_msg())
                self.assertIsInstance(cm.exception.__cause__, ValidationError)

    def test_unsafe_plain_integer_amount(self):
        with self.assertRaises(InvalidFieldError) as cm:
            TransactionRequest.from_dict(make_tx(value=10 ** 18))
        self.assertIsInstance(cm.exception.__cause__, RangeError)

    def test_not_a_mapping(self):
        with self.assertRaises(InvalidFieldError) as cm:
            TransactionRequest.from_dict(["nonce", 1])
        self.assertEqual(cm.exception.field, "transaction")

    def test_serialize_matches_eth_account(self):
        request = TransactionRequest.from_dict(make_tx(data="0xdeadbeef"))
        signed = Account.sign_transaction(request.to_dict(), PRIVATE_KEY)
        self.assertEqual(request.serialize(signed.v, signed.r, signed.s), bytes(signed.raw_transaction))
        r = signed.r.to_bytes(32, byteorder="big")
        s = signed.s.to_bytes(32, byteorder="big")
        self.assertEqual(request.serialize(signed.v, r, s), bytes(signed.raw_transaction))

    def test_serialize_fields(self):
        request = TransactionRequest.from_dict(make_tx())
        decoded = rlp.decode(request.serialize(37, 1, 2))
        self.assertEqual(len(decoded), 9)
        self.assertEqual(decoded[3], bytes.fromhex(TO[2:]))
        self.assertEqual(decoded[6], b"\x25")

class TestSignedTransaction(unittest.TestCase):
    def test_to_dict(self):
        signed = SignedTransaction(b"\x01\x02", 37, 1, 255)
        self.assertEqual(signed.hash, keccak(b"\x01\x02"))
        result = signed.to_dict()
        self.assertEqual(result["raw"], "0x0102")
        self.assertEqual(result["hash"], "0x" + keccak(b"\x01\x02").hex())
        self.assertEqual(result["v"], 37)
        self.assertEqual(result["s"], "0xff")

    def test_eip155_v(self):
        self.assertEqual(eip155_v(0, 1), 37)
        self.assertEqual(eip155_v(28, 1), 38)
        self.assertEqual(eip155_v(1, None), 28)
        self.assertEqual(eip155_v(27, None), 27)

if __name__ == "__main__":
    unittest.main()
