#! /usr/bin/env python3

from .commands import (
    WALLET_TYPES,
    VALIDATORS,
    get_wallet,
    getaddress,
    getaddresses,
    signmessage,
    signtx,
    validate,
    verifymessage,
)
from .common import (
    ADDRESS_COUNT,
    Chain,
)
from .errors import (
    handle_errors,
    BadArgumentError,
    DEVICE_CONN_ERROR,
    HELP_TEXT,
    MISSING_ARGUMENTS,
    NO_WALLET_TYPE,
)
from .utils import big_number
from .wallet import (
    EthereumWallet,
    get_derivation_path,
)
from . import __version__

import argparse
import getpass
import logging
import json
import sys

from typing import (
    Any,
    Dict,
    IO,
    List,
    NoReturn,
    Optional,
    Union,
)


# Transaction fields that may exceed the safe integer range
AMOUNT_FIELDS = ["value", "gas_price", "gasPrice", "gas_limit", "gasLimit", "gas"]


def parse_transaction(tx_json: str) -> Dict[str, Any]:
    """
    Parse a transaction given on the command line. Amounts may be integers or decimal or hex strings.
    """
    try:
        tx = json.loads(tx_json)
    except ValueError as e:
        raise BadArgumentError("Transaction is not valid JSON: {}".format(e)) from e
    if not isinstance(tx, dict):
        raise BadArgumentError("Transaction must be a JSON object")
    for field in AMOUNT_FIELDS:
        if field in tx and isinstance(tx[field], (int, str)) and not isinstance(tx[field], bool):
            tx[field] = big_number(tx[field])
    return tx


def parse_validate_value(kind: str, value: str) -> Any:
    if kind == "safe_integer":
        try:
            return json.loads(value)
        except ValueError:
            return value
    if kind == "big_number":
        return big_number(value)
    return value


def getaddress_handler(args: argparse.Namespace, wallet: EthereumWallet) -> Dict[str, Any]:
    return getaddress(wallet, display=args.display)

def getaddresses_handler(args: argparse.Namespace, wallet: EthereumWallet) -> Dict[str, Any]:
    return getaddresses(wallet)

def signtx_handler(args: argparse.Namespace, wallet: EthereumWallet) -> Dict[str, Union[str, int]]:
    return signtx(wallet, parse_transaction(args.tx))

def signmessage_handler(args: argparse.Namespace, wallet: EthereumWallet) -> Dict[str, str]:
    return signmessage(wallet, message=args.message)

def verifymessage_handler(args: argparse.Namespace, wallet: EthereumWallet) -> Dict[str, bool]:
    return verifymessage(wallet, message=args.message, signature=args.signature)

def validate_handler(args: argparse.Namespace) -> Dict[str, bool]:
    return validate(args.kind, parse_validate_value(args.kind, args.value))

class EWIHelpFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
    pass

class EWIArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.formatter_class = EWIHelpFormatter

    def print_usage(self, file: Optional[IO[str]] = None) -> None:
        if file is None:
            file = sys.stderr
        super().print_usage(file)

    def print_help(self, file: Optional[IO[str]] = None) -> None:
        if file is None:
            file = sys.stderr
        super().print_help(file)
        error = {'error': 'Help text requested', 'code': HELP_TEXT}
        print(json.dumps(error))

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        args = {'prog': self.prog, 'message': message}
        error = {'error': '%(prog)s: error: %(message)s' % args, 'code': MISSING_ARGUMENTS}
        print(json.dumps(error))
        self.exit(2)

def get_parser() -> EWIArgumentParser:
    parser = EWIArgumentParser(description='Ethereum Wallet Interface, version {}.\nGet addresses and sign transactions and messages with software, Trezor and Ledger wallets. Responses are in JSON format.'.format(__version__))
    parser.add_argument('--wallet-type', '-t', help='Specify the type of wallet to use', choices=WALLET_TYPES)
    parser.add_argument('--device-path', '-d', help='Specify the transport path of the Trezor device to connect to. The first device found is used if not given.')
    parser.add_argument('--path', help="The derivation path of the address to use, e.g. m/44'/60'/0'/0/0. Defaults to the standard path of the chain.")
    parser.add_argument('--chain', help='Select chain to work with', type=Chain.argparse, choices=list(Chain), default=Chain.MAIN) # type: ignore
    parser.add_argument('--address-index', help='Use the address at this index under the change level of the derivation path', type=int)
    parser.add_argument('--address-count', help='The number of addresses to derive', type=int, default=ADDRESS_COUNT)
    parser.add_argument('--stdin-secret', help='Enter the private key or mnemonic of a software wallet on the command line', action='store_true')
    parser.add_argument('--debug', help='Print debug statements', action='store_true')
    parser.add_argument('--version', action='version', version='%(prog)s {}'.format(__version__))

    subparsers = parser.add_subparsers(description='Commands', dest='command')
    # work-around to make subparser required
    subparsers.required = True

    getaddress_parser = subparsers.add_parser('getaddress', help='Get the address of the wallet')
    getaddress_parser.add_argument('--display', help='Show the address on the device', action='store_true')
    getaddress_parser.set_defaults(func=getaddress_handler)

    getaddresses_parser = subparsers.add_parser('getaddresses', help='Get every address derived by the wallet')
    getaddresses_parser.set_defaults(func=getaddresses_handler)

    signtx_parser = subparsers.add_parser('signtx', help='Sign a transaction')
    signtx_parser.add_argument('tx', help='The transaction as a JSON object with nonce, gas_price, gas_limit, to, value, data and chain_id')
    signtx_parser.set_defaults(func=signtx_handler)

    signmsg_parser = subparsers.add_parser('signmessage', help='Sign a message')
    signmsg_parser.add_argument('message', help='The message to sign')
    signmsg_parser.set_defaults(func=signmessage_handler)

    verifymsg_parser = subparsers.add_parser('verifymessage', help='Verify that a message was signed by the wallet')
    verifymsg_parser.add_argument('message', help='The signed message')
    verifymsg_parser.add_argument('signature', help='The signature returned by signmessage')
    verifymsg_parser.set_defaults(func=verifymessage_handler)

    validate_parser = subparsers.add_parser('validate', help='Check a value with one of the validators. Does not need a wallet')
    validate_parser.add_argument('kind', help='The kind of value', choices=list(VALIDATORS))
    validate_parser.add_argument('value', help='The value to check')
    validate_parser.set_defaults(func=validate_handler)

    return parser

def get_wallet_kwargs(args: argparse.Namespace) -> Dict[str, Any]:
    derivation_path = args.path
    if args.address_index is not None:
        derivation_path = get_derivation_path(args.path, args.chain).child(args.address_index)
    kwargs: Dict[str, Any] = {
        'derivation_path': derivation_path,
        'address_count': args.address_count,
        'chain': args.chain,
    }
    if args.wallet_type == 'trezor':
        kwargs['device_path'] = args.device_path
    elif args.wallet_type == 'software':
        if not args.stdin_secret:
            raise BadArgumentError('Software wallets need a private key or mnemonic, use --stdin-secret')
        secret = getpass.getpass('Enter your private key or mnemonic: ').strip()
        if len(secret.split()) > 1:
            kwargs['mnemonic'] = secret
            kwargs['passphrase'] = getpass.getpass('Enter your mnemonic passphrase (empty for none): ')
        else:
            if args.path is not None or args.address_index is not None:
                raise BadArgumentError('--path and --address-index cannot be used with a private key')
            del kwargs['derivation_path']
            del kwargs['address_count']
            kwargs['private_key'] = secret
    return kwargs

def process_commands(cli_args: List[str]) -> Any:
    parser = get_parser()
    args = parser.parse_args(cli_args)

    command = args.command
    result: Dict[str, Any] = {}

    # Setup debug logging
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    # Validators do not need a wallet
    if command == 'validate':
        with handle_errors(result=result, debug=args.debug):
            result = args.func(args)
        return result

    if not args.wallet_type:
        return {'error': 'You must specify a wallet type for all commands except validate', 'code': NO_WALLET_TYPE}

    wallet = None
    with handle_errors(result=result, code=DEVICE_CONN_ERROR, debug=args.debug):
        wallet = get_wallet(args.wallet_type, **get_wallet_kwargs(args))
    if wallet is None:
        return result

    # Do the commands
    with handle_errors(result=result, debug=args.debug):
        result = args.func(args, wallet)

    with handle_errors(result=result, debug=args.debug):
        wallet.close()

    return result

def main() -> None:
    result = process_commands(sys.argv[1:])
    print(json.dumps(result))
