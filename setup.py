# -*- coding: utf-8 -*-
from setuptools import setup

packages = \
['ewilib',
 'ewilib.transports',
 'ewilib.wallets']

package_data = \
{'': ['*']}

modules = \
['ewi']
install_requires = \
['eth-account>=0.13,<0.15',
 'eth-utils>=2.0.0',
 'rlp>=3.0.0',
 'typing-extensions>=4.4,<5.0']

extras_require = \
{'ledger': ['ledgereth>=0.9'],
 'test': ['pytest>=7.0'],
 'trezor': ['trezor>=0.13,<0.14', 'libusb1>=1.7,<4']}

entry_points = \
{'console_scripts': ['ewi = ewilib._cli:main']}

setup_kwargs = {
    'name': 'ewi',
    'version': '1.0.0',
    'description': 'A library for working with Ethereum software and hardware wallets',
    'long_description': "# Ethereum Wallet Interface\n\nThe Ethereum Wallet Interface is a Python library and command line tool that gives one interface to software, Trezor and Ledger Ethereum wallets.\nCalling code gets addresses, signs transactions and signs messages without knowing which wallet is in use.\nPython software can use the provided library (`ewilib`). Software in other languages can execute the `ewi` tool.\n\n## Install\n\n```\npip3 install .\n```\n\nHardware wallet support needs the device libraries:\n\n```\npip3 install .[trezor,ledger]\n```\n\n## Usage\n\n```\n./ewi.py -t <software|trezor|ledger> [--path <derivation path>] <command> <command args>\n```\n\nSoftware wallets read their private key or mnemonic with `--stdin-secret`.\nAll output will be in JSON form and sent to `stdout`.\nTo see a complete list of available commands and global parameters, run `./ewi.py --help`.\n\n## License\n\nThis project is available under the MIT License.\n",
    'author': 'The EWI developers',
    'author_email': 'None',
    'maintainer': 'None',
    'maintainer_email': 'None',
    'url': 'None',
    'packages': packages,
    'package_data': package_data,
    'py_modules': modules,
    'install_requires': install_requires,
    'extras_require': extras_require,
    'entry_points': entry_points,
    'python_requires': '>=3.8',
}


setup(**setup_kwargs)
