__all__ = [
    'ledger',
    'software',
    'trezor',
]
