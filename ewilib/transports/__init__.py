__all__ = [
    'ledger',
    'trezor',
]
