#! /usr/bin/env python3

# Ethereum wallet interaction script

if __name__ == '__main__':
    from ewilib._cli import main
    main()
else:
    raise ImportError('ewi is not importable. Import ewilib instead')
