"""
Kernel layer.

`sendswap/kernels/python/` holds the integer-only pricing and liquidity kernels
that the engine composes. They know nothing about accounts, ledgers or events.
"""
