"""
Version of the nft_contract package.

Bump the minor version when the public operation surface or any error code
changes; the free-mint signature format is covered by the same rule.
"""

__version__ = "0.1.0"
