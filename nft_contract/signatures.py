"""
nft_contract.signatures — free-mint authorization signatures (secp256k1).

Wire format
-----------
The authorized signer signs, with Ethereum's personal-message scheme, the
Keccak-256 of the tightly packed tuple

    recipient (address, 20B) || quantity (uint256, 32B BE) || authToken (bytes32)

i.e. exactly what ethers' `solidityPackedKeccak256(["address","uint256","bytes32"], …)`
followed by `signer.signMessage(getBytes(hash))` produces. The signature is the
usual 65-byte `r || s || v`.

Verification rules
------------------
* `v` must be 27/28 (0/1 is normalized); `r`, `s` in range; `s` in the lower
  half of the curve order (no malleable twins).
* The recovered address must equal the configured signer. An unset signer
  (zero address) never matches.
* The recipient is always the invoking caller, so a signature issued for one
  address cannot be redeemed by another.
* Every failure raises the same SignatureVerificationFailed, regardless of
  which field was wrong.

Elliptic-curve math is delegated to `py_ecc.secp256k1`.
"""

from __future__ import annotations

from typing import Optional, Tuple

from py_ecc.secp256k1 import ecdsa_raw_recover, ecdsa_raw_sign, privtopub

from .errors import SignatureVerificationFailed
from .hashing import eth_signed_message_hash, keccak256, solidity_packed_keccak256
from .types import ZERO_ADDRESS, hex_to_bytes

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_HALF_N = SECP256K1_N // 2

SIGNATURE_LEN = 65
FREE_MINT_TYPES = ("address", "uint256", "bytes32")


# ---- digests -----------------------------------------------------------------


def free_mint_digest(recipient: bytes, quantity: int, auth_token: bytes) -> bytes:
    """Keccak-256 over the packed (recipient, quantity, authToken) tuple."""
    return solidity_packed_keccak256(FREE_MINT_TYPES, (recipient, quantity, auth_token))


# ---- keys & addresses --------------------------------------------------------


def _priv_bytes(private_key) -> bytes:
    b = hex_to_bytes(private_key)
    if len(b) != 32:
        raise ValueError("private key must be 32 bytes")
    k = int.from_bytes(b, "big")
    if not 0 < k < SECP256K1_N:
        raise ValueError("private key out of range")
    return b


def public_key_to_address(x: int, y: int) -> bytes:
    return keccak256(x.to_bytes(32, "big") + y.to_bytes(32, "big"))[12:]


def address_from_private_key(private_key) -> bytes:
    x, y = privtopub(_priv_bytes(private_key))
    return public_key_to_address(x, y)


# ---- signing (off-chain issuers, tests) --------------------------------------


def sign_message_hash(private_key, message_hash: bytes) -> bytes:
    """
    Personal-sign a 32-byte hash (like `signer.signMessage(getBytes(hash))`).
    Returns the 65-byte r||s||v signature with v in {27, 28}.
    """
    digest = eth_signed_message_hash(message_hash)
    v, r, s = ecdsa_raw_sign(digest, _priv_bytes(private_key))
    return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])


def sign_free_mint(private_key, recipient: bytes, quantity: int, auth_token: bytes) -> bytes:
    return sign_message_hash(private_key, free_mint_digest(recipient, quantity, auth_token))


# ---- recovery ----------------------------------------------------------------


def split_signature(signature) -> Optional[Tuple[int, int, int]]:
    """Return (v, r, s) for a well-formed, non-malleable signature, else None."""
    try:
        sig = hex_to_bytes(signature)
    except (TypeError, ValueError):
        return None
    if len(sig) != SIGNATURE_LEN:
        return None
    r = int.from_bytes(sig[0:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    v = sig[64]
    if v < 27:
        v += 27
    if v not in (27, 28):
        return None
    if not (0 < r < SECP256K1_N) or not (0 < s <= _HALF_N):
        return None
    return v, r, s


def recover_signer(message_hash: bytes, signature) -> Optional[bytes]:
    """
    Recover the address that personal-signed `message_hash`.
    Returns None when the signature is malformed or does not recover.
    """
    vrs = split_signature(signature)
    if vrs is None:
        return None
    digest = eth_signed_message_hash(message_hash)
    try:
        x, y = ecdsa_raw_recover(digest, vrs)
    except (ValueError, ZeroDivisionError):
        return None
    if x == 0 and y == 0:
        return None
    return public_key_to_address(x, y)


def verify_free_mint(
    signer: bytes,
    caller: bytes,
    quantity: int,
    auth_token: bytes,
    signature,
) -> None:
    """Raise SignatureVerificationFailed unless `signer` authorized this mint for `caller`."""
    if signer == ZERO_ADDRESS:
        raise SignatureVerificationFailed()
    recovered = recover_signer(free_mint_digest(caller, quantity, auth_token), signature)
    if recovered is None or recovered != signer:
        raise SignatureVerificationFailed()


__all__ = [
    "SECP256K1_N",
    "SIGNATURE_LEN",
    "free_mint_digest",
    "public_key_to_address",
    "address_from_private_key",
    "sign_message_hash",
    "sign_free_mint",
    "split_signature",
    "recover_signer",
    "verify_free_mint",
]
