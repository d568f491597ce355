"""
nft_contract.hashing — Keccak-256 and tight ("packed") encodings.

Goals
-----
- Strictly bytes-in, bytes-out (no implicit text/encoding).
- Bit-exact with the EVM: `keccak256`, `abi.encodePacked` for the handful of
  static types the collection hashes, and the EIP-191 personal-message prefix.

Provided APIs
-------------
- keccak256(data) -> bytes, keccak256_hex(data) -> str
- hash_concat_keccak256(*chunks) -> bytes
- pack_address(addr), pack_uint256(n), pack_bytes32(b)
- encode_packed(types, values) -> bytes        # address | uint256 | bytes32
- eth_signed_message_hash(message) -> bytes     # "\\x19Ethereum Signed Message:\\n<len>"

Keccak-256 comes from PyCryptodome (`Crypto.Hash.keccak`); hashlib's sha3_256
is the NIST variant and is *not* interchangeable.
"""

from __future__ import annotations

from typing import Any, Sequence

from Crypto.Hash import keccak as _keccak

from .types import ADDRESS_LEN, U256_MAX, WORD_LEN, hex_to_bytes

_ETH_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise TypeError(f"{name} must be bytes-like (got {type(buf).__name__})")


# ------------------------------- Hash Functions ------------------------------ #


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    """Keccak-256 (pre-SHA3) as used by Ethereum."""
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()


def keccak256_hex(data: bytes | bytearray | memoryview) -> str:
    return "0x" + keccak256(data).hex()


def hash_concat_keccak256(*chunks: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    for i, c in enumerate(chunks):
        h.update(_ensure_bytes(c, f"chunk[{i}]"))
    return h.digest()


# ------------------------------- Packed Encoding ----------------------------- #


def pack_address(addr: Any) -> bytes:
    b = hex_to_bytes(addr)
    if len(b) != ADDRESS_LEN:
        raise ValueError(f"address must be {ADDRESS_LEN} bytes (got {len(b)})")
    return b


def pack_uint256(n: int) -> bytes:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0 or n > U256_MAX:
        raise ValueError(f"uint256 out of range: {n!r}")
    return n.to_bytes(WORD_LEN, "big")


def pack_bytes32(b: Any) -> bytes:
    raw = hex_to_bytes(b)
    if len(raw) != WORD_LEN:
        raise ValueError(f"bytes32 must be {WORD_LEN} bytes (got {len(raw)})")
    return raw


_PACKERS = {
    "address": pack_address,
    "uint256": pack_uint256,
    "bytes32": pack_bytes32,
}


def encode_packed(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    Tight encoding identical to Solidity's `abi.encodePacked` for the static
    types used by the collection. Unknown types raise ValueError.
    """
    if len(types) != len(values):
        raise ValueError("types and values must have the same length")
    out = bytearray()
    for t, v in zip(types, values):
        packer = _PACKERS.get(t)
        if packer is None:
            raise ValueError(f"unsupported packed type: {t}")
        out.extend(packer(v))
    return bytes(out)


def solidity_packed_keccak256(types: Sequence[str], values: Sequence[Any]) -> bytes:
    return keccak256(encode_packed(types, values))


def eth_signed_message_hash(message: bytes) -> bytes:
    """EIP-191 version 0x45 digest, as produced by `signer.signMessage(bytes)`."""
    m = _ensure_bytes(message, "message")
    return keccak256(_ETH_MESSAGE_PREFIX + str(len(m)).encode("ascii") + m)


__all__ = [
    "keccak256",
    "keccak256_hex",
    "hash_concat_keccak256",
    "pack_address",
    "pack_uint256",
    "pack_bytes32",
    "encode_packed",
    "solidity_packed_keccak256",
    "eth_signed_message_hash",
]
