"""
nft_contract.types — addresses, native amounts and the per-call context.

These small, dependency-light helpers are shared by every component of the
collection. Higher layers (runtime, tests, off-chain tooling) may hand in
hex strings; everything is normalized to raw bytes at the boundary.

Conventions
-----------
* Addresses are exactly 20 raw bytes. Hex input ("0x…" or bare) is accepted.
* Role ids and authorization tokens are exactly 32 raw bytes.
* Malformed call arguments raise InvalidArgument, never a bare ValueError.
* Native amounts are integers in the smallest unit ("wei"); no floats anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Dict, List, Union

from .errors import InvalidAddress, InvalidArgument

if TYPE_CHECKING:  # pragma: no cover
    from .runtime import NativeLedger


HexLike = Union[str, bytes, bytearray, memoryview]

ADDRESS_LEN = 20
WORD_LEN = 32
U256_MAX = (1 << 256) - 1
WEI_PER_ETHER = 10**18

ZERO_ADDRESS: bytes = b"\x00" * ADDRESS_LEN


# ------------------------------ hex helpers ---------------------------------


def hex_to_bytes(v: HexLike) -> bytes:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        if len(s) % 2:
            s = "0" + s  # tolerate odd-length hex
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


def to_hex(b: bytes) -> str:
    return "0x" + bytes(b).hex()


# ------------------------------ addresses -----------------------------------


def to_address(v: Any) -> bytes:
    """Normalize an address-like value to 20 raw bytes or raise InvalidAddress."""
    try:
        b = hex_to_bytes(v)
    except (TypeError, ValueError):
        raise InvalidAddress(v) from None
    if len(b) != ADDRESS_LEN:
        raise InvalidAddress(v)
    return b


def is_zero_address(addr: bytes) -> bool:
    return addr == ZERO_ADDRESS


def to_checksum_address(addr: HexLike) -> str:
    """EIP-55 mixed-case rendering, handy for logs and fixtures."""
    from .hashing import keccak256

    raw = to_address(addr).hex()
    digest = keccak256(raw.encode("ascii")).hex()
    return "0x" + "".join(
        c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
        for i, c in enumerate(raw)
    )


def to_fixed_bytes(v: Any, size: int, *, name: str = "value") -> bytes:
    """Normalize a bytesN-like value or raise InvalidArgument."""
    try:
        b = hex_to_bytes(v)
    except (TypeError, ValueError):
        raise InvalidArgument(name, v) from None
    if len(b) != size:
        raise InvalidArgument(name, v)
    return b


def to_word(v: Any, *, name: str = "value") -> bytes:
    return to_fixed_bytes(v, WORD_LEN, name=name)


# ------------------------------ amounts -------------------------------------


def ether(amount: Union[int, str, Decimal]) -> int:
    """
    Convert an ether amount to wei.

        ether("0.01") == 10**16
        ether(1) == 10**18

    Fractions finer than one wei are rejected.
    """
    try:
        d = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"invalid ether amount: {amount!r}") from e
    wei = d * WEI_PER_ETHER
    if wei != wei.to_integral_value() or wei < 0:
        raise ValueError(f"ether amount not representable in wei: {amount!r}")
    return int(wei)


def require_amount(n: Any, *, name: str = "amount") -> int:
    if isinstance(n, bool) or not isinstance(n, int) or not 0 <= n <= U256_MAX:
        raise InvalidArgument(name, n)
    return n


# ------------------------------ call context --------------------------------


@dataclass(frozen=True)
class CallContext:
    """
    Evaluated context for a single contract invocation.

    Attributes:
        caller:   bytes — authenticated invoker (20 bytes)
        value:    int   — native amount attached to the call (already moved
                          into the contract's balance by the host)
        contract: bytes — address of the collection itself
        native:   NativeLedger — host-side native balances
        events:   list  — per-invocation event buffer (dropped on revert)
    """

    caller: bytes
    value: int
    contract: bytes
    native: "NativeLedger"
    events: List["Event"]

    def emit(self, name: str, **args: Any) -> None:
        self.events.append(Event(name=name, address=self.contract, args=dict(args)))


@dataclass(frozen=True)
class Event:
    """A log entry emitted by the collection (name + decoded arguments)."""

    name: str
    address: bytes
    args: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "address": to_hex(self.address),
            "args": {k: (to_hex(v) if isinstance(v, bytes) else v) for k, v in self.args.items()},
        }


__all__ = [
    "ADDRESS_LEN",
    "WORD_LEN",
    "U256_MAX",
    "WEI_PER_ETHER",
    "ZERO_ADDRESS",
    "HexLike",
    "hex_to_bytes",
    "to_hex",
    "to_address",
    "is_zero_address",
    "to_checksum_address",
    "to_fixed_bytes",
    "to_word",
    "ether",
    "require_amount",
    "CallContext",
    "Event",
]
