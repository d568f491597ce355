"""
nft_contract.royalty
====================

ERC-2981 royalty configuration: one collection-wide default plus optional
per-token overrides, each a (receiver, basis points) pair.

    royalty_info(token_id, sale_price) -> (receiver, sale_price * bps // 10000)

Resolution order: per-token override → default → (ZERO_ADDRESS, 0).

Validation (mirrors OpenZeppelin's ERC2981):
- bps > 10000                 → ERC2981InvalidDefaultRoyalty / ERC2981InvalidTokenRoyalty
- zero receiver               → ERC2981InvalidDefaultRoyaltyReceiver / ...TokenRoyaltyReceiver

Integer math only; the amount is truncated, never rounded up.
Overrides may name ids that have not been minted yet, as in ERC2981.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import (
    ERC2981InvalidDefaultRoyalty,
    ERC2981InvalidDefaultRoyaltyReceiver,
    ERC2981InvalidTokenRoyalty,
    ERC2981InvalidTokenRoyaltyReceiver,
)
from .types import ZERO_ADDRESS, require_amount, to_address

FEE_DENOMINATOR = 10_000


@dataclass(frozen=True)
class RoyaltyEntry:
    receiver: bytes
    bps: int

    def amount(self, sale_price: int) -> int:
        return sale_price * self.bps // FEE_DENOMINATOR


@dataclass
class RoyaltyRegistry:
    default: Optional[RoyaltyEntry] = None
    overrides: Dict[int, RoyaltyEntry] = field(default_factory=dict)

    def set_default_royalty(self, receiver, bps: int) -> RoyaltyEntry:
        receiver = to_address(receiver)
        require_amount(bps, name="royalty bps")
        if bps > FEE_DENOMINATOR:
            raise ERC2981InvalidDefaultRoyalty(bps, FEE_DENOMINATOR)
        if receiver == ZERO_ADDRESS:
            raise ERC2981InvalidDefaultRoyaltyReceiver(receiver)
        self.default = RoyaltyEntry(receiver, bps)
        return self.default

    def delete_default_royalty(self) -> None:
        self.default = None

    def set_token_royalty(self, token_id: int, receiver, bps: int) -> RoyaltyEntry:
        require_amount(token_id, name="token id")
        receiver = to_address(receiver)
        require_amount(bps, name="royalty bps")
        if bps > FEE_DENOMINATOR:
            raise ERC2981InvalidTokenRoyalty(token_id, bps, FEE_DENOMINATOR)
        if receiver == ZERO_ADDRESS:
            raise ERC2981InvalidTokenRoyaltyReceiver(token_id, receiver)
        entry = RoyaltyEntry(receiver, bps)
        self.overrides[token_id] = entry
        return entry

    def reset_token_royalty(self, token_id: int) -> None:
        require_amount(token_id, name="token id")
        self.overrides.pop(token_id, None)

    def resolve(self, token_id: int) -> Optional[RoyaltyEntry]:
        entry = self.overrides.get(token_id)
        return entry if entry is not None else self.default

    def royalty_info(self, token_id: int, sale_price: int) -> Tuple[bytes, int]:
        require_amount(token_id, name="token id")
        require_amount(sale_price, name="sale price")
        entry = self.resolve(token_id)
        if entry is None:
            return ZERO_ADDRESS, 0
        return entry.receiver, entry.amount(sale_price)


__all__ = ["FEE_DENOMINATOR", "RoyaltyEntry", "RoyaltyRegistry"]
