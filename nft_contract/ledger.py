"""
Token ledger (ERC-721 style ownership) for the collection
=========================================================

Owns token identity, the ownership mapping and the running supply counter.

Highlights
----------
- Token ids are assigned sequentially from the supply counter, starting at 0.
  Every mint path (public, free, admin) draws from this single sequence.
- `mint(to, quantity)` assigns a *contiguous* id range to one recipient.
- Events: b"Transfer" {from: ZERO_ADDRESS, to, tokenId} per minted id.
- No burn and no transfer: balances never decrease in this core.

Invariants
----------
- every id in [0, supply) maps to exactly one owner
- sum(balances.values()) == supply
- both hold after every single minted id, so `rollback(mark)` only has to
  walk back the ids in [mark, supply)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .errors import ERC721InvalidOwner, ERC721InvalidReceiver, ERC721NonexistentToken
from .types import ZERO_ADDRESS, CallContext, require_amount, to_address

DEFAULT_NAME = "NftContract"
DEFAULT_SYMBOL = "NFT"


@dataclass
class TokenLedger:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    supply: int = 0
    owners: Dict[int, bytes] = field(default_factory=dict)
    balances: Dict[bytes, int] = field(default_factory=dict)

    # ---- reads ---------------------------------------------------------------

    def total_supply(self) -> int:
        return self.supply

    def next_token_id(self) -> int:
        return self.supply

    def exists(self, token_id: int) -> bool:
        return token_id in self.owners

    def require_minted(self, token_id: int) -> None:
        require_amount(token_id, name="token id")
        if token_id not in self.owners:
            raise ERC721NonexistentToken(token_id)

    def balance_of(self, owner) -> int:
        owner = to_address(owner)
        if owner == ZERO_ADDRESS:
            raise ERC721InvalidOwner(owner)
        return self.balances.get(owner, 0)

    def owner_of(self, token_id: int) -> bytes:
        self.require_minted(token_id)
        return self.owners[token_id]

    # ---- writes --------------------------------------------------------------

    @staticmethod
    def check_receiver(to) -> bytes:
        to = to_address(to)
        if to == ZERO_ADDRESS:
            raise ERC721InvalidReceiver(to)
        return to

    def mint(self, ctx: CallContext, to, quantity: int) -> range:
        """
        Mint `quantity` tokens to `to` and return the id range assigned.
        Validates everything before the first write.
        """
        to = self.check_receiver(to)
        require_amount(quantity, name="quantity")
        ids = range(self.supply, self.supply + quantity)
        for token_id in ids:
            self.owners[token_id] = to
            self.balances[to] = self.balances.get(to, 0) + 1
            self.supply = token_id + 1
            ctx.emit("Transfer", **{"from": ZERO_ADDRESS, "to": to, "tokenId": token_id})
        return ids

    # ---- checkpoints ---------------------------------------------------------

    def checkpoint(self) -> int:
        return self.supply

    def rollback(self, mark: int) -> None:
        """Undo every mint after `mark`. Cost is O(tokens minted since)."""
        for token_id in range(self.supply - 1, mark - 1, -1):
            owner = self.owners.pop(token_id)
            left = self.balances[owner] - 1
            if left:
                self.balances[owner] = left
            else:
                del self.balances[owner]
        self.supply = mark


__all__ = ["DEFAULT_NAME", "DEFAULT_SYMBOL", "TokenLedger"]
