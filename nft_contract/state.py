"""
nft_contract.state — the single aggregate that owns all collection state.

Every mutable piece of the collection (roles, pause flag, ledger, used-token
set, royalty tables, URIs, fee, signer, treasury accounting) hangs off one
`CollectionState`. Operations receive it through the contract object; no
component keeps module-level globals.

Checkpoints
-----------
`snapshot()` returns a `Checkpoint`; `restore(cp)` rewinds the state to it in
place. The runtime takes one before each invocation and restores it if the
invocation fails, which gives every operation all-or-nothing semantics even
if a failure happens after a partial write.

The ledger and the used-token set grow with every mint and are append-only,
so they only record a high-water mark and undo what was added after it. The
remaining components are small and only change on admin calls; they are
copied whole.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict

from .access import RoleRegistry
from .ledger import TokenLedger
from .metadata import MetadataResolver
from .pausable import PauseGate
from .replay import UsedTokenSet
from .royalty import RoyaltyRegistry
from .treasury import Treasury
from .types import ZERO_ADDRESS

DEFAULT_MINT_FEE = 10**16  # 0.01 ether

# components that roll back from a mark instead of a copy
_APPEND_ONLY = ("ledger", "used_tokens")


@dataclass(frozen=True)
class Checkpoint:
    ledger_mark: int
    used_mark: int
    copies: Dict[str, Any]


@dataclass
class CollectionState:
    roles: RoleRegistry = field(default_factory=RoleRegistry)
    pause: PauseGate = field(default_factory=PauseGate)
    ledger: TokenLedger = field(default_factory=TokenLedger)
    used_tokens: UsedTokenSet = field(default_factory=UsedTokenSet)
    royalties: RoyaltyRegistry = field(default_factory=RoyaltyRegistry)
    metadata: MetadataResolver = field(default_factory=MetadataResolver)
    treasury: Treasury = field(default_factory=Treasury)
    mint_fee: int = DEFAULT_MINT_FEE
    signer: bytes = ZERO_ADDRESS

    def snapshot(self) -> Checkpoint:
        return Checkpoint(
            ledger_mark=self.ledger.checkpoint(),
            used_mark=self.used_tokens.checkpoint(),
            copies={
                f.name: copy.deepcopy(getattr(self, f.name))
                for f in fields(self)
                if f.name not in _APPEND_ONLY
            },
        )

    def restore(self, cp: Checkpoint) -> None:
        """Restore in place so references held by the contract stay valid."""
        self.ledger.rollback(cp.ledger_mark)
        self.used_tokens.rollback(cp.used_mark)
        for name, value in cp.copies.items():
            setattr(self, name, copy.deepcopy(value))


__all__ = ["DEFAULT_MINT_FEE", "Checkpoint", "CollectionState"]
