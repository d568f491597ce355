"""
nft_contract.pausable
=====================

Global pause switch for the collection.

Key Points
----------
- The paused flag is **global to the collection** (single boolean).
- Changing pause state requires `ADMIN_ROLE`; the contract checks the role
  before calling into this gate.
- `pause` while paused raises EnforcedPause and `unpause` while running raises
  ExpectedPause; neither touches any other state.
- Emitted Events (on change only):
  * ``Paused``   : {"account": bytes}
  * ``Unpaused`` : {"account": bytes}

Usage
-----
    gate.require_not_paused()      # first precondition of every issuance path
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import EnforcedPause, ExpectedPause
from .types import CallContext

__all__ = ["PauseGate"]


@dataclass
class PauseGate:
    paused: bool = False

    def is_paused(self) -> bool:
        return self.paused

    def require_not_paused(self) -> None:
        if self.paused:
            raise EnforcedPause()

    def require_paused(self) -> None:
        if not self.paused:
            raise ExpectedPause()

    def pause(self, ctx: CallContext) -> None:
        self.require_not_paused()
        self.paused = True
        ctx.emit("Paused", account=ctx.caller)

    def unpause(self, ctx: CallContext) -> None:
        self.require_paused()
        self.paused = False
        ctx.emit("Unpaused", account=ctx.caller)
