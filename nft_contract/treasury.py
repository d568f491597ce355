"""
nft_contract.treasury — paid-mint proceeds held by the collection.

The collection's native balance lives on the host ledger, at the collection's
own address. The host moves the attached value in before a payable call runs
(and back out if the call reverts); the treasury only does the accounting and
the admin-only withdrawal.

- balance(ctx)          -> int    current native balance of the collection
- record_proceeds(ctx)  -> None   account for a successful paid mint
- withdraw_all(ctx)     -> int    move the entire balance to the caller

Events
------
- b"Withdrawn" {"to": bytes, "amount": int}
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import CallContext


@dataclass
class Treasury:
    total_collected: int = 0
    total_withdrawn: int = 0

    def balance(self, ctx: CallContext) -> int:
        return ctx.native.balance_of(ctx.contract)

    def record_proceeds(self, ctx: CallContext) -> None:
        self.total_collected += ctx.value

    def withdraw_all(self, ctx: CallContext) -> int:
        amount = ctx.native.balance_of(ctx.contract)
        ctx.native.transfer(ctx.contract, ctx.caller, amount)
        self.total_withdrawn += amount
        ctx.emit("Withdrawn", to=ctx.caller, amount=amount)
        return amount


__all__ = ["Treasury"]
