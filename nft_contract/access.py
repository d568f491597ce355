"""
nft_contract.access
===================

Deterministic, minimal **Role-Based Access Control** (RBAC) for the collection.

Design goals
------------
- **Bytes32 role identifiers**: each role is identified by 32 bytes.
- **Single admin tier**: every role, `DEFAULT_ADMIN_ROLE` included, is
  administered by `DEFAULT_ADMIN_ROLE`; only its holders may grant/revoke.
- **Tagged checks**: `check_role` returns a `RoleCheck` result instead of
  raising, so gated operations can run it as their very first statement and
  decide how to surface the failure. `require_role` is the raising shortcut.
- **Idempotent operations**: granting an existing role or revoking a missing
  role is a no-op (no revert) and emits nothing.

API surface
-----------
- **Constants**
    - `DEFAULT_ADMIN_ROLE`: bytes32 zero.
    - `ADMIN_ROLE`: keccak256(b"ADMIN_ROLE"), the operator role that gates
      every administrative operation of the collection.

- **RoleRegistry**
    - `has_role(role, account) -> bool`
    - `get_role_admin(role) -> bytes`
    - `check_role(role, account) -> RoleCheck`
    - `require_role(role, account) -> None` (raises AccessControlUnauthorizedAccount)
    - `grant_role(ctx, role, account) -> bool`
    - `revoke_role(ctx, role, account) -> bool`
    - `renounce_role(ctx, role, confirmation) -> bool`

Events
------
- **RoleGranted**      : {"role", "account", "sender"}
- **RoleRevoked**      : {"role", "account", "sender"}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from .errors import AccessControlBadConfirmation, AccessControlUnauthorizedAccount
from .hashing import keccak256
from .types import CallContext, to_address, to_word

__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "ADMIN_ROLE",
    "derive_role_id",
    "normalize_role",
    "RoleCheck",
    "RoleRegistry",
]


def derive_role_id(name: bytes) -> bytes:
    """Role id derivation matching Solidity's `keccak256("NAME")`."""
    return keccak256(name)


DEFAULT_ADMIN_ROLE: bytes = b"\x00" * 32
ADMIN_ROLE: bytes = derive_role_id(b"ADMIN_ROLE")


def normalize_role(role) -> bytes:
    return to_word(role, name="role")


@dataclass(frozen=True)
class RoleCheck:
    """Outcome of a capability lookup: ok, or the error to surface."""

    ok: bool
    error: Optional[AccessControlUnauthorizedAccount] = None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> None:
        if not self.ok:
            if self.error is None:
                raise RuntimeError("failed role check carries no error")
            raise self.error


@dataclass
class RoleRegistry:
    """
    Storage layout:
      members: role -> set of accounts holding it
    """

    members: Dict[bytes, Set[bytes]] = field(default_factory=dict)

    # ---- Queries -------------------------------------------------------------

    def has_role(self, role, account) -> bool:
        role = normalize_role(role)
        return to_address(account) in self.members.get(role, ())

    def get_role_admin(self, role) -> bytes:
        normalize_role(role)
        return DEFAULT_ADMIN_ROLE

    def check_role(self, role, account) -> RoleCheck:
        role = normalize_role(role)
        account = to_address(account)
        if account in self.members.get(role, ()):
            return RoleCheck(ok=True)
        return RoleCheck(ok=False, error=AccessControlUnauthorizedAccount(account, role))

    def require_role(self, role, account) -> None:
        self.check_role(role, account).unwrap()

    # ---- Mutations -----------------------------------------------------------

    def _grant(self, role: bytes, account: bytes) -> bool:
        holders = self.members.setdefault(role, set())
        if account in holders:
            return False
        holders.add(account)
        return True

    def _revoke(self, role: bytes, account: bytes) -> bool:
        holders = self.members.get(role)
        if not holders or account not in holders:
            return False
        holders.discard(account)
        return True

    def setup_role(self, role, account) -> bool:
        """Unchecked grant, used at deployment for the initial admin."""
        return self._grant(normalize_role(role), to_address(account))

    def grant_role(self, ctx: CallContext, role, account) -> bool:
        """
        Grant `role` to `account`. Only callable by an admin of `role`.
        Emits RoleGranted on first grant.
        """
        role = normalize_role(role)
        self.require_role(self.get_role_admin(role), ctx.caller)
        account = to_address(account)
        if not self._grant(role, account):
            return False
        ctx.emit("RoleGranted", role=role, account=account, sender=ctx.caller)
        return True

    def revoke_role(self, ctx: CallContext, role, account) -> bool:
        """
        Revoke `role` from `account`. Only callable by an admin of `role`.
        Emits RoleRevoked on successful state change.
        """
        role = normalize_role(role)
        self.require_role(self.get_role_admin(role), ctx.caller)
        account = to_address(account)
        if not self._revoke(role, account):
            return False
        ctx.emit("RoleRevoked", role=role, account=account, sender=ctx.caller)
        return True

    def renounce_role(self, ctx: CallContext, role, confirmation) -> bool:
        """Caller removes themself from `role`; `confirmation` must be the caller."""
        role = normalize_role(role)
        if to_address(confirmation) != ctx.caller:
            raise AccessControlBadConfirmation()
        if not self._revoke(role, ctx.caller):
            return False
        ctx.emit("RoleRevoked", role=role, account=ctx.caller, sender=ctx.caller)
        return True

