"""
nft_contract.errors — typed failures raised by the collection contract.

Every failure is a *tagged* exception: a stable `code` (the custom-error name
the Solidity collection exposes) plus a small tuple of structured parameters
so callers can diagnose and retry without string-matching.

Hierarchy
---------
ContractError (base)
 ├─ WrongEthAmount(sent, required)
 ├─ EnforcedPause() / ExpectedPause()
 ├─ SignatureVerificationFailed()
 ├─ ProvidedHexUsed()
 ├─ WrongArraysLength()
 ├─ AccessControlUnauthorizedAccount(account, neededRole)
 ├─ AccessControlBadConfirmation()
 ├─ ERC2981InvalidDefaultRoyalty(numerator, denominator)
 ├─ ERC2981InvalidDefaultRoyaltyReceiver(receiver)
 ├─ ERC2981InvalidTokenRoyalty(tokenId, numerator, denominator)
 ├─ ERC2981InvalidTokenRoyaltyReceiver(tokenId, receiver)
 ├─ ERC721NonexistentToken(tokenId)
 ├─ ERC721InvalidReceiver(receiver) / ERC721InvalidOwner(owner)
 ├─ InvalidAddress(value)
 ├─ InvalidArgument(name, value)
 ├─ NonPayable(method, value)
 ├─ UnknownMethod(name)
 └─ InsufficientBalance(account, balance, needed)

Notes
-----
* Raising any of these aborts the whole invocation; the runtime restores the
  pre-call state (see nft_contract.runtime).
* `selector` is the 4-byte keccak selector of the error signature, identical
  to what an EVM client decodes from revert data.
* Keep this module free of heavy imports; it is used from every layer.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Tuple


def _render(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


class ContractError(Exception):
    """
    Base class for collection failures.

    Subclasses declare:
        code      : custom-error name (stable, machine readable)
        fields    : parameter names, in ABI order
        abi_types : Solidity parameter types, used for the selector
        template  : human message, formatted with the parameters
    """

    code: ClassVar[str] = "ContractError"
    fields: ClassVar[Tuple[str, ...]] = ()
    abi_types: ClassVar[Tuple[str, ...]] = ()
    template: ClassVar[str] = "contract call failed"

    def __init__(self, *params: Any) -> None:
        if len(params) != len(self.fields):
            raise TypeError(
                f"{type(self).__name__} expects {len(self.fields)} parameter(s), got {len(params)}"
            )
        super().__init__(*params)
        self.params: Tuple[Any, ...] = tuple(params)
        for name, value in zip(self.fields, params):
            setattr(self, name, value)
        self.message: str = self.template.format(
            **{k: _render(v) for k, v in zip(self.fields, params)}
        )

    @property
    def signature(self) -> str:
        return f"{self.code}({','.join(self.abi_types)})"

    @property
    def selector(self) -> bytes:
        from .hashing import keccak256

        return keccak256(self.signature.encode("ascii"))[:4]

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        inner = ", ".join(repr(_render(p)) for p in self.params)
        return f"{self.code}({inner})"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view for logs and receipts."""
        return {
            "code": self.code,
            "message": self.message,
            "args": {k: _render(v) for k, v in zip(self.fields, self.params)},
        }


# ---- issuance ---------------------------------------------------------------


class WrongEthAmount(ContractError):
    code = "WrongEthAmount"
    fields = ("sent", "required")
    abi_types = ("uint256", "uint256")
    template = "attached value {sent} does not equal the mint fee {required}"


class SignatureVerificationFailed(ContractError):
    code = "SignatureVerificationFailed"
    template = "free-mint signature verification failed"


class ProvidedHexUsed(ContractError):
    code = "ProvidedHexUsed"
    template = "authorization token was already consumed"


class WrongArraysLength(ContractError):
    code = "WrongArraysLength"
    template = "recipients and quantities must have the same length"


# ---- pause ------------------------------------------------------------------


class EnforcedPause(ContractError):
    code = "EnforcedPause"
    template = "operation blocked while paused"


class ExpectedPause(ContractError):
    code = "ExpectedPause"
    template = "collection is not paused"


# ---- access control ---------------------------------------------------------


class AccessControlUnauthorizedAccount(ContractError):
    code = "AccessControlUnauthorizedAccount"
    fields = ("account", "needed_role")
    abi_types = ("address", "bytes32")
    template = "account {account} is missing role {needed_role}"


class AccessControlBadConfirmation(ContractError):
    code = "AccessControlBadConfirmation"
    template = "roles can only be renounced for the calling account"


# ---- royalties (ERC-2981) ---------------------------------------------------


class ERC2981InvalidDefaultRoyalty(ContractError):
    code = "ERC2981InvalidDefaultRoyalty"
    fields = ("numerator", "denominator")
    abi_types = ("uint256", "uint256")
    template = "default royalty {numerator} exceeds denominator {denominator}"


class ERC2981InvalidDefaultRoyaltyReceiver(ContractError):
    code = "ERC2981InvalidDefaultRoyaltyReceiver"
    fields = ("receiver",)
    abi_types = ("address",)
    template = "invalid default royalty receiver {receiver}"


class ERC2981InvalidTokenRoyalty(ContractError):
    code = "ERC2981InvalidTokenRoyalty"
    fields = ("token_id", "numerator", "denominator")
    abi_types = ("uint256", "uint256", "uint256")
    template = "royalty {numerator} for token {token_id} exceeds denominator {denominator}"


class ERC2981InvalidTokenRoyaltyReceiver(ContractError):
    code = "ERC2981InvalidTokenRoyaltyReceiver"
    fields = ("token_id", "receiver")
    abi_types = ("uint256", "address")
    template = "invalid royalty receiver {receiver} for token {token_id}"


# ---- ledger (ERC-721) -------------------------------------------------------


class ERC721NonexistentToken(ContractError):
    code = "ERC721NonexistentToken"
    fields = ("token_id",)
    abi_types = ("uint256",)
    template = "token {token_id} has not been minted"


class ERC721InvalidReceiver(ContractError):
    code = "ERC721InvalidReceiver"
    fields = ("receiver",)
    abi_types = ("address",)
    template = "cannot mint to {receiver}"


class ERC721InvalidOwner(ContractError):
    code = "ERC721InvalidOwner"
    fields = ("owner",)
    abi_types = ("address",)
    template = "invalid owner {owner}"


# ---- call-boundary ----------------------------------------------------------


class InvalidAddress(ContractError):
    code = "InvalidAddress"
    fields = ("value",)
    abi_types = ("bytes",)
    template = "not a 20-byte address: {value!r}"


class InvalidArgument(ContractError):
    code = "InvalidArgument"
    fields = ("name", "value")
    abi_types = ("string", "bytes")
    template = "invalid {name}: {value!r}"


class NonPayable(ContractError):
    code = "NonPayable"
    fields = ("method", "value")
    abi_types = ("string", "uint256")
    template = "{method} does not accept value (got {value})"


class UnknownMethod(ContractError):
    code = "UnknownMethod"
    fields = ("name",)
    abi_types = ("string",)
    template = "no such operation: {name}"


class InsufficientBalance(ContractError):
    code = "InsufficientBalance"
    fields = ("account", "balance", "needed")
    abi_types = ("address", "uint256", "uint256")
    template = "account {account} holds {balance}, needs {needed}"


__all__ = [
    "ContractError",
    "WrongEthAmount",
    "SignatureVerificationFailed",
    "ProvidedHexUsed",
    "WrongArraysLength",
    "EnforcedPause",
    "ExpectedPause",
    "AccessControlUnauthorizedAccount",
    "AccessControlBadConfirmation",
    "ERC2981InvalidDefaultRoyalty",
    "ERC2981InvalidDefaultRoyaltyReceiver",
    "ERC2981InvalidTokenRoyalty",
    "ERC2981InvalidTokenRoyaltyReceiver",
    "ERC721NonexistentToken",
    "ERC721InvalidReceiver",
    "ERC721InvalidOwner",
    "InvalidAddress",
    "InvalidArgument",
    "NonPayable",
    "UnknownMethod",
    "InsufficientBalance",
]
