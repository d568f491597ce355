"""
nft_contract.contract — the collection contract.

`NftContract` wires the components held in a `CollectionState` into the
public operation surface of the collection:

Issuance:
  - mintNft()                                   payable, exactly `mintFee`
  - freeMint(quantity, authToken, signature)    signed, one-time
  - adminMint(recipients[], quantities[])       ADMIN_ROLE
Administration (ADMIN_ROLE unless noted):
  - setSigner(address) / signer()
  - changeMintFee(amount) / mintFee()
  - pause() / unpause() / paused()
  - withdrawETH() / balance()
  - grantRole / revokeRole (role admin), renounceRole (self), hasRole, getRoleAdmin
Royalty:
  - setDefaultRoyalty, deleteDefaultRoyalty, setTokenRoyalty, resetTokenRoyalty
  - royaltyInfo(tokenId, salePrice)
Metadata:
  - changeBaseUri, changeUriExtension, changeContractUri
  - tokenURI(tokenId), contractURI(), name(), symbol()
Reads:
  - balanceOf, ownerOf, totalSupply, isUsed, supportsInterface

Every operation takes the per-call `CallContext` first. Gated operations run
the role check as their very first statement; issuance paths then check the
argument shape, then the pause gate, then their path-specific conditions, and
only then write. Operations never catch their own failures: the host
(`nft_contract.runtime`) restores the pre-call state when one propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .access import ADMIN_ROLE, DEFAULT_ADMIN_ROLE
from .config import CollectionConfig
from .errors import WrongArraysLength, WrongEthAmount
from .ledger import TokenLedger
from .logging import get_logger
from .metadata import MetadataResolver
from .signatures import verify_free_mint
from .state import CollectionState
from .types import CallContext, require_amount, to_address, to_fixed_bytes, to_hex, to_word

log = get_logger(__name__)

# ERC-165 interface ids
INTERFACE_ERC165 = bytes.fromhex("01ffc9a7")
INTERFACE_ERC721 = bytes.fromhex("80ac58cd")
INTERFACE_ERC721_METADATA = bytes.fromhex("5b5e139f")
INTERFACE_ERC2981 = bytes.fromhex("2a55205a")
INTERFACE_ACCESS_CONTROL = bytes.fromhex("7965db0b")

SUPPORTED_INTERFACES = frozenset(
    (
        INTERFACE_ERC165,
        INTERFACE_ERC721,
        INTERFACE_ERC721_METADATA,
        INTERFACE_ERC2981,
        INTERFACE_ACCESS_CONTROL,
    )
)


# ---------------------------------------------------------------------------
# ABI registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AbiEntry:
    name: str  # public (camelCase) name
    attr: str  # Python method name
    payable: bool = False
    view: bool = False


def external(name: str, *, payable: bool = False, view: bool = False) -> Callable:
    """Mark a method as part of the public surface under `name`."""

    def deco(fn: Callable) -> Callable:
        fn.__abi__ = (name, payable, view)  # type: ignore[attr-defined]
        return fn

    return deco


def _collect_abi(cls: type) -> Dict[str, AbiEntry]:
    table: Dict[str, AbiEntry] = {}
    for attr, fn in vars(cls).items():
        marker = getattr(fn, "__abi__", None)
        if marker is None:
            continue
        name, payable, view = marker
        table[name] = AbiEntry(name=name, attr=attr, payable=payable, view=view)
    return table


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class NftContract:
    """One deployed collection. All mutable state lives in `self.state`."""

    ABI: Dict[str, AbiEntry] = {}

    def __init__(self, address: bytes, state: Optional[CollectionState] = None):
        self.address = to_address(address)
        self.state = state if state is not None else CollectionState()

    @classmethod
    def deploy(cls, ctx: CallContext, config: Optional[CollectionConfig] = None) -> "NftContract":
        """Build a fresh collection; the deployer receives DEFAULT_ADMIN_ROLE and ADMIN_ROLE."""
        cfg = config or CollectionConfig()
        state = CollectionState(
            ledger=TokenLedger(name=cfg.name, symbol=cfg.symbol),
            metadata=MetadataResolver(
                base_uri=cfg.base_uri,
                uri_extension=cfg.uri_extension,
                contract_uri=cfg.contract_uri,
            ),
            mint_fee=cfg.mint_fee,
            signer=cfg.signer,
        )
        contract = cls(ctx.contract, state)
        for role in (DEFAULT_ADMIN_ROLE, ADMIN_ROLE):
            if state.roles.setup_role(role, ctx.caller):
                ctx.emit("RoleGranted", role=role, account=ctx.caller, sender=ctx.caller)
        log.info(
            "collection deployed",
            extra={"contract": to_hex(contract.address), "deployer": to_hex(ctx.caller)},
        )
        return contract

    # ---- internal guards ---------------------------------------------------

    def _only_admin(self, ctx: CallContext) -> None:
        self.state.roles.check_role(ADMIN_ROLE, ctx.caller).unwrap()

    # ---- issuance ----------------------------------------------------------

    @external("mintNft", payable=True)
    def mint_nft(self, ctx: CallContext) -> int:
        """Public paid mint of exactly one token to the caller."""
        st = self.state
        st.pause.require_not_paused()
        if ctx.value != st.mint_fee:
            raise WrongEthAmount(ctx.value, st.mint_fee)
        (token_id,) = st.ledger.mint(ctx, ctx.caller, 1)
        st.treasury.record_proceeds(ctx)
        return token_id

    @external("freeMint")
    def free_mint(self, ctx: CallContext, quantity: int, auth_token: Any, signature: Any) -> List[int]:
        """
        Mint `quantity` tokens to the caller against a one-time signed
        authorization. The signature must cover (caller, quantity, auth_token)
        and come from the configured signer; the token is consumed on success.
        """
        st = self.state
        require_amount(quantity, name="quantity")
        token = to_word(auth_token, name="auth token")
        st.pause.require_not_paused()
        verify_free_mint(st.signer, ctx.caller, quantity, token, signature)
        st.used_tokens.require_unused(token)
        ids = st.ledger.mint(ctx, ctx.caller, quantity)
        st.used_tokens.mark_used(token)
        return list(ids)

    @external("adminMint")
    def admin_mint(
        self, ctx: CallContext, recipients: Sequence[Any], quantities: Sequence[int]
    ) -> List[int]:
        """
        Mint quantities[i] tokens to recipients[i], in array order. Each
        recipient gets a contiguous id range. All recipients and quantities
        are validated before the first token is minted.
        """
        self._only_admin(ctx)
        st = self.state
        if len(recipients) != len(quantities):
            raise WrongArraysLength()
        st.pause.require_not_paused()
        batch: List[Tuple[bytes, int]] = [
            (st.ledger.check_receiver(to), require_amount(qty, name="quantity"))
            for to, qty in zip(recipients, quantities)
        ]
        minted: List[int] = []
        for to, qty in batch:
            minted.extend(st.ledger.mint(ctx, to, qty))
        log.info(
            "admin mint",
            extra={"recipients": len(batch), "minted": len(minted), "sender": to_hex(ctx.caller)},
        )
        return minted

    # ---- administration ----------------------------------------------------

    @external("setSigner")
    def set_signer(self, ctx: CallContext, signer: Any) -> None:
        self._only_admin(ctx)
        self.state.signer = to_address(signer)
        log.info("signer changed", extra={"signer": to_hex(self.state.signer)})

    @external("signer", view=True)
    def signer(self, ctx: CallContext) -> bytes:
        return self.state.signer

    @external("changeMintFee")
    def change_mint_fee(self, ctx: CallContext, amount: int) -> None:
        self._only_admin(ctx)
        self.state.mint_fee = require_amount(amount, name="mint fee")
        log.info("mint fee changed", extra={"mint_fee": self.state.mint_fee})

    @external("mintFee", view=True)
    def mint_fee(self, ctx: CallContext) -> int:
        return self.state.mint_fee

    @external("pause")
    def pause(self, ctx: CallContext) -> None:
        self._only_admin(ctx)
        self.state.pause.pause(ctx)
        log.info("collection paused", extra={"sender": to_hex(ctx.caller)})

    @external("unpause")
    def unpause(self, ctx: CallContext) -> None:
        self._only_admin(ctx)
        self.state.pause.unpause(ctx)
        log.info("collection unpaused", extra={"sender": to_hex(ctx.caller)})

    @external("paused", view=True)
    def paused(self, ctx: CallContext) -> bool:
        return self.state.pause.is_paused()

    @external("withdrawETH")
    def withdraw_eth(self, ctx: CallContext) -> int:
        self._only_admin(ctx)
        amount = self.state.treasury.withdraw_all(ctx)
        log.info("treasury withdrawn", extra={"to": to_hex(ctx.caller), "amount": amount})
        return amount

    @external("balance", view=True)
    def balance(self, ctx: CallContext) -> int:
        return self.state.treasury.balance(ctx)

    # ---- roles -------------------------------------------------------------

    @external("ADMIN_ROLE", view=True)
    def admin_role(self, ctx: CallContext) -> bytes:
        return ADMIN_ROLE

    @external("DEFAULT_ADMIN_ROLE", view=True)
    def default_admin_role(self, ctx: CallContext) -> bytes:
        return DEFAULT_ADMIN_ROLE

    @external("grantRole")
    def grant_role(self, ctx: CallContext, role: Any, account: Any) -> bool:
        return self.state.roles.grant_role(ctx, role, account)

    @external("revokeRole")
    def revoke_role(self, ctx: CallContext, role: Any, account: Any) -> bool:
        return self.state.roles.revoke_role(ctx, role, account)

    @external("renounceRole")
    def renounce_role(self, ctx: CallContext, role: Any, confirmation: Any) -> bool:
        return self.state.roles.renounce_role(ctx, role, confirmation)

    @external("hasRole", view=True)
    def has_role(self, ctx: CallContext, role: Any, account: Any) -> bool:
        return self.state.roles.has_role(role, account)

    @external("getRoleAdmin", view=True)
    def get_role_admin(self, ctx: CallContext, role: Any) -> bytes:
        return self.state.roles.get_role_admin(role)

    # ---- royalty -----------------------------------------------------------

    @external("setDefaultRoyalty")
    def set_default_royalty(self, ctx: CallContext, receiver: Any, bps: int) -> None:
        self._only_admin(ctx)
        self.state.royalties.set_default_royalty(receiver, bps)

    @external("deleteDefaultRoyalty")
    def delete_default_royalty(self, ctx: CallContext) -> None:
        self._only_admin(ctx)
        self.state.royalties.delete_default_royalty()

    @external("setTokenRoyalty")
    def set_token_royalty(self, ctx: CallContext, token_id: int, receiver: Any, bps: int) -> None:
        self._only_admin(ctx)
        self.state.royalties.set_token_royalty(token_id, receiver, bps)

    @external("resetTokenRoyalty")
    def reset_token_royalty(self, ctx: CallContext, token_id: int) -> None:
        self._only_admin(ctx)
        self.state.royalties.reset_token_royalty(token_id)

    @external("royaltyInfo", view=True)
    def royalty_info(self, ctx: CallContext, token_id: int, sale_price: int) -> Tuple[bytes, int]:
        return self.state.royalties.royalty_info(token_id, sale_price)

    # ---- metadata ----------------------------------------------------------

    @external("changeBaseUri")
    def change_base_uri(self, ctx: CallContext, uri: str) -> None:
        self._only_admin(ctx)
        self.state.metadata.change_base_uri(uri)

    @external("changeUriExtension")
    def change_uri_extension(self, ctx: CallContext, extension: str) -> None:
        self._only_admin(ctx)
        self.state.metadata.change_uri_extension(extension)

    @external("changeContractUri")
    def change_contract_uri(self, ctx: CallContext, uri: str) -> None:
        self._only_admin(ctx)
        self.state.metadata.change_contract_uri(uri)

    @external("tokenURI", view=True)
    def token_uri(self, ctx: CallContext, token_id: int) -> str:
        self.state.ledger.require_minted(token_id)
        return self.state.metadata.token_uri(token_id)

    @external("contractURI", view=True)
    def contract_uri(self, ctx: CallContext) -> str:
        return self.state.metadata.contract_uri

    @external("name", view=True)
    def name(self, ctx: CallContext) -> str:
        return self.state.ledger.name

    @external("symbol", view=True)
    def symbol(self, ctx: CallContext) -> str:
        return self.state.ledger.symbol

    # ---- reads -------------------------------------------------------------

    @external("balanceOf", view=True)
    def balance_of(self, ctx: CallContext, owner: Any) -> int:
        return self.state.ledger.balance_of(owner)

    @external("ownerOf", view=True)
    def owner_of(self, ctx: CallContext, token_id: int) -> bytes:
        return self.state.ledger.owner_of(token_id)

    @external("totalSupply", view=True)
    def total_supply(self, ctx: CallContext) -> int:
        return self.state.ledger.total_supply()

    @external("isUsed", view=True)
    def is_used(self, ctx: CallContext, auth_token: Any) -> bool:
        return self.state.used_tokens.is_used(auth_token)

    @external("supportsInterface", view=True)
    def supports_interface(self, ctx: CallContext, interface_id: Any) -> bool:
        return to_fixed_bytes(interface_id, 4, name="interface id") in SUPPORTED_INTERFACES


NftContract.ABI = _collect_abi(NftContract)


__all__ = [
    "INTERFACE_ERC165",
    "INTERFACE_ERC721",
    "INTERFACE_ERC721_METADATA",
    "INTERFACE_ERC2981",
    "INTERFACE_ACCESS_CONTROL",
    "SUPPORTED_INTERFACES",
    "AbiEntry",
    "external",
    "NftContract",
]
