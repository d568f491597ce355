"""ERC-2981 royalties: default, per-token overrides, validation, truncation."""
from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from nft_contract.errors import (
    ERC2981InvalidDefaultRoyalty,
    ERC2981InvalidDefaultRoyaltyReceiver,
    ERC2981InvalidTokenRoyalty,
    ERC2981InvalidTokenRoyaltyReceiver,
    InvalidArgument,
)
from nft_contract.royalty import FEE_DENOMINATOR, RoyaltyRegistry
from nft_contract.types import U256_MAX, ZERO_ADDRESS, ether


def test_erc2981_flow(nft, owner, addr1):
    nft.connect(addr1.address).mintNft(value=ether("0.01"))

    nft.setDefaultRoyalty(owner.address, 100)
    assert nft.royaltyInfo(0, ether(1)) == (owner.address, ether("0.01"))

    with pytest.raises(ERC2981InvalidDefaultRoyalty) as ei:
        nft.setDefaultRoyalty(owner.address, 100000)
    assert (ei.value.numerator, ei.value.denominator) == (100000, 10000)

    with pytest.raises(ERC2981InvalidDefaultRoyaltyReceiver) as ei:
        nft.setDefaultRoyalty(ZERO_ADDRESS, 1000)
    assert ei.value.receiver == ZERO_ADDRESS

    nft.setTokenRoyalty(0, addr1.address, 1000)
    assert nft.royaltyInfo(0, ether(1)) == (addr1.address, ether("0.1"))

    nft.resetTokenRoyalty(0)
    assert nft.royaltyInfo(0, ether(1)) == (owner.address, ether("0.01"))

    nft.deleteDefaultRoyalty()
    assert nft.royaltyInfo(0, ether(1)) == (ZERO_ADDRESS, 0)


def test_nothing_configured(nft):
    assert nft.royaltyInfo(7, ether(3)) == (ZERO_ADDRESS, 0)


def test_token_royalty_validation(nft, addr1):
    nft.connect(addr1.address).mintNft(value=ether("0.01"))

    with pytest.raises(ERC2981InvalidTokenRoyalty) as ei:
        nft.setTokenRoyalty(0, addr1.address, 10001)
    assert ei.value.params == (0, 10001, 10000)

    with pytest.raises(ERC2981InvalidTokenRoyaltyReceiver) as ei:
        nft.setTokenRoyalty(0, ZERO_ADDRESS, 10)
    assert ei.value.token_id == 0


def test_token_royalty_may_precede_the_mint(nft, addr1):
    nft.setTokenRoyalty(0, addr1.address, 500)
    assert nft.royaltyInfo(0, 10_000) == (addr1.address, 500)
    nft.connect(addr1.address).mintNft(value=ether("0.01"))
    assert nft.royaltyInfo(0, 10_000) == (addr1.address, 500)


def test_negative_token_id_rejected(nft, addr1):
    with pytest.raises(InvalidArgument) as ei:
        nft.setTokenRoyalty(-1, addr1.address, 500)
    assert ei.value.name == "token id"


def test_full_royalty_is_allowed(nft, owner):
    nft.setDefaultRoyalty(owner.address, FEE_DENOMINATOR)
    assert nft.royaltyInfo(0, 12345) == (owner.address, 12345)


def test_amount_is_truncated():
    reg = RoyaltyRegistry()
    reg.set_default_royalty(b"\x01" * 20, 1)
    assert reg.royalty_info(0, 9999) == (b"\x01" * 20, 0)
    assert reg.royalty_info(0, 10000) == (b"\x01" * 20, 1)


def test_override_survives_default_deletion():
    reg = RoyaltyRegistry()
    reg.set_default_royalty(b"\x01" * 20, 100)
    reg.set_token_royalty(3, b"\x02" * 20, 250)
    reg.delete_default_royalty()
    assert reg.royalty_info(3, 10000) == (b"\x02" * 20, 250)
    assert reg.royalty_info(4, 10000) == (ZERO_ADDRESS, 0)


@given(
    bps=st.integers(min_value=0, max_value=FEE_DENOMINATOR),
    price=st.integers(min_value=0, max_value=U256_MAX // FEE_DENOMINATOR),
)
def test_royalty_amount_property(bps, price):
    reg = RoyaltyRegistry()
    reg.set_default_royalty(b"\x03" * 20, bps)
    receiver, amount = reg.royalty_info(1, price)
    assert receiver == b"\x03" * 20
    assert amount == price * bps // FEE_DENOMINATOR
    assert 0 <= amount <= price


@given(bps=st.integers(min_value=FEE_DENOMINATOR + 1, max_value=U256_MAX))
def test_over_denominator_always_rejected(bps):
    reg = RoyaltyRegistry()
    with pytest.raises(ERC2981InvalidDefaultRoyalty):
        reg.set_default_royalty(b"\x03" * 20, bps)
    assert reg.default is None
