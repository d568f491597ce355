from __future__ import annotations

import copy

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nft_contract.errors import ERC721InvalidOwner, ERC721InvalidReceiver, ERC721NonexistentToken
from nft_contract.ledger import TokenLedger
from nft_contract.runtime import NativeLedger
from nft_contract.types import ZERO_ADDRESS, CallContext

CONTRACT = b"\xcc" * 20


def _ctx(events=None):
    return CallContext(
        caller=b"\x01" * 20, value=0, contract=CONTRACT, native=NativeLedger(), events=events if events is not None else []
    )


def test_mint_assigns_contiguous_range():
    ledger = TokenLedger()
    events = []
    ids = ledger.mint(_ctx(events), b"\x02" * 20, 3)

    assert list(ids) == [0, 1, 2]
    assert ledger.total_supply() == 3
    assert ledger.next_token_id() == 3
    assert ledger.balance_of(b"\x02" * 20) == 3
    assert [e.args["tokenId"] for e in events] == [0, 1, 2]


def test_reads_and_errors():
    ledger = TokenLedger()
    with pytest.raises(ERC721NonexistentToken):
        ledger.owner_of(0)
    with pytest.raises(ERC721InvalidOwner):
        ledger.balance_of(ZERO_ADDRESS)
    with pytest.raises(ERC721InvalidReceiver):
        ledger.mint(_ctx(), ZERO_ADDRESS, 1)
    assert ledger.balance_of(b"\x09" * 20) == 0
    assert not ledger.exists(0)


@settings(max_examples=50)
@given(
    st.lists(
        st.tuples(st.integers(min_value=1, max_value=5), st.integers(min_value=0, max_value=4)),
        max_size=20,
    )
)
def test_supply_and_ownership_invariants(batches):
    ledger = TokenLedger()
    ctx = _ctx()
    for who, qty in batches:
        ledger.mint(ctx, bytes([who]) * 20, qty)

    assert sum(ledger.balances.values()) == ledger.supply
    assert sorted(ledger.owners) == list(range(ledger.supply))
    for holder, count in ledger.balances.items():
        assert sum(1 for o in ledger.owners.values() if o == holder) == count


mints = st.lists(
    st.tuples(st.integers(min_value=1, max_value=5), st.integers(min_value=0, max_value=4)),
    max_size=10,
)


@settings(max_examples=50)
@given(mints, mints)
def test_rollback_restores_the_ledger_at_the_mark(before, after):
    ledger = TokenLedger()
    ctx = _ctx()
    for who, qty in before:
        ledger.mint(ctx, bytes([who]) * 20, qty)
    expected = copy.deepcopy(ledger)
    mark = ledger.checkpoint()

    for who, qty in after:
        ledger.mint(ctx, bytes([who]) * 20, qty)
    ledger.rollback(mark)

    assert ledger == expected
    assert ledger.next_token_id() == mark
