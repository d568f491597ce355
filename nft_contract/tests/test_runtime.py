"""
Local host: method resolution, payable checks, atomic rollback, event log,
serialized concurrent invocations.
"""
from __future__ import annotations

import threading

import pytest

from nft_contract.config import CollectionConfig
from nft_contract.errors import InsufficientBalance, InvalidArgument, NonPayable, ProvidedHexUsed, UnknownMethod
from nft_contract.runtime import CallStatus, LocalRuntime, NativeLedger, resolve_method
from nft_contract.types import CallContext, ether, to_hex


def test_resolve_by_public_or_python_name():
    assert resolve_method("mintNft").attr == "mint_nft"
    assert resolve_method("mint_nft").name == "mintNft"
    assert resolve_method("withdrawETH").attr == "withdraw_eth"
    assert resolve_method("tokenURI").view
    with pytest.raises(UnknownMethod):
        resolve_method("burn")


def test_snake_case_invocation(runtime, nft, addr1):
    runtime.invoke(nft.address, "mint_nft", sender=addr1.address, value=ether("0.01"))
    assert runtime.invoke(nft.address, "balance_of", addr1.address, sender=addr1.address).return_value == 1


def test_unknown_handle_attribute(nft):
    with pytest.raises(AttributeError):
        nft.burn


def test_value_on_non_payable_rejected(runtime, nft, addr1):
    before = runtime.balance_of(addr1.address)
    with pytest.raises(NonPayable) as ei:
        nft.connect(addr1.address).totalSupply(value=1)
    assert ei.value.method == "totalSupply"
    assert runtime.balance_of(addr1.address) == before


def test_insufficient_funds_reverts(runtime, owner):
    poor = b"\x77" * 20
    nft = runtime.deploy(owner.address)
    with pytest.raises(InsufficientBalance) as ei:
        nft.connect(poor).mintNft(value=ether("0.01"))
    assert ei.value.balance == 0
    assert nft.totalSupply() == 0


def test_non_raising_mode(runtime, nft, addr1):
    res = nft.connect(addr1.address).transact("mintNft", value=1, raise_on_revert=False)
    assert res.status is CallStatus.REVERT
    assert res.error.code == "WrongEthAmount"
    d = res.to_dict()
    assert d["status"] == "revert"
    assert d["error"]["args"] == {"sent": 1, "required": ether("0.01")}


@pytest.mark.parametrize(
    "method,args,name",
    [
        ("freeMint", (-1, b"\x01" * 32, b"\x00" * 65), "quantity"),
        ("freeMint", (1, b"\x01" * 31, b"\x00" * 65), "auth token"),
        ("adminMint", (None, [-1]), "quantity"),
        ("changeBaseUri", (42,), "base uri"),
        ("supportsInterface", ("0xzz",), "interface id"),
    ],
)
def test_malformed_arguments_revert_with_typed_error(runtime, nft, addr1, method, args, name):
    args = tuple([addr1.address] if a is None else a for a in args)
    logged = len(runtime.logs)
    res = nft.transact(method, *args, raise_on_revert=False)
    assert res.status is CallStatus.REVERT
    assert isinstance(res.error, InvalidArgument)
    assert res.error.name == name
    assert res.to_dict()["error"]["code"] == "InvalidArgument"
    assert nft.totalSupply() == 0
    assert len(runtime.logs) == logged


def test_success_result_serializes(nft, addr1):
    res = nft.connect(addr1.address).transact("mintNft", value=ether("0.01"))
    d = res.to_dict()
    assert d["status"] == "success"
    assert d["returnValue"] == 0
    assert d["events"][0]["event"] == "Transfer"
    assert d["events"][0]["args"]["to"] == to_hex(addr1.address)


def test_failure_after_partial_write_is_rolled_back(runtime, nft, addr1, monkeypatch):
    contract = nft.contract

    def boom(self, ctx):
        contract.state.mint_fee = 1
        contract.state.ledger.mint(ctx, ctx.caller, 2)
        raise RuntimeError("late failure")

    monkeypatch.setattr(type(contract), "mint_nft", boom)
    logged = len(runtime.logs)
    before = runtime.balance_of(addr1.address)

    with pytest.raises(RuntimeError):
        nft.connect(addr1.address).mintNft(value=ether("0.01"))

    assert nft.totalSupply() == 0
    assert nft.mintFee() == ether("0.01")
    assert runtime.balance_of(addr1.address) == before
    assert len(runtime.logs) == logged


def test_deploy_with_config(runtime, owner, signer):
    cfg = CollectionConfig(name="Kittens", symbol="KIT", mint_fee=ether("0.5"), signer=signer.address)
    nft = runtime.deploy(owner.address, cfg)
    assert nft.name() == "Kittens"
    assert nft.symbol() == "KIT"
    assert nft.mintFee() == ether("0.5")
    assert nft.signer() == signer.address


def test_deployments_get_distinct_addresses(runtime, owner):
    a = runtime.deploy(owner.address)
    b = runtime.deploy(owner.address)
    assert a.address != b.address
    a.changeMintFee(0)
    assert b.mintFee() == ether("0.01")


def test_unknown_contract_address(runtime, owner):
    with pytest.raises(LookupError):
        runtime.invoke(b"\x99" * 20, "totalSupply", sender=owner.address)


def test_supports_interface(nft):
    for iid in ("0x01ffc9a7", "0x80ac58cd", "0x5b5e139f", "0x2a55205a", "0x7965db0b"):
        assert nft.supportsInterface(iid) is True
    assert nft.supportsInterface(bytes.fromhex("ffffffff")) is False


def test_concurrent_free_mints_consume_token_once(nft, signer, addr1, auth_hex, sign_free_mint):
    nft.setSigner(signer.address)
    token = auth_hex()
    sig = sign_free_mint(addr1.address, 1, token)
    results = []

    def worker():
        res = nft.connect(addr1.address).transact("freeMint", 1, token, sig, raise_on_revert=False)
        results.append(res)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(r.is_success for r in results) == 1
    assert all(isinstance(r.error, ProvidedHexUsed) for r in results if not r.is_success)
    assert nft.totalSupply() == 1


def test_native_ledger():
    ledger = NativeLedger()
    a, b = b"\x01" * 20, b"\x02" * 20
    ledger.credit(a, 10)
    ledger.transfer(a, b, 4)
    assert (ledger.balance_of(a), ledger.balance_of(b)) == (6, 4)
    snap = ledger.snapshot()
    ledger.transfer(b, a, 4)
    ledger.restore(snap)
    assert ledger.balance_of(b) == 4
    with pytest.raises(InsufficientBalance):
        ledger.debit(a, 7)


def test_fund(owner):
    rt = LocalRuntime()
    rt.fund(owner.address, 5)
    assert rt.balance_of(owner.address) == 5


def test_checkpoint_leaves_growing_components_uncopied(nft, addr1):
    nft.connect(addr1.address).mintNft(value=ether("0.01"))
    state = nft.contract.state
    cp = state.snapshot()
    assert cp.ledger_mark == 1
    assert "ledger" not in cp.copies and "used_tokens" not in cp.copies

    state.ledger.mint(CallContext(addr1.address, 0, nft.address, NativeLedger(), []), addr1.address, 3)
    state.mint_fee = 7
    state.restore(cp)
    assert nft.totalSupply() == 1
    assert nft.balanceOf(addr1.address) == 1
    assert nft.mintFee() == ether("0.01")
