"""
nft_contract.tests.conftest
===========================

Pytest fixtures for the collection.

- Deterministic accounts (owner, addr1..addr4, signer) derived from fixed
  private keys, so addresses are stable across runs.
- A fresh `LocalRuntime` per test with every account funded.
- `nft`: a collection deployed by `owner` with the default configuration.
- `auth_hex` / `sign_free_mint` factories for free-mint authorizations.
"""
from __future__ import annotations

import itertools
import os
from dataclasses import dataclass
from typing import Callable, Dict

import pytest

from nft_contract.hashing import keccak256
from nft_contract.runtime import ContractHandle, LocalRuntime
from nft_contract.signatures import address_from_private_key, sign_free_mint as _sign
from nft_contract.types import ether

# Keep dict/set hash-iteration stable and the clock in UTC.
os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

ACCOUNT_NAMES = ("owner", "addr1", "addr2", "addr3", "addr4", "signer")
STARTING_BALANCE = ether(100)


@dataclass(frozen=True)
class Account:
    name: str
    key: bytes
    address: bytes


def make_account(name: str) -> Account:
    key = keccak256(b"nft-contract/tests/account|" + name.encode("ascii"))
    return Account(name=name, key=key, address=address_from_private_key(key))


_ACCOUNTS: Dict[str, Account] = {n: make_account(n) for n in ACCOUNT_NAMES}


@pytest.fixture(scope="session")
def accounts() -> Dict[str, Account]:
    return dict(_ACCOUNTS)


@pytest.fixture
def owner() -> Account:
    return _ACCOUNTS["owner"]


@pytest.fixture
def addr1() -> Account:
    return _ACCOUNTS["addr1"]


@pytest.fixture
def addr2() -> Account:
    return _ACCOUNTS["addr2"]


@pytest.fixture
def addr3() -> Account:
    return _ACCOUNTS["addr3"]


@pytest.fixture
def addr4() -> Account:
    return _ACCOUNTS["addr4"]


@pytest.fixture
def signer() -> Account:
    return _ACCOUNTS["signer"]


@pytest.fixture
def runtime() -> LocalRuntime:
    rt = LocalRuntime()
    for acct in _ACCOUNTS.values():
        rt.fund(acct.address, STARTING_BALANCE)
    return rt


@pytest.fixture
def nft(runtime: LocalRuntime, owner: Account) -> ContractHandle:
    return runtime.deploy(owner.address)


@pytest.fixture
def auth_hex() -> Callable[[], bytes]:
    """Fresh, deterministic 32-byte authorization tokens."""
    counter = itertools.count()
    return lambda: keccak256(b"auth-token|" + next(counter).to_bytes(8, "big"))


@pytest.fixture
def sign_free_mint(signer: Account) -> Callable[..., bytes]:
    """sign_free_mint(recipient, quantity, token, key=signer.key) -> 65-byte signature."""

    def _factory(recipient, quantity: int, token: bytes, key: bytes = signer.key) -> bytes:
        return _sign(key, recipient, quantity, token)

    return _factory
