"""
nft_contract.runtime — a small local execution host for collections.

The collection core assumes an environment that authenticates callers, moves
attached native value, serializes invocations and gives each invocation
all-or-nothing semantics. `LocalRuntime` provides exactly that, in process:

  - NativeLedger     per-address native balances ("wei")
  - LocalRuntime     deploy / fund / invoke under a single lock
  - CallResult       status, return value and the events of one invocation
  - ContractHandle   bound proxy: handle.connect(account).mintNft(value=…)

Invocation pipeline (`LocalRuntime.invoke`):
  1) resolve the method (public camelCase name or Python snake_case name)
  2) reject attached value on non-payable methods (NonPayable)
  3) checkpoint collection state + snapshot native ledger
  4) move attached value caller → collection
  5) run the operation with a fresh CallContext and event buffer
  6) on failure: restore both snapshots, drop the buffered events, re-raise
     (or return a REVERT result when raise_on_revert=False)
  7) on success: append the events to the runtime log and return SUCCESS
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import CollectionConfig
from .contract import AbiEntry, NftContract
from .errors import ContractError, InsufficientBalance, NonPayable, UnknownMethod
from .hashing import keccak256
from .logging import get_logger, trace_scope
from .types import CallContext, Event, require_amount, to_address, to_hex

log = get_logger(__name__)


# ---------------------------------------------------------------------------
# Native balances
# ---------------------------------------------------------------------------


@dataclass
class NativeLedger:
    balances: Dict[bytes, int] = field(default_factory=dict)

    def balance_of(self, account: Any) -> int:
        return self.balances.get(to_address(account), 0)

    def credit(self, account: Any, amount: int) -> None:
        account = to_address(account)
        require_amount(amount)
        if amount:
            self.balances[account] = self.balances.get(account, 0) + amount

    def debit(self, account: Any, amount: int) -> None:
        account = to_address(account)
        require_amount(amount)
        bal = self.balances.get(account, 0)
        if bal < amount:
            raise InsufficientBalance(account, bal, amount)
        if amount:
            self.balances[account] = bal - amount

    def transfer(self, src: Any, dst: Any, amount: int) -> None:
        self.debit(src, amount)
        self.credit(dst, amount)

    def snapshot(self) -> Dict[bytes, int]:
        return dict(self.balances)

    def restore(self, snap: Dict[bytes, int]) -> None:
        self.balances = dict(snap)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class CallStatus(str, Enum):
    SUCCESS = "success"
    REVERT = "revert"

    @property
    def is_success(self) -> bool:
        return self is CallStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class CallResult:
    status: CallStatus
    return_value: Any = None
    events: Tuple[Event, ...] = ()
    error: Optional[ContractError] = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    def to_dict(self) -> Dict[str, Any]:
        rv = self.return_value
        return {
            "status": str(self.status),
            "returnValue": to_hex(rv) if isinstance(rv, bytes) else rv,
            "events": [ev.to_dict() for ev in self.events],
            "error": self.error.to_dict() if self.error is not None else None,
        }


# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------


def resolve_method(method: str) -> AbiEntry:
    """Look a method up by public name first, then by Python attribute name."""
    entry = NftContract.ABI.get(method)
    if entry is not None:
        return entry
    for candidate in NftContract.ABI.values():
        if candidate.attr == method:
            return candidate
    raise UnknownMethod(method)


class LocalRuntime:
    """In-process host: every invocation is serialized and atomic."""

    def __init__(self, native: Optional[NativeLedger] = None):
        self.native = native if native is not None else NativeLedger()
        self.logs: List[Event] = []
        self._contracts: Dict[bytes, NftContract] = {}
        self._deploy_nonce = 0
        self._lock = threading.RLock()

    # ---- accounts ----------------------------------------------------------

    def fund(self, account: Any, amount: int) -> None:
        with self._lock:
            self.native.credit(account, amount)

    def balance_of(self, account: Any) -> int:
        return self.native.balance_of(account)

    # ---- contracts ---------------------------------------------------------

    def _next_address(self, deployer: bytes) -> bytes:
        nonce = self._deploy_nonce
        self._deploy_nonce += 1
        return keccak256(b"nft-contract/deploy|" + deployer + nonce.to_bytes(8, "big"))[12:]

    def deploy(self, deployer: Any, config: Optional[CollectionConfig] = None) -> "ContractHandle":
        deployer = to_address(deployer)
        with self._lock:
            address = self._next_address(deployer)
            events: List[Event] = []
            ctx = CallContext(caller=deployer, value=0, contract=address, native=self.native, events=events)
            self._contracts[address] = NftContract.deploy(ctx, config)
            self.logs.extend(events)
        return ContractHandle(runtime=self, address=address, sender=deployer)

    def contract(self, address: Any) -> NftContract:
        address = to_address(address)
        try:
            return self._contracts[address]
        except KeyError:
            raise LookupError(f"no collection deployed at {to_hex(address)}") from None

    # ---- invocation --------------------------------------------------------

    def invoke(
        self,
        address: Any,
        method: str,
        *args: Any,
        sender: Any,
        value: int = 0,
        raise_on_revert: bool = True,
    ) -> CallResult:
        contract = self.contract(address)
        sender = to_address(sender)
        with self._lock, trace_scope(contract=to_hex(contract.address), method=method, caller=to_hex(sender)):
            try:
                return self._execute(contract, method, args, sender, value)
            except ContractError as e:
                log.info("call reverted", extra={"code": e.code})
                if raise_on_revert:
                    raise
                return CallResult(status=CallStatus.REVERT, error=e)

    def _execute(
        self, contract: NftContract, method: str, args: Tuple[Any, ...], sender: bytes, value: int
    ) -> CallResult:
        entry = resolve_method(method)
        require_amount(value, name="value")
        if value and not entry.payable:
            raise NonPayable(entry.name, value)

        events: List[Event] = []
        ctx = CallContext(caller=sender, value=value, contract=contract.address, native=self.native, events=events)
        fn = getattr(contract, entry.attr)

        if entry.view:
            rv = fn(ctx, *args)
            log.debug("view ok", extra={"op": entry.name})
            return CallResult(status=CallStatus.SUCCESS, return_value=rv)

        state_snap = contract.state.snapshot()
        native_snap = self.native.snapshot()
        try:
            if value:
                self.native.transfer(sender, contract.address, value)
            rv = fn(ctx, *args)
        except Exception:
            contract.state.restore(state_snap)
            self.native.restore(native_snap)
            raise

        self.logs.extend(events)
        log.debug("call ok", extra={"op": entry.name, "events": len(events)})
        return CallResult(status=CallStatus.SUCCESS, return_value=rv, events=tuple(events))


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContractHandle:
    """
    Bound proxy to one deployed collection for one sender.

        nft = runtime.deploy(owner)
        nft.connect(addr1).mintNft(value=ether("0.01"))
        assert nft.balanceOf(addr1) == 1
    """

    runtime: LocalRuntime
    address: bytes
    sender: bytes

    def connect(self, account: Any) -> "ContractHandle":
        return replace(self, sender=to_address(account))

    def transact(self, method: str, *args: Any, value: int = 0, raise_on_revert: bool = True) -> CallResult:
        return self.runtime.invoke(
            self.address, method, *args, sender=self.sender, value=value, raise_on_revert=raise_on_revert
        )

    def call(self, method: str, *args: Any, value: int = 0) -> Any:
        return self.transact(method, *args, value=value).return_value

    @property
    def contract(self) -> NftContract:
        return self.runtime.contract(self.address)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name not in NftContract.ABI:
            raise AttributeError(name)

        def _bound(*args: Any, value: int = 0) -> Any:
            return self.call(name, *args, value=value)

        _bound.__name__ = name
        return _bound


__all__ = [
    "NativeLedger",
    "CallStatus",
    "CallResult",
    "resolve_method",
    "LocalRuntime",
    "ContractHandle",
]
