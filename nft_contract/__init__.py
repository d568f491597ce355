"""
NFT collection contract (pure Python)

A deterministic state-transition engine for a single non-fungible token
collection:
- role-based access control and a global pause switch
- public paid mint, signed one-time free mint, batched admin mint
- ERC-2981 royalties and token/contract metadata URIs
- a treasury withdrawn through the host's native ledger
plus a small local host (`runtime`) that serializes invocations and rolls
back failed ones.

Re-exports:
    __version__
    NftContract, LocalRuntime, ContractHandle, CollectionConfig, ether
    errors, types, hashing, signatures, access, pausable, replay, ledger,
    royalty, metadata, treasury, state, contract, runtime, config
"""

from . import (access, config, contract, errors, hashing, ledger, metadata,
               pausable, replay, royalty, runtime, signatures, state,
               treasury, types)
from .config import CollectionConfig
from .contract import NftContract
from .runtime import ContractHandle, LocalRuntime
from .types import ether
from .version import __version__

__all__ = [
    "__version__",
    "NftContract",
    "LocalRuntime",
    "ContractHandle",
    "CollectionConfig",
    "ether",
    # submodules
    "errors",
    "types",
    "hashing",
    "signatures",
    "access",
    "pausable",
    "replay",
    "ledger",
    "royalty",
    "metadata",
    "treasury",
    "state",
    "contract",
    "runtime",
    "config",
]
