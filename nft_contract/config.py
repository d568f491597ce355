"""
Collection configuration loader.

Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (NFT_*)
    3) Config file (TOML or JSON), path given explicitly or via NFT_CONFIG
    4) Built-in defaults (lowest)

The result is a frozen, validated `CollectionConfig` which the runtime uses
to initialize a freshly deployed collection.

File layout (TOML):

    [collection]
    name = "NftContract"
    symbol = "NFT"
    mint_fee = "0.01 ether"      # or an integer amount in wei
    base_uri = "https://test.uri/"
    uri_extension = ".json"
    contract_uri = "https://test.uri/contract.json"
    signer = "0x…"               # optional; zero address leaves free mint closed

A flat table (no [collection] header) is accepted as well.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidAddress
from .ledger import DEFAULT_NAME, DEFAULT_SYMBOL
from .metadata import DEFAULT_BASE_URI, DEFAULT_CONTRACT_URI, DEFAULT_URI_EXTENSION
from .state import DEFAULT_MINT_FEE
from .types import U256_MAX, ZERO_ADDRESS, ether, to_address, to_hex

ENV_PREFIX = "NFT_"
ENV_CONFIG_PATH = "NFT_CONFIG"

_ENV_KEYS = {
    "name": "NFT_NAME",
    "symbol": "NFT_SYMBOL",
    "mint_fee": "NFT_MINT_FEE",
    "base_uri": "NFT_BASE_URI",
    "uri_extension": "NFT_URI_EXTENSION",
    "contract_uri": "NFT_CONTRACT_URI",
    "signer": "NFT_SIGNER",
}


class ConfigError(ValueError):
    """Raised when a configuration layer holds an unusable value."""


@dataclass(frozen=True)
class CollectionConfig:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    mint_fee: int = DEFAULT_MINT_FEE
    base_uri: str = DEFAULT_BASE_URI
    uri_extension: str = DEFAULT_URI_EXTENSION
    contract_uri: str = DEFAULT_CONTRACT_URI
    signer: bytes = ZERO_ADDRESS

    def __post_init__(self) -> None:
        for key in ("name", "symbol", "base_uri", "uri_extension", "contract_uri"):
            if not isinstance(getattr(self, key), str):
                raise ConfigError(f"{key} must be a string")
        if not self.name or not self.symbol:
            raise ConfigError("name and symbol must be non-empty")
        if isinstance(self.mint_fee, bool) or not isinstance(self.mint_fee, int):
            raise ConfigError("mint_fee must be an integer amount in wei")
        if not 0 <= self.mint_fee <= U256_MAX:
            raise ConfigError(f"mint_fee out of range: {self.mint_fee}")
        if not isinstance(self.signer, bytes) or len(self.signer) != 20:
            raise ConfigError("signer must be a 20-byte address")

    def with_overrides(self, **changes: Any) -> "CollectionConfig":
        return replace(self, **_coerce(changes))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["signer"] = to_hex(self.signer)
        return d


# ------------------------------
# Value parsing
# ------------------------------


def parse_amount(value: Any) -> int:
    """
    Accept an int (wei), a decimal/hex string of wei, or "<n> ether".

        parse_amount("0.01 ether") == 10**16
        parse_amount("10000000000000000") == 10**16
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid amount: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"invalid amount: {value!r}")
    v = value.strip().lower()
    try:
        if v.endswith("ether"):
            return ether(v[: -len("ether")].strip())
        return int(v, 0)
    except ValueError as e:
        raise ConfigError(f"invalid amount: {value!r}") from e


def _coerce(raw: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in _ENV_KEYS:
            raise ConfigError(f"unknown config key: {key}")
        if key == "mint_fee":
            out[key] = parse_amount(value)
        elif key == "signer":
            try:
                out[key] = to_address(value) if value else ZERO_ADDRESS
            except InvalidAddress as e:
                raise ConfigError(f"signer is not an address: {value!r}") from e
        else:
            out[key] = value
    return out


# ------------------------------
# Layers
# ------------------------------


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    suffix = path.suffix.lower()
    with path.open("rb") as f:
        if suffix in {".toml", ".tml"}:
            data = tomllib.load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ConfigError(f"unsupported config format: {suffix}. Use .toml or .json")
    section = data.get("collection", data)
    if not isinstance(section, dict):
        raise ConfigError("config file must contain a table of collection settings")
    return dict(section)


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    return {key: environ[env] for key, env in _ENV_KEYS.items() if environ.get(env)}


def load(
    config_file: Optional[str | Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> CollectionConfig:
    """
    Build a CollectionConfig.

    Precedence: overrides > env > file > defaults.
    """
    env = os.environ if environ is None else environ
    merged: Dict[str, Any] = {}

    path = config_file or env.get(ENV_CONFIG_PATH)
    if path:
        merged.update(_load_file(Path(path).expanduser()))
    merged.update(_from_env(env))
    merged.update(overrides)

    return CollectionConfig(**_coerce(merged))


__all__ = [
    "ENV_PREFIX",
    "ENV_CONFIG_PATH",
    "ConfigError",
    "CollectionConfig",
    "parse_amount",
    "load",
]
