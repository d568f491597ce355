"""
nft_contract.metadata — per-token and collection-level metadata locators.

    token_uri(id)  = base_uri + decimal(id) + uri_extension
    contract_uri() = contract_uri (verbatim)

The strings are plain mutable settings; existence of the token is checked by
the contract before `token_uri` is consulted.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument

DEFAULT_BASE_URI = "https://test.uri/"
DEFAULT_URI_EXTENSION = ".json"
DEFAULT_CONTRACT_URI = "https://test.uri/contract.json"


def _require_str(v, name: str) -> str:
    if not isinstance(v, str):
        raise InvalidArgument(name, v)
    return v


@dataclass
class MetadataResolver:
    base_uri: str = DEFAULT_BASE_URI
    uri_extension: str = DEFAULT_URI_EXTENSION
    contract_uri: str = DEFAULT_CONTRACT_URI

    def token_uri(self, token_id: int) -> str:
        return f"{self.base_uri}{int(token_id)}{self.uri_extension}"

    def change_base_uri(self, uri: str) -> None:
        self.base_uri = _require_str(uri, "base uri")

    def change_uri_extension(self, extension: str) -> None:
        self.uri_extension = _require_str(extension, "uri extension")

    def change_contract_uri(self, uri: str) -> None:
        self.contract_uri = _require_str(uri, "contract uri")


__all__ = [
    "DEFAULT_BASE_URI",
    "DEFAULT_URI_EXTENSION",
    "DEFAULT_CONTRACT_URI",
    "MetadataResolver",
]
