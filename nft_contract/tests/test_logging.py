from __future__ import annotations

import io
import json
import logging

import pytest

from nft_contract import logging as nlog
from nft_contract.types import ether


def _capture(json_fmt: bool):
    stream = io.StringIO()
    nlog.configure(json=json_fmt, level="DEBUG", stream=stream)
    return stream


def test_json_lines_carry_context():
    stream = _capture(True)
    log = nlog.get_logger("nft_contract.tests")
    with nlog.trace_scope("abc123", method="mintNft"):
        log.info("hello", extra={"token": b"\x01\x02"})

    rec = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert rec["msg"] == "hello"
    assert rec["trace_id"] == "abc123"
    assert rec["method"] == "mintNft"
    assert rec["token"] == "0x0102"
    assert nlog.context() == {}


def test_text_format_and_bind():
    stream = _capture(False)
    nlog.bind(contract="0xcc")
    try:
        nlog.get_logger("nft_contract.tests").warning("careful", extra={"n": 1})
    finally:
        nlog.clear_context()
    line = stream.getvalue().strip().splitlines()[-1]
    assert "WARN" in line
    assert "contract=0xcc" in line
    assert "n=1" in line
    assert line.endswith("| careful")


def test_env_format_override(monkeypatch):
    monkeypatch.setenv("NFT_LOG_FORMAT", "json")
    stream = io.StringIO()
    nlog.configure(stream=stream)
    root = logging.getLogger()
    assert isinstance(root.handlers[-1].formatter, nlog.JSONFormatter)


@pytest.mark.parametrize(
    "fmt,level,formatter",
    [("json", "DEBUG", nlog.JSONFormatter), ("text", "warning", nlog.TextFormatter)],
)
def test_configure_from_env(monkeypatch, fmt, level, formatter):
    monkeypatch.setenv("NFT_LOG_FORMAT", fmt)
    monkeypatch.setenv("NFT_LOG_LEVEL", level)
    nlog.configure_from_env()
    root = logging.getLogger()
    assert root.level == logging.getLevelName(level.upper())
    assert isinstance(root.handlers[-1].formatter, formatter)


def test_runtime_logs_reverts(nft, addr1):
    stream = _capture(True)
    nft.connect(addr1.address).transact("mintNft", value=1, raise_on_revert=False)
    records = [json.loads(line) for line in stream.getvalue().splitlines()]
    reverted = [r for r in records if r["msg"] == "call reverted"]
    assert reverted and reverted[0]["code"] == "WrongEthAmount"
    assert reverted[0]["method"] == "mintNft"


def test_admin_operations_log_at_info(nft):
    stream = _capture(True)
    nft.changeMintFee(ether("0.2"))
    records = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert any(r["msg"] == "mint fee changed" and r["level"] == "INFO" for r in records)


def test_with_fields_adapter():
    stream = _capture(True)
    log = nlog.with_fields(nlog.get_logger("nft_contract.tests"), component="issuer")
    log.info("issued")
    rec = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert rec["component"] == "issuer"
