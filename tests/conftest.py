"""
Pytest configuration and fixtures for txproof tests.
"""
import json

import httpx
import pytest

from txproof.services.adapters import EvmAdapter, SolanaAdapter, TronAdapter
from txproof.services.models import ChainId

EVM_RPC_URL = "https://eth.test"
BSC_RPC_URL = "https://bsc.test"
SOLANA_RPC_URL = "https://sol.test"
TRON_RPC_URL = "https://tron.test"


class FakeChainNode:
    """Scripted chain endpoint served through httpx.MockTransport.

    `responses` maps a JSON-RPC method name (or an HTTP path for Tron) to one
    outcome or a list of outcomes consumed in order. An outcome is a JSON
    result, an httpx.Response, or an exception to raise.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content or b"{}")
        key = payload.get("method") or request.url.path
        self.calls.append((request.url.host, key, payload))

        outcome = self.responses[key]
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        if "method" in payload:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload.get("id"), "result": outcome})
        return httpx.Response(200, json=outcome)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def methods(self):
        return [key for _, key, _ in self.calls]


def make_evm_adapter(node, chain=ChainId.ETHEREUM, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return EvmAdapter(chain, EVM_RPC_URL, node.client(), **kwargs)


def make_solana_adapter(node, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return SolanaAdapter(ChainId.SOLANA, SOLANA_RPC_URL, node.client(), **kwargs)


def make_tron_adapter(node, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return TronAdapter(ChainId.TRON, TRON_RPC_URL, node.client(), **kwargs)


@pytest.fixture
def node():
    return FakeChainNode()


def evm_hash(fill="ab"):
    return "0x" + fill * 32


def solana_signature(length=88):
    alphabet = "5VqPcWmz3Jk1hTgBxRyNaLsEdFuHoK9i2rtGpw4ZeXfn8YAbCQjMv6S7DU"
    return (alphabet * 3)[:length]


def tron_hash(fill="c3"):
    return fill * 32


def word(value: int) -> str:
    """32-byte ABI word in hex without prefix"""
    return format(value, "064x")


def address_topic(address: str) -> str:
    return "0x" + "0" * 24 + address.lower().replace("0x", "")
