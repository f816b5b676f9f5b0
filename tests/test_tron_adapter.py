"""
Tron adapter tests
"""
import base58
import pytest

from conftest import FakeChainNode, make_tron_adapter, tron_hash, word
from txproof.services.adapters.tron import hex_to_base58
from txproof.services.errors import TransactionNotFound, UnsupportedTransactionType
from txproof.services.models import ChainId, TransferStatus, TransferType

TX_HASH = tron_hash("c3")
USDT_HEX = "41a614f803b6fd780986a42c78ec9c7f77e6ded13c"
USDT_BASE58 = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
OWNER_HEX = "41" + "11" * 20
RECIPIENT_HEX = "41" + "22" * 20


def b58(hex_address):
    return base58.b58encode_check(bytes.fromhex(hex_address)).decode()


def tron_tx(contract, ret=("SUCCESS",)):
    tx = {"txID": TX_HASH, "raw_data": {"contract": [contract]}}
    if ret:
        tx["ret"] = [{"contractRet": r} for r in ret]
    return tx


def trx_transfer(amount=2_500_000):
    return {
        "type": "TransferContract",
        "parameter": {"value": {"owner_address": OWNER_HEX, "to_address": RECIPIENT_HEX, "amount": amount}},
    }


def trc20_transfer(amount=10_000_000, data=None):
    data = data if data is not None else "a9059cbb" + word(int(RECIPIENT_HEX[2:], 16)) + word(amount)
    return {
        "type": "TriggerSmartContract",
        "parameter": {"value": {"owner_address": OWNER_HEX, "contract_address": USDT_HEX, "data": data}},
    }


def test_hex_to_base58_known_address():
    assert hex_to_base58(USDT_HEX) == USDT_BASE58
    assert hex_to_base58(USDT_HEX[2:]) == USDT_BASE58
    assert hex_to_base58("0x" + USDT_HEX[2:]) == USDT_BASE58


def test_hex_to_base58_passes_base58_through():
    assert hex_to_base58(USDT_BASE58) == USDT_BASE58


@pytest.mark.asyncio
async def test_trx_transfer_is_native():
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trx_transfer())})
    transfer = await make_tron_adapter(node).fetch_and_decode(TX_HASH)

    assert transfer.chain == ChainId.TRON
    assert transfer.type == TransferType.NATIVE
    assert transfer.from_ == b58(OWNER_HEX)
    assert transfer.to == b58(RECIPIENT_HEX)
    assert transfer.amount == "2.5"
    assert transfer.token_address is None
    assert transfer.status == TransferStatus.CONFIRMED
    assert node.calls[0][2] == {"value": TX_HASH}


@pytest.mark.asyncio
async def test_trc20_transfer_uses_queried_decimals():
    node = FakeChainNode({
        "/wallet/gettransactionbyid": tron_tx(trc20_transfer()),
        "/wallet/triggerconstantcontract": {"constant_result": [word(6)], "result": {"result": True}},
    })
    transfer = await make_tron_adapter(node).fetch_and_decode(TX_HASH)

    assert transfer.type == TransferType.TOKEN
    assert transfer.token_address == USDT_BASE58
    assert transfer.from_ == b58(OWNER_HEX)
    assert transfer.to == b58(RECIPIENT_HEX)
    assert transfer.amount == "10"

    decimals_request = node.calls[1][2]
    assert decimals_request["function_selector"] == "decimals()"
    assert decimals_request["contract_address"] == USDT_HEX


@pytest.mark.asyncio
async def test_trc20_decimals_fallback_when_contract_returns_nothing():
    node = FakeChainNode({
        "/wallet/gettransactionbyid": tron_tx(trc20_transfer(amount=5 * 10**18)),
        "/wallet/triggerconstantcontract": {"result": {"result": True}},
    })
    transfer = await make_tron_adapter(node, token_decimals_fallback=18).fetch_and_decode(TX_HASH)
    assert transfer.amount == "5"


@pytest.mark.asyncio
async def test_missing_ret_means_pending():
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trx_transfer(), ret=())})
    transfer = await make_tron_adapter(node).fetch_and_decode(TX_HASH)
    assert transfer.status == TransferStatus.PENDING


@pytest.mark.asyncio
async def test_reverted_contract_means_failed():
    node = FakeChainNode({
        "/wallet/gettransactionbyid": tron_tx(trc20_transfer(), ret=("REVERT",)),
        "/wallet/triggerconstantcontract": {"constant_result": [word(6)]},
    })
    transfer = await make_tron_adapter(node).fetch_and_decode(TX_HASH)
    assert transfer.status == TransferStatus.FAILED


@pytest.mark.asyncio
async def test_empty_body_raises_not_found():
    node = FakeChainNode({"/wallet/gettransactionbyid": {}})
    with pytest.raises(TransactionNotFound):
        await make_tron_adapter(node).fetch_and_decode(TX_HASH)


@pytest.mark.asyncio
async def test_other_contract_types_are_unsupported():
    freeze = {"type": "FreezeBalanceV2Contract", "parameter": {"value": {"owner_address": OWNER_HEX}}}
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(freeze)})
    with pytest.raises(UnsupportedTransactionType):
        await make_tron_adapter(node).fetch_and_decode(TX_HASH)


@pytest.mark.asyncio
async def test_non_transfer_contract_call_is_unsupported():
    approve = "095ea7b3" + word(int(RECIPIENT_HEX[2:], 16)) + word(1)
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trc20_transfer(data=approve))})
    with pytest.raises(UnsupportedTransactionType):
        await make_tron_adapter(node).fetch_and_decode(TX_HASH)


@pytest.mark.asyncio
async def test_truncated_transfer_call_data_is_unsupported():
    truncated = "a9059cbb" + word(int(RECIPIENT_HEX[2:], 16)) + "00ff"
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trc20_transfer(data=truncated))})
    with pytest.raises(UnsupportedTransactionType):
        await make_tron_adapter(node).fetch_and_decode(TX_HASH)


@pytest.mark.asyncio
async def test_api_key_is_sent_as_header():
    seen = []
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trx_transfer())})
    original = node.handler

    def handler(request):
        seen.append(request.headers.get("TRON-PRO-API-KEY"))
        return original(request)

    node.handler = handler
    await make_tron_adapter(node, api_key="secret-key").fetch_and_decode(TX_HASH)
    assert seen == ["secret-key"]


@pytest.mark.parametrize(
    "decimals_body",
    [
        {
            "result": {"result": True},
            "constant_result": ["08c379a0" + word(32)],
            "transaction": {"ret": [{"ret": "FAILED"}]},
        },
        {"result": {"code": "CONTRACT_VALIDATE_ERROR", "message": "636f6e7472616374"}},
    ],
)
@pytest.mark.asyncio
async def test_reverting_decimals_call_uses_fallback(decimals_body):
    node = FakeChainNode({
        "/wallet/gettransactionbyid": tron_tx(trc20_transfer(amount=4 * 10**18)),
        "/wallet/triggerconstantcontract": decimals_body,
    })
    transfer = await make_tron_adapter(node, token_decimals_fallback=18).fetch_and_decode(TX_HASH)
    assert transfer.amount == "4"


@pytest.mark.parametrize(
    "arguments",
    [
        "zz" * 64,
        word(int(RECIPIENT_HEX[2:], 16)) + "0x" + "0" * 62,
    ],
)
@pytest.mark.asyncio
async def test_transfer_call_data_with_non_hex_arguments_is_unsupported(arguments):
    node = FakeChainNode({"/wallet/gettransactionbyid": tron_tx(trc20_transfer(data="a9059cbb" + arguments))})
    with pytest.raises(UnsupportedTransactionType):
        await make_tron_adapter(node).fetch_and_decode(TX_HASH)
