"""
EngineConfiguration tests
"""
import pytest

from txproof.config import EngineConfiguration


def test_defaults_point_at_public_endpoints():
    config = EngineConfiguration(env={})

    assert config.RPC_ENDPOINTS == {
        "ethereum": "https://eth.llamarpc.com",
        "bsc": "https://bsc-dataseed.binance.org",
        "solana": "https://api.mainnet-beta.solana.com",
        "tron": "https://api.trongrid.io",
    }
    assert config.RPC_TIMEOUT == 10.0
    assert config.RPC_MAX_RETRIES == 1
    assert config.TOKEN_DECIMALS_FALLBACK == 18
    assert config.TRON_API_KEY is None
    assert config.LOG_LEVEL == "INFO"
    assert config.DEBUG_MODE is False


def test_environment_overrides():
    config = EngineConfiguration(env={
        "ENVIRONMENT": "development",
        "SOLANA_RPC_URL": "https://sol.example",
        "TRON_FULL_NODE": "https://tron.example",
        "TRON_API_KEY": "abc",
        "RPC_TIMEOUT": "3",
        "RPC_MAX_RETRIES": "0",
        "TOKEN_DECIMALS_FALLBACK": "6",
    })

    assert config.DEBUG_MODE is True
    assert config.LOG_LEVEL == "DEBUG"
    assert config.rpc_url_for("solana") == "https://sol.example"
    assert config.rpc_url_for("tron") == "https://tron.example"
    assert config.TRON_API_KEY == "abc"
    assert config.RPC_TIMEOUT == 3.0
    assert config.RPC_MAX_RETRIES == 0
    assert config.TOKEN_DECIMALS_FALLBACK == 6


def test_deposit_addresses_are_read_per_chain():
    config = EngineConfiguration(env={
        "ETH_WALLET_ADDRESS": " 0xabc ",
        "TRON_WALLET_ADDRESS": "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t",
    })

    assert config.deposit_address_for("ethereum") == "0xabc"
    assert config.deposit_address_for("tron") == "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
    assert config.deposit_address_for("bsc") is None


def test_validate_accepts_defaults():
    assert EngineConfiguration(env={}).validate() is True


@pytest.mark.parametrize(
    "env",
    [
        {"ETHEREUM_RPC_URL": "ws://eth.example"},
        {"RPC_TIMEOUT": "0"},
        {"RPC_MAX_RETRIES": "-1"},
    ],
)
def test_validate_rejects_bad_values(env):
    with pytest.raises(ValueError):
        EngineConfiguration(env=env).validate()


def test_missing_deposit_addresses_only_warn(caplog):
    with caplog.at_level("WARNING", logger="txproof.config"):
        EngineConfiguration(env={"ETH_WALLET_ADDRESS": "0xabc"}).validate()
    assert "bsc" in caplog.text
    assert "ethereum" not in caplog.text.split("for:")[1]
