#chain_configs.py

# Chain family identifiers. Every chain in the table belongs to exactly one
# family, and each family has exactly one adapter implementation.
FAMILY_EVM = "evm"
FAMILY_SOLANA = "solana"
FAMILY_TRON = "tron"

EVM_TX_HASH = r"0x[a-fA-F0-9]{64}"
SOLANA_SIGNATURE = r"[1-9A-HJ-NP-Za-km-z]{88,98}"
TRON_TX_HASH = r"[a-fA-F0-9]{64}"


def get_chain_configs():
    """Return the closed chain table in identification priority order.

    `url_pattern` captures the hash from a known explorer URL (the URL prefix is
    case-insensitive, the hash is not), `hash_pattern` is the bare-hash grammar and `grammar`
    is the human description used in guidance text.
    """
    return {
        "ethereum": {
            "name": "Ethereum",
            "symbol": "ETH",
            "family": FAMILY_EVM,
            "explorer": "https://etherscan.io/tx/",
            "url_pattern": r"(?i:https?://(?:www\.)?etherscan\.io/tx/)(" + EVM_TX_HASH + r")(?![0-9a-fA-F])",
            "hash_pattern": EVM_TX_HASH,
            "grammar": "Ethereum: starts with '0x' followed by 64 hexadecimal characters (66 characters in total). Explorer: etherscan.io",
            "native_decimals": 18,
            "rpc_env": "ETHEREUM_RPC_URL",
            "rpc_default": "https://eth.llamarpc.com",
            "deposit_env": "ETH_WALLET_ADDRESS",
        },
        "bsc": {
            "name": "BNB Smart Chain",
            "symbol": "BNB",
            "family": FAMILY_EVM,
            "explorer": "https://bscscan.com/tx/",
            "url_pattern": r"(?i:https?://(?:www\.)?bscscan\.com/tx/)(" + EVM_TX_HASH + r")(?![0-9a-fA-F])",
            "hash_pattern": EVM_TX_HASH,
            "grammar": "BNB Smart Chain: starts with '0x' followed by 64 hexadecimal characters (66 characters in total). Explorer: bscscan.com",
            "native_decimals": 18,
            "rpc_env": "BSC_RPC_URL",
            "rpc_default": "https://bsc-dataseed.binance.org",
            "deposit_env": "BSC_WALLET_ADDRESS",
        },
        "solana": {
            "name": "Solana",
            "symbol": "SOL",
            "family": FAMILY_SOLANA,
            "explorer": "https://solscan.io/tx/",
            "url_pattern": r"(?i:https?://(?:www\.)?(?:solscan\.io|explorer\.solana\.com)/tx/)(" + SOLANA_SIGNATURE + r")(?![1-9A-HJ-NP-Za-km-z])",
            "hash_pattern": SOLANA_SIGNATURE,
            "grammar": "Solana: 88 to 98 base58 characters (letters and digits except 0, O, I and l). Explorer: solscan.io",
            "native_decimals": 9,
            "rpc_env": "SOLANA_RPC_URL",
            "rpc_default": "https://api.mainnet-beta.solana.com",
            "deposit_env": "SOLANA_WALLET_ADDRESS",
        },
        "tron": {
            "name": "Tron",
            "symbol": "TRX",
            "family": FAMILY_TRON,
            "explorer": "https://tronscan.org/#/transaction/",
            "url_pattern": r"(?i:https?://(?:www\.)?tronscan\.(?:org|io)/#/transaction/)(" + TRON_TX_HASH + r")(?![0-9a-fA-F])",
            "hash_pattern": TRON_TX_HASH,
            "grammar": "Tron: 64 hexadecimal characters without a '0x' prefix. Explorer: tronscan.org",
            "native_decimals": 6,
            "rpc_env": "TRON_FULL_NODE",
            "rpc_default": "https://api.trongrid.io",
            "deposit_env": "TRON_WALLET_ADDRESS",
        },
    }
