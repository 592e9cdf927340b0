"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from defi_dashboard.config import (
    AppConfig,
    CoinGeckoConfig,
    EthereumConfig,
    LLMConfig,
    PriceOracleConfig,
    SolanaConfig,
    SubgraphConfig,
    YieldsConfig,
)
from defi_dashboard.models import PoolPosition, Portfolio, TokenBalance

ETH_ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
SOL_ADDRESS = "7EcDhSYGxXyscszYEp35KHN8vvw3svAuLKTzXwCFLtV"


@pytest.fixture()
def eth_address() -> str:
    return ETH_ADDRESS


@pytest.fixture()
def sol_address() -> str:
    return SOL_ADDRESS


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_ethereum_config() -> EthereumConfig:
    return EthereumConfig(
        alchemy_api_key="alchemy-test-key",
        networks=("eth-mainnet", "eth-sepolia"),
        rpc_timeout=5,
    )


@pytest.fixture()
def sample_solana_config() -> SolanaConfig:
    return SolanaConfig(
        helius_api_key="helius-test-key",
        helius_url="https://api.helius.example.com",
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=5,
    )


@pytest.fixture()
def sample_coingecko_config() -> CoinGeckoConfig:
    return CoinGeckoConfig(
        base_url="https://api.coingecko.example.com/api/v3",
        coin_ids={"ETH": "ethereum", "SOL": "solana"},
        fallback_prices={"ETH": 3000.0},
    )


@pytest.fixture()
def sample_app_config(
    sample_ethereum_config: EthereumConfig,
    sample_solana_config: SolanaConfig,
    sample_coingecko_config: CoinGeckoConfig,
) -> AppConfig:
    return AppConfig(
        ethereum=sample_ethereum_config,
        solana=sample_solana_config,
        price_oracle=PriceOracleConfig(coingecko=sample_coingecko_config, timeout=5),
        subgraph=SubgraphConfig(uniswap_v2_url="https://graph.example.com/uniswap-v2"),
        yields=YieldsConfig(url="https://yields.example.com/pools"),
        llm=LLMConfig(base_url="https://llm.example.com/v1", api_key="llm-test-key"),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def eth_usdc_position() -> PoolPosition:
    """10 ETH + 30,000 USDC deposited at $3000, ETH now $3600."""
    return PoolPosition(
        amount_a=10.0,
        amount_b=30000.0,
        initial_price_a=3000.0,
        initial_price_b=1.0,
        current_price_a=3600.0,
        current_price_b=1.0,
        symbol_a="ETH",
        symbol_b="USDC",
    )


@pytest.fixture()
def sample_portfolio() -> Portfolio:
    return Portfolio(
        address=ETH_ADDRESS,
        chain="ethereum",
        total_value=7000.0,
        tokens=(
            TokenBalance(
                symbol="ETH", name="Ethereum", balance=1.5, value=5000.0,
                change_24h=2.5, chain="ethereum",
            ),
            TokenBalance(
                symbol="USDC", name="USD Coin", balance=2000.0, value=2000.0,
                change_24h=0.0, chain="ethereum",
            ),
        ),
        native_balance=1.5,
        network="eth-mainnet",
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    ethereum:
      alchemy_api_key: "${TEST_ALCHEMY_KEY}"
      networks: [eth-mainnet]
      rpc_timeout: 10
    solana:
      helius_api_key: "helius-key"
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    price_oracle:
      provider: coingecko
      timeout: 5
      coingecko:
        base_url: "https://cg.example.com/api/v3"
        coin_ids: {ETH: ethereum, SOL: solana}
        fallback_prices: {ETH: 3000, SOL: 130}
    subgraph:
      uniswap_v2_url: "https://graph.example.com"
      fee_rate: 0.003
    yields:
      chains: [Ethereum]
      limit: 10
    llm:
      base_url: "https://llm.example.com/v1/"
      api_key: "llm-key"
      model: test-model
      max_retries: 1
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file

