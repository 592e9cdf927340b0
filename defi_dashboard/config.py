"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EthereumConfig:
    alchemy_api_key: str = ""
    networks: tuple[str, ...] = ("eth-mainnet", "eth-sepolia")
    rpc_timeout: int = 30
    min_token_balance: float = 0.000001


@dataclass(frozen=True)
class SolanaConfig:
    helius_api_key: str = ""
    helius_url: str = "https://api.helius.xyz"
    rpc_endpoints: tuple[str, ...] = ("https://api.mainnet-beta.solana.com",)
    rpc_timeout: int = 30


@dataclass(frozen=True)
class CoinGeckoConfig:
    base_url: str = "https://api.coingecko.com/api/v3"
    api_key: str = ""
    coin_ids: dict[str, str] = field(
        default_factory=lambda: {"ETH": "ethereum", "SOL": "solana"}
    )
    fallback_prices: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "coingecko"
    coingecko: CoinGeckoConfig = field(default_factory=CoinGeckoConfig)
    timeout: int = 15


@dataclass(frozen=True)
class SubgraphConfig:
    uniswap_v2_url: str = ""
    fee_rate: float = 0.003
    timeout: int = 30


@dataclass(frozen=True)
class YieldsConfig:
    url: str = "https://yields.llama.fi/pools"
    chains: tuple[str, ...] = ("Ethereum", "Solana")
    min_tvl: float = 1_000_000.0
    max_apy: float = 1000.0
    limit: int = 50
    blue_chips: tuple[str, ...] = ("Aave", "Compound", "Uniswap", "Curve", "Lido")
    timeout: int = 30


@dataclass(frozen=True)
class LLMConfig:
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-4o-mini"
    temperature: float = 0.3
    max_retries: int = 2
    timeout: int = 60


@dataclass(frozen=True)
class AppConfig:
    ethereum: EthereumConfig = field(default_factory=EthereumConfig)
    solana: SolanaConfig = field(default_factory=SolanaConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)
    subgraph: SubgraphConfig = field(default_factory=SubgraphConfig)
    yields: YieldsConfig = field(default_factory=YieldsConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_ethereum(raw: dict[str, Any]) -> EthereumConfig:
    return EthereumConfig(
        alchemy_api_key=raw.get("alchemy_api_key", ""),
        networks=tuple(raw.get("networks", EthereumConfig.networks)),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        min_token_balance=float(raw.get("min_token_balance", 0.000001)),
    )


def _build_solana(raw: dict[str, Any]) -> SolanaConfig:
    return SolanaConfig(
        helius_api_key=raw.get("helius_api_key", ""),
        helius_url=raw.get("helius_url", SolanaConfig.helius_url),
        rpc_endpoints=tuple(raw.get("rpc_endpoints", SolanaConfig.rpc_endpoints)),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    cg_raw = raw.get("coingecko", {})
    coin_ids = cg_raw.get("coin_ids")
    return PriceOracleConfig(
        provider=raw.get("provider", "coingecko"),
        coingecko=CoinGeckoConfig(
            base_url=cg_raw.get("base_url", CoinGeckoConfig.base_url),
            api_key=cg_raw.get("api_key", ""),
            coin_ids=(
                dict(coin_ids) if coin_ids is not None
                else CoinGeckoConfig().coin_ids
            ),
            fallback_prices={
                k: float(v) for k, v in cg_raw.get("fallback_prices", {}).items()
            },
        ),
        timeout=int(raw.get("timeout", 15)),
    )


def _build_subgraph(raw: dict[str, Any]) -> SubgraphConfig:
    return SubgraphConfig(
        uniswap_v2_url=raw.get("uniswap_v2_url", ""),
        fee_rate=float(raw.get("fee_rate", 0.003)),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_yields(raw: dict[str, Any]) -> YieldsConfig:
    return YieldsConfig(
        url=raw.get("url", YieldsConfig.url),
        chains=tuple(raw.get("chains", YieldsConfig.chains)),
        min_tvl=float(raw.get("min_tvl", 1_000_000.0)),
        max_apy=float(raw.get("max_apy", 1000.0)),
        limit=int(raw.get("limit", 50)),
        blue_chips=tuple(raw.get("blue_chips", YieldsConfig.blue_chips)),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_llm(raw: dict[str, Any]) -> LLMConfig:
    return LLMConfig(
        base_url=raw.get("base_url", LLMConfig.base_url).rstrip("/"),
        api_key=raw.get("api_key", ""),
        model=raw.get("model", LLMConfig.model),
        temperature=float(raw.get("temperature", 0.3)),
        max_retries=int(raw.get("max_retries", 2)),
        timeout=int(raw.get("timeout", 60)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        ethereum=_build_ethereum(raw.get("ethereum") or {}),
        solana=_build_solana(raw.get("solana") or {}),
        price_oracle=_build_price_oracle(raw.get("price_oracle") or {}),
        subgraph=_build_subgraph(raw.get("subgraph") or {}),
        yields=_build_yields(raw.get("yields") or {}),
        llm=_build_llm(raw.get("llm") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.ethereum.networks:
        raise ValueError("At least one Ethereum network must be configured")
    if not cfg.solana.rpc_endpoints:
        raise ValueError("At least one Solana RPC endpoint must be configured")

    timeouts = {
        "ethereum.rpc_timeout": cfg.ethereum.rpc_timeout,
        "solana.rpc_timeout": cfg.solana.rpc_timeout,
        "price_oracle.timeout": cfg.price_oracle.timeout,
        "subgraph.timeout": cfg.subgraph.timeout,
        "yields.timeout": cfg.yields.timeout,
        "llm.timeout": cfg.llm.timeout,
    }
    for name, value in timeouts.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if cfg.llm.max_retries < 0:
        raise ValueError("llm.max_retries must be >= 0")
    if cfg.yields.limit <= 0:
        raise ValueError("yields.limit must be positive")
