"""Static lookup tables for asset inference, valuation and chain naming.

Every table is a plain dict handed to the pure functions in
``bridgedash.normalize``; ``AssetTables`` bundles them so callers can swap in
their own (tests, other destination chains).
"""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN = "Unknown"

# Lowercase contract address -> symbol
TOKEN_ADDRESSES: dict[str, str] = {
    # Ethereum
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": "USDC",
    "0xdac17f958d2ee523a2206206994597c13d831ec7": "USDT",
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2": "WETH",
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599": "WBTC",
    "0x6b175474e89094c44da98b954eedeac495271d0f": "DAI",
    "0xae7ab96520de3a18e5e111b5eaab095312d7fe84": "stETH",
    "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0": "wstETH",
    "0xae78736cd615f374d3085123a210448e74fc6393": "rETH",
    "0x514910771af9ca656af840dff83e8264ecf986ca": "LINK",
    "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984": "UNI",
    "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9": "AAVE",
    "0x7d1afa7b718fb893db30a3abc0cfc608aacfebb0": "MATIC",
    # Arbitrum
    "0xaf88d065e77c8cc2239327c5edb3a432268e5831": "USDC",
    "0x82af49447d8a07e3bd95bd0d56f35241523fbab1": "WETH",
    # Base
    "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913": "USDC",
    "0x4200000000000000000000000000000000000006": "WETH",
    # Polygon
    "0x3c499c542cef5e3811e1192ce70d8cc03d5c3359": "USDC",
}

# Token decimals for hex-encoded amounts; anything not listed uses DEFAULT_DECIMALS
TOKEN_DECIMALS: dict[str, int] = {
    "USDC": 6,
    "USDT": 6,
}
DEFAULT_DECIMALS = 18

# USD unit prices. Unlisted symbols are valued at DEFAULT_PRICE (stablecoin assumption).
UNIT_PRICES: dict[str, float] = {
    "USDC": 1.0,
    "USDT": 1.0,
    "DAI": 1.0,
    "ETH": 3000.0,
    "WETH": 3000.0,
    "stETH": 3000.0,
    "wstETH": 3500.0,
    "rETH": 3300.0,
    "BTC": 60000.0,
    "WBTC": 60000.0,
    "stBTC": 60000.0,
    "SOL": 150.0,
    "mSOL": 165.0,
    "stSOL": 170.0,
    "BONK": 0.00002,
    "HYPE": 25.0,
    "MATIC": 0.7,
    "AVAX": 30.0,
    "LINK": 15.0,
    "UNI": 8.0,
    "AAVE": 100.0,
}
DEFAULT_PRICE = 1.0

# Amount assumed when a symbol is recognized but no amount can be decoded
DEFAULT_AMOUNTS: dict[str, str] = {
    "USDC": "1000",
    "USDT": "1000",
    "DAI": "1000",
    "ETH": "1",
    "WETH": "1",
    "stETH": "1",
    "wstETH": "1",
    "rETH": "1",
    "BTC": "0.05",
    "WBTC": "0.05",
    "stBTC": "0.05",
    "SOL": "10",
    "mSOL": "10",
    "stSOL": "10",
    "BONK": "1000000",
    "HYPE": "50",
    "MATIC": "100",
    "AVAX": "10",
    "LINK": "50",
    "UNI": "100",
    "AAVE": "5",
}
DEFAULT_AMOUNT = "1"

# Irregular spellings (lowercase phrase -> symbol)
ASSET_ALIASES: dict[str, str] = {
    "wrapped ether": "WETH",
    "wrapped eth": "WETH",
    "usd coin": "USDC",
    "usdc.e": "USDC",
    "tether": "USDT",
    "wrapped bitcoin": "WBTC",
    "lido staked ether": "stETH",
    "marinade sol": "mSOL",
    "polygon ecosystem token": "MATIC",
}

# Raw chain identifier (numeric chain / Hyperlane domain id, or slug) -> display name
CHAIN_NAMES: dict[str, str] = {
    "1": "Ethereum",
    "ethereum": "Ethereum",
    "10": "Optimism",
    "optimism": "Optimism",
    "56": "BNB Chain",
    "bsc": "BNB Chain",
    "137": "Polygon",
    "polygon": "Polygon",
    "8453": "Base",
    "base": "Base",
    "42161": "Arbitrum",
    "arbitrum": "Arbitrum",
    "43114": "Avalanche",
    "avalanche": "Avalanche",
    "999": "Hyperliquid",
    "hyperliquid": "Hyperliquid",
    "hyperevm": "Hyperliquid",
    "1399811149": "Solana",
    "solana": "Solana",
    "solanamainnet": "Solana",
}

# (source display name, destination display name) -> asset typically carried
CHAIN_PAIR_ASSETS: dict[tuple[str, str], str] = {
    ("Solana", "Hyperliquid"): "USDC",
    ("Hyperliquid", "Solana"): "USDC",
    ("Ethereum", "Hyperliquid"): "USDC",
    ("Hyperliquid", "Ethereum"): "USDC",
    ("Arbitrum", "Hyperliquid"): "USDC",
    ("Base", "Hyperliquid"): "USDC",
}

# Seeds for the discovery registry
SEED_ASSETS: tuple[str, ...] = ("USDC", "USDT", "WETH", "ETH", "WBTC", "SOL", "DAI")
SEED_CHAINS: tuple[str, ...] = ("Ethereum", "Solana", "Arbitrum", "Base", "Polygon", "Hyperliquid")


@dataclass(frozen=True)
class AssetTables:
    """Lookup tables used by one normalization run."""

    addresses: dict[str, str] = field(default_factory=lambda: dict(TOKEN_ADDRESSES))
    decimals: dict[str, int] = field(default_factory=lambda: dict(TOKEN_DECIMALS))
    prices: dict[str, float] = field(default_factory=lambda: dict(UNIT_PRICES))
    default_amounts: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_AMOUNTS))
    aliases: dict[str, str] = field(default_factory=lambda: dict(ASSET_ALIASES))
    chains: dict[str, str] = field(default_factory=lambda: dict(CHAIN_NAMES))
    routes: dict[tuple[str, str], str] = field(default_factory=lambda: dict(CHAIN_PAIR_ASSETS))

    @property
    def symbols(self) -> list[str]:
        """Every symbol the tables know about, in a stable order."""
        seen: dict[str, None] = {}
        for s in list(self.prices) + list(self.addresses.values()) + list(self.default_amounts):
            seen.setdefault(s, None)
        return list(seen)

    def unit_price(self, symbol: str) -> float:
        return float(self.prices.get(symbol, DEFAULT_PRICE))

    def default_amount(self, symbol: str) -> str:
        return self.default_amounts.get(symbol, DEFAULT_AMOUNT)

    def token_decimals(self, symbol: str) -> int:
        return int(self.decimals.get(symbol, DEFAULT_DECIMALS))


DEFAULT_TABLES = AssetTables()
