"""Marketplace contracts on an in-memory ledger: airdrops, crowdfunding, NFTs, payments and token transfers."""

__version__ = "0.1.0"

__all__ = [
    "airdrop",
    "airdrop_models",
    "crowdfunding",
    "crowdfunding_models",
    "example",
    "nft",
    "payment",
    "runtime",
    "transfers",
]