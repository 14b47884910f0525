"""SquidMarket: NFT marketplace collection discovery service."""

__version__ = "1.0.0"
