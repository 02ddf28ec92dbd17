"""
Configuration management for NFT Token History.

Loads settings from environment variables and an optional .env file.
"""

from nft_history.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
