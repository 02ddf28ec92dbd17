"""
Structured logging for NFT Token History.

JSON logs with timestamp, asset_id, event_type.
"""

from nft_history.history_logging.logger import bind_asset, configure_logging, get_logger

__all__ = ["bind_asset", "configure_logging", "get_logger"]
