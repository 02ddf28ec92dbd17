"""
Main entrypoint: token history API server, or a one-shot timeline dump.

    python main.py                                  # FastAPI server (API_HOST / API_PORT)
    python main.py --asset 0xabc.../42 --account 0x...   # print one timeline and exit

Env: NETWORK, OPENSEA_API_KEY, ETH_RPC_URL, LOG_LEVEL, LOG_FORMAT, etc.

API-only: uvicorn nft_history.api_server.app:app --host 0.0.0.0 --port 8000
"""

import argparse
import asyncio
import sys

# Configure structured JSON logging before other imports that may log
from nft_history.history_logging import configure_logging, get_logger

logger = get_logger("main")


async def _print_timeline(asset_id: str, account: str) -> int:
    from nft_history.config import get_settings
    from nft_history.core.exceptions import TokenHistoryError
    from nft_history.pipeline import TimelineLoader, TokenHistoryPipeline
    from nft_history.timeline.presentation import present_timeline

    settings = get_settings()
    loader = TimelineLoader(TokenHistoryPipeline.from_settings(settings), account)
    try:
        timeline = await loader.load(asset_id)
    except TokenHistoryError as e:
        logger.error("main_history_failed", asset_id=asset_id, error=str(e))
        return 1
    if timeline is None:
        return 1
    for view in present_timeline(timeline, account):
        print(f"{view.date_label:>14}  {view.text}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="NFT token history")
    parser.add_argument("--asset", help="<contract>/<tokenId>; omit to run the API server")
    parser.add_argument("--account", default="", help="Viewing account address")
    parser.add_argument("--log-format", choices=("json", "console"), help="Override LOG_FORMAT")
    args = parser.parse_args()
    if args.log_format:
        configure_logging(fmt=args.log_format)

    if args.asset:
        sys.exit(asyncio.run(_print_timeline(args.asset, args.account)))

    from nft_history.api_server.app import app
    from nft_history.config import get_settings
    import uvicorn

    settings = get_settings()
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port, network=settings.network)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
