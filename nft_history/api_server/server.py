"""
FastAPI server — read-only token history API.

Exposes GET /token-history/{contract_address}/{token_id} returning the
ordered, name-resolved timeline with presentation fields. Each request runs
the pipeline once; nothing is persisted between requests.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from nft_history.config import get_settings
from nft_history.core.exceptions import FetchError, InvalidAssetIdError, ResolutionError
from nft_history.history_logging import get_logger
from nft_history.pipeline import TokenHistoryPipeline
from nft_history.timeline.models import AssetId
from nft_history.timeline.presentation import present_timeline

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------

def get_pipeline() -> TokenHistoryPipeline:
    """Dependency: pipeline built from current settings (override in tests)."""
    return TokenHistoryPipeline.from_settings(get_settings())


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class TimelineEntryResponse(BaseModel):
    """One timeline row: entry data plus presentation fields."""

    created_at: str = Field(..., description="Event timestamp (ISO-like)")
    kind: str = Field(..., description="ens | mint | successful | transfer | raw category")
    counterparty_address: str | None = Field(None, description="Address that gained custody")
    counterparty_display_name: str | None = Field(None, description="ENS name or abbreviated address")
    sale_amount: str | None = Field(None, description="Sale amount (5 significant digits)")
    payment_token: str | None = Field(None, description="Payment token symbol (WETH shown as ETH)")
    label: str = Field("", description="Human label, e.g. 'Sent to vitalik.eth'")
    icon: str = Field("", description="Icon glyph for the kind")
    date_label: str = Field("", description="Short date, e.g. 'Mar 3, 2021'")
    is_clickable: bool = Field(False, description="True if the row links to the counterparty")


class TokenHistoryResponse(BaseModel):
    """GET /token-history response."""

    asset_id: str = Field(..., description="<contract>/<tokenId>")
    is_short: bool = Field(..., description="True when the timeline has at most 2 entries")
    entries: list[TimelineEntryResponse] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------

app = FastAPI(title="NFT Token History", version="0.1.0")


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/token-history/{contract_address}/{token_id}", response_model=TokenHistoryResponse)
async def get_token_history(
    contract_address: str,
    token_id: str,
    account: str = Query("", description="Viewing account address (for clickability)"),
    pipeline: TokenHistoryPipeline = Depends(get_pipeline),
) -> TokenHistoryResponse:
    try:
        asset = AssetId.parse(f"{contract_address}/{token_id}")
    except InvalidAssetIdError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        timeline = await pipeline.run(asset, account)
    except (FetchError, ResolutionError) as e:
        logger.warning("api_token_history_failed", asset_id=str(asset), error=str(e))
        raise HTTPException(status_code=502, detail="Unable to load history") from e

    rows = [
        TimelineEntryResponse(
            **entry.to_dict(),
            label=view.label,
            icon=view.icon,
            date_label=view.date_label,
            is_clickable=view.is_clickable,
        )
        for entry, view in zip(timeline.entries, present_timeline(timeline, account))
    ]
    return TokenHistoryResponse(asset_id=str(asset), is_short=timeline.is_short, entries=rows)
