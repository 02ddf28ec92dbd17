"""
Tests for event classification (timeline.classifier.classify).

Covers mint/registration reclassification, sale normalization, malformed
sale prices and unknown categories.
"""

from __future__ import annotations

import pytest

from nft_history.timeline.classifier import classify, normalize_payment_token
from nft_history.timeline.models import EntryKind, RawEvent, TimelineEntry
from tests.factories import (
    ALICE,
    BOB,
    ENS_REGISTRY,
    NFT_CONTRACT,
    ONE_ETH_WEI,
    mint,
    sale,
    transfer,
)


def test_plain_transfer():
    entry, address = classify(transfer("2021-05-01T10:00:00", BOB), NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.TRANSFER
    assert entry.counterparty_address == BOB
    assert entry.counterparty_display_name is None
    assert address == BOB


def test_zero_address_transfer_on_other_contract_is_mint():
    entry, address = classify(mint("2021-05-01T10:00:00", ALICE), NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.MINT
    assert address == ALICE


def test_zero_address_transfer_on_registry_is_registration():
    entry, address = classify(mint("2021-05-01T10:00:00", ALICE), ENS_REGISTRY, ENS_REGISTRY)
    assert entry.kind == EntryKind.REGISTRATION
    assert entry.counterparty_address == ALICE
    assert address == ALICE


def test_registry_match_ignores_case():
    entry, _ = classify(mint("2021-05-01T10:00:00", ALICE), ENS_REGISTRY.upper().replace("0X", "0x"), ENS_REGISTRY)
    assert entry.kind == EntryKind.REGISTRATION


def test_transfer_without_recipient_has_nothing_to_resolve():
    entry, address = classify(transfer("2021-05-01T10:00:00", None), NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.TRANSFER
    assert entry.counterparty_address is None
    assert address is None


def test_classification_is_idempotent():
    raw = mint("2021-05-01T10:00:00", ALICE)
    first = classify(raw, ENS_REGISTRY, ENS_REGISTRY)
    second = classify(raw, ENS_REGISTRY, ENS_REGISTRY)
    assert first == second


def test_weth_sale_normalized_to_eth():
    entry, address = classify(sale("2021-05-02T10:00:00", ONE_ETH_WEI, "WETH"), NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.SALE
    assert entry.payment_token == "ETH"
    assert entry.sale_amount == "1"
    assert entry.counterparty_address is None
    assert address is None


def test_other_payment_token_passes_through():
    raw = RawEvent(
        event_category="successful",
        created_at="2021-05-02T10:00:00",
        payment_symbol="USDC",
        payment_decimals=6,
        total_price="1234567",
    )
    entry, _ = classify(raw, NFT_CONTRACT, ENS_REGISTRY)
    assert entry.payment_token == "USDC"
    assert entry.sale_amount == "1.2346"


@pytest.mark.parametrize("total_price", [None, "", "garbage"])
def test_malformed_sale_keeps_entry_with_blank_amount(total_price):
    entry, address = classify(sale("2021-05-02T10:00:00", total_price), NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.SALE
    assert entry.sale_amount is None
    assert entry.payment_token == "ETH"
    assert address is None


@pytest.mark.parametrize(
    "total_price, decimals, amount",
    [("1" + "0" * 40, 0, "1" + "0" * 40), ("1e60", 18, "0.000000000000000001")],
)
def test_extreme_sale_price_still_classified(total_price, decimals, amount):
    raw = RawEvent(
        event_category="successful",
        created_at="2021-05-02T10:00:00",
        payment_symbol="WETH",
        payment_decimals=decimals,
        total_price=total_price,
    )
    entry, _ = classify(raw, NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == EntryKind.SALE
    assert entry.sale_amount == amount


def test_unknown_category_passes_through():
    raw = RawEvent(
        event_category="bid_entered",
        created_at="2021-05-03T10:00:00",
        from_address=ALICE,
        to_address=BOB,
        payment_symbol="WETH",
        total_price=ONE_ETH_WEI,
    )
    entry, address = classify(raw, NFT_CONTRACT, ENS_REGISTRY)
    assert entry.kind == "bid_entered"
    assert not entry.is_known_kind
    assert entry.counterparty_address is None
    assert entry.sale_amount is None
    assert entry.payment_token is None
    assert address is None


def test_normalize_payment_token():
    assert normalize_payment_token("WETH") == "ETH"
    assert normalize_payment_token("DAI") == "DAI"
    assert normalize_payment_token(None) is None


def test_entry_rejects_sale_fields_on_transfer():
    with pytest.raises(ValueError):
        TimelineEntry(created_at="2021", kind=EntryKind.TRANSFER, sale_amount="1")


def test_entry_rejects_display_name_without_address():
    with pytest.raises(ValueError):
        TimelineEntry(created_at="2021", kind=EntryKind.MINT, counterparty_display_name="alice.eth")


def test_raw_event_from_api_item():
    item = {
        "event_type": "successful",
        "created_date": "2021-09-01T12:34:56.789012",
        "from_account": None,
        "to_account": {"address": BOB},
        "payment_token": {"symbol": "WETH", "decimals": 18},
        "total_price": "2500000000000000000",
    }
    raw = RawEvent.from_api_item(item)
    assert raw.event_category == "successful"
    assert raw.created_at == "2021-09-01T12:34:56.789012"
    assert raw.from_address is None
    assert raw.to_address == BOB
    assert raw.payment_symbol == "WETH"
    assert raw.payment_decimals == 18
    assert raw.total_price == "2500000000000000000"
