"""Tests for the description overflow codec."""

from app.modules.finance.description import (
    DescriptionExtras,
    decode_description,
    encode_description,
)


class TestEncode:
    def test_all_extras_in_fixed_order(self):
        extras = DescriptionExtras(
            related_order_number="WA-2025-000012",
            customer_id_card="ID123",
            customer_address="Algiers",
            notes="call first",
        )
        assert encode_description("Sold sedan", extras) == (
            "Sold sedan\n(Related Order: WA-2025-000012)\nID Card: ID123"
            "\nAddress: Algiers\nNotes: call first"
        )

    def test_empty_extras_are_skipped(self):
        extras = DescriptionExtras(customer_address="Oran")
        assert encode_description("Rent", extras) == "Rent\nAddress: Oran"

    def test_no_extras(self):
        assert encode_description("Rent", DescriptionExtras()) == "Rent"


class TestDecode:
    def test_round_trip(self):
        extras = DescriptionExtras(
            related_order_number="WA-2025-000012",
            customer_id_card="ID123",
            customer_address="Algiers",
            notes="call first",
        )
        base, decoded = decode_description(encode_description("Sold sedan", extras))
        assert base == "Sold sedan"
        assert decoded == extras

    def test_legacy_seller_and_buyer_lines_are_dropped(self):
        stored = "Sold sedan\nSeller: Ali\nBuyer: Omar\nNotes: ok"
        base, extras = decode_description(stored)
        assert base == "Sold sedan"
        assert extras.notes == "ok"

    def test_plain_description(self):
        base, extras = decode_description("  Office rent  ")
        assert base == "Office rent"
        assert extras == DescriptionExtras()

    def test_none(self):
        assert decode_description(None) == ("", DescriptionExtras())
