from __future__ import annotations

from typing import Any

import pytest

from stay_search.hotels import RawOffer, build_hotels, estimate_rating, filter_offers, normalize_offer, parse_offers


def _offer(
    hotel_id: str | None = "HLBER123",
    *,
    name: str | None = "Hotel Adlon",
    total: str | None = "300.00",
    rating: Any = "5",
    **hotel_extra: Any,
) -> dict[str, Any]:
    hotel: dict[str, Any] = {"type": "hotel", "hotelId": hotel_id, "name": name, "rating": rating}
    hotel.update(hotel_extra)
    offers = []
    if total is not None:
        offers.append(
            {
                "id": "OFFER-1",
                "checkInDate": "2025-03-01",
                "checkOutDate": "2025-03-03",
                "price": {"currency": "USD", "total": total, "base": "270.00"},
            }
        )
    return {"type": "hotel-offers", "hotel": hotel, "available": True, "offers": offers}


def test_normalize_full_offer() -> None:
    payload = _offer(
        rating="4",
        latitude=52.516,
        longitude=13.38,
        address={"lines": ["Unter den Linden 77"], "cityName": "BERLIN", "postalCode": "10117", "countryCode": "DE"},
        amenities=["WIFI", "SPA", "POOL", "GYM", "BAR", "PARKING", "SAUNA", "ROOM_SERVICE"],
        media=[{"uri": "https://img.example/adlon.jpg", "category": "EXTERIOR"}],
        description={"lang": "EN", "text": "Historic luxury hotel."},
    )
    payload["offers"][0]["room"] = {"type": "A1K", "description": {"text": "Deluxe king room"}}

    hotel = normalize_offer(RawOffer.model_validate(payload))

    assert hotel.id == "HLBER123"
    assert hotel.name == "Hotel Adlon"
    assert hotel.address == "Unter den Linden 77, BERLIN, 10117, DE"
    assert hotel.city == "BERLIN"
    assert hotel.total_price == 300.0
    assert hotel.currency == "USD"
    assert hotel.rating == 4.0
    assert hotel.rating_estimated is False
    assert hotel.amenities == ["WIFI", "SPA", "POOL", "GYM", "BAR", "PARKING"]
    assert hotel.image_url == "https://img.example/adlon.jpg"
    assert hotel.description == "Deluxe king room"
    assert hotel.latitude == 52.516
    assert hotel.offer_id == "OFFER-1"


def test_normalize_fills_defaults_for_sparse_offer() -> None:
    hotel = normalize_offer(RawOffer.model_validate({"hotel": {}, "offers": []}))

    assert hotel.id.startswith("unknown-")
    assert hotel.name == "Hotel Name Unavailable"
    assert hotel.address == "Address Unavailable"
    assert hotel.city == "City Unavailable"
    assert hotel.total_price == 0.0
    assert hotel.currency == "USD"
    assert hotel.amenities == []
    assert hotel.image_url == f"https://picsum.photos/seed/{hotel.id}/400/300"
    assert "Hotel Name Unavailable" in hotel.description


def test_description_falls_back_to_hotel_then_synthesized() -> None:
    with_hotel_text = normalize_offer(
        RawOffer.model_validate(_offer(description={"text": "Canal views."}, address={"cityName": "AMSTERDAM"}))
    )
    assert with_hotel_text.description == "Canal views."

    synthesized = normalize_offer(RawOffer.model_validate(_offer(address={"cityName": "AMSTERDAM"})))
    assert synthesized.description == "Stay at Hotel Adlon in AMSTERDAM. Check availability for details."


def test_unparsable_total_becomes_zero() -> None:
    hotel = normalize_offer(RawOffer.model_validate(_offer(total="n/a")))
    assert hotel.total_price == 0.0


@pytest.mark.parametrize("rating", [None, "0", "6", "-1", "five", "", 12])
def test_invalid_rating_uses_estimate_within_bounds(rating: Any) -> None:
    hotel = normalize_offer(RawOffer.model_validate(_offer(rating=rating)))
    assert 3.0 <= hotel.rating <= 4.5
    assert hotel.rating_estimated is True


def test_estimated_rating_is_stable_per_hotel() -> None:
    first = normalize_offer(RawOffer.model_validate(_offer("HOTEL-A", rating=None)))
    second = normalize_offer(RawOffer.model_validate(_offer("HOTEL-A", rating="9")))
    assert first.rating == second.rating == estimate_rating("HOTEL-A")


def test_estimate_rating_covers_bounds_only() -> None:
    values = {estimate_rating(f"hotel-{index}") for index in range(500)}
    assert min(values) >= 3.0
    assert max(values) <= 4.5
    assert all(round(value, 1) == value for value in values)


def test_filter_drops_offers_missing_hotel_name_or_price() -> None:
    payload = {
        "data": [
            _offer("H1"),
            {"type": "hotel-offers", "hotel": None, "offers": [{"price": {"total": "10"}}]},
            _offer("H3", total=None),
            _offer("H4", total="120.50"),
            _offer("H5", name=None),
        ]
    }
    offers = parse_offers(payload)
    assert len(offers) == 5
    assert [offer.hotel.hotelId for offer in filter_offers(offers)] == ["H1", "H4"]


def test_batch_of_five_with_two_invalid_yields_three_hotels() -> None:
    payload = {
        "data": [
            _offer("H1"),
            _offer("H2", total=None),
            _offer("H3"),
            {"type": "hotel-offers", "offers": [{"price": {"total": "99.00"}}]},
            _offer("H5", total="75"),
        ]
    }
    hotels = build_hotels(parse_offers(payload))
    assert [hotel.id for hotel in hotels] == ["H1", "H3", "H5"]


def test_parse_offers_skips_entries_with_wrong_shape() -> None:
    payload = {"data": [_offer("H1"), {"hotel": "not-a-mapping"}, "garbage"]}
    offers = parse_offers(payload)
    assert [offer.hotel.hotelId for offer in offers] == ["H1"]
    assert parse_offers({"errors": []}) == []


def test_numeric_price_total_is_accepted() -> None:
    payload = _offer()
    payload["offers"][0]["price"]["total"] = 412.5
    hotel = normalize_offer(RawOffer.model_validate(payload))
    assert hotel.total_price == 412.5


def test_malformed_optional_hotel_fields_do_not_drop_offer() -> None:
    payload = _offer(
        "H9",
        total="100.00",
        amenities=["WIFI", 12, None],
        latitude="not-a-number",
        media="https://img.example/flat.jpg",
        address={"lines": ["Main St", 5], "cityName": "OSLO"},
    )
    hotels = build_hotels(parse_offers({"data": [payload]}))
    assert len(hotels) == 1
    hotel = hotels[0]
    assert hotel.total_price == 100.0
    assert hotel.amenities == ["WIFI", "12"]
    assert hotel.latitude is None
    assert hotel.address == "Main St, OSLO"


def test_hotel_dict_roundtrip_keeps_estimate_flag() -> None:
    hotel = normalize_offer(RawOffer.model_validate(_offer(rating=None)))
    restored = type(hotel).from_dict(hotel.to_dict())
    assert restored == hotel
