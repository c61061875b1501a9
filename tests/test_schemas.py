"""Tests for reply decoding and the canonical itinerary models."""
from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from src.core.schemas import (
    UNNAMED_STOP,
    Day,
    Itinerary,
    ItineraryMetadata,
    RawDay,
    RawItinerary,
    RawStop,
    Stop,
)


class TestRawStop:
    """Alias collapsing for a single stop-like record."""

    def test_reads_long_form_coordinates_and_numeric_strings(self):
        raw = RawStop.model_validate({"name": "Louvre", "latitude": "48.8606", "longitude": 2.3376})
        assert raw.lat == pytest.approx(48.8606)
        assert raw.lng == pytest.approx(2.3376)
        assert raw.has_coordinates

    def test_first_non_null_alias_wins(self):
        raw = RawStop.model_validate({"name": "Pier", "lat": None, "latitude": 1.5, "lng": 2.5})
        assert raw.lat == 1.5
        assert raw.lng == 2.5

    @pytest.mark.parametrize("bad", ["NaN", "Infinity", "abc", "", True, [1.0], {"x": 1}])
    def test_non_finite_or_non_numeric_coordinates_count_as_absent(self, bad):
        raw = RawStop.model_validate({"name": "Somewhere", "lat": bad, "lng": 4.0})
        assert raw.lat is None
        assert not raw.has_coordinates

    def test_nested_location_mapping_supplies_coordinates(self):
        raw = RawStop.model_validate({"name": "Cafe", "location": {"lat": 38.7, "lng": -9.1}})
        assert (raw.lat, raw.lng) == (38.7, -9.1)
        # A mapping is not an address.
        assert raw.address is None

    def test_name_falls_back_through_title_and_place(self):
        assert RawStop.model_validate({"title": "Old Town"}).name == "Old Town"
        assert RawStop.model_validate({"place": "Harbour"}).name == "Harbour"
        assert RawStop.model_validate({"name": "   "}).name == UNNAMED_STOP
        assert RawStop.model_validate({}).name == UNNAMED_STOP

    def test_query_prefers_address_then_location_then_name_then_title(self):
        assert RawStop.model_validate({"address": "Rua Augusta 1", "name": "Arch"}).query == "Rua Augusta 1"
        assert RawStop.model_validate({"location": "Belem", "name": "Tower"}).query == "Belem"
        assert RawStop.model_validate({"address": "  ", "name": "Tower"}).query == "Tower"
        assert RawStop.model_validate({"title": "Castle"}).query == "Castle"
        assert RawStop.model_validate({"location": {"lat": 1}}).query is None

    def test_collapses_descriptive_aliases(self):
        raw = RawStop.model_validate(
            {
                "name": "Museum",
                "notes": "Closed Mondays",
                "location": "Av. Brasilia",
                "category": "museum",
                "start_time": "09:00",
                "endTime": "11:00",
            }
        )
        assert raw.description == "Closed Mondays"
        assert raw.address == "Av. Brasilia"
        assert raw.place_type == "museum"
        assert raw.start_time == "09:00"
        assert raw.end_time == "11:00"

    def test_bare_string_is_a_named_stop(self):
        raw = RawStop.model_validate("Jeronimos Monastery")
        assert raw.name == "Jeronimos Monastery"
        assert raw.query == "Jeronimos Monastery"

    def test_non_mapping_decodes_to_empty(self):
        raw = RawStop.model_validate(42)
        assert raw.name == UNNAMED_STOP
        assert raw.query is None
        assert not raw.has_coordinates

    @pytest.mark.parametrize("day, expected", [(None, 0), (1, 0), ("3", 2), (0, 0), (-4, 0)])
    def test_bucket_index(self, day, expected):
        assert RawStop.model_validate({"name": "x", "day": day}).bucket_index == expected


class TestRawDay:
    def test_stops_take_precedence_over_activities(self):
        raw = RawDay.model_validate({"stops": [{"name": "A"}], "activities": [{"name": "B"}]})
        assert [stop.name for stop in raw.stops] == ["A"]

    def test_activities_used_when_stops_is_not_a_list(self):
        raw = RawDay.model_validate({"stops": None, "activities": [{"name": "B"}]})
        assert [stop.name for stop in raw.stops] == ["B"]

    def test_label_falls_back_to_title(self):
        assert RawDay.model_validate({"title": "Arrival"}).label == "Arrival"
        assert RawDay.model_validate({"label": " ", "title": "Arrival"}).label is None

    def test_day_index_uses_day_number_or_position(self):
        assert RawDay.model_validate({"day": 3}).day_index(0) == 2
        assert RawDay.model_validate({"day": "2"}).day_index(5) == 1
        assert RawDay.model_validate({}).day_index(4) == 4
        assert RawDay.model_validate({"day": -1}).day_index(0) == 0

    def test_non_mapping_entry_decodes_to_empty_day(self):
        raw = RawDay.model_validate("not a day")
        assert raw.day is None
        assert raw.stops == []


class TestRawItinerary:
    @pytest.mark.parametrize("payload", [None, [], "text", 7])
    def test_non_mapping_reply_decodes_to_empty(self, payload):
        raw = RawItinerary.model_validate(payload)
        assert raw.days is None
        assert raw.itinerary is None
        assert raw.locations == []
        assert raw.tips is None

    def test_declared_days_prefers_metadata(self):
        assert RawItinerary.model_validate({"metadata": {"days": 4}, "days": 2}).declared_days == 4
        assert RawItinerary.model_validate({"days": "3"}).declared_days == 3
        assert RawItinerary.model_validate({"days": [{"day": 1}]}).declared_days is None

    def test_numeric_days_is_not_a_container(self):
        raw = RawItinerary.model_validate({"days": 3, "itinerary": [{"day": 1}]})
        primary, secondary = raw.day_containers()
        assert raw.days is None
        assert len(primary) == 1
        assert secondary is None

    def test_day_containers_order(self):
        raw = RawItinerary.model_validate({"days": [{"day": 1}], "itinerary": [{"day": 1}, {"day": 2}]})
        primary, secondary = raw.day_containers()
        assert len(primary) == 1
        assert len(secondary) == 2

        only_itinerary = RawItinerary.model_validate({"days": [], "itinerary": [{"day": 1}]})
        primary, secondary = only_itinerary.day_containers()
        assert len(primary) == 1
        assert secondary is None

    def test_center_alias_precedence(self):
        raw = RawItinerary.model_validate(
            {
                "metadata": {"city_lat": 1, "city_lng": 2},
                "city_lat": 3,
                "city_lng": 4,
                "lat": 5,
                "lng": 6,
            }
        )
        assert (raw.center.lat, raw.center.lng) == (1, 2)

        raw = RawItinerary.model_validate({"city_lat": "3", "city_lng": "4", "lat": 5, "lng": 6})
        assert (raw.center.lat, raw.center.lng) == (3, 4)

        raw = RawItinerary.model_validate({"metadata": {"city_lat": 1}, "lat": 5, "lng": 6})
        assert (raw.center.lat, raw.center.lng) == (5, 6)

        # Halves from different sources are never paired.
        raw = RawItinerary.model_validate({"metadata": {"city_lat": 1}, "city_lng": 4})
        assert raw.center is None

        assert RawItinerary.model_validate({"lat": "north", "lng": 6}).center is None

    def test_tips_are_rendered_as_strings(self):
        raw = RawItinerary.model_validate({"tips": ["Buy a Viva Viagem card", 28, None]})
        assert raw.tips == ["Buy a Viva Viagem card", "28"]
        assert RawItinerary.model_validate({"tips": "Bring shoes"}).tips is None


class TestCanonicalModels:
    def test_stop_rejects_non_finite_coordinates(self):
        with pytest.raises(ValidationError):
            Stop(name="Nowhere", lat=math.inf, lng=0.0)
        with pytest.raises(ValidationError):
            Stop(name="Nowhere", lat=0.0, lng=math.nan)

    def test_stop_requires_a_name(self):
        with pytest.raises(ValidationError):
            Stop(name="", lat=0.0, lng=0.0)

    def test_itinerary_day_count_must_match_metadata(self):
        with pytest.raises(ValidationError):
            Itinerary(days=[Day(label="Day 1")], metadata=ItineraryMetadata(city="Porto", days=2))

    def test_payload_uses_wire_names_and_omits_absent_fields(self):
        itinerary = Itinerary(
            days=[
                Day(
                    label="Day 1",
                    stops=[Stop(name="Livraria Lello", lat=41.14, lng=-8.61, place_type="shop", start_time="10:00")],
                )
            ],
            metadata=ItineraryMetadata(city="Porto", days=1),
        )
        payload = itinerary.to_payload()

        stop = payload["days"][0]["stops"][0]
        assert stop == {
            "name": "Livraria Lello",
            "lat": 41.14,
            "lng": -8.61,
            "placeType": "shop",
            "startTime": "10:00",
        }
        assert payload["metadata"] == {"city": "Porto", "days": 1}
        assert "tips" not in payload
