"""Tests for vehicle photo list parsing."""

from app.modules.shipping.photos import parse_vehicle_photos, serialize_vehicle_photos


class TestParseVehiclePhotos:
    def test_native_list(self):
        assert parse_vehicle_photos(["https://a/1.jpg", "", None, "https://a/2.jpg"]) == [
            "https://a/1.jpg",
            "https://a/2.jpg",
        ]

    def test_json_string(self):
        assert parse_vehicle_photos('["https://a/1.jpg", "null", "https://a/2.jpg"]') == [
            "https://a/1.jpg",
            "https://a/2.jpg",
        ]

    def test_postgres_array_literal(self):
        assert parse_vehicle_photos('{"https://a/1.jpg","https://a/2.jpg"}') == [
            "https://a/1.jpg",
            "https://a/2.jpg",
        ]

    def test_comma_separated_text(self):
        assert parse_vehicle_photos("https://a/1.jpg, https://a/2.jpg") == [
            "https://a/1.jpg",
            "https://a/2.jpg",
        ]

    def test_empty_shapes(self):
        assert parse_vehicle_photos(None) == []
        assert parse_vehicle_photos("") == []
        assert parse_vehicle_photos("{}") == []
        assert parse_vehicle_photos("[]") == []
        assert parse_vehicle_photos(42) == []


class TestSerializeVehiclePhotos:
    def test_json_text(self):
        assert serialize_vehicle_photos("{a,b}") == '["a", "b"]'

    def test_nothing_to_store(self):
        assert serialize_vehicle_photos([]) is None
        assert serialize_vehicle_photos(None) is None
