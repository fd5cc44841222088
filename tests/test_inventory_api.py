"""Tests for the inventory API: cars, media, assignment and broadcast."""

import io
from urllib.parse import unquote

from PIL import Image

from app.modules.finance.service import FinanceService
from conftest import data


def png_bytes(size=(2400, 1200)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestCarCrud:
    def test_create_and_get(self, client, make_car):
        car = make_car(photos_urls=["https://cdn/1.jpg"])
        assert car["status"] == "available"
        assert car["photos_urls"] == ["https://cdn/1.jpg"]

        fetched = data(client.get(f"/api/inventory/{car['id']}"))
        assert fetched["vin"] == "KNAPM81ABCD123456"

    def test_list_filters(self, client, make_car):
        make_car()
        make_car(brand="Genesis", model="G80", vin="KMTGA41", status="sold")

        result = data(client.get("/api/inventory", params={"status": "sold"}))
        assert result["total"] == 1
        assert result["items"][0]["brand"] == "Genesis"

        result = data(client.get("/api/inventory", params={"search": "sportage"}))
        assert result["total"] == 1

    def test_update(self, client, make_car):
        car = make_car()
        updated = data(client.patch(f"/api/inventory/{car['id']}", json={"location": "Alger port"}))
        assert updated["location"] == "Alger port"

    def test_cannot_delete_assigned_car(self, client, make_car, make_order):
        car = make_car()
        order = make_order()
        client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": order["id"]})

        response = client.delete(f"/api/inventory/{car['id']}")
        assert response.status_code == 409

    def test_delete(self, client, make_car):
        car = make_car()
        response = client.delete(f"/api/inventory/{car['id']}")
        assert response.json() == {"message": "Car deleted successfully"}
        assert client.get(f"/api/inventory/{car['id']}").status_code == 404


class TestCarMedia:
    def test_photo_is_compressed_and_appended(self, client, make_car, blob_store):
        car = make_car()
        response = client.post(
            f"/api/inventory/{car['id']}/media",
            params={"kind": "photo"},
            files={"file": ("front.png", png_bytes(), "image/png")},
        )
        assert response.status_code == 200, response.text

        photos = data(response)["photos_urls"]
        assert len(photos) == 1
        (key,) = blob_store.files.keys()
        assert key.startswith(f"car-media/{car['id']}/")
        content, content_type = blob_store.files[key]
        assert content_type == "image/webp"
        assert Image.open(io.BytesIO(content)).size == (1600, 800)

    def test_not_an_image(self, client, make_car):
        car = make_car()
        response = client.post(
            f"/api/inventory/{car['id']}/media",
            params={"kind": "photo"},
            files={"file": ("notes.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 422

    def test_video_replaces_previous(self, client, make_car, blob_store):
        car = make_car()
        first = data(
            client.post(
                f"/api/inventory/{car['id']}/media",
                params={"kind": "video"},
                files={"file": ("walk.mp4", b"video-1", "video/mp4")},
            )
        )
        second = data(
            client.post(
                f"/api/inventory/{car['id']}/media",
                params={"kind": "video"},
                files={"file": ("walk.mp4", b"video-2", "video/mp4")},
            )
        )

        assert second["video_url"] != first["video_url"]
        assert len(blob_store.deleted) == 1
        assert first["video_url"].endswith(blob_store.deleted[0])

    def test_failed_commit_keeps_previous_video(self, client, lenient_client, make_car, blob_store, fail_next_commit):
        car = make_car()
        first = data(
            client.post(
                f"/api/inventory/{car['id']}/media",
                params={"kind": "video"},
                files={"file": ("walk.mp4", b"video-1", "video/mp4")},
            )
        )
        first_key = first["video_url"].split(".amazonaws.com/")[1]

        fail_next_commit()
        response = lenient_client.post(
            f"/api/inventory/{car['id']}/media",
            params={"kind": "video"},
            files={"file": ("walk.mp4", b"video-2", "video/mp4")},
        )
        assert response.status_code == 500

        assert data(client.get(f"/api/inventory/{car['id']}"))["video_url"] == first["video_url"]
        assert list(blob_store.files) == [first_key]
        assert len(blob_store.deleted) == 1


class TestAssign:
    def test_assign_pairs_car_and_order_and_records_sale(self, client, make_car, make_order):
        car = make_car()
        order = make_order()

        response = client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": order["id"]})
        assert response.status_code == 200, response.text
        result = data(response)

        assert result["warnings"] == []
        assert result["car"]["status"] == "reserved"
        assert result["car"]["assigned_to_order"] == order["id"]

        updated_order = data(client.get(f"/api/orders/{order['id']}"))
        assert updated_order["status"] == "bought"
        assert updated_order["assigned_car_id"] == car["id"]
        assert updated_order["order_data"]["statusHistory"][-1]["status"] == "bought"

        transaction = data(client.get(f"/api/finance/transactions/{result['transaction_id']}"))
        assert transaction["type"] == "Income"
        assert transaction["category"] == "Car Sale"
        assert transaction["payment_status"] == "Pending"
        assert transaction["amount"] == 4200000.0
        assert transaction["related_car_id"] == car["id"]
        assert transaction["related_order_id"] == order["id"]
        assert transaction["base_description"].startswith("Car Sale: 2022 Kia Sportage")

    def test_car_already_assigned(self, client, make_car, make_order):
        car = make_car()
        first = make_order()
        second = make_order(customer_name="Amine")
        client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": first["id"]})

        response = client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": second["id"]})
        assert response.status_code == 409

    def test_closed_order(self, client, make_car, make_order):
        car = make_car()
        order = make_order()
        client.post(f"/api/orders/{order['id']}/status", json={"status": "cancelled"})

        response = client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": order["id"]})
        assert response.status_code == 409
        assert data(client.get(f"/api/inventory/{car['id']}"))["status"] == "available"

    def test_transaction_failure_is_a_warning(self, client, make_car, make_order, monkeypatch):
        async def failing_car_sale(*args, **kwargs):
            raise RuntimeError("ledger offline")

        monkeypatch.setattr(FinanceService, "create_car_sale", failing_car_sale)
        car = make_car()
        order = make_order()

        result = data(
            client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": order["id"]})
        )
        assert result["transaction_id"] is None
        assert result["warnings"] == ["Car assigned, but transaction failed: ledger offline"]
        assert result["car"]["status"] == "reserved"
        assert data(client.get(f"/api/orders/{order['id']}"))["status"] == "bought"


class TestUnassign:
    def _assigned(self, client, make_car, make_order):
        car = make_car()
        order = make_order()
        result = data(
            client.post(f"/api/inventory/{car['id']}/assign", json={"order_id": order["id"]})
        )
        return car, order, result["transaction_id"]

    def test_requires_confirmation(self, client, make_car, make_order):
        car, order, _ = self._assigned(client, make_car, make_order)

        response = client.post(f"/api/inventory/{car['id']}/unassign", json={})
        assert response.status_code == 422
        assert data(client.get(f"/api/inventory/{car['id']}"))["status"] == "reserved"

    def test_unassign_reverts_both_sides_and_deletes_sale(self, client, make_car, make_order):
        car, order, transaction_id = self._assigned(client, make_car, make_order)

        response = client.post(f"/api/inventory/{car['id']}/unassign", json={"confirm": True})
        assert response.status_code == 200
        result = data(response)
        assert result["deleted_transactions"] == 1
        assert result["car"]["status"] == "available"
        assert result["car"]["assigned_to_order"] is None

        updated_order = data(client.get(f"/api/orders/{order['id']}"))
        assert updated_order["status"] == "confirmed"
        assert updated_order["assigned_car_id"] is None

        assert client.get(f"/api/finance/transactions/{transaction_id}").status_code == 404

    def test_cleanup_failure_does_not_block(self, client, make_car, make_order, monkeypatch):
        car, order, transaction_id = self._assigned(client, make_car, make_order)

        async def failing_delete(*args, **kwargs):
            raise RuntimeError("locked")

        monkeypatch.setattr(FinanceService, "delete_for_pairing", failing_delete)

        response = client.post(f"/api/inventory/{car['id']}/unassign", json={"confirm": True})
        assert response.status_code == 200
        assert data(response)["deleted_transactions"] == 0
        assert data(client.get(f"/api/orders/{order['id']}"))["status"] == "confirmed"
        assert client.get(f"/api/finance/transactions/{transaction_id}").status_code == 200

    def test_not_assigned(self, client, make_car):
        car = make_car()
        response = client.post(f"/api/inventory/{car['id']}/unassign", json={"confirm": True})
        assert response.status_code == 409


class TestShareCar:
    def test_links_for_orders_with_phone(self, client, make_car, make_order):
        car = make_car(photos_urls=["https://cdn/1.jpg"])
        first = make_order()
        second = make_order(customer_name="Amine", customer_phone="0661 22 33 44")

        result = data(
            client.post(
                f"/api/inventory/{car['id']}/share",
                json={"order_ids": [first["id"], second["id"], 999]},
            )
        )

        assert [link["order_id"] for link in result["links"]] == [first["id"], second["id"]]
        assert result["skipped_order_ids"] == [999]
        assert result["links"][1]["phone"] == "213661223344"
        assert "https://cdn/1.jpg" in result["message"]
        assert unquote(result["links"][0]["whatsapp_url"].split("?text=")[1]) == result["message"]
