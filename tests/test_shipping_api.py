"""Tests for shipping forms: PDF, documents and the WhatsApp hand-off."""

import io
from datetime import datetime
from types import SimpleNamespace
from urllib.parse import unquote

from PIL import Image

from app.modules.shipping.message import build_copy_text, build_share_message
from app.modules.shipping.pdf_generator import ShippingFormPDF
from conftest import data


def form_payload(**overrides):
    payload = {
        "name": "Yacine Haddad",
        "phone": "0770 11 22 33",
        "email": "yacine@example.com",
        "address": "12 rue Didouche, Alger",
        "passport_number": "P1234567",
        "id_card_number": "ID-9",
        "code_postal": "16000",
        "zip_number": "Alger",
        "vehicle_model": "Hyundai Tucson",
        "vin_number": "KMHJ381ABCDE12345",
        "notes": "Fragile mirrors",
        "vehicle_photos_urls": "https://cdn/a.jpg, https://cdn/b.jpg",
    }
    payload.update(overrides)
    return payload


def sample_form(**overrides):
    values = dict(
        name="Yacine",
        phone="0770112233",
        email=None,
        address=None,
        passport_number=None,
        id_card_number=None,
        code_postal=None,
        zip_number=None,
        vehicle_model="Kia K5",
        vin_number=None,
        notes=None,
        status="pending",
        pdf_url="https://files/form.pdf",
        passport_photo_url=None,
        id_card_url=None,
        id_card_back_url=None,
        vehicle_photos_urls='["https://cdn/a.jpg"]',
        created_at=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestShareMessage:
    def test_template(self):
        message = build_share_message(sample_form(), signature="Test Motors")
        assert message == (
            "*Shipping Details*\n"
            "------------------\n"
            "*Customer Info*\n"
            "Name: Yacine\n"
            "Phone: 0770112233\n"
            "Address: N/A\n"
            "\n"
            "*Vehicle Info*\n"
            "Model: Kia K5\n"
            "VIN: N/A\n"
            "Status: pending\n"
            "\n"
            "*Documents & Media*\n"
            "📄 *Shipping Form PDF*: https://files/form.pdf\n"
            "\n"
            "🚗 *Vehicle Photos*:\n"
            "1. https://cdn/a.jpg\n"
            "\n"
            "------------------\n"
            "*Test Motors*"
        )

    def test_copy_text_lists_every_field(self):
        text = build_copy_text(sample_form(id_card_back_url="https://files/back.jpg"))
        assert "City Name: N/A" in text
        assert "ID Card (Back): https://files/back.jpg" in text
        assert text.endswith("1. https://cdn/a.jpg")


class TestPdf:
    def test_renders_a_pdf(self):
        pdf = ShippingFormPDF.generate_shipping_pdf(
            sample_form(notes="Arrivée prévue ✓"), generated_at=datetime(2025, 3, 14)
        )
        assert pdf.startswith(b"%PDF")


class TestShippingFormsApi:
    def test_create_uploads_pdf(self, client, blob_store):
        response = client.post("/api/shipping-forms", json=form_payload())
        assert response.status_code == 201, response.text

        form = data(response)
        assert form["vehicle_photos_urls"] == ["https://cdn/a.jpg", "https://cdn/b.jpg"]
        assert form["shipment_month"] == datetime.now().strftime("%Y-%m")
        assert form["status"] == "pending"

        (key,) = blob_store.files.keys()
        assert key.startswith("shipping/shipping_form_yacine_haddad_")
        assert form["pdf_url"].endswith(key)
        assert blob_store.files[key][0].startswith(b"%PDF")

    def test_update_replaces_pdf(self, client, blob_store):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        old_key = form["pdf_url"].split(".amazonaws.com/")[1]

        updated = data(client.patch(f"/api/shipping-forms/{form['id']}", json={"notes": "Handle with care"}))

        assert updated["notes"] == "Handle with care"
        assert updated["pdf_url"] != form["pdf_url"]
        assert blob_store.deleted == [old_key]

    def test_update_survives_failed_blob_delete(self, client, blob_store):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        blob_store.fail_deletes = True

        response = client.patch(f"/api/shipping-forms/{form['id']}", json={"notes": "x"})
        assert response.status_code == 200

    def test_failed_commit_keeps_previous_pdf(self, client, lenient_client, blob_store, fail_next_commit):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        old_key = form["pdf_url"].split(".amazonaws.com/")[1]

        fail_next_commit()
        response = lenient_client.patch(f"/api/shipping-forms/{form['id']}", json={"notes": "x"})
        assert response.status_code == 500

        assert data(client.get(f"/api/shipping-forms/{form['id']}"))["pdf_url"] == form["pdf_url"]
        assert list(blob_store.files) == [old_key]
        assert len(blob_store.deleted) == 1
        assert blob_store.deleted[0] != old_key

    def test_failed_delete_commit_keeps_pdf(self, client, lenient_client, blob_store, fail_next_commit):
        form = data(client.post("/api/shipping-forms", json=form_payload()))

        fail_next_commit()
        response = lenient_client.delete(f"/api/shipping-forms/{form['id']}")
        assert response.status_code == 500

        assert client.get(f"/api/shipping-forms/{form['id']}").status_code == 200
        assert blob_store.deleted == []

    def test_toggle_status(self, client):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        toggled = data(client.post(f"/api/shipping-forms/{form['id']}/status"))
        assert toggled["status"] == "completed"
        toggled = data(client.post(f"/api/shipping-forms/{form['id']}/status"))
        assert toggled["status"] == "pending"

    def test_list_filters(self, client):
        client.post("/api/shipping-forms", json=form_payload(shipment_month="2025-01"))
        client.post("/api/shipping-forms", json=form_payload(name="Other", vin_number="XYZ"))

        result = data(client.get("/api/shipping-forms", params={"shipment_month": "2025-01"}))
        assert result["total"] == 1
        result = data(client.get("/api/shipping-forms", params={"search": "xyz"}))
        assert result["items"][0]["name"] == "Other"

    def test_upload_documents(self, client, blob_store):
        form = data(client.post("/api/shipping-forms", json=form_payload(vehicle_photos_urls=None)))

        response = client.post(
            f"/api/shipping-forms/{form['id']}/documents",
            params={"kind": "passport_photo"},
            files={"file": ("passport.pdf", b"%PDF-scan", "application/pdf")},
        )
        assert response.status_code == 200, response.text
        assert "passport_photo_" in data(response)["passport_photo_url"]

        buffer = io.BytesIO()
        Image.new("RGB", (640, 480)).save(buffer, format="JPEG")
        response = client.post(
            f"/api/shipping-forms/{form['id']}/documents",
            params={"kind": "vehicle_photo"},
            files={"file": ("side.jpg", buffer.getvalue(), "image/jpeg")},
        )
        photos = data(response)["vehicle_photos_urls"]
        assert len(photos) == 1
        assert "vehicle_photo_" in photos[0]

    def test_share(self, client):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        share = data(client.get(f"/api/shipping-forms/{form['id']}/share"))

        assert share["whatsapp_url"].startswith("https://wa.me/213770112233?text=")
        assert unquote(share["whatsapp_url"].split("?text=")[1]) == share["message"]
        assert share["message"].endswith("*Test Motors*")
        assert "Passport: P1234567" in share["copy_text"]
        assert unquote(share["pdf_share_url"]).endswith(
            "Here is the shipping document for Yacine Haddad."
        )

    def test_delete_removes_pdf(self, client, blob_store):
        form = data(client.post("/api/shipping-forms", json=form_payload()))
        response = client.delete(f"/api/shipping-forms/{form['id']}")
        assert response.json() == {"message": "Shipping form deleted successfully"}
        assert len(blob_store.deleted) == 1
        assert client.get(f"/api/shipping-forms/{form['id']}").status_code == 404
