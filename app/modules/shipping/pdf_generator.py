from datetime import datetime
from typing import Any, Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.core.config import config
from .photos import parse_vehicle_photos

TITLE_COLOR = (41, 128, 185)
LINK_COLOR = (0, 0, 255)
LABEL_WIDTH = 40


def _latin1(text: Optional[str]) -> str:
    # Core fonts only cover latin-1
    return (text or "").encode("latin-1", "replace").decode("latin-1")


class ShippingFormPDF(FPDF):
    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "", 10)
        self.set_text_color(150)
        self.cell(0, 10, _latin1(f"{config.company_name} - Shipping Department"), align="C")
        self.set_text_color(0)

    def section(self, title: str):
        self.set_font("Helvetica", "B", 16)
        self.cell(0, 10, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_line_width(0.5)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.ln(5)

    def field(self, label: str, value: Optional[str]):
        self.set_font("Helvetica", "B", 10)
        self.cell(LABEL_WIDTH, 8, label)
        self.set_font("Helvetica", "", 10)
        self.cell(0, 8, _latin1(value) or "N/A", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def link_line(self, label: str, url: str):
        self.set_font("Helvetica", "B", 10)
        self.set_text_color(*LINK_COLOR)
        self.cell(0, 8, label, link=url, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(0)

    @staticmethod
    def generate_shipping_pdf(form: Any, generated_at: Optional[datetime] = None) -> bytes:
        """
        Render a shipping form to PDF bytes with fpdf2.

        `form` is a ShippingForm, saved or not yet flushed.
        """
        pdf = ShippingFormPDF()
        pdf.set_margins(20, 20, 20)
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        # --- Title and date ---
        pdf.set_font("Helvetica", "B", 22)
        pdf.set_text_color(*TITLE_COLOR)
        pdf.cell(0, 12, "SHIPPING FORM", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0)

        moment = form.created_at or generated_at or datetime.now()
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(0, 8, f"Date: {moment.strftime('%d/%m/%Y')}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

        # --- Customer ---
        pdf.section("Customer Information")
        pdf.field("Full Name:", form.name)
        pdf.field("Phone:", form.phone)
        pdf.field("Email:", form.email)
        pdf.field("Address:", form.address)
        if form.passport_number:
            pdf.field("Passport No:", form.passport_number)
        if form.id_card_number:
            pdf.field("ID Card No:", form.id_card_number)
        pdf.field("Postal Code:", form.code_postal)
        pdf.field("City Name:", form.zip_number)
        pdf.ln(6)

        # --- Vehicle ---
        pdf.section("Vehicle Information")
        pdf.field("Model:", form.vehicle_model)
        pdf.field("VIN:", form.vin_number)
        pdf.ln(6)

        if form.notes:
            pdf.section("Notes")
            pdf.set_font("Helvetica", "", 10)
            pdf.multi_cell(0, 5, _latin1(form.notes), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(6)

        # --- Documents & media ---
        photos = parse_vehicle_photos(form.vehicle_photos_urls)
        if form.passport_photo_url or form.id_card_url or form.id_card_back_url or photos:
            pdf.section("Documents & Media Links")
            if form.passport_photo_url:
                pdf.link_line("Passport Photo (Click to View)", form.passport_photo_url)
            if form.id_card_url:
                pdf.link_line("ID Card Front (Click to View)", form.id_card_url)
            if form.id_card_back_url:
                pdf.link_line("ID Card Back (Click to View)", form.id_card_back_url)
            for index, url in enumerate(photos, start=1):
                pdf.link_line(f"Vehicle Photo {index} (Click to View)", url)

        return bytes(pdf.output())
