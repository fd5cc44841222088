"""Broadcast message offering a stock car to customers"""

from typing import Any, Optional

from app.core.config import config
from app.modules.shipping.photos import parse_vehicle_photos

RULE = "━━━━━━━━━━━━━━━━━━━━━"


def _number(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def build_car_message(car: Any, company_name: Optional[str] = None) -> str:
    """Arabic car announcement with numbered photo links and the video link."""
    company = company_name or config.company_name
    photos = parse_vehicle_photos(car.photos_urls)
    images_list = "\n".join(f"{index}. {url}" for index, url in enumerate(photos, start=1))
    video_section = f"\n\n الفيديوهات:\n1. {car.video_url}" if car.video_url else ""

    return (
        f"شكراً لاختيارك {company} لاستيراد السيارات الكورية!\n"
        f"\n"
        f"{RULE}\n"
        f" تفاصيل السيارة المتاحة\n"
        f"{RULE}\n"
        f"\n"
        f" السيارة: {car.brand} {car.model}\n"
        f" سنة الصنع: {car.year or ''}\n"
        f" السعر: {_number(car.selling_price)} {car.currency or 'دج'}\n"
        f" الموقع: {car.location or ''}\n"
        f" المسافة المقطوعة: {_number(car.mileage)} كم\n"
        f" اللون: {car.color or 'غير محدد'}\n"
        f"\n"
        f" ملاحظات:\n"
        f"{car.notes or 'لا توجد ملاحظات إضافية'}\n"
        f"\n"
        f"{RULE}\n"
        f" الصور والفيديوهات ({len(photos)} صور، {'1' if car.video_url else '0'} فيديو)\n"
        f"\n"
        f" الصور:\n"
        f"{images_list}{video_section}\n"
        f"\n"
        f"{RULE}\n"
        f" للاستفسار والحجز:\n"
        f"\n"
        f"نحن في خدمتك! اتصل بنا الآن للمزيد من التفاصيل أو لحجز هذه السيارة.\n"
        f"\n"
        f"فريق {company}"
    )
