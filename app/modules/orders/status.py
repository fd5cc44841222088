"""
Order status machine.

Statuses are a flat ordered vocabulary with no transition graph: any status
can follow any other. Every change appends one entry to
order_data["statusHistory"] and refreshes order_data["lastUpdated"]; history
is never reordered or pruned. "shipped" additionally needs ShippingDetails.
"""

import copy
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from app.core.exceptions import ValidationError
from app.core.utils import now_ms, format_display_date


class OrderStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    bought = "bought"
    shipped = "shipped"
    customs = "customs"
    ready = "ready"
    delivered = "delivered"
    cancelled = "cancelled"


ORDER_STATUSES = tuple(status.value for status in OrderStatus)

# Stored by older versions; readable and filterable, never offered as a target
LEGACY_STATUSES = ("completed",)

READABLE_STATUSES = ORDER_STATUSES + LEGACY_STATUSES

# Orders in these statuses cannot take a car
CLOSED_STATUSES = (OrderStatus.cancelled.value, OrderStatus.delivered.value)

SHIPPING_CARRIERS = {
    "cma": "CMA CGM",
    "maersk": "Maersk Line",
    "cosco": "COSCO Shipping",
    "hmm": "HMM (Hyundai Merchant Marine)",
    "cig": "CIG Shipping",
}

CIG_VIN_SUFFIX_LENGTH = 6
AWAITING_TRACKING_NUMBER = "PENDING"


@dataclass
class ShippingDetails:
    carrier: Optional[str] = None
    tracking_number: str = ""
    route: str = ""
    vin_last_digits: str = ""
    awaiting_tracking: bool = False


def validate_shipping_details(details: ShippingDetails) -> None:
    """
    Raises:
        ValidationError: unknown carrier, or CIG without a 6-character VIN suffix
    """
    if details.carrier and details.carrier not in SHIPPING_CARRIERS:
        raise ValidationError(f"Unknown shipping company: {details.carrier}")

    if details.carrier == "cig" and len((details.vin_last_digits or "").strip()) != CIG_VIN_SUFFIX_LENGTH:
        raise ValidationError("VIN (Last 6 Digits) is required for CIG")


def build_history_entry(status: str, note: str, now: datetime) -> Dict[str, Any]:
    return {
        "status": status,
        "timestamp": now_ms(now),
        "date": format_display_date(now),
        "note": note,
    }


def apply_status(
    order_data: Optional[Dict[str, Any]],
    status: str,
    now: datetime,
    note: Optional[str] = None,
) -> Dict[str, Any]:
    """
    New order_data with the status change recorded. The input is not mutated.
    """
    updated = copy.deepcopy(order_data) if order_data else {}
    history = list(updated.get("statusHistory") or [])
    history.append(build_history_entry(status, note or f"Updated status to {status}", now))

    updated["status"] = status
    updated["lastUpdated"] = now.isoformat()
    updated["statusHistory"] = history
    return updated


def shipping_note(details: ShippingDetails) -> str:
    if details.awaiting_tracking:
        return "Shipped - Waiting for tracking"
    carrier_name = SHIPPING_CARRIERS.get(details.carrier or "", details.carrier or "")
    return f"Shipped via {carrier_name} - Tracking: {details.tracking_number}"


def apply_shipment(
    order_data: Optional[Dict[str, Any]], details: ShippingDetails, now: datetime
) -> Dict[str, Any]:
    """
    Mark as shipped: a history entry with the carrier note plus the nested
    "shipping" record. Awaiting tracking always stores "PENDING".
    """
    validate_shipping_details(details)
    note = shipping_note(details)

    updated = apply_status(order_data, OrderStatus.shipped.value, now, note)
    updated["shipping"] = {
        "carrier": details.carrier or "",
        "trackingNumber": (
            AWAITING_TRACKING_NUMBER if details.awaiting_tracking else details.tracking_number
        ),
        "route": details.route or "",
        "vinLast4Digits": details.vin_last_digits or "",
        "awaitingTracking": details.awaiting_tracking,
        "createdAt": now.isoformat(),
        "lastUpdated": format_display_date(now),
        "note": note,
    }
    return updated


def reference_sequence(reference: Optional[str], year: int) -> Optional[int]:
    """Sequence number of a WA-<year>-<n> reference, None when malformed or another year."""
    if not reference:
        return None
    parts = reference.split("-")
    if len(parts) == 3 and parts[0] == "WA" and parts[1] == str(year) and parts[2].isdigit():
        return int(parts[2])
    return None


def latest_reference(references: Iterable[str], year: int) -> Optional[str]:
    """Reference with the highest numeric sequence; text order breaks past 6 digits."""
    numbered = [ref for ref in references if reference_sequence(ref, year) is not None]
    if not numbered:
        return None
    return max(numbered, key=lambda ref: reference_sequence(ref, year))


def next_reference_number(latest: Optional[str], year: int) -> str:
    """
    WA-<year>-<6 digit sequence>, one past the latest reference of that year.
    A missing, malformed or other-year latest starts the sequence at 1.
    """
    sequence = (reference_sequence(latest, year) or 0) + 1
    return f"WA-{year}-{sequence:06d}"


def build_intake_order_data(
    reference_number: str,
    customer: Dict[str, Any],
    car: Dict[str, Any],
    notes: Optional[str],
    now: datetime,
    whatsapp_phone: str,
) -> Dict[str, Any]:
    """order_data seeded at intake: customer and car snapshot plus the first history entry."""
    brand = car.get("brand") or ""
    model = car.get("model") or ""
    budget = car.get("budget") or ""

    return {
        "referenceNumber": reference_number,
        "status": OrderStatus.pending.value,
        "source": "dashboard",
        "createdAt": now.isoformat(),
        "lastUpdated": now.isoformat(),
        "displayDate": now.strftime("%d/%m/%Y %H:%M"),
        "customerInfo": {
            "name": customer.get("name") or "",
            "phone": customer.get("phone") or "",
            "email": customer.get("email") or "",
            "wilaya": customer.get("wilaya") or "",
            "idCard": customer.get("id_card") or "",
            "whatsappPhone": whatsapp_phone,
        },
        "carDetails": {
            "brand": brand,
            "model": model,
            "budget": budget,
            "customBudget": car.get("custom_budget") or "",
            "brandDisplay": brand,
            "modelDisplay": f"{brand} {model}",
            "budgetDisplay": f"{budget} DZD" if budget else "N/A",
        },
        "notes": notes or "",
        "statusHistory": [
            build_history_entry(OrderStatus.pending.value, "Order created from dashboard", now)
        ],
    }
