"""
Trip table export for spreadsheets.

Column headers and status labels follow the admin UI language. CSV output
quotes every cell and starts with a UTF-8 byte order mark so Excel opens
Arabic text correctly.
"""

import csv
import io
from datetime import datetime
from typing import Iterable, List, Optional
import pandas as pd
from busbooking.cities.aliases import arabic_name

HEADERS = {
    "en": ["ID", "From", "To", "Departure Time", "Arrival Time", "Company", "Available Seats", "Status"],
    "de": ["ID", "Von", "Nach", "Abfahrtszeit", "Ankunftszeit", "Unternehmen", "Verfügbare Plätze", "Status"],
    "ar": ["ID", "من", "إلى", "وقت المغادرة", "وقت الوصول", "الشركة", "المقاعد المتاحة", "الحالة"],
}

STATUS_LABELS = {
    "en": ("Active", "Inactive"),
    "de": ("Aktiv", "Inaktiv"),
    "ar": ("نشط", "معطل"),
}

SHEET_NAMES = {"en": "Trips", "de": "Fahrten", "ar": "الرحلات"}

MISSING = "N/A"

def _lang(language) -> str:
    value = getattr(language, "value", language)
    return value if value in HEADERS else "en"

def format_timestamp(value: Optional[datetime]) -> str:
    """en-US style, e.g. ``03/15/2025, 08:00 AM``"""
    if value is None:
        return MISSING
    return value.strftime("%m/%d/%Y, %I:%M %p")

def _city(name: Optional[str], language: str) -> str:
    if not name:
        return MISSING
    if language == "ar":
        return arabic_name(name) or name
    return name

def build_export_rows(trips: Iterable, language="en") -> List[list]:
    lang = _lang(language)
    active, inactive = STATUS_LABELS[lang]
    rows = []
    for trip in trips:
        rows.append([
            trip.id if trip.id is not None else "",
            _city(trip.from_city, lang),
            _city(trip.to_city, lang),
            format_timestamp(trip.departure_time),
            format_timestamp(trip.arrival_time),
            trip.company_name or MISSING,
            trip.seats_available if trip.seats_available is not None else 0,
            active if trip.is_active else inactive,
        ])
    return rows

def build_export_frame(trips: Iterable, language="en") -> pd.DataFrame:
    lang = _lang(language)
    return pd.DataFrame(build_export_rows(trips, lang), columns=HEADERS[lang])

def export_trips_csv(trips: Iterable, language="en") -> bytes:
    df = build_export_frame(trips, language)
    output = io.StringIO()
    df.to_csv(output, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return ("\ufeff" + output.getvalue()).encode("utf-8")

def export_trips_excel(trips: Iterable, language="en") -> bytes:
    lang = _lang(language)
    df = build_export_frame(trips, lang)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=SHEET_NAMES[lang], index=False)
    return output.getvalue()
