"""Arabic <-> English names of Syrian cities, used for autocomplete and display."""

from typing import Dict, Optional

ARABIC_TO_ENGLISH: Dict[str, str] = {
    "دمشق": "Damascus",
    "حلب": "Aleppo",
    "حمص": "Homs",
    "حماة": "Hama",
    "اللاذقية": "Latakia",
    "طرطوس": "Tartus",
    "دير الزور": "Deir ez-Zor",
    "الرقة": "Raqqa",
    "الحسكة": "Hasakah",
    "القامشلي": "Qamishli",
    "إدلب": "Idlib",
    "درعا": "Daraa",
    "السويداء": "As-Suwayda",
    "القنيطرة": "Quneitra",
    "تدمر": "Palmyra",
    "الباب": "Al-Bab",
    "منبج": "Manbij",
    "عفرين": "Afrin",
    "كوباني": "Kobani",
    "البوكمال": "Al-Bukamal",
    "الميادين": "Al-Mayadin",
    "سلمية": "Salamiyah",
    "جبلة": "Jableh",
    "بانياس": "Baniyas",
    "صافيتا": "Safita",
    "مصياف": "Masyaf",
    "القصير": "Al-Qusayr",
    "دوما": "Douma",
    "حرستا": "Harasta",
    "التل": "Al-Tall",
    "النبك": "Al-Nabek",
    "قطنا": "Qatana",
    "داريا": "Darayya",
    "الحجر الأسود": "Al-Hajar al-Aswad",
    "سحنايا": "Sahnaya",
    "كفربطنا": "Kafr Batna",
    "جرمانا": "Jaramana",
    "ريف دمشق": "Rif Dimashq",
}

ENGLISH_TO_ARABIC: Dict[str, str] = {en: ar for ar, en in ARABIC_TO_ENGLISH.items()}


def english_name(name: str) -> str:
    """Canonical English name for an Arabic city name, or the input unchanged"""
    return ARABIC_TO_ENGLISH.get(name, name)


def arabic_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return ENGLISH_TO_ARABIC.get(name, name)


def city_matches_input(city_name: str, text: str) -> bool:
    """Prefix match of `text` against an English city name, Arabic aliases included"""
    city_lower = city_name.lower()
    if city_lower.startswith(text.lower()):
        return True

    exact = ARABIC_TO_ENGLISH.get(text)
    if exact and exact.lower() == city_lower:
        return True

    return any(
        arabic.startswith(text) and english.lower() == city_lower
        for arabic, english in ARABIC_TO_ENGLISH.items()
    )
