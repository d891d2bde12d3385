from __future__ import annotations

import re
from typing import Any

from updoo.models.enums import Language


DEFAULT_LANGUAGE = Language.POLISH
_FALLBACK_ORDER = (Language.ENGLISH, Language.POLISH)
_POLISH_LETTERS = str.maketrans("ąćęłńóśźżĄĆĘŁŃÓŚŹŻ", "acelnoszzACELNOSZZ")


def parse_accept_language(header: str | None) -> Language | None:
    """Map an ``Accept-Language`` header to a supported language.

    Only the first tag is considered, so ``"en-US,pl;q=0.8"`` is English.
    Unknown or missing values return ``None`` so callers can fall back.
    """
    if not header:
        return None
    first = header.split(",", 1)[0].split(";", 1)[0].strip().lower()
    code = first.split("-", 1)[0]
    if code == "en":
        return Language.ENGLISH
    if code == "pl":
        return Language.POLISH
    return None


def resolve_request_language(header: str | None, user_language: Language | str | None = None) -> Language:
    from_header = parse_accept_language(header)
    if from_header is not None:
        return from_header
    if user_language:
        return Language(user_language)
    return DEFAULT_LANGUAGE


def display_name(names: dict[str, Any] | None, language: Language, fallback: str = "") -> str:
    names = names or {}
    value = names.get(language.value)
    if value:
        return str(value)
    for candidate in _FALLBACK_ORDER:
        value = names.get(candidate.value)
        if value:
            return str(value)
    return fallback


def localized_ref(entity, language: Language) -> dict[str, Any] | None:
    if entity is None:
        return None
    return {
        "id": entity.id,
        "slug": entity.slug,
        "name": display_name(entity.names, language, fallback=entity.slug),
    }


def slug_from_name(name: str, fallback: str = "slug") -> str:
    result = name.translate(_POLISH_LETTERS).strip().lower()
    result = re.sub(r"\s+", "-", result)
    result = re.sub(r"[^a-z0-9-]", "", result)
    result = re.sub(r"-+", "-", result).strip("-")
    return result or fallback


def mask_surname(surname: str | None) -> str:
    value = (surname or "").strip()
    return f"{value[0]}." if value else ""
