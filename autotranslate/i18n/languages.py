"""
Locale codes and language names.

Store locales (e.g. "pt-BR", "zh-Hant") are used verbatim when talking to the
content store. Providers want plain language codes, so they go through
`provider_language` first.
"""

from __future__ import annotations


# Human-readable names
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "zh": "Chinese (Simplified)",
    "zh-tw": "Chinese (Traditional)",
    "pt": "Portuguese",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "ko": "Korean",
    "it": "Italian",
    "ru": "Russian",
    "nl": "Dutch",
    "pl": "Polish",
    "vi": "Vietnamese",
    "th": "Thai",
    "tr": "Turkish",
    "id": "Indonesian",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "cs": "Czech",
    "hu": "Hungarian",
    "ro": "Romanian",
    "uk": "Ukrainian",
    "hi": "Hindi",
    "bn": "Bengali",
    "ar": "Arabic",
    "he": "Hebrew",
    "fa": "Persian",
    "ur": "Urdu",
    "sw": "Swahili",
}

# Region/script tags that providers treat as a distinct language
_DISTINCT_VARIANTS: dict[str, str] = {
    "zh-tw": "zh-tw",
    "zh-hk": "zh-tw",
    "zh-hant": "zh-tw",
    "zh-cn": "zh",
    "zh-hans": "zh",
}


def normalize_language_code(code: str) -> str:
    """Normalize a code to lower case with '-' separators."""
    return code.strip().lower().replace("_", "-")


def provider_language(code: str) -> str:
    """
    Map a store locale to the language code a provider expects.

    "pt-BR" -> "pt", "zh-Hant" -> "zh-tw", "en" -> "en"
    """
    code = normalize_language_code(code)
    if code in _DISTINCT_VARIANTS:
        return _DISTINCT_VARIANTS[code]
    return code.split("-", 1)[0]


def get_language_name(code: str) -> str:
    """Get human-readable language name, falling back to the code itself."""
    normalized = normalize_language_code(code)
    return LANGUAGE_NAMES.get(normalized) or LANGUAGE_NAMES.get(provider_language(code), code)
