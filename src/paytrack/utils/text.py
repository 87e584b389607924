"""Text helpers for renderers without full Unicode font support."""

_TURKISH_TO_ASCII = str.maketrans(
    {
        "ğ": "g",
        "Ğ": "G",
        "ü": "u",
        "Ü": "U",
        "ş": "s",
        "Ş": "S",
        "ı": "i",
        "İ": "I",
        "ö": "o",
        "Ö": "O",
        "ç": "c",
        "Ç": "C",
    }
)


def transliterate(text: str) -> str:
    """Replace Turkish diacritic letters with their ASCII equivalents."""
    return text.translate(_TURKISH_TO_ASCII)
