import re


def clean_tel(value: str | None) -> str:
    """Quita espacios y guiones del teléfono (conserva '+' inicial)."""
    if not value:
        return ""
    tel = value.strip()
    prefijo = "+" if tel.startswith("+") else ""
    return prefijo + re.sub(r"\D+", "", tel)


def capitalizar(value: str | None) -> str:
    """Capitaliza nombre/razón social y colapsa espacios."""
    if not value:
        return ""
    return " ".join(value.split()).title()
