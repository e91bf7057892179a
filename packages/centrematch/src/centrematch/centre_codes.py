"""Abbreviated centre codes used in booking numbers."""

from __future__ import annotations

from datetime import date

CODE_LENGTH = 4


def _fit(code: str) -> str:
    # upper() can change length (e.g. "ß" -> "SS"), so cut after upper-casing
    return code.upper()[:CODE_LENGTH].ljust(CODE_LENGTH, "X")


def generate_abbreviated_centre_code(centre_name: str) -> str:
    """Generate a 4-letter code from a centre name.

    Examples: "Campbelltown" -> "CAMP", "Campbelltown Mall" -> "CAMA",
    "The Pines Centre" -> "THPC", "The Glen Shopping Centre" -> "TGSC",
    "QVB" -> "QVBX".
    """
    words = centre_name.split()

    if not words:
        return _fit(centre_name.strip())
    if len(words) == 1:
        return _fit(words[0][:4])
    if len(words) == 2:
        return _fit(words[0][:2].upper() + words[1][:2].upper())
    if len(words) == 3:
        return _fit(words[0][:2].upper() + words[1][0] + words[2][0])
    return _fit("".join(w[0] for w in words[:4]))


def get_centre_code_for_booking(centre_name: str, centre_code: str | None = None) -> str:
    """Reuse a short stored code, otherwise derive one from the name."""
    if centre_code and len(centre_code) <= CODE_LENGTH:
        return centre_code.upper()
    return generate_abbreviated_centre_code(centre_name)


def format_booking_number(centre_code: str, booking_date: date, sequence: int) -> str:
    """Format a booking number as CODE-YYYYMMDD-SEQ."""
    return f"{centre_code}-{booking_date:%Y%m%d}-{sequence:03d}"
