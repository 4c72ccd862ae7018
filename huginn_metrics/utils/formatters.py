"""Text formatting helpers."""

from __future__ import annotations


def ensure_sentence(text: str) -> str:
    """Ensure ``text`` ends with a sentence terminator when non-empty."""

    body = (text or "").strip()
    if not body:
        return body
    if body[-1] not in ".!?":
        body = f"{body}."
    return body


def format_decimal(value: float, places: int = 1) -> str:
    """Format ``value`` with ``places`` decimals (``0`` gives a whole number)."""

    if places <= 0:
        return f"{value:.0f}"
    return f"{value:.{places}f}"


def format_compact(value: float, places: int = 1) -> str:
    """Format ``value`` like :func:`format_decimal` but trim trailing zeros.

    ``25.0`` becomes ``"25"`` while ``12.5`` stays ``"12.5"``.
    """

    text = format_decimal(value, places)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
