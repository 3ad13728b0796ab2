# frontend/formatting.py
"""Display helpers shared by the inventory cards and forms."""
import html
import math
from datetime import date
from typing import Any, List, Optional

DASH = "—"
STATUS_FOR_SALE = "verkauf"
STATUS_RESERVED = "reserviert"


def to_number(value: Any) -> Optional[float]:
    """Parse form input as a number; blanks and garbage become None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def escape_html(value: Any) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def format_number_de(number: float) -> str:
    """12500 -> '12.500', 1234.5 -> '1.234,5' (de-AT grouping)"""
    if float(number).is_integer():
        text = f"{int(number):,}"
    else:
        text = f"{round(number, 3):,}".rstrip("0").rstrip(".")
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_km(value: Any) -> str:
    number = to_number(value)
    if number is None:
        return DASH
    return f"{format_number_de(number)} km"


def format_price(value: Any) -> str:
    number = to_number(value)
    if number is None:
        return DASH
    return f"{format_number_de(number)} €"


def format_today(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{today.day}.{today.month}.{today.year}"


def normalize_status(value: Any) -> str:
    return STATUS_RESERVED if str(value or "").lower() == STATUS_RESERVED else STATUS_FOR_SALE


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def counter_frames(start: int, end: int, duration_ms: int, frame_ms: int = 16) -> List[int]:
    """Values shown by the animated vehicle counter, one per frame"""
    if duration_ms <= 0 or start == end:
        return [end]
    steps = max(1, math.ceil(duration_ms / frame_ms))
    diff = end - start
    return [round(start + diff * ease_out_cubic(min(1.0, i / steps))) for i in range(1, steps + 1)]
