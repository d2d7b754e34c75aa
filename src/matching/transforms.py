"""Coercion of raw CSV values to lead field types."""
import re
from datetime import datetime
from typing import Any, Optional
import pandas as pd

from src.matching.fields import FieldMapping

TRUE_VALUES = {"sim", "s", "yes", "y", "true", "t", "1", "x", "verdadeiro"}
FALSE_VALUES = {"nao", "não", "n", "no", "false", "f", "0", "falso"}


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def parse_brl(value: Any) -> Optional[float]:
    """
    Parse a Brazilian currency amount.

    "R$ 1.234,56" -> 1234.56, "R$ 1.500" -> 1500.0, "12,5" -> 12.5,
    "12.5" -> 12.5.

    Args:
        value: Raw amount

    Returns:
        Amount or None for blanks

    Raises:
        ValueError: If no amount can be read
    """
    if _blank(value):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    s = re.sub(r'[R$\s]', '', str(value))
    negative = s.startswith("-")
    s = s.lstrip("-")

    if "," in s:
        # Dots are thousands separators, comma is the decimal mark
        s = s.replace(".", "").replace(",", ".")
    elif s.count(".") > 1 or re.fullmatch(r'[1-9]\d{0,2}\.\d{3}', s):
        # Several dots, or a lone dot before three digits ("1.500"), group thousands
        s = s.replace(".", "")

    if not re.fullmatch(r'\d+(\.\d+)?', s):
        raise ValueError(f"Invalid currency amount: {value!r}")

    amount = float(s)
    return -amount if negative else amount


def to_number(value: Any) -> Optional[float]:
    """
    Parse a plain number, accepting a decimal comma.

    Args:
        value: Raw value

    Returns:
        Number or None for blanks

    Raises:
        ValueError: If the value is not numeric
    """
    if _blank(value):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    s = str(value).strip().replace(" ", "")
    if "," in s and "." not in s:
        s = s.replace(",", ".")
    try:
        return float(s)
    except ValueError as e:
        raise ValueError(f"Invalid number: {value!r}") from e


def to_boolean(value: Any) -> Optional[bool]:
    """
    Parse yes/no style flags (Portuguese and English).

    Args:
        value: Raw value

    Returns:
        Boolean or None for blanks

    Raises:
        ValueError: If the value is not a recognized flag
    """
    if _blank(value):
        return None
    if isinstance(value, bool):
        return value

    s = str(value).strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


def to_date(value: Any) -> Optional[datetime]:
    """
    Parse a date or timestamp, day first ("31/12/2024 14:00").

    Args:
        value: Raw value

    Returns:
        datetime or None for blanks

    Raises:
        ValueError: If the value is not a date
    """
    if _blank(value):
        return None

    s = str(value).strip()
    # ISO dates must not be read day-first
    dayfirst = not re.match(r'^\d{4}-\d{2}-\d{2}', s)
    try:
        parsed = pd.to_datetime(s, dayfirst=dayfirst)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {value!r}") from e

    if pd.isna(parsed):
        raise ValueError(f"Invalid date: {value!r}")
    return parsed.to_pydatetime()


TRANSFORMS = {
    "parseBRL": parse_brl,
    "toNumber": to_number,
    "toBoolean": to_boolean,
    "toDate": to_date,
    "toTimestamp": to_date,
}

TYPE_TRANSFORMS = {
    "number": to_number,
    "boolean": to_boolean,
    "date": to_date,
}


def coerce_value(value: Any, field: FieldMapping) -> Any:
    """
    Convert a raw value to the field's type.

    Args:
        value: Raw value
        field: Target field

    Returns:
        Converted value; text fields come back stripped

    Raises:
        ValueError: If the value does not fit the field type
    """
    if field.transform_function:
        transform = TRANSFORMS.get(field.transform_function)
        if transform is None:
            raise ValueError(f"Unknown transform {field.transform_function!r} for {field.name}")
        return transform(value)

    transform = TYPE_TRANSFORMS.get(field.data_type)
    if transform is not None:
        return transform(value)

    if _blank(value):
        return None
    return str(value).strip()
