from typing import Any, Optional
from urllib.parse import parse_qsl

from jobsync.models import CustomField


def _field_name(field) -> Optional[str]:
    if isinstance(field, CustomField):
        return field.name
    if isinstance(field, dict):
        return field.get("name")
    return None


def _field_value(field) -> Any:
    if isinstance(field, CustomField):
        return field.value
    return field.get("value")


def _as_text(value: Any) -> Optional[str]:
    """Flatten a raw custom field value to a string, or None when empty"""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("value") or value.get("name") or value.get("title")
    if value is None or value == "" or isinstance(value, (list, dict)):
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def extract_field(fields: Optional[list], name: str) -> Optional[str]:
    """Value of the first custom field called `name`, as text, or None.

    List values collapse to their first element, option dicts to their
    value or name. Checkbox booleans become "Yes"/"No". Empty strings and
    empty lists count as missing.
    """
    for field in fields or []:
        if _field_name(field) != name:
            continue
        return _as_text(_field_value(field))
    return None


def extract_as_list(fields: Optional[list], name: str) -> list:
    """Same lookup as extract_field, wrapped for list-typed destination fields"""
    value = extract_field(fields, name)
    return [] if value is None else [value]


def parse_form(data: Optional[str]) -> dict[str, str]:
    """Decode a URL-encoded form body into a flat dict. First value wins."""
    form = {}
    if not data:
        return form
    for key, value in parse_qsl(data, keep_blank_values=True):
        form.setdefault(key, value)
    return form


def extract_form_field(form: dict, name: str) -> Optional[str]:
    value = form.get(name)
    return value if value else None
