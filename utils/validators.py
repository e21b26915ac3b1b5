"""
utils/validators.py — Input validation helpers for the JSON API.

Validates:
- Plant and task names (non-empty)
- Growth form and climate class (closed sets)
- Date strings (ISO date or instant)
- Status filter, source filter and grouping options

Each validator returns (value, error). error is None when the input is
valid; otherwise value is None and error is a message for the response.
"""

from models import Climate, GrowthForm
from utils.dates import to_instant, is_date_only


def validate_name(value, label='Name'):
    name = (value or '').strip() if isinstance(value, str) else ''
    if not name:
        return None, f"{label} is required"
    return name, None


def validate_growth_form(value):
    try:
        return GrowthForm(value).value, None
    except ValueError:
        return None, f"Unknown growth form: {value!r} (expected seed or seedling)"


def validate_climate(value, default=Climate.TEMPERATE.value):
    if value in (None, ''):
        return default, None
    try:
        return Climate(value).value, None
    except ValueError:
        return None, f"Unknown climate: {value!r} (expected warm, cool or temperate)"


def validate_date(value, label='Date'):
    """
    Accept 'YYYY-MM-DD' or an ISO instant.

    The value is returned as given (date-only stays date-only) so the
    engine applies its own local-midnight rule.
    """
    if not isinstance(value, str) or not value.strip():
        return None, f"{label} is required"
    text = value.strip()
    try:
        to_instant(text)
    except ValueError:
        return None, f"{label} is not a valid date: {value!r}"
    if is_date_only(text) and len(text) != 10:
        return None, f"{label} is not a valid date: {value!r}"
    return text, None


def validate_choice(value, choices, label):
    if value not in choices:
        return None, f"Unknown {label}: {value!r} (expected one of {', '.join(choices)})"
    return value, None


def parse_bool(value):
    """Form posts send booleans as text ('true', 'on', '1'); JSON sends real ones."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)
