"""
Coercion of raw request values into the types the managers expect.

Form posts deliver everything as strings and JSON bodies may carry numbers
or strings, so both go through these helpers.
"""

from fieldservice.buisness.errors import InvalidQuantityError, ValidationError


def _to_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str) and value.strip():
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    raise ValidationError(f"{field} is required")


def positive_quantity(value, field='quantity'):
    """Integer > 0, otherwise InvalidQuantityError"""
    try:
        quantity = _to_int(value, field)
    except ValidationError as e:
        raise InvalidQuantityError(e.message)
    if quantity <= 0:
        raise InvalidQuantityError(f"{field} must be greater than zero")
    return quantity


def non_negative_quantity(value, field='quantity'):
    """Integer >= 0, otherwise InvalidQuantityError"""
    try:
        quantity = _to_int(value, field)
    except ValidationError as e:
        raise InvalidQuantityError(e.message)
    if quantity < 0:
        raise InvalidQuantityError(f"{field} cannot be negative")
    return quantity


def required_id(value, field='id'):
    return _to_int(value, field)


def optional_id(value, field='id'):
    """Integer id or None for empty values"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _to_int(value, field)


def required_text(value, field):
    text = optional_text(value)
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def optional_text(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None
