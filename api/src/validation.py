"""
Request and field validation.

Each function returns a list of violation messages; an empty list means the
input is valid. Payload validators check the shape of a request body,
field validators check the values a service is about to persist.
"""

import math
import re
from numbers import Real
from typing import Any, List, Mapping, Optional

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REGISTRATION_FIELDS = ("firstName", "lastName", "email", "password")
LOGIN_FIELDS = ("email", "password")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    """Real, not bool, and finite once stored as a float."""
    # bool is a Real subclass
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def validate_registration(payload: Mapping[str, Any]) -> List[str]:
    """Check a registration body has every required field as a string."""
    if any(_is_blank(payload.get(field)) for field in REGISTRATION_FIELDS):
        return [f"All fields are required: {', '.join(REGISTRATION_FIELDS)}"]

    return [
        f"{field} must be a string"
        for field in REGISTRATION_FIELDS
        if not isinstance(payload[field], str)
    ]


def validate_login(payload: Mapping[str, Any]) -> List[str]:
    """Check a login body carries email and password strings."""
    if any(_is_blank(payload.get(field)) for field in LOGIN_FIELDS):
        return ["Email and password are required"]

    return [
        f"{field} must be a string"
        for field in LOGIN_FIELDS
        if not isinstance(payload[field], str)
    ]


def validate_item(payload: Mapping[str, Any]) -> List[str]:
    """Check an item body has a name and a price, then validate the values."""
    if _is_blank(payload.get("name")) or payload.get("price") is None:
        return ["Name and price are required fields"]

    return item_violations(
        payload.get("name"),
        payload.get("price"),
        payload.get("description"),
    )


def registration_violations(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    password_min_length: int = 8,
) -> List[str]:
    """
    Validate user fields before they are persisted.

    Args:
        first_name: First name
        last_name: Last name
        email: Normalized email address
        password: Plaintext password
        password_min_length: Minimum accepted password length

    Returns:
        List of violation messages
    """
    violations = []

    if _is_blank(first_name):
        violations.append("firstName is required")
    if _is_blank(last_name):
        violations.append("lastName is required")
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        violations.append("email must be a valid email address")
    if not isinstance(password, str) or len(password) < password_min_length:
        violations.append(f"password must be at least {password_min_length} characters long")

    return violations


def item_violations(name: Any, price: Any, description: Optional[Any] = None) -> List[str]:
    """
    Validate item fields before they are persisted.

    Args:
        name: Item name
        price: Item price
        description: Optional description

    Returns:
        List of violation messages
    """
    violations = []

    if not isinstance(name, str) or not name.strip():
        violations.append("Item name is required")

    if not _is_number(price):
        violations.append("Price must be a number")
    elif price < 0:
        violations.append("Price must be greater than or equal to 0")

    if description is not None and not isinstance(description, str):
        violations.append("Description must be a string")

    return violations
