"""
Validation functions for configuration values and object names.
"""

from typing import Any, List, Optional

from .exceptions import ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        valid_choices: Allowed values
        field_name: Name of the field being validated
        case_sensitive: When False, the comparison ignores case and the
            matching entry of valid_choices is returned

    Returns:
        The validated choice

    Raises:
        ValidationError: If the value is not an allowed choice
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )

    if case_sensitive:
        if value in valid_choices:
            return value
    else:
        for choice in valid_choices:
            if choice.lower() == value.lower():
                return choice

    raise ValidationError(
        f"{field_name} must be one of {valid_choices}, got '{value}'",
        field_name=field_name,
        value=value
    )


def validate_object_name(name: Any, field_name: str = "name") -> str:
    """
    Validate the name of a connection or another object stored in its own folder.

    Args:
        name: Object name to validate
        field_name: Name of the field being validated

    Returns:
        Validated name

    Raises:
        ValidationError: If the name cannot be used as a folder name
    """
    if not isinstance(name, str) or not name:
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=name
        )

    if name in (".", ".."):
        raise ValidationError(
            f"{field_name} cannot be '{name}'",
            field_name=field_name,
            value=name
        )

    for forbidden in ("/", "\\", "\x00"):
        if forbidden in name:
            raise ValidationError(
                f"{field_name} contains a forbidden character {forbidden!r}: {name}",
                field_name=field_name,
                value=name
            )

    return name
