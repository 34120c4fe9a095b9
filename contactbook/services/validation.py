from contactbook.constants import (
    DEFAULT_SORT_COLUMN,
    EMAIL_MAX_LENGTH,
    EMAIL_PATTERN,
    MOBILE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SORTABLE_COLUMNS,
)


class ValidationError(ValueError):
    pass


def require(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationError(message)


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_name(first_name: str, last_name: str) -> None:
    require(bool(first_name.strip() or last_name.strip()), "At least first name or last name must be provided")


def validate_email(email: str) -> None:
    require(not email or is_valid_email(email), f"Invalid email format: {email}")


def validate_length(value: str, limit: int, field_name: str) -> None:
    require(len(value) <= limit, f"{field_name} must be at most {limit} characters")


def validate_contact_fields(first_name: str, last_name: str, email: str, mobile: str) -> None:
    validate_name(first_name, last_name)
    validate_email(email)
    validate_length(first_name, NAME_MAX_LENGTH, "First name")
    validate_length(last_name, NAME_MAX_LENGTH, "Last name")
    validate_length(email, EMAIL_MAX_LENGTH, "Email")
    validate_length(mobile, MOBILE_MAX_LENGTH, "Mobile")


def sanitize_column_name(column: str) -> str:
    if column in SORTABLE_COLUMNS:
        return column
    return DEFAULT_SORT_COLUMN
