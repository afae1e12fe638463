"""Input Validation — field rules for registration and post input.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Field checks return a {"message": ...} violation dict, or None when the field is fine
    - Composite validators collect EVERY violation in field order — never first-error-wins
    - An empty list means the input may reach the store

Design Decisions:
    - email-validator for format checks: same library pydantic's EmailStr delegates to,
      run with check_deliverability=False so validation never does DNS IO, and
      test_environment=True so addresses on the reserved .test domain are accepted
    - Whitespace-only values count as empty
"""

from email_validator import EmailNotValidError, validate_email

from postboard.core.domain_types import MIN_TEXT_LENGTH


def is_empty(value: str | None) -> bool:
    return value is None or not value.strip()


def has_min_length(value: str | None, minimum: int = MIN_TEXT_LENGTH) -> bool:
    return value is not None and len(value) >= minimum


def is_email(value: str | None) -> bool:
    if is_empty(value):
        return False
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


# --- Field checks -------------------------------------------------------------

def check_email(email: str | None) -> dict | None:
    if not is_email(email):
        return _violation("E-Mail is invalid.")
    return None


def check_password(password: str | None) -> dict | None:
    if is_empty(password) or not has_min_length(password):
        return _violation("Password too short!")
    return None


def check_name(name: str | None) -> dict | None:
    if is_empty(name):
        return _violation("Name is invalid.")
    return None


def check_title(title: str | None) -> dict | None:
    if is_empty(title) or not has_min_length(title):
        return _violation("Title is invalid.")
    return None


def check_content(content: str | None) -> dict | None:
    if is_empty(content) or not has_min_length(content):
        return _violation("Content is invalid.")
    return None


# --- Composite validators -----------------------------------------------------

def validate_user_input(email: str | None, password: str | None, name: str | None) -> list[dict]:
    """Registration input: email format, password length, non-empty name."""
    return _collect(check_email(email), check_password(password), check_name(name))


def validate_post_input(title: str | None, content: str | None) -> list[dict]:
    """Post create/update input: title and content length."""
    return _collect(check_title(title), check_content(content))


def _collect(*results: dict | None) -> list[dict]:
    return [r for r in results if r is not None]


def _violation(message: str) -> dict:
    """Construct a standard violation record."""
    return {"message": message}
