"""Email value object.

Syntax checking and normalization are delegated to email-validator; no
DNS lookups are made. The stored form is lower-cased so that lookups and
the unique index are case-insensitive.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from mindwell_identity.domain.user.exceptions import InvalidEmailError


@dataclass(frozen=True)
class Email:
    """A well-formed, normalized, lower-cased email address."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        try:
            result = validate_email(self.value.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            msg = f"Invalid email format: {self.value} ({e})"
            raise InvalidEmailError(msg) from e

        object.__setattr__(self, "value", result.normalized.lower())

    @classmethod
    def is_valid(cls, value: str) -> bool:
        try:
            cls(value)
        except InvalidEmailError:
            return False
        return True

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
