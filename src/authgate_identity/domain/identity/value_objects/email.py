"""Email value object."""

from dataclasses import dataclass

from authgate_identity.exceptions import InvalidEmailError


def normalize_email(value: str) -> str:
    """Canonical form used for storage and lookups."""
    return value.strip().lower()


@dataclass(frozen=True)
class Email:
    """A syntactically plausible, normalized email address."""

    value: str

    def __post_init__(self) -> None:
        normalized = normalize_email(self.value)
        if not normalized:
            raise InvalidEmailError

        local, sep, domain = normalized.rpartition("@")
        if not sep or not local or not domain or any(c.isspace() for c in normalized):
            raise InvalidEmailError

        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
