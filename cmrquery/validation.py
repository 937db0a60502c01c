"""Validation helpers for queries.

Problems are collected into a ``ValidationResult`` instead of raising on the
first one, so a caller can see everything that is wrong with a query before
any request reaches CMR.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional


@dataclass
class ValidationError:
    """A single problem with a query attribute.

    Attributes:
        field: Name of the offending attribute or parameter
        message: What is wrong with it
        value: The rejected value (optional)
    """

    field: str
    message: str
    value: Optional[Any] = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating a query.

    Attributes:
        is_valid: False as soon as one error has been added
        errors: The collected errors
    """

    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)

    def add_error(
        self, field: str, message: str, value: Optional[Any] = None
    ) -> "ValidationResult":
        """Record an error and mark the result invalid.

        Returns:
            self for method chaining
        """
        self.errors.append(ValidationError(field=field, message=message, value=value))
        self.is_valid = False
        return self

    def __str__(self) -> str:
        if self.is_valid:
            return "Validation passed"
        error_strs = [str(e) for e in self.errors]
        return "Validation failed:\n  " + "\n  ".join(error_strs)

    def raise_if_invalid(self) -> None:
        """Raise a ValueError listing every error, if there are any.

        Raises:
            ValueError: If validation failed
        """
        if not self.is_valid:
            raise ValueError(str(self))


def validate_choice(
    value: Any,
    choices: Iterable[Any],
    field_name: str,
    result: Optional[ValidationResult] = None,
) -> ValidationResult:
    """Validate that a value is one of a fixed set of choices.

    Args:
        value: The value to validate
        choices: The accepted values
        field_name: The name of the field being validated
        result: An existing ValidationResult to add to (creates new if None)

    Returns:
        The ValidationResult (existing or new)
    """
    if result is None:
        result = ValidationResult()

    choices = list(choices)
    if value not in choices:
        result.add_error(
            field=field_name,
            message=f"must be one of {', '.join(map(str, choices))}",
            value=value,
        )
    return result


def validate_prefix(
    values: Iterable[str],
    prefixes: Iterable[str],
    field_name: str,
    result: Optional[ValidationResult] = None,
) -> ValidationResult:
    """Validate that every value starts with one of the given prefixes.

    An empty set of prefixes accepts everything.

    Args:
        values: The strings to validate
        prefixes: Accepted leading characters
        field_name: The name of the field being validated
        result: An existing ValidationResult to add to (creates new if None)

    Returns:
        The ValidationResult (existing or new)
    """
    if result is None:
        result = ValidationResult()

    prefixes = tuple(prefixes)
    if not prefixes:
        return result

    for value in values:
        if not isinstance(value, str) or not value.startswith(prefixes):
            result.add_error(
                field=field_name,
                message=f"must start with one of {', '.join(prefixes)}",
                value=value,
            )
    return result
