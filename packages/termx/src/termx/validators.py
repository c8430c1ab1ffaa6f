"""
Reusable validators for text widgets.

A validator takes the submitted value and raises ValidationError with a
user-facing message when it is not acceptable.
"""
from __future__ import annotations

import re
from typing import Callable

from .errors import ValidationError

TextValidator = Callable[[str], None]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def required(message: str = "This field is required") -> TextValidator:
    def check(value: str) -> None:
        if not value.strip():
            raise ValidationError(message)
    return check


def min_length(minimum: int) -> TextValidator:
    def check(value: str) -> None:
        if len(value) < minimum:
            raise ValidationError(f"Must be at least {minimum} characters")
    return check


def max_length(maximum: int) -> TextValidator:
    def check(value: str) -> None:
        if len(value) > maximum:
            raise ValidationError(f"Must be at most {maximum} characters")
    return check


def email(message: str = "Invalid email format") -> TextValidator:
    def check(value: str) -> None:
        if not _EMAIL_RE.match(value):
            raise ValidationError(message)
    return check


def chain(*validators: TextValidator) -> TextValidator:
    """Run validators in order; the first failure wins."""
    def check(value: str) -> None:
        for validator in validators:
            validator(value)
    return check
