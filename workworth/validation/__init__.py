"""Input validation package."""

from workworth.validation.validator import InputValidator, parse_decimal

__all__ = ["InputValidator", "parse_decimal"]
