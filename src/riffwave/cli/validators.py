def validate_positive_integer(type_: object, value: int) -> None:
    """Validate that value is greater than zero."""
    if value <= 0:
        raise ValueError("Value must be positive")


def validate_non_negative_integer(type_: object, value: int | None) -> None:
    if value is not None and value < 0:
        raise ValueError("Value must not be negative")


def validate_log_level(type_: object, level: str) -> None:
    if level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"Unknown log level: {level}")
