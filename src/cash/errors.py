"""Exceptions raised by the Cash value type."""


class CashError(Exception):
    """Base class for every error raised by this package."""


class IncompatibleCurrency(CashError, TypeError):
    """Two Cash operands carry different currencies."""

    def __init__(self, left: object, right: object, operation: str) -> None:
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Incompatible currencies for '{operation}': {left!r} != {right!r}. "
            f"Convert explicitly before combining."
        )


class DivisionByZero(CashError, ZeroDivisionError):
    """Division, modulo or divmod by a zero divisor."""


class InvalidConfiguration(CashError, ValueError):
    """An option or default has a value outside its recognised domain."""

    def __init__(self, option: str, value: object) -> None:
        self.option = option
        self.value = value
        super().__init__(f"Invalid value for '{option}': {value!r}")


class InvalidAmount(CashError, ValueError):
    """The raw amount cannot be read as a decimal number."""
