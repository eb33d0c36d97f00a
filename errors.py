from __future__ import annotations


class MissingVariable(KeyError):
    """Raised when an evaluation needs a variable that has no binding."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Variable '{self.name}' not in bindings"


class UnsupportedDenominator(ValueError):
    """Raised when an operation has no correct form for a non-unit denominator."""

    def __init__(self, operation: str, *denominators: float) -> None:
        shown = ", ".join("%g" % d for d in denominators)
        super().__init__(f"{operation} requires denominator 1 (got {shown})")
        self.operation = operation
        self.denominators = denominators


class InaccurateDenominatorWarning(UserWarning):
    """Issued when a result was computed over a non-unit denominator anyway."""
