"""Bidirectional conversions used as request-body transforms.

A conversion turns routing input into a value (``apply``) and a value back
into routing output (``unapply``). Conversions compose with ``map``.
"""

from abc import ABC, abstractmethod


class Conversion[Input, Output](ABC):
    """Abstract ``apply``/``unapply`` pair."""

    @abstractmethod
    def apply(self, input: Input) -> Output:
        """Convert routing input into a value."""
        ...

    @abstractmethod
    def unapply(self, output: Output) -> Input:
        """Convert a value back into routing input."""
        ...

    def map[Next](self, downstream: "Conversion[Output, Next]") -> "MappedConversion[Input, Output, Next]":
        """Chain ``downstream`` after this conversion."""
        return MappedConversion(self, downstream)


class Identity[Value](Conversion[Value, Value]):
    """Conversion that passes values through untouched."""

    def apply(self, input: Value) -> Value:
        return input

    def unapply(self, output: Value) -> Value:
        return output


class MappedConversion[Input, Middle, Output](Conversion[Input, Output]):
    """Two conversions run in sequence; ``unapply`` runs them in reverse."""

    def __init__(self, upstream: Conversion[Input, Middle], downstream: Conversion[Middle, Output]) -> None:
        self.upstream = upstream
        self.downstream = downstream

    def apply(self, input: Input) -> Output:
        return self.downstream.apply(self.upstream.apply(input))

    def unapply(self, output: Output) -> Input:
        return self.upstream.unapply(self.downstream.unapply(output))

    def __repr__(self) -> str:
        return f"MappedConversion({self.upstream!r}, {self.downstream!r})"
