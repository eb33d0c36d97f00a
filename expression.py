"""
Unevaluated containers over fractions.

A Product is a list of fractions to be multiplied, an Equation a list of
products to be summed. Neither carries out its operation until asked to
(expand / evaluate), and simplify only works inside each fraction.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Tuple
from errors import UnsupportedDenominator
from fraction import Fraction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Product:
    factors: Tuple[Fraction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "factors", tuple(self.factors))

    def __len__(self) -> int:
        return len(self.factors)

    def __iter__(self):
        return iter(self.factors)

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        result = 1.0
        for f in self.factors:
            result *= f.evaluate(bindings)
        return result

    def simplify(self) -> "Product":
        return Product(tuple(f.simplify() for f in self.factors))

    def expand(self) -> Fraction:
        """Distribute the factors into one fraction.

        An empty product is the fraction 1; a single factor is returned as is.
        """
        if len(self.factors) == 0:
            return Fraction.one()
        result = self.factors[0]
        for f in self.factors[1:]:
            result = result.expand_with(f)
        return result

    def to_list(self) -> List[Any]:
        return [f.to_dict() for f in self.factors]

    @staticmethod
    def from_list(data: Iterable[Mapping[str, Any]]) -> "Product":
        return Product(tuple(Fraction.from_dict(f) for f in data))

    def to_string(self) -> str:
        return " * ".join(f"({f.to_string()})" for f in self.factors)

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class Equation:
    products: Tuple[Product, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        products = tuple(p if isinstance(p, Product) else Product(tuple(p)) for p in self.products)
        object.__setattr__(self, "products", products)

    @staticmethod
    def of(fraction: Fraction) -> "Equation":
        return Equation((Product((fraction,)),))

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self):
        return iter(self.products)

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        result = 0.0
        for p in self.products:
            result += p.evaluate(bindings)
        return result

    def simplify(self) -> "Equation":
        return Equation(tuple(p.simplify() for p in self.products))

    def expand(self) -> Fraction:
        """Expand every product and collect the results into one simplified fraction."""
        terms = []
        for p in self.products:
            expanded = p.expand()
            if not expanded.is_simple():
                raise UnsupportedDenominator("Equation expansion", expanded.denominator)
            terms.extend(expanded.numerator)
        logger.debug("expanded %d products into %d terms", len(self.products), len(terms))
        return Fraction(tuple(terms), 1.0).simplify()

    def first_fraction(self) -> Fraction:
        """The single fraction of a one-product, one-factor equation (as builders return)."""
        if len(self.products) != 1 or len(self.products[0]) != 1:
            raise ValueError("Equation is not a single fraction")
        return self.products[0].factors[0]

    def to_list(self) -> List[Any]:
        return [p.to_list() for p in self.products]

    @staticmethod
    def from_list(data: Iterable[Iterable[Mapping[str, Any]]]) -> "Equation":
        return Equation(tuple(Product.from_list(p) for p in data))

    def to_string(self) -> str:
        if len(self.products) == 0:
            return "0"
        return " + ".join(p.to_string() for p in self.products)

    def __str__(self) -> str:
        return self.to_string()
