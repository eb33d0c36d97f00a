from __future__ import annotations
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union
from expression import Equation, Product
from fraction import Fraction
from term import Term

Pair = Tuple[float, Mapping[str, int]]


def polynomial(coeffs: Sequence[float], variable: str = "x") -> Equation:
    """Build a univariate polynomial from coefficients, highest degree first.

    polynomial([1, -2, 1], 'x') is x^2 - 2x + 1. Zero coefficients are skipped.
    """
    terms = []
    deg = len(coeffs) - 1
    for i, c in enumerate(coeffs):
        if c == 0:
            continue
        power = deg - i
        terms.append(Term(c, {variable: power} if power > 0 else {}))
    return Equation.of(Fraction(tuple(terms)))


def monomial(coeff: float, powers: Optional[Mapping[str, int]] = None) -> Equation:
    return Equation.of(Fraction((Term(coeff, dict(powers or {})),)))


def sum_of(pairs: Iterable[Pair]) -> Equation:
    """sum_of([(2, {'x': 2}), (3, {'x': 1}), (1, {})]) is 2x^2 + 3x + 1."""
    return Equation.of(Fraction(tuple(Term(c, dict(p)) for c, p in pairs)))


def _as_fraction(factor: Union[Fraction, Equation, Iterable[Pair]]) -> Fraction:
    if isinstance(factor, Fraction):
        return factor
    if isinstance(factor, Equation):
        return factor.first_fraction()
    return Fraction(tuple(Term(c, dict(p)) for c, p in factor))


def product(*factors: Union[Fraction, Equation, Iterable[Pair]]) -> Equation:
    """A single product of the given factors, e.g. product([(1, {}), (1, {'x': 2})], [(1, {}), (-1, {'y': 2})])."""
    return Equation((Product(tuple(_as_fraction(f) for f in factors)),))
