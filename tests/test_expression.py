"""Tests for Product and Equation."""

import pytest
from errors import MissingVariable, UnsupportedDenominator
from expression import Equation, Product
from fraction import Fraction
from polynomial_parser import parse_fraction
from term import Term


class TestProduct:
    """Tests for Product."""

    def test_scenario_expansion(self):
        """(x + 1)(x + 2) expands to x^2 + 3x + 2 and keeps its value."""
        prod = Product((parse_fraction("x + 1"), parse_fraction("x + 2")))
        expanded = prod.expand().simplify()
        assert {t.key(): t.coefficient for t in expanded.numerator} == {
            (("x", 2),): 1,
            (("x", 1),): 3,
            (): 2,
        }
        assert expanded.evaluate({"x": 5}) == 42
        assert prod.evaluate({"x": 5}) == 42

    @pytest.mark.parametrize("point", [{"x": 0.5, "y": -1.0}, {"x": -3.0, "y": 2.0}, {"x": 10.0, "y": 0.25}])
    def test_expand_then_evaluate(self, point):
        """Expanding does not change the value at any point."""
        prod = Product((parse_fraction("1 + x^2"), parse_fraction("1 - y^2"), parse_fraction("x + 2y")))
        assert prod.expand().evaluate(point) == pytest.approx(prod.evaluate(point))

    def test_empty_product(self):
        """An empty product is 1 both expanded and evaluated."""
        assert Product().expand() == Fraction.one()
        assert Product().evaluate({}) == 1

    def test_single_factor_unchanged(self):
        """A one-factor product expands to that factor as is."""
        f = Fraction((Term(1, {"x": 1}), Term(1, {"x": 1})), 2)
        assert Product((f,)).expand() is f

    def test_expand_non_unit_denominator(self):
        """Expanding a factor with a non-unit denominator fails."""
        prod = Product((parse_fraction("x"), Fraction((Term(1),), 2)))
        with pytest.raises(UnsupportedDenominator):
            prod.expand()

    def test_simplify_within_factors(self):
        """Simplify works factor by factor and keeps the factor count."""
        f = Fraction((Term(1, {"x": 1}), Term(1, {"x": 1})))
        prod = Product((f, f)).simplify()
        assert len(prod) == 2
        assert prod.factors[0] == Fraction((Term(2, {"x": 1}),))

    def test_to_string(self):
        """Factors are wrapped and joined with *."""
        prod = Product((parse_fraction("x + 1"), parse_fraction("y")))
        assert str(prod) == "(x + 1) * (y)"


class TestEquation:
    """Tests for Equation."""

    def test_evaluate_sums_products(self):
        """An equation is the sum of its products."""
        eq = Equation((
            Product((parse_fraction("x"), parse_fraction("y"))),
            Product((parse_fraction("3"),)),
        ))
        assert eq.evaluate({"x": 2, "y": 5}) == 13

    def test_empty_equation(self):
        """An empty equation evaluates to 0."""
        assert Equation().evaluate({}) == 0

    def test_missing_variable(self):
        """Missing bindings propagate out of nested products."""
        eq = Equation((Product((parse_fraction("x"), parse_fraction("y"))),))
        with pytest.raises(MissingVariable):
            eq.evaluate({"x": 1})

    def test_simplify_does_not_merge_products(self):
        """Simplify never combines across products."""
        eq = Equation((Product((parse_fraction("x"),)), Product((parse_fraction("x"),))))
        simplified = eq.simplify()
        assert len(simplified) == 2
        assert simplified == eq

    def test_expand_merges(self):
        """Expand collects every product into one fraction."""
        eq = Equation((
            Product((parse_fraction("x + 1"), parse_fraction("x - 1"))),
            Product((parse_fraction("1"),)),
        ))
        assert eq.expand() == Fraction((Term(1, {"x": 2}),))

    def test_accepts_plain_sequences(self):
        """Nested sequences of fractions become products."""
        eq = Equation(([parse_fraction("x")],))
        assert isinstance(eq.products[0], Product)

    def test_first_fraction(self):
        """Single-fraction equations give their fraction back."""
        f = parse_fraction("x + 1")
        assert Equation.of(f).first_fraction() == f
        with pytest.raises(ValueError):
            Equation().first_fraction()
