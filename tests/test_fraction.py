"""Tests for Fraction."""

import warnings

import pytest
from errors import InaccurateDenominatorWarning, MissingVariable, UnsupportedDenominator
from fraction import Fraction
from polynomial_parser import parse_fraction
from term import Term


def frac(*terms, denominator=1.0):
    return Fraction(tuple(Term(c, p) for c, p in terms), denominator)


def as_map(f):
    return {t.key(): pytest.approx(t.coefficient) for t in f.numerator}


class TestConstruction:
    """Tests for Fraction invariants."""

    def test_default_denominator(self):
        """Denominator defaults to 1."""
        assert Fraction((Term(1),)).denominator == 1
        assert Fraction((Term(1),)).is_simple()

    def test_zero_denominator_rejected(self):
        """A zero denominator is rejected."""
        with pytest.raises(ValueError):
            Fraction((Term(1),), 0)

    def test_numerator_must_be_terms(self):
        """Only Terms go into the numerator."""
        with pytest.raises(TypeError):
            Fraction((1.0,))

    def test_list_converted(self):
        """Lists are stored as tuples so the fraction stays immutable."""
        terms = [Term(1)]
        f = Fraction(terms)
        terms.append(Term(2))
        assert len(f.numerator) == 1


class TestEvaluate:
    """Tests for Fraction.evaluate."""

    def test_scenario_polynomial(self):
        """x^2 - 4x + 4 is 0 at x=2 and 1 at x=3."""
        f = frac((1, {"x": 2}), (-4, {"x": 1}), (4, {}))
        assert f.evaluate({"x": 2}) == 0
        assert f.evaluate({"x": 3}) == 1

    def test_denominator_divides(self):
        """The numerator sum is divided by the denominator."""
        f = frac((3, {"x": 1}), (1, {}), denominator=2)
        assert f.evaluate({"x": 3}) == 5

    def test_missing_variable_propagates(self):
        """Missing bindings surface from any term."""
        f = frac((1, {"x": 1}), (1, {"y": 1}))
        with pytest.raises(MissingVariable) as exc:
            f.evaluate({"x": 1})
        assert exc.value.name == "y"


class TestDerivative:
    """Tests for Fraction.derivative."""

    def test_scenario_multivariable(self):
        """d/dx and d/dy of x^3y^2 + 2xy - y."""
        f = frac((1, {"x": 3, "y": 2}), (2, {"x": 1, "y": 1}), (-1, {"y": 1}))
        dx = f.derivative("x").simplify()
        assert dx == frac((3, {"x": 2, "y": 2}), (2, {"y": 1}))
        dy = f.derivative("y").simplify()
        assert dy == frac((2, {"x": 3, "y": 1}), (2, {"x": 1}), (-1, {}))

    def test_zero_terms_dropped(self):
        """Terms that differentiate to zero are removed."""
        f = frac((5, {}), (1, {"y": 1}), (2, {"x": 1}))
        assert f.derivative("x") == frac((2, {}))

    def test_non_unit_denominator_fails(self):
        """Without the quotient rule a non-unit denominator is an error."""
        with pytest.raises(UnsupportedDenominator):
            frac((1, {"x": 2}), denominator=3).derivative("x")

    def test_input_unchanged(self):
        """The source fraction is not modified."""
        f = frac((1, {"x": 2}))
        f.derivative("x")
        assert f == frac((1, {"x": 2}))


class TestIntegral:
    """Tests for Fraction.integral and Fraction.definite_integral."""

    def test_indefinite_keeps_denominator(self):
        """Indefinite integration maps over terms and keeps the denominator."""
        f = frac((2, {"x": 1}), (1, {}), denominator=4)
        g = f.integral("x")
        assert g == frac((1, {"x": 2}), (1, {"x": 1}), denominator=4)

    @pytest.mark.parametrize("a,b", [(0, 1), (-2, 3), (1.5, -0.5)])
    def test_fundamental_theorem(self, a, b):
        """Definite integral equals F(b) - F(a)."""
        f = frac((3, {"x": 2}), (-2, {"x": 1}), (5, {}))
        anti = f.integral("x")
        expected = anti.evaluate({"x": b}) - anti.evaluate({"x": a})
        assert f.definite_integral(a, b, "x").evaluate({}) == pytest.approx(expected, abs=1e-9)

    @pytest.mark.parametrize("c", [-3.0, 0.0, 2.5])
    def test_zero_width(self, c):
        """Integrating over [c, c] gives 0."""
        f = frac((3, {"x": 2}), (-2, {"x": 1}), (5, {}))
        assert f.definite_integral(c, c, "x").evaluate({}) == 0

    def test_non_unit_denominator_warns(self):
        """A non-unit denominator still produces a result, with a warning."""
        f = frac((2, {"x": 1}), denominator=2)
        with pytest.warns(InaccurateDenominatorWarning):
            g = f.definite_integral(0, 2, "x")
        assert g.denominator == 2
        assert g.evaluate({}) == pytest.approx(2)

    def test_unit_denominator_silent(self):
        """No warning for simple polynomial fractions."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            frac((2, {"x": 1})).definite_integral(0, 2, "x")


class TestSimplify:
    """Tests for Fraction.simplify."""

    def test_like_term_cancellation(self):
        """5x^2 - 5x^2 + 3 collapses to 3."""
        f = frac((5, {"x": 2}), (-5, {"x": 2}), (3, {}))
        s = f.simplify()
        assert s == frac((3, {}))

    def test_first_occurrence_order(self):
        """Output order follows the first appearance of each term shape."""
        f = frac((1, {"y": 1}), (2, {"x": 1}), (3, {"y": 1}), (4, {}))
        s = f.simplify()
        assert [t.key() for t in s.numerator] == [(("y", 1),), (("x", 1),), ()]
        assert [t.coefficient for t in s.numerator] == [4, 2, 4]

    def test_like_terms_regardless_of_variable_order(self):
        """xy and yx are like terms."""
        f = Fraction((Term(1, {"x": 1, "y": 1}), Term(2, {"y": 1, "x": 1})))
        assert len(f.simplify().numerator) == 1

    def test_near_zero_dropped(self):
        """Coefficients below 1e-10 are treated as zero."""
        f = frac((1e-12, {"x": 1}), (1, {}))
        assert f.simplify() == frac((1, {}))

    def test_idempotent(self):
        """Simplifying twice changes nothing."""
        f = frac((1, {"x": 1}), (2, {}), (3, {"x": 1}), (-2, {}), (1, {"x": 2, "y": 1}))
        once = f.simplify()
        assert once.simplify() == once

    def test_keeps_denominator(self):
        """Denominator survives simplification."""
        assert frac((1, {}), (1, {}), denominator=3).simplify().denominator == 3


class TestExpand:
    """Tests for Fraction.expand_with and arithmetic."""

    def test_distributes(self):
        """(x + 1)(x + 2) = x^2 + 3x + 2."""
        a = frac((1, {"x": 1}), (1, {}))
        b = frac((1, {"x": 1}), (2, {}))
        assert as_map(a.expand_with(b)) == {(("x", 2),): 1, (("x", 1),): 3, (): 2}

    def test_non_unit_denominator_fails(self):
        """Expansion needs both denominators to be 1."""
        a = frac((1, {"x": 1}))
        b = frac((1, {}), denominator=2)
        with pytest.raises(UnsupportedDenominator):
            a.expand_with(b)
        with pytest.raises(UnsupportedDenominator):
            b.expand_with(a)

    def test_add_same_denominator(self):
        """Like terms combine on addition."""
        s = frac((1, {"x": 1})) + frac((2, {"x": 1}), (1, {}))
        assert s == frac((3, {"x": 1}), (1, {}))

    def test_add_cross_multiplies(self):
        """x/2 + 1/3 = (3x + 2)/6."""
        s = frac((1, {"x": 1}), denominator=2) + frac((1, {}), denominator=3)
        assert s.denominator == 6
        assert s.evaluate({"x": 4}) == pytest.approx(4 / 2 + 1 / 3)

    def test_sub_cancels(self):
        """f - f is empty."""
        f = frac((1, {"x": 1}), (1, {}))
        assert (f - f).numerator == ()

    def test_pow(self):
        """(x + 1)^2 = x^2 + 2x + 1 and f^0 = 1."""
        f = frac((1, {"x": 1}), (1, {}))
        assert as_map(f.pow(2)) == {(("x", 2),): 1, (("x", 1),): 2, (): 1}
        assert f.pow(0) == Fraction.one()


class TestUnivariate:
    """Tests for the univariate helpers."""

    def test_coeffs(self):
        """Coefficients come back lowest degree first."""
        f = parse_fraction("2x^3 - x + 5")
        assert f.to_univariate_coeffs("x") == [5, -1, 0, 2]

    def test_multivariate(self):
        """A second variable makes the fraction non-univariate."""
        f = parse_fraction("x + y")
        assert not f.is_univariate("x")
        assert f.to_univariate_coeffs("x") == []


class TestString:
    """Tests for printing."""

    def test_signs(self):
        """Negative terms print with a minus separator."""
        assert str(frac((1, {"x": 2}), (-4, {"x": 1}), (4, {}))) == "x^2 - 4x + 4"

    def test_denominator(self):
        """Non-unit denominators are shown."""
        assert str(frac((1, {"x": 1}), (1, {}), denominator=2)) == "(x + 1)/2"

    def test_empty(self):
        """An empty numerator prints as 0."""
        assert str(Fraction()) == "0"
