from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union
import numpy as np
from expression import Equation, Product
from fraction import Fraction
from term import Term

logger = logging.getLogger(__name__)

Bounds = Mapping[str, Tuple[float, float]]
Expr = Union[Fraction, Product, Equation]

VERIFY_TOLERANCE = 1e-10


def integral_over_region(expr: Fraction, bounds: Bounds) -> Fraction:
    """Iterated definite integral over a rectangular region.

    Variables are integrated in the order the bounds mapping yields them, and the
    running result is simplified after each step:

        integral_over_region(xy, {'y': (0, 2), 'x': (0, 3)})  # dy then dx
    """
    result = expr
    for var, (lower, upper) in bounds.items():
        result = result.definite_integral(lower, upper, var).simplify()
        logger.debug("integrated %s over [%g, %g]: %d terms left", var, lower, upper, len(result.numerator))
    return result


def integral_value(expr: Fraction, bounds: Bounds) -> float:
    return integral_over_region(expr, bounds).evaluate({})


def partial_derivative(expr: Fraction, var: str, order: int = 1) -> Fraction:
    result = expr
    for _ in range(order):
        result = result.derivative(var).simplify()
    return result


def expand_and_simplify(product: Union[Product, Sequence[Fraction]]) -> Fraction:
    if not isinstance(product, Product):
        product = Product(tuple(product))
    return product.expand().simplify()


def evaluate_at(expr: Expr, point: Mapping[str, float]) -> float:
    return expr.evaluate(point)


def volume_under_surface(surface: Fraction, x_bounds: Tuple[float, float], y_bounds: Tuple[float, float]) -> float:
    """Volume under z = f(x, y) over [x0, x1] x [y0, y1]."""
    return integral_value(surface, {"x": x_bounds, "y": y_bounds})


def area_of_region(x_bounds: Tuple[float, float], y_bounds: Tuple[float, float]) -> float:
    return integral_value(Fraction.one(), {"x": x_bounds, "y": y_bounds})


def circle_area_element(r: str = "r") -> Fraction:
    """Radial integrand r of the polar area element r dr dtheta."""
    return Fraction((Term(1.0, {r: 1}),))


def disk_area(radius: float) -> float:
    return integral_value(circle_area_element(), {"r": (0, radius)}) * 2 * math.pi


def average_value(expr: Fraction, var: str, a: float, b: float) -> float:
    """Mean of f over [a, b]: 1/(b-a) * integral of f."""
    if a == b:
        raise ValueError("Average over an empty interval")
    return integral_value(expr, {var: (a, b)}) / (b - a)


def center_of_mass_1d(density: Fraction, var: str, a: float, b: float) -> float:
    moment = density.expand_with(Fraction((Term(1.0, {var: 1}),)))
    mass = integral_value(density, {var: (a, b)})
    if mass == 0:
        raise ZeroDivisionError("Total mass is zero")
    return integral_value(moment, {var: (a, b)}) / mass


def verify_integration(original: Fraction, integrated: Fraction, var: str) -> bool:
    """Differentiate the antiderivative back and compare structurally with the original."""
    return partial_derivative(integrated, var) == original.simplify()


def numerical_verification(
    expr1: Expr,
    expr2: Expr,
    variables: Sequence[str],
    num_samples: int = 10,
    tol: float = VERIFY_TOLERANCE,
    seed: Any = None,
) -> Dict[str, Any]:
    """Compare two expressions at random points in [-5, 5]^n."""
    rng = np.random.default_rng(seed)
    samples = rng.uniform(-5.0, 5.0, size=(num_samples, len(variables)))
    errors: List[Dict[str, Any]] = []
    for row in samples:
        point = {v: float(x) for v, x in zip(variables, row)}
        val1 = expr1.evaluate(point)
        val2 = expr2.evaluate(point)
        error = abs(val1 - val2)
        if error > tol:
            errors.append({"point": point, "val1": val1, "val2": val2, "error": error})
    return {"passed": len(errors) == 0, "errors": errors}
