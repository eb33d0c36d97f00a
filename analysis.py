"""
Numerical and rule-based add-ons built on evaluate and derivative.

Everything here composes the core operations: product/quotient rules and
integration by parts return plain fractions (or a numerator/denominator pair),
while critical points, arc length and surface area sample the expression
numerically with numpy.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import numpy as np
from errors import MissingVariable
from fraction import Fraction
from term import Term

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_RANGE = (-10.0, 10.0)
DEFAULT_SAMPLES = 1000
DEFAULT_STEPS = 1000
LIMIT_STEP = 1e-7
LIMIT_TOLERANCE = 1e-5
ROOT_TOLERANCE = 1e-10


# -----------------
# Differentiation and integration rules
# -----------------

@dataclass(frozen=True)
class Quotient:
    """numerator / denominator where both sides are polynomial fractions."""
    numerator: Fraction
    denominator: Fraction

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        den = self.denominator.evaluate(bindings)
        if den == 0:
            raise ZeroDivisionError("denominator evaluates to zero")
        return self.numerator.evaluate(bindings) / den

    def to_string(self) -> str:
        return f"({self.numerator.to_string()})/({self.denominator.to_string()})"

    def __str__(self) -> str:
        return self.to_string()


def product_rule_derivative(factors: Sequence[Fraction], var: str) -> Fraction:
    """d/dx (f1 * f2 * ... * fn) = sum over i of f1 * ... * fi' * ... * fn."""
    if len(factors) == 0:
        return Fraction.constant(0.0).simplify()
    if len(factors) == 1:
        return factors[0].derivative(var)
    terms: List[Term] = []
    for i, f in enumerate(factors):
        part = f.derivative(var)
        for j, g in enumerate(factors):
            if i != j:
                part = part.expand_with(g)
        terms.extend(part.numerator)
    return Fraction(tuple(terms)).simplify()


def quotient_rule_derivative(numerator: Fraction, denominator: Fraction, var: str) -> Quotient:
    """d/dx (f/g) = (f'g - fg') / g^2, kept as a pair since g is not constant."""
    f_prime = numerator.derivative(var)
    g_prime = denominator.derivative(var)
    top = f_prime.expand_with(denominator) - numerator.expand_with(g_prime)
    return Quotient(top, denominator.expand_with(denominator))


@dataclass(frozen=True)
class PartsResult:
    """integral(u dv) = uv - integral(v du)."""
    uv: Fraction
    v_du: Fraction
    var: str

    def antiderivative(self) -> Fraction:
        return self.uv - self.v_du.integral(self.var)


def integration_by_parts(u: Fraction, dv: Fraction, var: str) -> PartsResult:
    du = u.derivative(var)
    v = dv.integral(var)
    return PartsResult(u.expand_with(v), v.expand_with(du), var)


# -----------------
# Series and limits
# -----------------

@dataclass(frozen=True)
class TaylorSeries:
    series: Fraction
    var: str
    center: float
    order: int

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        return self.series.evaluate(bindings)


def taylor_series(func: Fraction, var: str, center: float = 0.0, order: int = 5) -> TaylorSeries:
    """sum over n < order of f^(n)(a)/n! * (x - a)^n, expanded into a polynomial in x."""
    shift = Fraction((Term(1.0, {var: 1}), Term(-center, {}))).simplify()
    terms: List[Term] = []
    current = func
    for n in range(order):
        value = current.evaluate({var: center})
        if abs(value) > ROOT_TOLERANCE:
            terms.extend(shift.pow(n).scale(value / math.factorial(n)).numerator)
        if n < order - 1:
            current = current.derivative(var)
    return TaylorSeries(Fraction(tuple(terms)).simplify(), var, center, order)


@dataclass(frozen=True)
class Limit:
    value: Optional[float]
    method: str
    exists: bool
    left: Optional[float] = None
    right: Optional[float] = None


Limitable = Union[Fraction, Quotient]


def _substitute(expr: Limitable, bindings: Mapping[str, float]) -> Optional[float]:
    """Value at the point, or None when direct substitution gives no finite number."""
    if isinstance(expr, Quotient):
        den = expr.denominator.evaluate(bindings)
        if den == 0:
            return None
        value = expr.numerator.evaluate(bindings) / den
    else:
        value = expr.evaluate(bindings)
    return value if math.isfinite(value) else None


def compute_limit(
    expr: Limitable,
    var: str,
    approaches: float,
    step: float = LIMIT_STEP,
    tol: float = LIMIT_TOLERANCE,
    fixed: Optional[Mapping[str, float]] = None,
) -> Limit:
    """Limit by direct substitution, falling back to a two-sided numeric approach."""
    point = dict(fixed or {})
    direct = _substitute(expr, {**point, var: approaches})
    if direct is not None:
        return Limit(direct, "direct substitution", True)
    left = _substitute(expr, {**point, var: approaches - step})
    right = _substitute(expr, {**point, var: approaches + step})
    if left is None or right is None or abs(left - right) >= tol:
        return Limit(None, "limits differ", False, left, right)
    # a finite limit must hold still as the step shrinks; poles keep growing
    inner_left = _substitute(expr, {**point, var: approaches - step / 10})
    inner_right = _substitute(expr, {**point, var: approaches + step / 10})
    if (
        inner_left is None
        or inner_right is None
        or abs(inner_left - left) >= tol
        or abs(inner_right - right) >= tol
    ):
        return Limit(None, "diverges", False, left, right)
    return Limit((left + right) / 2, "two-sided approach", True, left, right)


# -----------------
# Roots, critical points, curve sketching
# -----------------

def find_root(
    f: Callable[[float], float], a: float, b: float, tol: float = 1e-12, max_iter: int = 200
) -> Optional[float]:
    """Find a root of f in [a, b] using Brent's method.

    Requires a sign change between the endpoints; returns None otherwise.
    """
    if a >= b:
        return None
    fa = f(a)
    fb = f(b)
    if fa == 0:
        return a
    if fb == 0:
        return b
    if fa * fb > 0:
        return None
    # keep |fb| <= |fa| so b is the better guess
    if abs(fa) < abs(fb):
        a, b = b, a
        fa, fb = fb, fa
    c = a
    fc = fa
    mflag = True
    d = a
    for _ in range(max_iter):
        if abs(fb) < tol or abs(b - a) < tol:
            return b
        if fa != fc and fb != fc:
            # inverse quadratic interpolation
            s = (
                (a * fb * fc) / ((fa - fb) * (fa - fc))
                + (b * fa * fc) / ((fb - fa) * (fb - fc))
                + (c * fa * fb) / ((fc - fa) * (fc - fb))
            )
        else:
            # secant
            s = b - fb * (b - a) / (fb - fa)
        lo, hi = sorted(((3 * a + b) / 4, b))
        if (
            not (lo < s < hi)
            or (mflag and abs(s - b) >= abs(b - c) / 2)
            or (not mflag and abs(s - b) >= abs(c - d) / 2)
            or (mflag and abs(b - c) < tol)
            or (not mflag and abs(c - d) < tol)
        ):
            s = (a + b) / 2.0
            mflag = True
        else:
            mflag = False
        fs = f(s)
        d = c
        c = b
        fc = fb
        if fa * fs < 0:
            b = s
            fb = fs
        else:
            a = s
            fa = fs
        if abs(fa) < abs(fb):
            a, b = b, a
            fa, fb = fb, fa
    if abs(fb) < tol:
        return b
    return None


def _dedupe(roots: List[float], tol: float) -> List[float]:
    if not roots:
        return []
    roots = sorted(roots)
    unique = [float(roots[0])]
    for r in roots[1:]:
        if abs(r - unique[-1]) > tol:
            unique.append(float(r))
    return unique


def _polynomial_roots(expr: Fraction, var: str, lo: float, hi: float, tol: float) -> List[float]:
    coeffs = [float(c) for c in reversed(expr.to_univariate_coeffs(var))]
    while coeffs and abs(coeffs[0]) < ROOT_TOLERANCE:
        coeffs.pop(0)
    if len(coeffs) <= 1:
        # zero or non-zero constant: no isolated roots
        return []
    roots = []
    for root in np.roots(coeffs):
        if abs(root.imag) < tol:
            r = float(root.real)
            if lo <= r <= hi:
                roots.append(r)
    return _dedupe(roots, tol)


def _bracketed_roots(
    expr: Fraction, var: str, lo: float, hi: float, fixed: Mapping[str, float], num_samples: int, tol: float
) -> List[float]:
    def f(x: float) -> float:
        return expr.evaluate({**fixed, var: x})

    xs = np.linspace(lo, hi, num_samples + 1)
    ys = [f(float(x)) for x in xs]
    roots = []
    for i in range(len(xs) - 1):
        if ys[i] == 0:
            roots.append(float(xs[i]))
        elif ys[i] * ys[i + 1] < 0:
            r = find_root(f, float(xs[i]), float(xs[i + 1]))
            if r is not None:
                roots.append(r)
    if ys[-1] == 0:
        roots.append(float(xs[-1]))
    return _dedupe(roots, tol)


def find_roots(
    expr: Fraction,
    var: str,
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    num_samples: int = DEFAULT_SAMPLES,
    fixed: Optional[Mapping[str, float]] = None,
    tol: float = 1e-7,
) -> List[float]:
    """Real roots of expr = 0 in the closed search range, in ascending order.

    Univariate fractions go through numpy's companion-matrix root finder; when other
    variables are pinned through `fixed` the range is sampled for sign changes and
    each bracket refined with Brent's method.
    """
    lo, hi = search_range
    if lo >= hi:
        return []
    missing = [v for v in expr.variables() if v != var and v not in (fixed or {})]
    if missing:
        raise MissingVariable(missing[0])
    if expr.is_univariate(var):
        logger.debug("polynomial root path for %s", var)
        return _polynomial_roots(expr, var, lo, hi, tol)
    logger.debug("sampling root path for %s over %d samples", var, num_samples)
    return _bracketed_roots(expr, var, lo, hi, dict(fixed or {}), num_samples, tol)


@dataclass(frozen=True)
class CriticalPoints:
    points: List[float]
    derivative: Fraction


def find_critical_points(
    func: Fraction,
    var: str,
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    num_samples: int = DEFAULT_SAMPLES,
    fixed: Optional[Mapping[str, float]] = None,
) -> CriticalPoints:
    """Points in the search range where f'(x) = 0."""
    derivative = func.derivative(var)
    return CriticalPoints(find_roots(derivative, var, search_range, num_samples, fixed), derivative)


@dataclass(frozen=True)
class Extremum:
    point: float
    value: float
    second_derivative: float
    kind: str


def second_derivative_test(func: Fraction, var: str, point: float) -> Extremum:
    second = func.derivative(var).derivative(var)
    f_value = func.evaluate({var: point})
    f2 = second.evaluate({var: point})
    if f2 > 0:
        kind = "local minimum"
    elif f2 < 0:
        kind = "local maximum"
    else:
        kind = "inconclusive"
    return Extremum(point, f_value, f2, kind)


@dataclass(frozen=True)
class CurveAnalysis:
    critical_points: List[float]
    extrema: List[Extremum]
    inflection_points: List[float]
    first_derivative: Fraction
    second_derivative: Fraction


def analyze_curve(
    func: Fraction, var: str, search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE
) -> CurveAnalysis:
    first = func.derivative(var)
    second = first.derivative(var)
    critical = find_roots(first, var, search_range)
    extrema = [second_derivative_test(func, var, p) for p in critical]
    inflections = find_roots(second, var, search_range)
    return CurveAnalysis(critical, extrema, inflections, first, second)


# -----------------
# Quadrature
# -----------------

def _trapezoid(values: np.ndarray, a: float, b: float) -> float:
    h = (b - a) / (len(values) - 1)
    return float(h * (values.sum() - (values[0] + values[-1]) / 2.0))


def arc_length(func: Fraction, var: str, a: float, b: float, num_steps: int = DEFAULT_STEPS) -> float:
    """Length of y = f(x) on [a, b]: integral of sqrt(1 + f'(x)^2)."""
    derivative = func.derivative(var)
    xs = np.linspace(a, b, num_steps + 1)
    slopes = np.array([derivative.evaluate({var: float(x)}) for x in xs])
    return _trapezoid(np.sqrt(1.0 + slopes ** 2), a, b)


def surface_area_of_revolution(
    func: Fraction, var: str, a: float, b: float, num_steps: int = DEFAULT_STEPS
) -> float:
    """Area swept by y = f(x) on [a, b] around the x axis: 2*pi * integral of |y| sqrt(1 + y'^2)."""
    derivative = func.derivative(var)
    xs = np.linspace(a, b, num_steps + 1)
    ys = np.array([func.evaluate({var: float(x)}) for x in xs])
    slopes = np.array([derivative.evaluate({var: float(x)}) for x in xs])
    return 2.0 * math.pi * _trapezoid(np.abs(ys) * np.sqrt(1.0 + slopes ** 2), a, b)


# -----------------
# Multivariable
# -----------------

def gradient(func: Fraction, variables: Sequence[str]) -> Dict[str, Fraction]:
    return {v: func.derivative(v) for v in variables}


def directional_derivative(
    func: Fraction,
    variables: Sequence[str],
    point: Mapping[str, float],
    direction: Mapping[str, float],
) -> float:
    """grad f . v at the point. The direction is used as given, not normalised."""
    grad = gradient(func, variables)
    return float(sum(grad[v].evaluate(point) * direction[v] for v in variables))


@dataclass(frozen=True)
class LagrangeSystem:
    """grad f = lambda * grad g together with g = 0."""
    objective_gradient: Dict[str, Fraction]
    constraint_gradient: Dict[str, Fraction]
    constraint: Fraction
    variables: Tuple[str, ...] = field(default_factory=tuple)

    def residual(self, point: Mapping[str, float], lam: float) -> np.ndarray:
        rows = [
            self.objective_gradient[v].evaluate(point) - lam * self.constraint_gradient[v].evaluate(point)
            for v in self.variables
        ]
        rows.append(self.constraint.evaluate(point))
        return np.array(rows)


def lagrange_system(objective: Fraction, constraint: Fraction, variables: Sequence[str]) -> LagrangeSystem:
    return LagrangeSystem(
        gradient(objective, variables),
        gradient(constraint, variables),
        constraint,
        tuple(variables),
    )
