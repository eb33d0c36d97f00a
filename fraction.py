from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from errors import InaccurateDenominatorWarning, UnsupportedDenominator
from term import PowerKey, Term, format_number

logger = logging.getLogger(__name__)

# coefficients smaller than this are treated as zero when collecting like terms
EPSILON = 1e-10


@dataclass(frozen=True)
class Fraction:
    """(t1 + t2 + ... + tn) / denominator, with a constant denominator."""
    numerator: Tuple[Term, ...] = field(default_factory=tuple)
    denominator: float = 1.0

    def __post_init__(self) -> None:
        terms = tuple(self.numerator)
        for t in terms:
            if not isinstance(t, Term):
                raise TypeError(f"Fraction numerator expects Term, got {type(t).__name__}")
        if self.denominator == 0:
            raise ValueError("Fraction denominator must be non-zero")
        object.__setattr__(self, "numerator", terms)
        object.__setattr__(self, "denominator", float(self.denominator))

    @staticmethod
    def from_terms(terms: Iterable[Term], denominator: float = 1.0) -> "Fraction":
        return Fraction(tuple(terms), denominator)

    @staticmethod
    def constant(value: float) -> "Fraction":
        return Fraction((Term(value, {}),))

    @staticmethod
    def one() -> "Fraction":
        return Fraction.constant(1.0)

    @staticmethod
    def variable(name: str) -> "Fraction":
        return Fraction((Term(1.0, {name: 1}),))

    @property
    def terms(self) -> Tuple[Term, ...]:
        return self.numerator

    def is_simple(self) -> bool:
        return self.denominator == 1

    def is_zero(self) -> bool:
        return all(t.is_zero() for t in self.numerator)

    def is_constant(self) -> bool:
        return all(t.is_constant() for t in self.numerator)

    def variables(self) -> List[str]:
        seen: Dict[str, None] = {}
        for t in self.numerator:
            for v in t.powers:
                seen.setdefault(v, None)
        return list(seen)

    def is_univariate(self, var: str) -> bool:
        """Check if the fraction depends on no variable other than var."""
        for t in self.numerator:
            for v in t.powers:
                if v != var:
                    return False
        return True

    def to_univariate_coeffs(self, var: str) -> List[float]:
        """Coefficient list [a0, a1, ..., an] of the fraction read as a0 + a1*x + ... + an*x^n.
        Returns an empty list if the fraction is not univariate in var."""
        if not self.is_univariate(var):
            return []
        deg = max(self.degree_var(var), 0)
        coeffs = [0.0] * (deg + 1)
        for t in self.numerator:
            coeffs[t.degree_var(var)] += t.coefficient / self.denominator
        return coeffs

    def degree(self) -> int:
        return max((t.degree() for t in self.numerator), default=0)

    def degree_var(self, var: str) -> int:
        deg = -1
        for t in self.numerator:
            deg = max(deg, t.degree_var(var))
        return deg

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        total = 0.0
        for t in self.numerator:
            total += t.evaluate(bindings)
        return total / self.denominator

    def derivative(self, var: str) -> "Fraction":
        if not self.is_simple():
            # needs the quotient rule, see analysis.quotient_rule_derivative
            raise UnsupportedDenominator("Differentiation", self.denominator)
        terms = [t.derivative(var) for t in self.numerator]
        return Fraction(tuple(t for t in terms if t.coefficient != 0), 1.0)

    def integral(self, var: str) -> "Fraction":
        # denominator is a constant, so it passes through unchanged
        return Fraction(tuple(t.integral(var) for t in self.numerator), self.denominator)

    def definite_integral(self, lower: float, upper: float, var: str) -> "Fraction":
        if not self.is_simple():
            warnings.warn(
                f"Definite integration with denominator {format_number(self.denominator)} may be inaccurate",
                InaccurateDenominatorWarning,
                stacklevel=2,
            )
        terms = tuple(t.definite_integral(lower, upper, var) for t in self.numerator)
        return Fraction(terms, self.denominator)

    def simplify(self, epsilon: Optional[float] = None) -> "Fraction":
        threshold = EPSILON if epsilon is None else epsilon
        # dict keeps first-occurrence order of each powers key
        acc: Dict[PowerKey, float] = {}
        for t in self.numerator:
            k = t.key()
            acc[k] = acc.get(k, 0.0) + t.coefficient
        new_terms: List[Term] = []
        for k, c in acc.items():
            if abs(c) >= threshold:
                new_terms.append(Term(c, dict(k)))
        return Fraction(tuple(new_terms), self.denominator)

    def expand_with(self, other: "Fraction") -> "Fraction":
        if not self.is_simple() or not other.is_simple():
            raise UnsupportedDenominator("Expansion", self.denominator, other.denominator)
        prods: List[Term] = []
        for a in self.numerator:
            for b in other.numerator:
                prods.append(a.multiply(b))
        logger.debug("expanded %d x %d terms", len(self.numerator), len(other.numerator))
        return Fraction(tuple(prods), 1.0).simplify()

    def scale(self, r: float) -> "Fraction":
        return Fraction(tuple(t.scale(r) for t in self.numerator), self.denominator)

    def __neg__(self) -> "Fraction":
        return self.scale(-1.0)

    def __add__(self, rhs: "Fraction") -> "Fraction":
        if self.denominator == rhs.denominator:
            return Fraction(self.numerator + rhs.numerator, self.denominator).simplify()
        # both denominators are constants: a/p + b/q = (aq + bp)/pq
        left = tuple(t.scale(rhs.denominator) for t in self.numerator)
        right = tuple(t.scale(self.denominator) for t in rhs.numerator)
        return Fraction(left + right, self.denominator * rhs.denominator).simplify()

    def __sub__(self, rhs: "Fraction") -> "Fraction":
        return self + (-rhs)

    def __mul__(self, rhs: "Fraction") -> "Fraction":
        return self.expand_with(rhs)

    def pow(self, exp: int) -> "Fraction":
        if exp < 0:
            raise ValueError("Exponent must be non-negative")
        res = Fraction.one()
        for _ in range(exp):
            res = res.expand_with(self)
        return res

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numerator": {"terms": [t.to_dict() for t in self.numerator]},
            "denominator": self.denominator,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Fraction":
        terms = [Term.from_dict(t) for t in data["numerator"]["terms"]]
        return Fraction(tuple(terms), data.get("denominator", 1.0))

    def to_string(self) -> str:
        if len(self.numerator) == 0:
            body = "0"
        else:
            parts: List[str] = []
            for idx, t in enumerate(self.numerator):
                s = t.to_string()
                if s.startswith("-"):
                    body_s = s[1:]
                    if idx == 0:
                        parts.append(f"-{body_s}")
                    else:
                        parts.append(f" - {body_s}")
                else:
                    if idx == 0:
                        parts.append(s)
                    else:
                        parts.append(f" + {s}")
            body = "".join(parts)
        if self.is_simple():
            return body
        return f"({body})/{format_number(self.denominator)}"

    def __str__(self) -> str:
        return self.to_string()
