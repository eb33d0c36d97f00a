from __future__ import annotations
import math
import numbers
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple
from errors import MissingVariable

PowerKey = Tuple[Tuple[str, int], ...]


def format_number(value: float) -> str:
    return "%.12g" % value


@dataclass(frozen=True)
class Term:
    """coefficient * prod(var ** power). An empty powers map is a constant."""
    coefficient: float = 0.0
    powers: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        clean: Dict[str, int] = {}
        for var, e in dict(self.powers).items():
            if isinstance(e, bool) or not isinstance(e, numbers.Integral):
                if isinstance(e, float) and e.is_integer():
                    e = int(e)
                else:
                    raise ValueError(f"Exponent of '{var}' must be an integer, got {e!r}")
            if e < 0:
                raise ValueError(f"Exponent of '{var}' must be non-negative, got {e}")
            if e != 0:
                clean[var] = int(e)
        object.__setattr__(self, "coefficient", float(self.coefficient))
        object.__setattr__(self, "powers", MappingProxyType(clean))

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from a plain dict
        return (Term, (self.coefficient, dict(self.powers)))

    def __hash__(self) -> int:
        return hash((self.coefficient, self.key()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self.coefficient == other.coefficient and self.key() == other.key()

    @staticmethod
    def constant(value: float) -> Term:
        return Term(value, {})

    def key(self) -> PowerKey:
        # like terms share this key regardless of insertion order of powers
        return tuple(sorted(self.powers.items()))

    def degree(self) -> int:
        return sum(self.powers.values())

    def degree_var(self, var: str) -> int:
        return self.powers.get(var, 0)

    def is_constant(self) -> bool:
        return len(self.powers) == 0

    def is_zero(self) -> bool:
        return self.coefficient == 0

    def variables(self) -> List[str]:
        return list(self.powers.keys())

    def vmap(self) -> Dict[str, int]:
        return dict(self.powers)

    def scale(self, r: float) -> Term:
        return Term(self.coefficient * r, self.vmap())

    def multiply(self, other: Term) -> Term:
        v = self.vmap()
        for k, e in other.powers.items():
            v[k] = v.get(k, 0) + e
        return Term(self.coefficient * other.coefficient, v)

    def __neg__(self) -> Term:
        return Term(-self.coefficient, self.vmap())

    def is_like_term(self, other: Term) -> bool:
        return self.key() == other.key()

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        result = self.coefficient
        for var, e in self.powers.items():
            if var not in bindings:
                raise MissingVariable(var)
            base = float(bindings[var])
            try:
                result *= base ** e
            except OverflowError:
                negative = base < 0 and e % 2 == 1
                result *= -math.inf if negative else math.inf
        return result

    def derivative(self, var: str) -> Term:
        e = self.degree_var(var)
        if e == 0:
            return Term(0.0, {})
        v = self.vmap()
        v[var] = e - 1
        if v[var] == 0:
            del v[var]
        return Term(self.coefficient * e, v)

    def integral(self, var: str) -> Term:
        # exponents are validated non-negative, so e + 1 is never zero
        e = self.degree_var(var)
        v = self.vmap()
        v[var] = e + 1
        return Term(self.coefficient / (e + 1), v)

    def definite_integral(self, lower: float, upper: float, var: str) -> Term:
        integrated = self.integral(var)
        q = integrated.degree_var(var)
        bound_diff = float(upper) ** q - float(lower) ** q
        v = integrated.vmap()
        v.pop(var, None)
        return Term(integrated.coefficient * bound_diff, v)

    def to_dict(self) -> Dict[str, Any]:
        return {"coefficient": self.coefficient, "powers": self.vmap()}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Term:
        return Term(data["coefficient"], data.get("powers") or {})

    def to_string(self) -> str:
        if len(self.powers) == 0:
            return format_number(self.coefficient)
        sign = "-" if self.coefficient < 0 else ""
        abs_coeff = abs(self.coefficient)
        coeff_part = "" if abs_coeff == 1 else format_number(abs_coeff)
        # sorted for stable printing
        vars_part = ""
        for name in sorted(self.powers):
            exp = self.powers[name]
            if exp == 1:
                vars_part += f"{name}"
            else:
                vars_part += f"{name}^{exp}"
        return f"{sign}{coeff_part}{vars_part}"

    def __str__(self) -> str:
        return self.to_string()
