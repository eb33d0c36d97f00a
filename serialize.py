from __future__ import annotations
import json
from typing import Any, Union
from expression import Equation, Product
from fraction import Fraction
from term import Term

Node = Union[Term, Fraction, Product, Equation]

_KINDS = {
    "term": Term.from_dict,
    "fraction": Fraction.from_dict,
    "product": Product.from_list,
    "equation": Equation.from_list,
}


def to_data(obj: Node) -> Any:
    if isinstance(obj, (Term, Fraction)):
        return obj.to_dict()
    if isinstance(obj, (Product, Equation)):
        return obj.to_list()
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def dumps(obj: Node, **kwargs: Any) -> str:
    return json.dumps(to_data(obj), **kwargs)


def loads(text: str, kind: str = "equation") -> Node:
    """Decode JSON produced by dumps; kind is one of term, fraction, product, equation."""
    if kind not in _KINDS:
        raise ValueError(f"Unknown kind '{kind}'")
    return _KINDS[kind](json.loads(text))
