#!/usr/bin/env python3
import logging
from calculus import integral_value
from expression import Product
from polynomial_parser import parse_fraction

def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    f = parse_fraction("x^3y^2 + 2xy - y")
    print(f"d/dx {f} = {f.derivative('x').simplify()}")
    print(f"d/dy {f} = {f.derivative('y').simplify()}")
    prod = Product((parse_fraction("x + 1"), parse_fraction("x + 2")))
    print(f"{prod} = {prod.expand()}")
    print(f"integral of xy over [0,3]x[0,2] = {integral_value(parse_fraction('xy'), {'y': (0, 2), 'x': (0, 3)}):g}")

if __name__ == "__main__":
    main()
