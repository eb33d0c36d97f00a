from __future__ import annotations
from typing import List, Optional
from fraction import Fraction

# Lexer + shunting-yard producing polynomial fractions
class Tok:
	def __init__(self, kind: str, lex: str = "", num: Optional[float] = None):
		self.kind, self.lex, self.num = kind, lex, num

def _implicit_mul(toks: List[Tok], prev: Optional[Tok]) -> None:
	# "2x", "x(", ")(" and "x y" all multiply
	if prev and prev.kind in ('ID','NUM',')'):
		toks.append(Tok('*', '*'))

def tokenize(expr: str) -> List[Tok]:
	s = expr
	i, n = 0, len(s)
	toks: List[Tok] = []
	prev: Optional[Tok] = None
	while i < n:
		c = s[i]
		if c.isspace():
			i += 1; continue
		if c in "+-*/^()":
			k = c
			i += 1
			if k == '-' and (prev is None or prev.kind in ('+','-','*','/','^','(','NEG')):
				k = 'NEG'
			if k == '(':
				_implicit_mul(toks, prev)
			t = Tok(k, k)
			toks.append(t)
			prev = t; continue
		if c.isdigit() or c == '.':
			j = i
			has_dot = False
			while j < n and (s[j].isdigit() or (s[j]=='.' and not has_dot)):
				has_dot = has_dot or s[j]=='.'
				j += 1
			num_str = s[i:j]
			if num_str == '.':
				raise ValueError(f"Unexpected char {c}")
			_implicit_mul(toks, prev)
			toks.append(Tok('NUM', num_str, float(num_str)))
			i = j; prev = toks[-1]; continue
		if c.isalpha() or c == '_':
			j = i+1
			while j < n and (s[j].isalnum() or s[j]=='_'):
				j += 1
			name = s[i:j]
			# purely alphabetic runs like "xy" are single-letter variables multiplied
			if name.isalpha() and len(name) > 1:
				for ch in name:
					_implicit_mul(toks, prev)
					toks.append(Tok('ID', ch))
					prev = toks[-1]
				i = j; continue
			_implicit_mul(toks, prev)
			toks.append(Tok('ID', name))
			i = j; prev = toks[-1]; continue
		raise ValueError(f"Unexpected char {c}")
	return toks

prec = {'^':4,'NEG':3,'*':2,'/':2,'+':1,'-':1}
right_assoc = {'NEG', '^'}

def to_rpn(toks: List[Tok]) -> List[Tok]:
	out: List[Tok] = []
	op: List[Tok] = []
	for t in toks:
		if t.kind in ('NUM','ID'):
			out.append(t)
		elif t.kind in prec:
			while op and op[-1].kind != '(' and ((t.kind in right_assoc and prec[t.kind] < prec[op[-1].kind]) or (t.kind not in right_assoc and prec[t.kind] <= prec[op[-1].kind])):
				out.append(op.pop())
			op.append(t)
		elif t.kind == '(':
			op.append(t)
		elif t.kind == ')':
			while op and op[-1].kind != '(':
				out.append(op.pop())
			if not op: raise ValueError("Mismatched parens")
			op.pop()
		else:
			raise ValueError("Unknown token kind")
	while op:
		if op[-1].kind == '(': raise ValueError("Mismatched parens")
		out.append(op.pop())
	return out

def _constant_value(f: Fraction, what: str) -> float:
	if not f.is_constant():
		raise ValueError(f"{what} must be constant")
	return f.evaluate({})

def eval_rpn(rpn: List[Tok]) -> Fraction:
	stack: List[Fraction] = []
	for t in rpn:
		if t.kind == 'NUM':
			stack.append(Fraction.constant(t.num))
		elif t.kind == 'ID':
			stack.append(Fraction.variable(t.lex))
		elif t.kind == 'NEG':
			if not stack: raise ValueError("neg missing operand")
			stack.append(-stack.pop())
		elif t.kind in ('+','-','*','/','^'):
			if len(stack) < 2: raise ValueError("binary op missing operands")
			b = stack.pop(); a = stack.pop()
			if t.kind == '+': stack.append(a + b)
			elif t.kind == '-': stack.append(a - b)
			elif t.kind == '*': stack.append(a * b)
			elif t.kind == '/':
				den = _constant_value(b, "Divisor")
				if den == 0: raise ZeroDivisionError("division by zero")
				stack.append(a.scale(1.0 / den).simplify())
			elif t.kind == '^':
				exp = _constant_value(b, "Exponent")
				if not float(exp).is_integer() or exp < 0: raise ValueError("Exponent must be non-negative integer")
				stack.append(a.pow(int(exp)))
		else:
			raise ValueError("Unknown RPN token")
	if len(stack) != 1: raise ValueError("Invalid expression")
	return stack[-1]


def parse_fraction(expr: str) -> Fraction:
	"""Parse polynomial text such as "x^2 - 4x + 4" into a simplified Fraction."""
	toks = tokenize(expr)
	rpn = to_rpn(toks)
	return eval_rpn(rpn).simplify()
