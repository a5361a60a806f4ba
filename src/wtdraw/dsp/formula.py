"""Sandboxed formula evaluation for the math generator.

Formulas are plain expressions over the per-sample variables ``x`` (phase,
0..2pi), ``t`` (normalized phase, 0..1), ``i`` (sample index) and ``n`` (frame
size). They are parsed with :mod:`ast` and compiled into a tree of closures
that only knows about arithmetic, comparisons, conditional expressions and a
fixed set of math functions, so no host-language code is ever executed.

Formulas written in JavaScript style keep working: ``Math.sin(x)``,
``Math.PI`` and friends resolve to the same whitelist.

Example Usage
-------------
>>> formula = compile_formula("sin(x) * cos(t * 5)")
>>> formula(x=0.0, t=0.0, i=0, n=2048)
0.0
"""

import ast
import math
import operator
from collections.abc import Callable, Mapping

import numpy as np

from wtdraw.utils import clamp

Node = Callable[[Mapping[str, float]], float]
Formula = Callable[..., float]

VARIABLES = ("x", "t", "i", "n")
CONSTANTS: dict[str, float] = {"pi": math.pi, "e": math.e, "tau": math.tau}

# Namespace accepted as a prefix for functions and constants (``Math.sin``)
ALIAS_NAMESPACE = "Math"


class FormulaError(ValueError):
    """A formula could not be compiled."""


def _sign(value: float) -> float:
    return math.copysign(1.0, value) if value else 0.0


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return clamp(value, low, high)


def _fract(value: float) -> float:
    return value - math.floor(value)


def build_functions(rng: np.random.Generator | None = None) -> dict[str, Callable[..., float]]:
    """Return the whitelist of callable functions.

    Args:
        rng: Random generator backing ``random()``. A fresh default generator
            is created when omitted.
    """
    generator = rng if rng is not None else np.random.default_rng()

    return {
        "sin": math.sin,
        "cos": math.cos,
        "tan": math.tan,
        "asin": math.asin,
        "acos": math.acos,
        "atan": math.atan,
        "atan2": math.atan2,
        "sinh": math.sinh,
        "cosh": math.cosh,
        "tanh": math.tanh,
        "exp": math.exp,
        "log": math.log,
        "log10": math.log10,
        "log2": math.log2,
        "sqrt": math.sqrt,
        "abs": abs,
        "pow": math.pow,
        "floor": math.floor,
        "ceil": math.ceil,
        "round": round,
        "min": min,
        "max": max,
        "sign": _sign,
        "clamp": _clamp,
        "fract": _fract,
        "random": lambda: float(generator.random()),
    }


_BINARY_OPS: dict[type[ast.operator], Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    # math.pow keeps negative bases with fractional exponents real (it raises)
    ast.Pow: math.pow,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: lambda value: float(not value),
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[float, float], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}


class _Compiler:
    def __init__(self, functions: Mapping[str, Callable[..., float]]) -> None:
        self.functions = functions

    def compile(self, node: ast.AST) -> Node:
        match node:
            case ast.Constant(value=bool()) | ast.Constant(value=str()):
                raise FormulaError(f"Unsupported literal: {node.value!r}")
            case ast.Constant(value=int() | float() as value):
                constant = float(value)
                return lambda env: constant
            case ast.Name(id=name):
                return self._name(name)
            case ast.Attribute():
                constant = self._alias_constant(node)
                return lambda env: constant
            case ast.UnaryOp(op=op, operand=operand):
                unary = _UNARY_OPS.get(type(op))
                if unary is None:
                    raise FormulaError(f"Unsupported operator: {type(op).__name__}")
                inner = self.compile(operand)
                return lambda env: unary(inner(env))
            case ast.BinOp(left=left, op=op, right=right):
                binary = _BINARY_OPS.get(type(op))
                if binary is None:
                    raise FormulaError(f"Unsupported operator: {type(op).__name__}")
                lhs, rhs = self.compile(left), self.compile(right)
                return lambda env: binary(lhs(env), rhs(env))
            case ast.BoolOp(op=op, values=values):
                operands = [self.compile(value) for value in values]
                if isinstance(op, ast.And):
                    return lambda env: float(all(operand(env) for operand in operands))
                return lambda env: float(any(operand(env) for operand in operands))
            case ast.Compare(left=left, ops=ops, comparators=comparators):
                return self._compare(left, ops, comparators)
            case ast.IfExp(test=test, body=body, orelse=orelse):
                cond, then, other = self.compile(test), self.compile(body), self.compile(orelse)
                return lambda env: then(env) if cond(env) else other(env)
            case ast.Call():
                return self._call(node)
            case _:
                raise FormulaError(f"Unsupported expression: {type(node).__name__}")

    def _name(self, name: str) -> Node:
        if name in VARIABLES:
            return lambda env: env[name]
        if name in CONSTANTS:
            constant = CONSTANTS[name]
            return lambda env: constant
        raise FormulaError(f"Unknown name: {name}")

    def _alias_name(self, node: ast.Attribute) -> str:
        if not (isinstance(node.value, ast.Name) and node.value.id == ALIAS_NAMESPACE):
            raise FormulaError("Attribute access is only allowed on Math")
        return node.attr

    def _alias_constant(self, node: ast.Attribute) -> float:
        attr = self._alias_name(node)
        constant = CONSTANTS.get(attr.lower())
        if constant is None:
            raise FormulaError(f"Unknown constant: {ALIAS_NAMESPACE}.{attr}")
        return constant

    def _compare(
        self, left: ast.expr, ops: list[ast.cmpop], comparators: list[ast.expr]
    ) -> Node:
        first = self.compile(left)
        chain = []
        for op, comparator in zip(ops, comparators, strict=True):
            compare = _COMPARE_OPS.get(type(op))
            if compare is None:
                raise FormulaError(f"Unsupported comparison: {type(op).__name__}")
            chain.append((compare, self.compile(comparator)))

        def evaluate(env: Mapping[str, float]) -> float:
            current = first(env)
            for compare, operand in chain:
                value = operand(env)
                if not compare(current, value):
                    return 0.0
                current = value
            return 1.0

        return evaluate

    def _call(self, node: ast.Call) -> Node:
        if node.keywords:
            raise FormulaError("Keyword arguments are not supported")

        match node.func:
            case ast.Name(id=name):
                pass
            case ast.Attribute() as attribute:
                name = self._alias_name(attribute)
            case _:
                raise FormulaError("Only named functions can be called")

        function = self.functions.get(name)
        if function is None:
            raise FormulaError(f"Unknown function: {name}")

        args = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                raise FormulaError("Star arguments are not supported")
            args.append(self.compile(arg))

        return lambda env: function(*(arg(env) for arg in args))


def compile_formula(expression: str, rng: np.random.Generator | None = None) -> Formula:
    """Compile a formula into a callable of ``(x, t, i, n)``.

    Args:
        expression: Formula text
        rng: Random generator used by ``random()``

    Returns:
        Function evaluating the formula for one sample

    Raises:
        FormulaError: If the expression is empty, not valid syntax, or uses
            anything outside the whitelist, or is nested too deeply to compile
    """
    if not expression or not expression.strip():
        raise FormulaError("Formula is empty")

    try:
        tree = ast.parse(expression.strip(), mode="eval")
        root = _Compiler(build_functions(rng)).compile(tree.body)
    except SyntaxError as e:
        raise FormulaError(f"Invalid formula syntax: {e.msg}") from e
    except (RecursionError, MemoryError) as e:
        raise FormulaError("Formula is nested too deeply") from e

    def formula(x: float, t: float, i: int, n: int) -> float:
        return root({"x": x, "t": t, "i": i, "n": n})

    return formula
