"""Secure formula evaluation utilities.

A formula block holds one derived column per line, ``target = expression``,
where the expression is arithmetic over numeric literals and ``[Column]``
references. Expressions are tokenized and parsed against a fixed grammar::

    expr  := term (('+' | '-') term)*
    term  := unary (('*' | '/' | '%') unary)*
    unary := ('+' | '-') unary | power
    power := atom ('**' unary)?
    atom  := NUMBER | '[' name ']' | '(' expr ')'

The parser re-emits a fully parenthesized numexpr expression whose only
names are generated bindings for the referenced columns, so nothing but
arithmetic over those columns can ever be evaluated. ``%`` keeps the sign
of the dividend and results round half away from zero.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import numpy as np
import pandas as pd
from numexpr import evaluate as ne_eval

from ..constants import FORMULA_DECIMALS

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|\[(?P<column>[^\]]*)\]"
    r"|(?P<op>\*\*|[-+*/%()])"
    r")"
)


class FormulaError(ValueError):
    """Raised when a formula is malformed or uses anything but arithmetic."""
    pass


@dataclass
class Token:
    kind: str  # number | column | op
    text: str
    pos: int


def tokenize(expr: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    end = len(expr.rstrip())
    while pos < end:
        m = TOKEN_RE.match(expr, pos)
        if m is None or m.end() == pos:
            raise FormulaError(
                f"Unexpected character {expr[pos:].lstrip()[:1]!r} at {pos}"
            )
        kind = m.lastgroup
        tokens.append(Token(kind, m.group(kind), m.start(kind)))
        pos = m.end()
    return tokens


@dataclass
class CompiledFormula:
    source: str
    expression: str
    bindings: Dict[str, str] = field(default_factory=dict)  # local -> column

    def evaluate(self, df: pd.DataFrame) -> np.ndarray:
        n = len(df)
        local_dict = {
            local: column_values(df, col) for local, col in self.bindings.items()
        }
        result = ne_eval(self.expression, local_dict=local_dict, global_dict={})
        result = np.asarray(result, dtype="float64")
        return np.broadcast_to(result, (n,)).copy()


def fmod_expression(lhs: str, rhs: str) -> str:
    """Remainder carrying the sign of the dividend (numexpr's ``%`` floors)."""
    mag = f"(abs({lhs}) % abs({rhs}))"
    return f"where({lhs} < 0, -{mag}, {mag})"


class _Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0
        self.bindings: Dict[str, str] = {}

    def peek(self):
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def take(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise FormulaError("Unexpected end of expression")
        self.i += 1
        return tok

    def accept(self, *ops: str):
        tok = self.peek()
        if tok is not None and tok.kind == "op" and tok.text in ops:
            self.i += 1
            return tok.text
        return None

    def parse(self) -> str:
        if not self.tokens:
            raise FormulaError("Empty expression")
        out = self.expr()
        tok = self.peek()
        if tok is not None:
            raise FormulaError(f"Unexpected {tok.text!r} at {tok.pos}")
        return out

    def expr(self) -> str:
        out = self.term()
        while True:
            op = self.accept("+", "-")
            if op is None:
                return out
            out = f"({out} {op} {self.term()})"

    def term(self) -> str:
        out = self.unary()
        while True:
            op = self.accept("*", "/", "%")
            if op is None:
                return out
            rhs = self.unary()
            if op == "%":
                out = fmod_expression(out, rhs)
            else:
                out = f"({out} {op} {rhs})"

    def unary(self) -> str:
        op = self.accept("+", "-")
        if op is not None:
            return f"({op}{self.unary()})"
        return self.power()

    def power(self) -> str:
        base = self.atom()
        if self.accept("**"):
            return f"({base} ** {self.unary()})"
        return base

    def atom(self) -> str:
        tok = self.take()
        if tok.kind == "number":
            value = float(tok.text)
            if not math.isfinite(value):
                raise FormulaError(f"Number out of range: {tok.text}")
            return repr(value)
        if tok.kind == "column":
            return self.bind(tok.text)
        if tok.text == "(":
            inner = self.expr()
            if not self.accept(")"):
                raise FormulaError("Missing closing parenthesis")
            return inner
        raise FormulaError(f"Unexpected {tok.text!r} at {tok.pos}")

    def bind(self, column: str) -> str:
        for local, col in self.bindings.items():
            if col == column:
                return local
        local = f"col_{len(self.bindings)}"
        self.bindings[local] = column
        return local


def compile_expression(expr: str) -> CompiledFormula:
    parser = _Parser(tokenize(expr))
    return CompiledFormula(expr, parser.parse(), dict(parser.bindings))


def column_values(df: pd.DataFrame, col: str) -> np.ndarray:
    """Numeric view of a column; absent or non-numeric cells read as 0."""
    if col not in df.columns:
        return np.zeros(len(df), dtype="float64")
    values = pd.to_numeric(df[col], errors="coerce").astype("float64")
    values = values.to_numpy()
    return np.where(np.isfinite(values), values, 0.0)


def round_half_up(values: np.ndarray, decimals: int) -> np.ndarray:
    """Round exact halves away from zero (``np.round`` rounds them to even)."""
    scale = 10.0 ** decimals
    return np.sign(values) * np.floor(np.abs(values) * scale + 0.5) / scale


def parse_formulas(text: str) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for line in (text or "").splitlines():
        if "=" not in line:
            continue
        target, expr = line.split("=", 1)
        target = target.strip()
        if target:
            pairs.append((target, expr.strip()))
    return pairs


def evaluate_formula(df: pd.DataFrame, expr: str) -> np.ndarray:
    """Evaluate one expression over every row; failures yield zeros."""
    n = len(df)
    try:
        result = compile_expression(expr).evaluate(df)
    except FormulaError as fe:
        logger.debug("Formula %r rejected: %s", expr, fe)
        return np.zeros(n, dtype="float64")
    except Exception:
        logger.debug("Formula %r failed to evaluate", expr, exc_info=True)
        return np.zeros(n, dtype="float64")
    result = np.where(np.isfinite(result), result, 0.0)
    return round_half_up(result, FORMULA_DECIMALS)


def apply_formulas(df: pd.DataFrame, text: str) -> pd.DataFrame:
    """Add/overwrite derived columns, top to bottom.

    Each line sees the columns written by the lines above it. Returns the
    input frame itself when the formula block is blank.
    """
    if not text or not text.strip():
        return df
    out = df.copy()
    for target, expr in parse_formulas(text):
        out[target] = evaluate_formula(out, expr)
    return out


def validate_formulas(text: str) -> List[str]:
    problems: List[str] = []
    for target, expr in parse_formulas(text):
        try:
            compile_expression(expr)
        except FormulaError as fe:
            problems.append(f"{target}: {fe}")
    return problems


__all__ = [
    "FormulaError",
    "CompiledFormula",
    "tokenize",
    "compile_expression",
    "parse_formulas",
    "evaluate_formula",
    "apply_formulas",
    "validate_formulas",
]
