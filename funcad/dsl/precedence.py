"""Precedence climbing over flat operand/operator sequences.

The expression grammar is recognised in one linear scan that yields operands
(already wrapped in their prefix negations) interleaved with binary
operators.  This module turns that flat sequence into a nested tree, driven
entirely by :data:`PRECEDENCE` and :data:`RIGHT_ASSOCIATIVE`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from . import ast

PRECEDENCE: dict[ast.BinaryOperator, int] = {
    ast.BinaryOperator.ADD: 1,
    ast.BinaryOperator.SUB: 1,
    ast.BinaryOperator.MUL: 2,
    ast.BinaryOperator.DIV: 2,
}

# Every current operator is left-associative.
RIGHT_ASSOCIATIVE: frozenset[ast.BinaryOperator] = frozenset()


@dataclass(slots=True)
class FlatExpression:
    """Output of the linear scan: ``operands[i] operators[i] operands[i + 1]``."""

    operands: list[ast.Expression] = field(default_factory=list)
    operators: list[ast.BinaryOperator] = field(default_factory=list)

    def push_operand(self, operand: ast.Expression) -> None:
        self.operands.append(operand)

    def push_operator(self, operator: ast.BinaryOperator) -> None:
        self.operators.append(operator)


def build_tree(flat: FlatExpression) -> ast.Expression:
    """Return the expression tree for ``flat``."""

    return resolve(flat.operands, flat.operators)


def resolve(
    operands: Sequence[ast.Expression], operators: Sequence[ast.BinaryOperator]
) -> ast.Expression:
    """Nest ``operands`` and ``operators`` by precedence and associativity."""

    if not operands:
        raise ValueError("expression needs at least one operand")
    if len(operands) != len(operators) + 1:
        raise ValueError(
            f"{len(operands)} operands cannot be joined by {len(operators)} operators"
        )
    tree, consumed = _climb(operands, operators, 0, 1)
    if consumed != len(operators):  # pragma: no cover - table misconfiguration
        raise ValueError("operator precedence table left operators unconsumed")
    return tree


def _climb(
    operands: Sequence[ast.Expression],
    operators: Sequence[ast.BinaryOperator],
    position: int,
    min_precedence: int,
) -> tuple[ast.Expression, int]:
    left = operands[position]
    while position < len(operators) and PRECEDENCE[operators[position]] >= min_precedence:
        operator = operators[position]
        precedence = PRECEDENCE[operator]
        next_min = precedence if operator in RIGHT_ASSOCIATIVE else precedence + 1
        right, position = _climb(operands, operators, position + 1, next_min)
        left = _combine(operator, left, right)
    return left, position


def _combine(
    operator: ast.BinaryOperator, left: ast.Expression, right: ast.Expression
) -> ast.BinaryOp:
    span = None
    if left.span is not None and right.span is not None:
        span = left.span.join(right.span)
    return ast.BinaryOp(operator, left, right, span=span)


__all__ = ["FlatExpression", "PRECEDENCE", "RIGHT_ASSOCIATIVE", "build_tree", "resolve"]
