"""Canonical source printer for funcad ASTs.

The printer emits one statement per line, single spaces around ``=`` and
binary operators and ``", "`` between arguments.  Parsing the printed text of
a parsed document gives back an equal tree.  For trees built by hand whose
nesting contradicts operator precedence, parentheses are added so the text
still denotes the same computation.
"""

from __future__ import annotations

from . import ast
from .precedence import PRECEDENCE, RIGHT_ASSOCIATIVE


def format_document(document: ast.Document) -> str:
    """Return canonical source text for ``document``."""

    return "\n".join(format_node(statement) for statement in document.statements)


def format_node(node: ast.Node) -> str:
    """Return canonical source text for any statement, expression or fragment."""

    match node:
        case ast.Document():
            return format_document(node)
        case ast.Import():
            return f"import {node.path}"
        case ast.FuncDef():
            head = node.name
            if node.parameters is not None:
                head += "(" + ", ".join(format_node(param) for param in node.parameters) + ")"
            return f"{head} = {format_node(node.body)}"
        case ast.ArgDef(default=None):
            return node.name
        case ast.ArgDef():
            return f"{node.name} = {format_node(node.default)}"
        case ast.NumberLiteral():
            return node.lexeme
        case ast.FuncName():
            return node.qualified
        case ast.FunctionCall(arguments=None):
            return node.name.qualified
        case ast.FunctionCall():
            return node.name.qualified + format_node(node.arguments)
        case ast.EmptyArgs():
            return "()"
        case ast.PositionalArgs():
            return "(" + ", ".join(format_node(value) for value in node.values) + ")"
        case ast.NamedArgs():
            return "(" + ", ".join(format_node(argument) for argument in node.arguments) + ")"
        case ast.NamedArg():
            return f"{node.name} = {format_node(node.value)}"
        case ast.Parenthesized():
            return f"({format_node(node.expression)})"
        case ast.Negation():
            operand = format_node(node.operand)
            if isinstance(node.operand, ast.BinaryOp):
                operand = f"({operand})"
            return f"-{operand}"
        case ast.BinaryOp():
            return _format_binary(node)
    raise TypeError(f"cannot format {type(node).__name__}")


def _format_binary(node: ast.BinaryOp) -> str:
    precedence = PRECEDENCE[node.operator]
    left = format_node(node.left)
    if isinstance(node.left, ast.BinaryOp):
        left_precedence = PRECEDENCE[node.left.operator]
        if left_precedence < precedence or (
            left_precedence == precedence and node.operator in RIGHT_ASSOCIATIVE
        ):
            left = f"({left})"
    right = format_node(node.right)
    if isinstance(node.right, ast.BinaryOp):
        right_precedence = PRECEDENCE[node.right.operator]
        if right_precedence < precedence or (
            right_precedence == precedence and node.operator not in RIGHT_ASSOCIATIVE
        ):
            right = f"({right})"
    return f"{left} {node.operator.symbol} {right}"


__all__ = ["format_document", "format_node"]
