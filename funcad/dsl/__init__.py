"""Parser, printer and serializer for the funcad formula language."""

from . import ast, atoms, grammar, options, precedence, printer, serializer
from .grammar import DSLSyntaxError, parse_document, parse_expression, parse_statement
from .options import ParserOptions
from .printer import format_document, format_node

__all__ = [
    "DSLSyntaxError",
    "ParserOptions",
    "ast",
    "atoms",
    "format_document",
    "format_node",
    "grammar",
    "options",
    "parse_document",
    "parse_expression",
    "parse_statement",
    "precedence",
    "printer",
    "serializer",
]
