"""Abstract syntax tree definitions for funcad documents.

Every node is a frozen dataclass so a parsed :class:`Document` can be shared
freely between consumers (module resolution, evaluation, serialization)
without defensive copies.  Source positions live in the optional ``span``
attribute, which is excluded from equality: two trees that only differ in
layout compare equal.

The three tagged unions (:data:`Statement`, :data:`Expression` and
:data:`CallArgs`) are closed.  Consumers are expected to ``match`` over the
member classes and treat anything else as a programming error.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Union

# ---------------------------------------------------------------------------
# Shared utilities


@dataclass(frozen=True, slots=True)
class Span:
    """Start/end position of a node in the source text.

    Offsets are character indices into the source string; lines and columns
    are 1-based.
    """

    start: int
    end: int
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_tuple(self) -> tuple[int, int, int, int, int, int]:
        """Return a tuple form used by serializers."""

        return (
            self.start,
            self.end,
            self.start_line,
            self.start_column,
            self.end_line,
            self.end_column,
        )

    def join(self, other: Span) -> Span:
        """Return the span covering ``self`` through ``other``."""

        return Span(
            self.start,
            other.end,
            self.start_line,
            self.start_column,
            other.end_line,
            other.end_column,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    """Base class for all AST nodes.

    ``span`` is optional because nodes are also built by hand (tests, the JSON
    deserializer) where no source text exists.
    """

    span: Optional[Span] = field(default=None, compare=False, repr=False)

    @property
    def node_type(self) -> str:
        """Expose a stable node type string used by the serializer."""

        return self.__class__.__name__

    def children(self) -> Iterator[Node]:
        """Yield child nodes in declaration order."""

        for spec in fields(self):
            if spec.name == "span":
                continue
            value = getattr(self, spec.name)
            yield from _iter_possible_children(value)

    def walk(self) -> Iterator[Node]:
        """Depth-first traversal starting at this node."""

        yield self
        for child in self.children():
            yield from child.walk()


class BinaryOperator(str, Enum):
    """Binary arithmetic operators, valued by their tag names."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> BinaryOperator:
        for operator, text in _SYMBOLS.items():
            if text == symbol:
                return operator
        raise ValueError(f"unknown operator symbol '{symbol}'")


_SYMBOLS = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUB: "-",
    BinaryOperator.MUL: "*",
    BinaryOperator.DIV: "/",
}


# ---------------------------------------------------------------------------
# Expressions


@dataclass(frozen=True, slots=True)
class NumberLiteral(Node):
    """Numeric literal; ``lexeme`` is the exact source text."""

    value: float
    lexeme: str


@dataclass(frozen=True, slots=True)
class FuncName(Node):
    """Possibly module-qualified function name such as ``sin`` or ``geo.area``."""

    function: str
    module: Optional[str] = None

    @property
    def qualified(self) -> str:
        if self.module is None:
            return self.function
        return f"{self.module}.{self.function}"


@dataclass(frozen=True, slots=True)
class EmptyArgs(Node):
    """Explicit empty argument list: ``f()``."""


@dataclass(frozen=True, slots=True)
class PositionalArgs(Node):
    """Comma separated positional arguments: ``f(1, 2)``."""

    values: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class NamedArg(Node):
    """Single ``name = value`` pair inside a call."""

    name: str
    value: Expression


@dataclass(frozen=True, slots=True)
class NamedArgs(Node):
    """Named arguments in source order.  Names may repeat."""

    arguments: tuple[NamedArg, ...]

    def as_pairs(self) -> list[tuple[str, Expression]]:
        return [(argument.name, argument.value) for argument in self.arguments]


@dataclass(frozen=True, slots=True)
class FunctionCall(Node):
    """Reference to a function, with or without an argument list.

    ``arguments`` is ``None`` for a bare reference (``pi``) which is distinct
    from an explicit empty call (``pi()``).
    """

    name: FuncName
    arguments: Optional[CallArgs] = None


@dataclass(frozen=True, slots=True)
class Parenthesized(Node):
    """Grouping parentheses around an expression."""

    expression: Expression


@dataclass(frozen=True, slots=True)
class Negation(Node):
    """Unary minus applied to an operand."""

    operand: Expression


@dataclass(frozen=True, slots=True)
class BinaryOp(Node):
    """Binary operation (``left <op> right``)."""

    operator: BinaryOperator
    left: Expression
    right: Expression


# ---------------------------------------------------------------------------
# Statements


@dataclass(frozen=True, slots=True)
class ArgDef(Node):
    """Parameter of a function definition with an optional default value."""

    name: str
    default: Optional[Expression] = None


@dataclass(frozen=True, slots=True)
class FuncDef(Node):
    """Function or constant definition.

    ``parameters`` is ``None`` for a constant (``pi = 3.14``) and a possibly
    empty tuple when a parameter list was written.
    """

    name: str
    parameters: Optional[tuple[ArgDef, ...]]
    body: Expression

    @property
    def is_constant(self) -> bool:
        return self.parameters is None


@dataclass(frozen=True, slots=True)
class Import(Node):
    """``import`` directive naming another document by relative path."""

    up_levels: int
    segments: tuple[str, ...]

    @property
    def alias(self) -> str:
        """Name the imported document is referred to by (its last segment)."""

        return self.segments[-1]

    @property
    def path(self) -> str:
        return "../" * self.up_levels + "/".join(self.segments)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """A complete unit of source, such as one file."""

    statements: tuple[Statement, ...] = ()

    @property
    def imports(self) -> tuple[Import, ...]:
        return tuple(stmt for stmt in self.statements if isinstance(stmt, Import))

    @property
    def definitions(self) -> tuple[FuncDef, ...]:
        return tuple(stmt for stmt in self.statements if isinstance(stmt, FuncDef))

    def find_definition(self, name: str) -> Optional[FuncDef]:
        """Return the first definition called ``name``, if any."""

        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None


Expression = Union[NumberLiteral, FunctionCall, Parenthesized, Negation, BinaryOp]
CallArgs = Union[EmptyArgs, PositionalArgs, NamedArgs]
Statement = Union[Import, FuncDef]


# ---------------------------------------------------------------------------
# Helper functions


def is_node(value: object) -> bool:
    """Return True when ``value`` is an AST node instance."""

    return is_dataclass(value) and isinstance(value, Node)


def iter_nodes(root: Node) -> Iterable[Node]:
    """Convenience wrapper to iterate depth-first over a subtree."""

    return root.walk()


def _iter_possible_children(value: object) -> Iterator[Node]:
    if isinstance(value, Node):
        yield value
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            yield from _iter_possible_children(item)
