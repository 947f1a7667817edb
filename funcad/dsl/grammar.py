"""Parser implementation for the funcad formula language.

The parser is scannerless: atoms are recognised directly on the source text
by :mod:`funcad.dsl.atoms` because the same characters tokenize differently
depending on context (``/`` divides inside an expression but separates path
segments after ``import``).  Alternatives are tried in a fixed order with
backtracking, PEG style.  Every failed attempt records what it expected and
where, so a rejected document reports the farthest position any alternative
reached rather than the first one that gave up.

Expressions are recognised in a single linear pass into a flat
operand/operator sequence and handed to :mod:`funcad.dsl.precedence` to be
nested.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import replace
from typing import Callable, Iterable, NoReturn, Optional, TypeVar

from funcad.telemetry.logger import get_logger

from . import ast, atoms, precedence
from .options import ParserOptions

_LOGGER = get_logger("funcad.dsl.grammar")

T = TypeVar("T")

IMPORT_KEYWORD = "import"
OPERATOR_SYMBOLS = tuple(operator.symbol for operator in ast.BinaryOperator)

EXPECT_IDENTIFIER = "identifier"
EXPECT_NUMBER = "number"
EXPECT_FUNC_NAME = "function name"
EXPECT_FILE_NAME = "file name"
EXPECT_END = "end of input"
EXPECT_SHALLOWER = "shallower nesting"

_IDENTIFIER_CHARS = atoms.LETTERS | atoms.DIGITS


class DSLSyntaxError(RuntimeError):
    """The single error raised for text that is not a valid document.

    ``offset`` is a character index into the source, ``byte_offset`` the same
    position in its UTF-8 encoding; ``line`` and ``column`` are 1-based.
    ``expected`` lists the token or construct kinds that would have been
    accepted at that position.
    """

    def __init__(
        self,
        message: str,
        *,
        offset: int,
        line: int,
        column: int,
        byte_offset: Optional[int] = None,
        expected: Iterable[str] = (),
        filename: str = "<funcad>",
    ) -> None:
        super().__init__(f"{filename}:{line}:{column}: {message}")
        self.message = message
        self.offset = offset
        self.byte_offset = offset if byte_offset is None else byte_offset
        self.line = line
        self.column = column
        self.expected = frozenset(expected)
        self.filename = filename


class _NoMatch(Exception):
    """Signals that the alternative being tried does not match here."""


class Parser:
    """Recursive-descent parser over one source buffer.

    A parser instance holds the cursor and failure bookkeeping for a single
    parse and must not be shared; the module level ``parse_*`` functions
    create a fresh one per call.
    """

    def __init__(
        self,
        source: str,
        filename: str = "<funcad>",
        options: Optional[ParserOptions] = None,
    ) -> None:
        if not isinstance(source, str):
            raise TypeError(f"source must be str, not {type(source).__name__}")
        self.source = source
        self.filename = filename
        self.options = options or ParserOptions()
        self.length = len(source)
        self.index = 0
        self.depth = 0
        self._farthest = 0
        self._expected: set[str] = set()
        self._line_starts = [0]
        for position, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(position + 1)

    # ------------------------------------------------------------------
    # Entry points

    def parse_document(self) -> ast.Document:
        return self._run(self._parse_document)

    def parse_statement(self) -> ast.Statement:
        return self._run(self._parse_statement)

    def parse_expression(self) -> ast.Expression:
        return self._run(self._parse_expression)

    def _run(self, rule: Callable[[], T]) -> T:
        try:
            result = rule()
        except _NoMatch:
            raise self._error() from None
        except RecursionError:
            # Named arguments in trailing operands cost the most frames per
            # level; on a small interpreter stack they can run out first.
            raise self._nesting_error("interpreter recursion limit") from None
        self._skip_whitespace()
        if self.index < self.length:
            self._note(EXPECT_END)
            raise self._error()
        return result

    # ------------------------------------------------------------------
    # Position and failure helpers

    def _position(self, offset: int) -> tuple[int, int]:
        line_index = bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def _span(self, start: int, end: int) -> ast.Span:
        start_line, start_column = self._position(start)
        end_line, end_column = self._position(end)
        return ast.Span(start, end, start_line, start_column, end_line, end_column)

    def _note(self, expected: str, position: Optional[int] = None) -> None:
        at = self.index if position is None else position
        if at > self._farthest:
            self._farthest = at
            self._expected = {expected}
        elif at == self._farthest:
            self._expected.add(expected)

    def _fail(self, expected: str, position: Optional[int] = None) -> NoReturn:
        self._note(expected, position)
        raise _NoMatch()

    def _error(self) -> DSLSyntaxError:
        offset = self._farthest
        line, column = self._position(offset)
        expected = sorted(self._expected)
        if offset < self.length:
            found = repr(self.source[offset])
        else:
            found = EXPECT_END
        if expected:
            message = f"expected {_describe(expected)}, found {found}"
        else:
            message = f"unexpected {found}"
        _LOGGER.debug(
            "syntax error | file=%s line=%d column=%d expected=%s",
            self.filename,
            line,
            column,
            expected,
        )
        return DSLSyntaxError(
            message,
            offset=offset,
            line=line,
            column=column,
            byte_offset=len(self.source[:offset].encode("utf-8")),
            expected=expected,
            filename=self.filename,
        )

    def _nesting_error(self, limit: str) -> DSLSyntaxError:
        offset = min(self.index, self.length)
        line, column = self._position(offset)
        _LOGGER.debug(
            "nesting limit | file=%s line=%d column=%d limit=%s",
            self.filename,
            line,
            column,
            limit,
        )
        return DSLSyntaxError(
            f"expression nested too deeply ({limit})",
            offset=offset,
            line=line,
            column=column,
            byte_offset=len(self.source[:offset].encode("utf-8")),
            expected=(EXPECT_SHALLOWER,),
            filename=self.filename,
        )

    # ------------------------------------------------------------------
    # Cursor helpers

    def _skip_whitespace(self) -> None:
        while self.index < self.length and self.source[self.index].isspace():
            self.index += 1

    def _attempt(self, rule: Callable[..., T], *args: object) -> Optional[T]:
        saved = self.index
        try:
            return rule(*args)
        except _NoMatch:
            self.index = saved
            return None

    def _literal(self, text: str) -> int:
        self._skip_whitespace()
        if not self.source.startswith(text, self.index):
            self._fail(f"'{text}'")
        start = self.index
        self.index += len(text)
        return start

    def _keyword(self, word: str) -> int:
        self._skip_whitespace()
        start = self.index
        end = start + len(word)
        follower = self.source[end : end + 1]
        if not self.source.startswith(word, start) or follower in _IDENTIFIER_CHARS:
            self._fail(f"'{word}'")
        self.index = end
        return start

    def _atom(
        self, matcher: Callable[[str, int], Optional[atoms.AtomMatch]], expected: str
    ) -> atoms.AtomMatch:
        self._skip_whitespace()
        found = matcher(self.source, self.index)
        if found is None:
            self._fail(expected)
        self.index = found.end
        return found

    def _separated(self, item: Callable[[], T]) -> list[T]:
        items = [item()]
        while self._attempt(self._literal, ",") is not None:
            items.append(item())
        return items

    def _first_of(self, *rules: Callable[[], T]) -> T:
        for rule in rules:
            result = self._attempt(rule)
            if result is not None:
                return result
        raise _NoMatch()

    # ------------------------------------------------------------------
    # Document and statements

    def _parse_document(self) -> ast.Document:
        statements: list[ast.Statement] = []
        while True:
            self._skip_whitespace()
            if self.index >= self.length:
                break
            statement = self._attempt(self._parse_statement)
            if statement is None:
                self._note(EXPECT_END)
                raise _NoMatch()
            statements.append(statement)
        _LOGGER.debug(
            "parsed document | file=%s statements=%d", self.filename, len(statements)
        )
        return ast.Document(tuple(statements), span=self._span(0, self.length))

    def _parse_statement(self) -> ast.Statement:
        return self._first_of(self._parse_import, self._parse_func_def)

    def _parse_import(self) -> ast.Import:
        start = self._keyword(IMPORT_KEYWORD)
        path = self._atom(atoms.match_file_name, EXPECT_FILE_NAME)
        return ast.Import(path.up_levels, path.parts, span=self._span(start, path.end))

    def _parse_func_def(self) -> ast.FuncDef:
        name = self._atom(atoms.match_identifier, EXPECT_IDENTIFIER)
        parameters = self._attempt(self._parse_parameters)
        self._literal("=")
        body = self._parse_expression()
        return ast.FuncDef(
            name.text, parameters, body, span=self._span(name.start, self.index)
        )

    def _parse_parameters(self) -> tuple[ast.ArgDef, ...]:
        self._literal("(")
        return self._first_of(
            self._parse_no_parameters,
            self._parse_default_parameters,
            self._parse_plain_parameters,
        )

    def _parse_no_parameters(self) -> tuple[ast.ArgDef, ...]:
        self._literal(")")
        return ()

    def _parse_default_parameters(self) -> tuple[ast.ArgDef, ...]:
        parameters = self._separated(self._parse_default_parameter)
        self._literal(")")
        return tuple(parameters)

    def _parse_plain_parameters(self) -> tuple[ast.ArgDef, ...]:
        parameters = self._separated(self._parse_plain_parameter)
        self._literal(")")
        return tuple(parameters)

    def _parse_default_parameter(self) -> ast.ArgDef:
        name = self._atom(atoms.match_identifier, EXPECT_IDENTIFIER)
        self._literal("=")
        default = self._parse_expression()
        return ast.ArgDef(name.text, default, span=self._span(name.start, self.index))

    def _parse_plain_parameter(self) -> ast.ArgDef:
        name = self._atom(atoms.match_identifier, EXPECT_IDENTIFIER)
        return ast.ArgDef(name.text, span=self._span(name.start, name.end))

    # ------------------------------------------------------------------
    # Expressions

    def _parse_expression(self) -> ast.Expression:
        self.depth += 1
        try:
            # The outermost expression is nesting level zero.
            if self.depth - 1 > self.options.max_depth:
                self._skip_whitespace()
                raise self._nesting_error(f"limit {self.options.max_depth}")
            flat = precedence.FlatExpression()
            flat.push_operand(self._parse_operand())
            while True:
                operation = self._attempt(self._parse_operation)
                if operation is None:
                    break
                operator, operand = operation
                flat.push_operator(operator)
                flat.push_operand(operand)
            return precedence.build_tree(flat)
        finally:
            self.depth -= 1

    def _parse_operation(self) -> tuple[ast.BinaryOperator, ast.Expression]:
        operator = self._parse_operator()
        return operator, self._parse_operand()

    def _parse_operator(self) -> ast.BinaryOperator:
        self._skip_whitespace()
        symbol = self.source[self.index : self.index + 1]
        if symbol and symbol in OPERATOR_SYMBOLS:
            self.index += 1
            return ast.BinaryOperator.from_symbol(symbol)
        for expected in OPERATOR_SYMBOLS:
            self._note(f"'{expected}'")
        raise _NoMatch()

    def _parse_operand(self) -> ast.Expression:
        negations: list[int] = []
        while True:
            start = self._attempt(self._literal, "-")
            if start is None:
                break
            negations.append(start)
        operand = self._parse_unit()
        end = self.index
        for start in reversed(negations):
            operand = ast.Negation(operand, span=self._span(start, end))
        return operand

    def _parse_unit(self) -> ast.Expression:
        # The three alternatives start with disjoint characters, so one
        # character of lookahead picks the only one that can match.
        self._skip_whitespace()
        ahead = self.source[self.index : self.index + 1]
        if ahead and ahead in atoms.DIGITS:
            return self._parse_number()
        if ahead == "(":
            return self._parse_parenthesized()
        self._note(EXPECT_NUMBER)
        self._note("'('")
        return self._parse_call()

    def _parse_number(self) -> ast.NumberLiteral:
        number = self._atom(atoms.match_number, EXPECT_NUMBER)
        return ast.NumberLiteral(
            float(number.text), number.text, span=self._span(number.start, number.end)
        )

    def _parse_parenthesized(self) -> ast.Parenthesized:
        start = self._literal("(")
        inner = self._parse_expression()
        self._literal(")")
        return ast.Parenthesized(inner, span=self._span(start, self.index))

    def _parse_call(self) -> ast.FunctionCall:
        found = self._atom(atoms.match_func_name, EXPECT_FUNC_NAME)
        if len(found.parts) == 2:
            module, function = found.parts
            name = ast.FuncName(function, module, span=self._span(found.start, found.end))
        else:
            name = ast.FuncName(found.parts[0], span=self._span(found.start, found.end))
        arguments = self._attempt(self._parse_call_args)
        return ast.FunctionCall(name, arguments, span=self._span(found.start, self.index))

    # ------------------------------------------------------------------
    # Call arguments

    def _parse_call_args(self) -> ast.CallArgs:
        start = self._literal("(")
        arguments: Optional[ast.CallArgs]
        if self._attempt(self._literal, ")") is not None:
            arguments = ast.EmptyArgs()
        else:
            arguments = self._attempt(self._parse_named_args)
            if arguments is None:
                arguments = self._parse_positional_args()
        # Spans of argument lists include the opening parenthesis.
        return replace(arguments, span=self._span(start, self.index))

    def _parse_named_args(self) -> ast.NamedArgs:
        arguments = self._separated(self._parse_named_arg)
        self._literal(")")
        return ast.NamedArgs(tuple(arguments))

    def _parse_positional_args(self) -> ast.PositionalArgs:
        values = self._separated(self._parse_expression)
        self._literal(")")
        return ast.PositionalArgs(tuple(values))

    def _parse_named_arg(self) -> ast.NamedArg:
        name = self._atom(atoms.match_identifier, EXPECT_IDENTIFIER)
        self._literal("=")
        value = self._parse_expression()
        return ast.NamedArg(name.text, value, span=self._span(name.start, self.index))


def _describe(expected: list[str]) -> str:
    if len(expected) == 1:
        return expected[0]
    return ", ".join(expected[:-1]) + " or " + expected[-1]


def parse_document(
    source: str, *, filename: str = "<funcad>", options: Optional[ParserOptions] = None
) -> ast.Document:
    """Parse ``source`` into an :class:`ast.Document`.

    Raises :class:`DSLSyntaxError` unless the whole input is a valid document.
    """

    return Parser(source, filename=filename, options=options).parse_document()


def parse_statement(
    source: str, *, filename: str = "<funcad>", options: Optional[ParserOptions] = None
) -> ast.Statement:
    """Parse ``source`` as exactly one import or definition."""

    return Parser(source, filename=filename, options=options).parse_statement()


def parse_expression(
    source: str, *, filename: str = "<funcad>", options: Optional[ParserOptions] = None
) -> ast.Expression:
    """Parse ``source`` as one standalone expression.

    Useful for unit tests and for tools that evaluate formulas typed by users.
    """

    return Parser(source, filename=filename, options=options).parse_expression()


__all__ = [
    "DSLSyntaxError",
    "Parser",
    "parse_document",
    "parse_expression",
    "parse_statement",
]
