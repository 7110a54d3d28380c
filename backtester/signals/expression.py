"""
Constrained expression language for textual buy/sell conditions.

Expressions such as ``rsi < 30 && close > sma20`` are tokenized and parsed
by a small recursive-descent parser. Identifiers are whole tokens resolved
against an explicit context mapping only, so ``sma5`` can never match
inside ``sma50`` and nothing outside the context is reachable.

Grammar (lowest to highest precedence):

    expression := or_expr
    or_expr    := and_expr (("||" | "or") and_expr)*
    and_expr   := not_expr (("&&" | "and") not_expr)*
    not_expr   := ("!" | "not") not_expr | comparison
    comparison := additive [(">" | "<" | ">=" | "<=" | "==" | "!=") additive]
    additive   := term (("+" | "-") term)*
    term       := unary (("*" | "/" | "%") unary)*
    unary      := ("-" | "+") unary | primary
    primary    := NUMBER | NAME | "true" | "false" | "(" expression ")"

``===`` and ``!==`` are accepted as aliases of ``==`` and ``!=``.
"""
import numbers
import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, List, Mapping, Union

from ..shared.errors import ExpressionError

Number = Union[float, bool]

_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<op>===|!==|==|!=|>=|<=|&&|\|\||[-+*/%<>!()])
    """,
    re.VERBOSE,
)

_WORD_OPERATORS = {'and': '&&', 'or': '||', 'not': '!'}
_LITERALS = {'true': True, 'false': False}
_OPERATOR_ALIASES = {'===': '==', '!==': '!='}

_COMPARISONS: dict = {
    '>': operator.gt,
    '<': operator.lt,
    '>=': operator.ge,
    '<=': operator.le,
    '==': operator.eq,
    '!=': operator.ne,
}


def _divide(left: Number, right: Number) -> float:
    if right == 0:
        raise ExpressionError("Division by zero")
    return left / right


def _modulo(left: Number, right: Number) -> float:
    if right == 0:
        raise ExpressionError("Modulo by zero")
    return left % right


_ARITHMETIC: dict = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': _divide,
    '%': _modulo,
}


@dataclass(frozen=True)
class Token:
    kind: str  # "number", "name", "op" or "end"
    text: str
    position: int


def tokenize(text: str) -> List[Token]:
    """Split an expression into tokens; raises ExpressionError on stray characters."""
    tokens: List[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ExpressionError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == 'name' and value in _WORD_OPERATORS:
            kind, value = 'op', _WORD_OPERATORS[value]
        elif kind == 'op':
            value = _OPERATOR_ALIASES.get(value, value)
        tokens.append(Token(kind, value, pos))
        pos = match.end()
    tokens.append(Token('end', '', length))
    return tokens


# AST nodes

@dataclass(frozen=True)
class Literal:
    value: Number

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return self.value


@dataclass(frozen=True)
class Name:
    name: str

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        if self.name not in context:
            raise ExpressionError(f"Unknown identifier '{self.name}'")
        value = context[self.name]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ExpressionError(f"Identifier '{self.name}' is not numeric: {value!r}")
        return value


@dataclass(frozen=True)
class Negate:
    operand: Any

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return -self.operand.evaluate(context)


@dataclass(frozen=True)
class Not:
    operand: Any

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return not self.operand.evaluate(context)


@dataclass(frozen=True)
class BinaryOp:
    op: str
    func: Callable[[Number, Number], Number]
    left: Any
    right: Any

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return self.func(self.left.evaluate(context), self.right.evaluate(context))


@dataclass(frozen=True)
class And:
    left: Any
    right: Any

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return bool(self.left.evaluate(context)) and bool(self.right.evaluate(context))


@dataclass(frozen=True)
class Or:
    left: Any
    right: Any

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        return bool(self.left.evaluate(context)) or bool(self.right.evaluate(context))


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _accept(self, *ops: str) -> Union[Token, None]:
        token = self.current
        if token.kind == 'op' and token.text in ops:
            self.pos += 1
            return token
        return None

    def _error(self, message: str) -> ExpressionError:
        token = self.current
        found = 'end of expression' if token.kind == 'end' else repr(token.text)
        return ExpressionError(f"{message} at position {token.position}, found {found}")

    def parse(self):
        if self.current.kind == 'end':
            raise ExpressionError("Empty expression")
        node = self._or()
        if self.current.kind != 'end':
            raise self._error("Unexpected token")
        return node

    def _or(self):
        node = self._and()
        while self._accept('||'):
            node = Or(node, self._and())
        return node

    def _and(self):
        node = self._not()
        while self._accept('&&'):
            node = And(node, self._not())
        return node

    def _not(self):
        if self._accept('!'):
            return Not(self._not())
        return self._comparison()

    def _comparison(self):
        node = self._additive()
        token = self._accept(*_COMPARISONS)
        if token is not None:
            node = BinaryOp(token.text, _COMPARISONS[token.text], node, self._additive())
            if self.current.kind == 'op' and self.current.text in _COMPARISONS:
                raise self._error("Chained comparison")
        return node

    def _additive(self):
        node = self._term()
        while True:
            token = self._accept('+', '-')
            if token is None:
                return node
            node = BinaryOp(token.text, _ARITHMETIC[token.text], node, self._term())

    def _term(self):
        node = self._unary()
        while True:
            token = self._accept('*', '/', '%')
            if token is None:
                return node
            node = BinaryOp(token.text, _ARITHMETIC[token.text], node, self._unary())

    def _unary(self):
        if self._accept('-'):
            return Negate(self._unary())
        if self._accept('+'):
            return self._unary()
        return self._primary()

    def _primary(self):
        token = self.current
        if token.kind == 'number':
            self.pos += 1
            return Literal(float(token.text))
        if token.kind == 'name':
            self.pos += 1
            if token.text in _LITERALS:
                return Literal(_LITERALS[token.text])
            return Name(token.text)
        if self._accept('('):
            node = self._or()
            if not self._accept(')'):
                raise self._error("Expected ')'")
            return node
        raise self._error("Expected a number, identifier or '('")


def _collect_names(node: Any) -> List[str]:
    if isinstance(node, Name):
        return [node.name]
    names: List[str] = []
    for attr in ('operand', 'left', 'right'):
        child = getattr(node, attr, None)
        if child is not None:
            names.extend(_collect_names(child))
    return names


@dataclass(frozen=True)
class Expression:
    """A parsed textual condition."""
    source: str
    root: Any

    @property
    def names(self) -> FrozenSet[str]:
        """Identifiers referenced by the expression."""
        return frozenset(_collect_names(self.root))

    def evaluate(self, context: Mapping[str, Any]) -> Number:
        """
        Evaluate against a context mapping.

        Raises:
            ExpressionError: Unknown identifier or arithmetic error
        """
        try:
            return self.root.evaluate(context)
        except (OverflowError, TypeError) as e:
            raise ExpressionError(f"Cannot evaluate '{self.source}': {e}") from e


def parse_expression(text: str) -> Expression:
    """
    Parse an expression string.

    Raises:
        ExpressionError: If the text is not a valid expression
    """
    if not isinstance(text, str):
        raise ExpressionError(f"Expression must be a string, got {type(text).__name__}")
    return Expression(source=text, root=_Parser(text).parse())


def evaluate_expression(text: str, context: Mapping[str, Any]) -> Number:
    """Parse and evaluate in one step."""
    return parse_expression(text).evaluate(context)


__all__ = [
    "Token",
    "Expression",
    "tokenize",
    "parse_expression",
    "evaluate_expression",
]
