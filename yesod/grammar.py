"""
Yesod Grammar - scannerless recursive-descent recognizer

Turns DSL text into a concrete syntax tree. No AST objects are built here;
see yesod.parser for tree construction.

Grammar:
--------
program         := ws (statement)* ws
statement       := assignment | exec
assignment      := identifier ":" ws cmd-expr ws
exec            := cmd-expr ws
cmd-expr        := "(" ws command ws ")"
command         := cmd-name (ws argument)*
argument        := named-arg | positional-arg
named-arg       := identifier ":" value
positional-arg  := value
value           := variable-ref | literal
variable-ref    := "$" identifier
literal         := quoted-string | unquoted-string
identifier      := [A-Za-z0-9_-]+
cmd-name        := [A-Za-z0-9_:-]+
unquoted-string := any chars except space, tab, CR, LF, ':', '(', ')', '$'
quoted-string   := '"' ('\' any-char | any-char-except-quote-or-backslash)* '"'
ws              := (whitespace | '\' newline | "//" comment-to-end-of-line)*
"""

import string
from dataclasses import dataclass, field
from enum import Enum

from .errors import DSLSyntaxError

IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "_-")
COMMAND_NAME_CHARS = IDENTIFIER_CHARS | {":"}
WHITESPACE_CHARS = frozenset(" \t\r\n")
UNQUOTED_EXCLUDED_CHARS = WHITESPACE_CHARS | frozenset(":()$")

LINE_CONTINUATIONS = ("\\\n", "\\\r\n")
COMMENT_START = "//"


# =============================================================================
# Syntax Tree
# =============================================================================


class NodeKind(Enum):
    """Syntax tree node kinds, one per grammar production that survives"""

    PROGRAM = "program"
    ASSIGNMENT = "assignment"
    EXEC = "exec"
    COMMAND = "command"
    COMMAND_NAME = "cmd-name"
    IDENTIFIER = "identifier"
    NAMED_ARG = "named-arg"
    POSITIONAL_ARG = "positional-arg"
    VARIABLE_REF = "variable-ref"
    QUOTED_STRING = "quoted-string"
    UNQUOTED_STRING = "unquoted-string"


@dataclass
class SyntaxNode:
    """A matched production; `text` is the exact source slice it covers"""

    kind: NodeKind
    text: str
    line: int
    column: int
    children: list["SyntaxNode"] = field(default_factory=list)

    def child(self, kind: NodeKind) -> "SyntaxNode | None":
        """First direct child of the given kind"""
        for node in self.children:
            if node.kind == kind:
                return node
        return None

    def children_of(self, *kinds: NodeKind) -> list["SyntaxNode"]:
        return [node for node in self.children if node.kind in kinds]


# =============================================================================
# Recognizer
# =============================================================================


class Grammar:
    """Recognize one DSL source string"""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def parse(self) -> SyntaxNode:
        """Match `program` against the whole source"""
        statements = []
        self._skip_ws()
        while not self._at_end():
            statements.append(self._statement())
        return SyntaxNode(NodeKind.PROGRAM, self.source, 1, 1, statements)

    # -------------------------------------------------------------------------
    # Productions
    # -------------------------------------------------------------------------

    def _statement(self) -> SyntaxNode:
        start = self.pos
        if self._current() == "(":
            command = self._cmd_expr()
            node = self._node(NodeKind.EXEC, start, [command])
        else:
            identifier = self._take(IDENTIFIER_CHARS, NodeKind.IDENTIFIER)
            if identifier is None:
                self._fail("Expected '(' or a variable assignment")
            self._expect(":", "Expected ':' after variable name")
            self._skip_ws()
            command = self._cmd_expr()
            node = self._node(NodeKind.ASSIGNMENT, start, [identifier, command])
        self._skip_ws()
        return node

    def _cmd_expr(self) -> SyntaxNode:
        start = self.pos
        self._expect("(", "Expected '('")
        self._skip_ws()

        name = self._take(COMMAND_NAME_CHARS, NodeKind.COMMAND_NAME)
        if name is None:
            self._fail("Expected command name")
        children = [name]

        while True:
            mark = self.pos
            self._skip_ws()
            if self._at_end() or self._current() == ")":
                self.pos = mark
                break
            children.append(self._argument())

        self._skip_ws()
        self._expect(")", "Expected ')' to close command")
        return self._node(NodeKind.COMMAND, start, children)

    def _argument(self) -> SyntaxNode:
        # named-arg first; fall back to positional-arg on any mismatch
        start = self.pos
        identifier = self._take(IDENTIFIER_CHARS, NodeKind.IDENTIFIER)
        if identifier is not None and self._current() == ":":
            self._advance()
            value = self._value()
            if value is not None:
                return self._node(NodeKind.NAMED_ARG, start, [identifier, value])

        self.pos = start
        value = self._value()
        if value is None:
            self._fail("Expected argument or ')'")
        return self._node(NodeKind.POSITIONAL_ARG, start, [value])

    def _value(self) -> SyntaxNode | None:
        """Match `value`; None when nothing here can start one"""
        char = self._current()
        if char == "$":
            return self._variable_ref()
        if char == '"':
            return self._quoted_string()

        start = self.pos
        while not self._at_end() and self._current() not in UNQUOTED_EXCLUDED_CHARS:
            self._advance()
        if self.pos == start:
            return None
        return self._node(NodeKind.UNQUOTED_STRING, start)

    def _variable_ref(self) -> SyntaxNode:
        start = self.pos
        self._advance()  # Skip $
        identifier = self._take(IDENTIFIER_CHARS, NodeKind.IDENTIFIER)
        if identifier is None:
            self._fail("Expected variable name after '$'")
        return self._node(NodeKind.VARIABLE_REF, start, [identifier])

    def _quoted_string(self) -> SyntaxNode:
        start = self.pos
        self._advance()  # Skip opening quote
        while not self._at_end():
            char = self._current()
            if char == "\\":
                self._advance()
                if self._at_end():
                    break
                self._advance()
            elif char == '"':
                self._advance()
                return self._node(NodeKind.QUOTED_STRING, start)
            else:
                self._advance()
        self.pos = start
        self._fail("Unterminated string")

    # -------------------------------------------------------------------------
    # Scanning helpers
    # -------------------------------------------------------------------------

    def _skip_ws(self) -> None:
        while not self._at_end():
            if self._current() in WHITESPACE_CHARS:
                self._advance()
            elif self.source.startswith(LINE_CONTINUATIONS, self.pos):
                self.pos += 2 if self.source.startswith("\\\n", self.pos) else 3
            elif self.source.startswith(COMMENT_START, self.pos):
                end = self.source.find("\n", self.pos)
                self.pos = len(self.source) if end == -1 else end
            else:
                break

    def _take(self, chars: frozenset[str], kind: NodeKind) -> SyntaxNode | None:
        start = self.pos
        while not self._at_end() and self._current() in chars:
            self._advance()
        if self.pos == start:
            return None
        return self._node(kind, start)

    def _expect(self, char: str, message: str) -> None:
        if self._current() != char:
            self._fail(message)
        self._advance()

    def _node(self, kind: NodeKind, start: int, children: list[SyntaxNode] | None = None) -> SyntaxNode:
        line, column = self.location(start)
        return SyntaxNode(kind, self.source[start : self.pos], line, column, children or [])

    def _current(self) -> str:
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def _advance(self) -> None:
        self.pos += 1

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _fail(self, message: str):
        found = "end of input" if self._at_end() else repr(self._current())
        line, column = self.location(self.pos)
        raise DSLSyntaxError(f"{message}, found {found}", line, column)

    def location(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a source offset"""
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1


def parse_tree(source: str) -> SyntaxNode:
    """Recognize DSL source and return its syntax tree"""
    return Grammar(source).parse()
