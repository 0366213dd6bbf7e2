"""
Grammar tests - syntax tree shape, independent of statement building
"""

import pytest

from yesod.errors import DSLSyntaxError
from yesod.grammar import Grammar, NodeKind, parse_tree


def kinds(node):
    return [child.kind for child in node.children]


# =============================================================================
# Statements
# =============================================================================


class TestStatements:
    """Top-level productions"""

    def test_exec_statement(self):
        tree = parse_tree("(my-command)")

        assert tree.kind == NodeKind.PROGRAM
        assert kinds(tree) == [NodeKind.EXEC]
        command = tree.children[0].child(NodeKind.COMMAND)
        assert command.text == "(my-command)"
        assert command.child(NodeKind.COMMAND_NAME).text == "my-command"

    def test_assignment_statement(self):
        tree = parse_tree("cfg: (get-config)")

        stmt = tree.children[0]
        assert stmt.kind == NodeKind.ASSIGNMENT
        assert stmt.child(NodeKind.IDENTIFIER).text == "cfg"
        assert stmt.child(NodeKind.COMMAND).child(NodeKind.COMMAND_NAME).text == "get-config"

    def test_adjacent_statements_need_no_whitespace(self):
        tree = parse_tree("(a)(b)x:(c)")
        assert kinds(tree) == [NodeKind.EXEC, NodeKind.EXEC, NodeKind.ASSIGNMENT]

    def test_empty_and_comment_only_programs(self):
        assert parse_tree("").children == []
        assert parse_tree("   \t\n").children == []
        assert parse_tree("   // just a comment\n").children == []

    def test_whitespace_inside_parentheses(self):
        tree = parse_tree("(  ping   )")
        assert tree.children[0].child(NodeKind.COMMAND).child(NodeKind.COMMAND_NAME).text == "ping"


# =============================================================================
# Arguments
# =============================================================================


class TestArguments:
    """Argument productions and their precedence"""

    def _args(self, source):
        return parse_tree(source).children[0].child(NodeKind.COMMAND).children[1:]

    def test_named_argument_wins_over_positional(self):
        (arg,) = self._args("(cmd a:b)")

        assert arg.kind == NodeKind.NAMED_ARG
        assert arg.child(NodeKind.IDENTIFIER).text == "a"
        assert arg.children[-1].kind == NodeKind.UNQUOTED_STRING
        assert arg.children[-1].text == "b"

    def test_value_kinds(self):
        args = self._args('(cmd plain "quoted text" $var key:$other)')

        assert [a.kind for a in args] == [
            NodeKind.POSITIONAL_ARG,
            NodeKind.POSITIONAL_ARG,
            NodeKind.POSITIONAL_ARG,
            NodeKind.NAMED_ARG,
        ]
        assert [a.children[-1].kind for a in args] == [
            NodeKind.UNQUOTED_STRING,
            NodeKind.QUOTED_STRING,
            NodeKind.VARIABLE_REF,
            NodeKind.VARIABLE_REF,
        ]
        assert args[1].children[0].text == '"quoted text"'

    def test_unquoted_allows_slashes_and_dots(self):
        (arg,) = self._args("(copy /dest/path.txt)")
        assert arg.children[0].text == "/dest/path.txt"

    def test_namespaced_command_name(self):
        tree = parse_tree("(server1:deploy env:prod)")
        command = tree.children[0].child(NodeKind.COMMAND)

        assert command.child(NodeKind.COMMAND_NAME).text == "server1:deploy"
        assert kinds(command) == [NodeKind.COMMAND_NAME, NodeKind.NAMED_ARG]

    def test_escaped_quote_stays_inside_string(self):
        (arg,) = self._args(r'(echo "say \"hi\"")')
        assert arg.children[0].text == r'"say \"hi\""'


# =============================================================================
# Whitespace, comments and continuations
# =============================================================================


class TestWhitespace:
    """ws production"""

    def test_line_continuation(self):
        tree = parse_tree("(build app \\\n    optimize:true)")
        command = tree.children[0].child(NodeKind.COMMAND)
        assert kinds(command) == [
            NodeKind.COMMAND_NAME,
            NodeKind.POSITIONAL_ARG,
            NodeKind.NAMED_ARG,
        ]

    def test_crlf_line_continuation(self):
        tree = parse_tree("(build \\\r\n app)")
        assert len(tree.children[0].child(NodeKind.COMMAND).children) == 2

    def test_comments_between_arguments(self):
        tree = parse_tree("(deploy // the service\n api // env next\n env:prod)")
        command = tree.children[0].child(NodeKind.COMMAND)
        assert kinds(command) == [
            NodeKind.COMMAND_NAME,
            NodeKind.POSITIONAL_ARG,
            NodeKind.NAMED_ARG,
        ]

    def test_comment_at_end_without_newline(self):
        assert len(parse_tree("(a) // trailing").children) == 1


# =============================================================================
# Errors
# =============================================================================


class TestSyntaxErrors:
    """Failures carry the position of the offending character"""

    def test_command_without_parentheses(self):
        with pytest.raises(DSLSyntaxError):
            parse_tree("my-command")

    def test_unbalanced_parentheses(self):
        with pytest.raises(DSLSyntaxError) as exc:
            parse_tree("(my-command")
        assert exc.value.line == 1
        assert exc.value.column == 12
        assert "end of input" in str(exc.value)

    def test_error_location_on_later_line(self):
        with pytest.raises(DSLSyntaxError) as exc:
            parse_tree("(ok)\n  (bad :x)")
        assert exc.value.line == 2
        assert exc.value.column == 8

    def test_missing_command_name(self):
        with pytest.raises(DSLSyntaxError, match="Expected command name"):
            parse_tree("( )")

    def test_dollar_without_name(self):
        with pytest.raises(DSLSyntaxError, match="Expected variable name"):
            parse_tree("(cmd $)")

    def test_unterminated_string(self):
        with pytest.raises(DSLSyntaxError, match="Unterminated string") as exc:
            parse_tree('(echo "abc)')
        assert exc.value.column == 7

    def test_space_before_assignment_colon(self):
        with pytest.raises(DSLSyntaxError):
            parse_tree("x :(cmd)")

    def test_nested_command_is_not_an_argument(self):
        with pytest.raises(DSLSyntaxError):
            parse_tree("(outer (inner))")

    def test_syntax_error_is_a_syntax_error(self):
        with pytest.raises(SyntaxError):
            parse_tree(")")


def test_location_is_one_based():
    grammar = Grammar("ab\ncd")
    assert grammar.location(0) == (1, 1)
    assert grammar.location(4) == (2, 2)
