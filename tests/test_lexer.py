"""Tests for the Lua lexer and the code-only view."""

from luaguard.validation.lexer import (
    SpanKind,
    TokenType,
    code_view,
    long_bracket_level,
    tokenize,
)


def _names(content):
    return [t.text for t in tokenize(content).tokens if t.type is TokenType.NAME]


class TestLongBracketLevel:
    def test_levels(self):
        assert long_bracket_level("[[", 0) == 0
        assert long_bracket_level("[=[", 0) == 1
        assert long_bracket_level("[==[", 0) == 2

    def test_not_a_long_bracket(self):
        assert long_bracket_level("[x]", 0) is None
        assert long_bracket_level("[=x", 0) is None
        assert long_bracket_level("a[[", 0) is None


class TestTokens:
    def test_keywords_in_comments_are_not_tokens(self):
        assert _names("-- end function\nlocal x = 1") == ["local", "x"]

    def test_keywords_in_strings_are_not_tokens(self):
        content = "local s = \"end\" .. 'function' .. `do`"
        assert _names(content) == ["local", "s"]

    def test_line_numbers(self):
        tokens = tokenize("local a\n\nlocal b").tokens
        assert [(t.text, t.line) for t in tokens] == [
            ("local", 1),
            ("a", 1),
            ("local", 3),
            ("b", 3),
        ]

    def test_multi_char_operators(self):
        texts = [t.text for t in tokenize("a ..= b ~= c ... d").tokens if t.type is TokenType.PUNCT]
        assert texts == ["..=", "~=", "..."]

    def test_numbers(self):
        tokens = tokenize("x = 0x1F + 1.5e-3 + .5").tokens
        numbers = [t.text for t in tokens if t.type is TokenType.NUMBER]
        assert numbers == ["0x1F", "1.5e-3", ".5"]


class TestLongLiterals:
    def test_block_comment_spans_lines(self):
        result = tokenize("--[[ if\nwhile\n]] local x")
        assert _names("--[[ if\nwhile\n]] local x") == ["local", "x"]
        assert result.spans[0].kind is SpanKind.BLOCK_COMMENT
        assert result.tokens[0].line == 3

    def test_level_must_match(self):
        content = "local s = [==[ a ]] end ]==] local t"
        assert _names(content) == ["local", "s", "local", "t"]
        assert not tokenize(content).problems

    def test_leveled_comment(self):
        assert _names("--[=[ ]] function ]=] x = 1") == ["x"]

    def test_unterminated_long_comment(self):
        result = tokenize("local x\n--[==[ never closed ]]")
        assert len(result.problems) == 1
        problem = result.problems[0]
        assert problem.kind is SpanKind.BLOCK_COMMENT
        assert problem.line == 2
        assert "expected ']==]'" in problem.message

    def test_unterminated_long_string(self):
        result = tokenize("x = [[ open")
        assert result.problems[0].kind is SpanKind.LONG_STRING
        assert "unterminated long string opened at line 1" in result.problems[0].message


class TestQuotedStrings:
    def test_escaped_quote(self):
        result = tokenize('s = "a \\" end" x')
        assert not result.problems
        assert _names('s = "a \\" end" x') == ["s", "x"]

    def test_unfinished_at_line_break(self):
        result = tokenize('s = "open\nlocal x = 1')
        assert len(result.problems) == 1
        assert result.problems[0].message == (
            "unfinished string starting at line 1 (reached end of line 1)"
        )
        # Scanning resumes on the next line
        assert _names('s = "open\nlocal x = 1') == ["s", "local", "x"]

    def test_unfinished_at_end_of_input(self):
        result = tokenize("s = 'open")
        assert result.problems[0].message == (
            "unfinished string starting at line 1 (reached end of input)"
        )

    def test_escaped_newline_continues(self):
        result = tokenize('s = "a\\\nb"\nx')
        assert not result.problems
        assert result.tokens[-1].line == 3

    def test_escaped_crlf_continues(self):
        result = tokenize('s = "a\\\r\nb"\r\nx')
        assert not result.problems
        assert result.tokens[2].text == '"a\\\r\nb"'
        assert result.tokens[-1].line == 3

    def test_z_escape_skips_line_breaks(self):
        result = tokenize('s = "a\\z\n    b"\nx')
        assert not result.problems
        assert result.tokens[-1].line == 3


class TestCodeView:
    def test_preserves_length_and_lines(self):
        content = 'local s = "end" -- if\nwhile true do end'
        view = code_view(content)
        assert len(view) == len(content)
        assert view.count("\n") == content.count("\n")
        assert "end\"" not in view
        assert "-- if" not in view
        assert view.endswith("while true do end")

    def test_no_spans_returns_content(self):
        assert code_view("local x = 1") == "local x = 1"

    def test_multiline_comment_keeps_newlines(self):
        view = code_view("--[[a\nb]]x")
        assert view == "     \n   x"
