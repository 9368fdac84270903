"""Tests for block and bracket balance checking."""

from conftest import BALANCED, UNBALANCED

from luaguard.validation import (
    ErrorKind,
    ErrorSeverity,
    OpenConstruct,
    StructuralValidator,
    block_spans,
    suggest_missing_closers,
)


def _messages(result):
    return [e.message for e in result.errors]


class TestCheckBalance:
    def test_balanced_function(self, validator):
        result = validator.check_balance(BALANCED)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_missing_end(self, validator):
        result = validator.check_balance(UNBALANCED)
        assert not result.is_valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.kind is ErrorKind.STRUCTURE
        assert error.severity is ErrorSeverity.CRITICAL
        assert error.line == 1
        assert error.message == "missing close for function opened at line 1 (expected 'end')"

    def test_keyword_in_comment_ignored(self, validator):
        assert validator.check_balance("-- end\nfunction f()\nend").is_valid

    def test_keywords_in_strings_ignored(self, validator):
        content = 'local s = "function if do"\nlocal t = [[ end end ]]'
        assert validator.check_balance(content).is_valid

    def test_empty_content(self, validator):
        assert validator.check_balance("").is_valid

    def test_file_name_on_errors(self, validator):
        result = validator.check_balance("do", file="src/Main.luau")
        assert result.errors[0].file == "src/Main.luau"


class TestBlockGrammar:
    def test_loops_consume_their_do(self, validator):
        content = "for i = 1, 10 do\n  print(i)\nend\nwhile x do\n  x = f()\nend"
        assert validator.check_balance(content).is_valid

    def test_generic_for(self, validator):
        content = "for _, child in ipairs(parent:GetChildren()) do\n  print(child)\nend"
        assert validator.check_balance(content).is_valid

    def test_bare_do_block(self, validator):
        assert validator.check_balance("do\n  local x = 1\nend").is_valid

    def test_repeat_until(self, validator):
        assert validator.check_balance("repeat\n  n = n + 1\nuntil n > 10").is_valid

    def test_repeat_closed_by_end_is_mismatch(self, validator):
        result = validator.check_balance("repeat\n  x = 1\nend")
        assert _messages(result) == [
            "expected 'until' to close 'repeat' opened at line 1, found 'end' at line 3"
        ]
        assert result.errors[0].severity is ErrorSeverity.CRITICAL

    def test_if_elseif_else(self, validator):
        content = "if a then\n  x()\nelseif b then\n  y()\nelse\n  z()\nend"
        assert validator.check_balance(content).is_valid

    def test_if_expression_opens_no_block(self, validator):
        content = "local x = if c then 1 else 2\nprint(f(if x then a else b))"
        assert validator.check_balance(content).is_valid

    def test_return_if_expression(self, validator):
        content = "local function pick(c)\n  return if c then 1 else 2\nend"
        assert validator.check_balance(content).is_valid

    def test_if_expression_nested_in_then_branch(self, validator):
        content = "local x = if a then if b then 1 else 2 else 3\nprint(x)\n"
        assert validator.check_balance(content).is_valid

    def test_if_expression_nested_in_else_branch(self, validator):
        content = "local x = if a then 1 else if b then 2 else 3\nprint(x)\n"
        assert validator.check_balance(content).is_valid

    def test_if_expression_elseif_chain(self, validator):
        content = "local x = if a then 1 elseif b then if c then 2 else 3 else 4\n"
        assert validator.check_balance(content).is_valid

    def test_statement_if_inside_if_expression_function(self, validator):
        content = (
            "local f = if a then function()\n  if b then\n    g()\n  end\nend else nil\n"
            "if c then\n  h()\nend\n"
        )
        assert validator.check_balance(content).is_valid

    def test_statement_if_after_then_still_opens_block(self, validator):
        result = validator.check_balance("if a then if b then\n  x()\nend\n")
        assert _messages(result) == ["missing close for if opened at line 1 (expected 'end')"]

    def test_keyword_after_member_access_ignored(self, validator):
        assert validator.check_balance("local e = t.end\nobj:do()").is_valid

    def test_anonymous_functions(self, validator):
        content = "part.Touched:Connect(function(hit)\n  print(hit)\nend)"
        assert validator.check_balance(content).is_valid

    def test_orphan_end(self, validator):
        result = validator.check_balance("local x = 1\nend")
        assert _messages(result) == ["unexpected 'end' at line 2 with no open block"]
        assert result.errors[0].line == 2
        assert result.errors[0].severity is ErrorSeverity.CRITICAL


class TestBrackets:
    def test_mismatched_bracket(self, validator):
        result = validator.check_balance("local t = {1, 2)")
        assert _messages(result) == [
            "expected '}' to close '{' opened at line 1, found ')' at line 1"
        ]
        assert result.errors[0].severity is ErrorSeverity.CRITICAL

    def test_orphan_bracket(self, validator):
        result = validator.check_balance("x = 1)")
        assert _messages(result) == ["unexpected ')' at line 1 with no open bracket"]

    def test_unclosed_index_bracket(self, validator):
        result = validator.check_balance("local v = t[1")
        assert _messages(result) == ["missing close for [ opened at line 1 (expected ']')"]
        assert result.has_critical

    def test_brackets_and_blocks_are_independent(self, validator):
        content = "call(function()\n  return 1\nend)"
        assert validator.check_balance(content).is_valid


class TestLexicalErrors:
    def test_unfinished_string_is_critical_syntax(self, validator):
        result = validator.check_balance('s = "open\nfunction f()\nend')
        assert len(result.errors) == 1
        assert result.errors[0].kind is ErrorKind.SYNTAX
        assert result.errors[0].severity is ErrorSeverity.CRITICAL
        assert result.errors[0].line == 1

    def test_unterminated_block_comment(self, validator):
        result = validator.check_balance("local x = 1\n--[[ todo")
        assert not result.is_valid
        assert result.errors[0].kind is ErrorKind.SYNTAX
        assert result.errors[0].line == 2

    def test_errors_sorted_by_line(self, validator):
        result = validator.check_balance("function f()\nx = 1)\ns = 'open")
        assert [e.line for e in result.errors] == sorted(e.line for e in result.errors)


class TestValidate:
    def test_proposed_content_decides(self, validator):
        assert validator.validate(UNBALANCED, BALANCED).is_valid
        assert not validator.validate(BALANCED, UNBALANCED).is_valid

    def test_no_previous_content(self, validator):
        assert validator.validate(None, BALANCED, mode="create").is_valid

    def test_results_are_fresh(self, validator):
        first = validator.validate(BALANCED, UNBALANCED)
        second = validator.validate(BALANCED, UNBALANCED)
        assert first is not second
        assert first.errors == second.errors


class TestOpenConstructs:
    def test_lists_unclosed_in_order(self, validator):
        result = validator.check_balance("function f()\n  if x then\n    g(")
        assert [(o.construct, o.line, o.closer) for o in result.open_constructs] == [
            ("function", 1, "end"),
            ("if", 2, "end"),
            ("(", 3, ")"),
        ]

    def test_balanced_has_none(self, validator):
        assert validator.check_balance(BALANCED).open_constructs == []


class TestSuggestMissingClosers:
    def test_appends_end(self, validator):
        result = validator.check_balance(UNBALANCED)
        fixed = suggest_missing_closers(UNBALANCED, result)
        assert fixed == UNBALANCED + "\nend\n"
        assert validator.check_balance(fixed).is_valid

    def test_nested_closers_innermost_first(self, validator):
        content = "function f()\n  if x then\n    g("
        fixed = suggest_missing_closers(content, validator.check_balance(content))
        assert fixed.endswith("\n)\nend\nend\n")
        assert validator.check_balance(fixed).is_valid

    def test_none_when_valid(self, validator):
        assert suggest_missing_closers(BALANCED, validator.check_balance(BALANCED)) is None

    def test_none_for_repeat(self, validator):
        content = "repeat\n  x()"
        assert suggest_missing_closers(content, validator.check_balance(content)) is None

    def test_none_when_other_errors(self, validator):
        content = "function f()\nx = 1)"
        assert suggest_missing_closers(content, validator.check_balance(content)) is None

    def test_open_construct_offset(self):
        result = StructuralValidator().check_balance("local a\nwhile x do")
        assert result.open_constructs == [OpenConstruct("while", 2, "end", 8)]


class TestBlockSpans:
    def test_loop_body_offsets(self):
        spans = block_spans("while true do\n  x()\nend")
        assert len(spans) == 1
        span = spans[0]
        assert span.construct == "while"
        assert span.start == 0
        assert span.body_start == 13
        assert span.end == 20
        assert span.closed

    def test_unclosed_extends_to_end(self):
        content = "function f()\n  x()\n"
        spans = block_spans(content)
        assert spans[0].end == len(content)
        assert not spans[0].closed

    def test_sorted_by_start(self):
        spans = block_spans("function a()\n  for i = 1, 2 do\n  end\nend")
        assert [s.construct for s in spans] == ["function", "for"]
