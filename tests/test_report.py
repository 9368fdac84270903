"""Tests for diagnostic reports and the check API."""

from conftest import BALANCED, UNBALANCED

from luaguard.antipatterns import AntiPatternScanner
from luaguard.api import check_paths, check_source
from luaguard.config import GuardConfig
from luaguard.report import (
    SOURCE_ANTIPATTERN,
    SOURCE_STRUCTURAL,
    DiagnosticReport,
    ReportEntry,
    ReportGenerator,
    code_snippet,
    merge_reports,
)

LOOPY = "while true do\n  x = x + 1\nend\nlocal p = Instance.new('Part')\nspawn(f)"


class TestCodeSnippet:
    def test_marks_line(self):
        snippet = code_snippet("a\nb\nc\nd\ne", 3, context=1)
        assert snippet == "  2 | b\n> 3 | c\n  4 | d"

    def test_clamped_at_edges(self):
        snippet = code_snippet("a\nb", 1, context=3)
        assert snippet.splitlines() == ["> 1 | a", "  2 | b"]

    def test_pads_line_numbers(self):
        content = "\n".join(str(i) for i in range(1, 12))
        snippet = code_snippet(content, 10, context=1)
        assert snippet.splitlines()[0] == "   9 | 9"

    def test_no_line(self):
        assert code_snippet("a", None) is None
        assert code_snippet("a", 5) is None


class TestReportGenerator:
    def test_severity_order(self, validator):
        content = UNBALANCED + "\n" + LOOPY
        report = ReportGenerator().generate(
            "a.lua", validator.check_balance(content), AntiPatternScanner().scan(content), content
        )
        severities = [e.severity for e in report.entries]
        order = ["critical", "error", "warning", "info"]
        assert severities == sorted(severities, key=order.index)
        assert report.entries[0].source == SOURCE_STRUCTURAL
        assert report.has_structural_errors

    def test_structural_before_antipattern_within_severity(self):
        lint = ReportEntry("a.lua", 1, "error", SOURCE_ANTIPATTERN, "loadstring-usage", "dynamic code")
        structural = ReportEntry("b.lua", 9, "error", SOURCE_STRUCTURAL, "structure", "stray closer")
        merged = merge_reports([DiagnosticReport([lint], 1), DiagnosticReport([structural], 1)])
        sources = [e.source for e in merged.by_severity()["error"]]
        assert sources == [SOURCE_STRUCTURAL, SOURCE_ANTIPATTERN]

    def test_stray_end_is_critical_beside_antipattern_error(self, validator):
        content = "local x = 1\nend\nloadstring(code)()"
        report = ReportGenerator().generate(
            "a.lua", validator.check_balance(content), AntiPatternScanner().scan(content), content
        )
        assert [e.source for e in report.by_severity()["critical"]] == [SOURCE_STRUCTURAL]
        assert [e.source for e in report.by_severity()["error"]] == [SOURCE_ANTIPATTERN]

    def test_antipattern_entry_fields(self):
        hits = AntiPatternScanner().scan(LOOPY)
        report = ReportGenerator(context_lines=0).generate("a.lua", None, hits, LOOPY)
        entry = next(e for e in report.entries if e.title == "infinite-loop-no-wait")
        assert entry.line == 1
        assert entry.fix
        assert entry.example
        assert entry.snippet is None

    def test_snippets_included(self, validator):
        report = ReportGenerator(context_lines=1).generate(
            "a.lua", validator.check_balance(UNBALANCED), [], UNBALANCED
        )
        assert report.entries[0].snippet.startswith("> 1 | function f()")

    def test_counts(self):
        report = ReportGenerator().generate("a.lua", None, AntiPatternScanner().scan(LOOPY), LOOPY)
        counts = report.counts()
        assert counts["critical"] == 0
        assert counts["error"] == 1
        assert sum(counts.values()) == len(report.entries)

    def test_suggested_closers(self, validator):
        report = ReportGenerator().generate(
            "a.lua", validator.check_balance(UNBALANCED), [], UNBALANCED
        )
        assert report.suggested_closers == {"a.lua": ["end"]}

    def test_clean(self, validator):
        report = ReportGenerator().generate("a.lua", validator.check_balance(BALANCED), [], BALANCED)
        assert report.is_clean
        assert not report.has_structural_errors

    def test_merge_keeps_grouping(self, validator):
        generator = ReportGenerator()
        first = generator.generate("a.lua", None, AntiPatternScanner().scan("spawn(f)"), "spawn(f)")
        second = generator.generate("b.lua", validator.check_balance("do"), [], "do")
        merged = merge_reports([first, second])
        assert merged.files_checked == 2
        assert [e.file for e in merged.entries] == ["b.lua", "a.lua"]


class TestCheckApi:
    def test_check_source(self):
        report = check_source("a.lua", LOOPY)
        titles = [e.title for e in report.entries]
        assert "infinite-loop-no-wait" in titles
        assert "spawn-deprecated" in titles
        assert not report.has_structural_errors

    def test_disabled_rules(self):
        config = GuardConfig(disabled_rules=("spawn-deprecated",))
        titles = [e.title for e in check_source("a.lua", LOOPY, config).entries]
        assert "spawn-deprecated" not in titles

    def test_check_paths_walks_directories(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "good.lua").write_text(BALANCED, encoding="utf-8")
        (tmp_path / "src" / "bad.luau").write_text(UNBALANCED, encoding="utf-8")
        (tmp_path / "src" / "notes.txt").write_text("function", encoding="utf-8")

        report = check_paths([tmp_path])

        assert report.files_checked == 2
        assert report.has_structural_errors
        assert {e.file for e in report.entries} == {str(tmp_path / "src" / "bad.luau")}
