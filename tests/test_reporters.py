"""Tests for verdict reporters."""

import json

from printguard.models import Action, Match, Verdict
from printguard.reporters import JSONReporter, TextReporter


class TestTextReporter:
    def test_file_level_warning(self):
        line = TextReporter().render_match(Match(file="/repo/x.ts"))
        assert line == "WARNING: print statement detected at /repo/x.ts"

    def test_line_level_warning_includes_text(self):
        line = TextReporter().render_match(Match(file="/repo/x.ts", line=7, text="  console.log(a);"))
        assert line.startswith("WARNING: print statement detected at /repo/x.ts:7")
        assert line.endswith("console.log(a);")

    def test_emit_writes_to_stderr(self, capsys):
        TextReporter().emit([Match(file="/a.ts"), Match(file="/b.ts")])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.count("WARNING:") == 2

    def test_emit_nothing_for_no_matches(self, capsys):
        TextReporter().emit([])
        assert capsys.readouterr().err == ""


class TestJSONReporter:
    def test_render(self):
        verdict = Verdict(action=Action.WARN, exit_code=0, reason="confirmed by operator", matches=[Match("/a", 1)])
        data = json.loads(JSONReporter().render(verdict))
        assert data["verdict"] == "WARN"
        assert data["matches"] == [{"file": "/a", "line": 1}]

    def test_write_creates_parent_dirs(self, tmp_path):
        out = tmp_path / "reports" / "verdict.json"
        written = JSONReporter().write(Verdict(action=Action.PASS, exit_code=0), str(out))
        assert written == out
        assert out.read_text().endswith("}\n")
        assert json.loads(out.read_text())["verdict"] == "PASS"
