"""
Tests for the callsite command line.

Run with: pytest tests/test_cli.py -v
"""

import json

import pytest

from callsite.main import create_config_from_args, main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "CALLSITE_EXTENSIONS",
        "CALLSITE_EXCLUDE_DIRS",
        "CALLSITE_BY_POSITION",
        "CALLSITE_WORKERS",
        "CALLSITE_OUTPUT",
        "CALLSITE_LOG_LEVEL",
        "CALLSITE_LOG_DIR",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestArguments:

    def test_cli_overrides(self):
        args = parse_args(["bar", "src", "--ext", ".el, .scm", "--by-position", "--workers", "2", "--json"])
        config = create_config_from_args(args)
        assert args.symbol == "bar"
        assert args.paths == ["src"]
        assert config.extensions == [".el", ".scm"]
        assert config.collapse_duplicates is False
        assert config.workers == 2
        assert config.output_format == "json"

    def test_config_file(self, tmp_path):
        path = tmp_path / "callsite.json"
        path.write_text(json.dumps({"workers": 5, "extensions": [".clj"]}))
        config = create_config_from_args(parse_args(["bar", "--config", str(path)]))
        assert config.workers == 5
        assert config.extensions == [".clj"]


class TestSearchCommand:

    def test_text_output(self, lisp_tree, capsys):
        assert main(["bar", str(lisp_tree / "src" / "a.el")]) == 0
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 2
        assert out[0].endswith("a.el:2:2: (bar x)")
        assert out[1].endswith("a.el:3:9: (bar 1)")

    def test_json_output(self, lisp_tree, capsys):
        assert main(["bar", str(lisp_tree), "--json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["symbol"] == "bar"
        assert report["total_calls"] == 3
        assert [len(d["calls"]) for d in report["documents"]] == [2, 1]
        first = report["documents"][0]["calls"][0]
        assert first["form"] == "(bar x)"
        assert first["line"] == 2

    def test_no_matches(self, lisp_tree, capsys):
        assert main(["nothing-calls-this", str(lisp_tree)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "No calls" in captured.err

    def test_invalid_symbol(self, lisp_tree, capsys):
        assert main(["(bar)", str(lisp_tree)]) == 2
        assert "[ERROR]" in capsys.readouterr().err

    def test_missing_symbol(self, capsys):
        assert main([]) == 2
        assert "symbol is required" in capsys.readouterr().err

    def test_invalid_config(self, lisp_tree, capsys):
        assert main(["bar", str(lisp_tree), "--workers", "0"]) == 2
        assert "workers" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["bar", "--config", str(tmp_path / "missing.json")]) == 2
        assert "Failed to load configuration" in capsys.readouterr().err

    def test_log_dir(self, lisp_tree, tmp_path, capsys):
        log_base = tmp_path / "logs"
        assert main(["bar", str(lisp_tree), "--log-dir", str(log_base)]) == 0
        run_dirs = list(log_base.iterdir())
        assert len(run_dirs) == 1
        assert run_dirs[0].name.startswith("bar_")
        assert (run_dirs[0] / "callsite.log").exists()


class TestListSymbols:

    def test_text(self, lisp_tree, capsys):
        assert main(["--list-symbols", str(lisp_tree)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split("\t")[0] for line in lines] == ["use-bar", "bar"]

    def test_json(self, lisp_tree, capsys):
        assert main(["--list-symbols", str(lisp_tree), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert {d["name"]: d["kind"] for d in data} == {"use-bar": "function", "bar": "function"}

    def test_nothing_defined(self, tmp_path, capsys):
        (tmp_path / "x.el").write_text("(message \"hi\")")
        assert main(["--list-symbols", str(tmp_path)]) == 1
