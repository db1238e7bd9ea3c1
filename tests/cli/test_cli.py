"""CSSS CLI Tests — commands, exit status and JSON error output."""

import json
import subprocess

import pytest

from csss import cli

SOURCE = 'main {\n  msg: "hi";\n  loop { times: 2; say: msg; }\n}\n'


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run_cli(*argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(list(argv))
    return exc.value.code


class TestCompile:

    def test_compile_to_stdout(self, workdir, capsys):
        (workdir / "demo.csss").write_text(SOURCE)
        assert run_cli("compile", "demo.csss") == 0
        out = capsys.readouterr().out
        assert out == (
            'let msg = "hi";\n'
            "for (let i = 0; i < 2; i++) {\n"
            "  console.log(msg);\n"
            "}\n"
        )

    def test_compile_to_file(self, workdir, capsys):
        (workdir / "demo.css").write_text(SOURCE)
        assert run_cli("compile", "demo.css", "-o", "demo.js") == 0
        status = json.loads(capsys.readouterr().out)
        assert status == {"status": "compiled", "output": "demo.js"}
        assert (workdir / "demo.js").read_text().startswith('let msg = "hi";')

    def test_bad_extension(self, workdir, capsys):
        (workdir / "demo.txt").write_text(SOURCE)
        assert run_cli("compile", "demo.txt") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["kind"] == "io_error"
        assert ".csss" in err["message"]

    def test_missing_file(self, workdir, capsys):
        assert run_cli("compile", "nope.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert "File not found" in err["message"]

    def test_invalid_utf8(self, workdir, capsys):
        (workdir / "bad.csss").write_bytes(b'a { say: "\xff"; }')
        assert run_cli("compile", "bad.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["kind"] == "io_error"
        assert "Error reading file" in err["message"]

    def test_unwritable_output(self, workdir, capsys):
        (workdir / "demo.csss").write_text(SOURCE)
        (workdir / "out").mkdir()
        assert run_cli("compile", "demo.csss", "-o", "out") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["kind"] == "io_error"
        assert err["details"] == {"path": "out"}

    def test_lex_error(self, workdir, capsys):
        (workdir / "bad.csss").write_text("a { color: #fff; }")
        assert run_cli("compile", "bad.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["kind"] == "lex_error"
        assert err["details"] == {"offset": 11, "char": "#"}
        assert err["location"]["file"] == "bad.csss"

    def test_parse_error(self, workdir, capsys):
        (workdir / "bad.csss").write_text("a { say: 1;")
        assert run_cli("compile", "bad.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["kind"] == "parse_error"
        assert err["details"]["expected_type"] == "RBrace"
        assert err["details"]["found_type"] == "EOF"

    def test_no_command(self, workdir, capsys):
        assert run_cli() == 1


class TestConfig:

    def test_rc_file_is_used(self, workdir, capsys):
        (workdir / ".csssrc.yml").write_text("indent: 0\nextensions: ['.txt']\n")
        (workdir / "demo.txt").write_text(SOURCE)
        assert run_cli("compile", "demo.txt") == 0
        assert "\nconsole.log(msg);\n" in capsys.readouterr().out

    def test_explicit_config(self, workdir, capsys):
        (workdir / "strict.json").write_text('{"duplicate_times": "error"}')
        (workdir / "dup.csss").write_text("a { loop { times: 1; times: 2; } }")
        assert run_cli("--config", "strict.json", "compile", "dup.csss") == 1
        assert json.loads(capsys.readouterr().out)["kind"] == "generator_error"

    def test_invalid_config(self, workdir, capsys):
        (workdir / ".csssrc.yml").write_text("duplicate_times: maybe\n")
        (workdir / "demo.csss").write_text(SOURCE)
        assert run_cli("compile", "demo.csss") == 1
        assert json.loads(capsys.readouterr().out)["kind"] == "config_error"


class TestInspect:

    def test_tokens(self, workdir, capsys):
        (workdir / "t.csss").write_text("a { }")
        assert run_cli("tokens", "t.csss") == 0
        tokens = json.loads(capsys.readouterr().out)
        assert [t["type"] for t in tokens] == ["Identifier", "LBrace", "RBrace"]

    def test_ast(self, workdir, capsys):
        (workdir / "t.csss").write_text("a { &loop { say: 1; } }")
        assert run_cli("ast", "t.csss") == 0
        tree = json.loads(capsys.readouterr().out)
        assert tree["filename"] == "t.csss"
        assert tree["rules"][0]["declarations"][0]["type"] == "NestedLoop"

    def test_ast_error(self, workdir, capsys):
        (workdir / "t.csss").write_text("a { &nope { } }")
        assert run_cli("ast", "t.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert err["details"]["expected_value"] == "loop"


class TestRun:

    def test_code_is_piped_to_runtime(self, workdir, monkeypatch):
        calls = []

        def fake_run(cmd, input=None, text=None):
            calls.append((cmd, input))
            return subprocess.CompletedProcess(cmd, 0)

        monkeypatch.setattr(cli.subprocess, "run", fake_run)
        (workdir / "demo.csss").write_text(SOURCE)
        assert run_cli("run", "demo.csss", "--node", "/usr/bin/nodejs") == 0
        cmd, code = calls[0]
        assert cmd == ["/usr/bin/nodejs", "-"]
        assert "console.log(msg);" in code

    def test_exit_status_is_childs(self, workdir, monkeypatch):
        monkeypatch.setattr(
            cli.subprocess, "run",
            lambda cmd, input=None, text=None: subprocess.CompletedProcess(cmd, 3),
        )
        (workdir / "demo.csss").write_text(SOURCE)
        assert run_cli("run", "demo.csss") == 3

    def test_missing_runtime(self, workdir, monkeypatch, capsys):
        def missing(cmd, input=None, text=None):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(cli.subprocess, "run", missing)
        (workdir / "demo.csss").write_text(SOURCE)
        assert run_cli("run", "demo.csss") == 1
        err = json.loads(capsys.readouterr().out)
        assert "node" in err["message"]

    def test_compile_error_skips_runtime(self, workdir, monkeypatch, capsys):
        def never(*a, **kw):
            raise AssertionError("runtime should not start")

        monkeypatch.setattr(cli.subprocess, "run", never)
        (workdir / "demo.csss").write_text("a {")
        assert run_cli("run", "demo.csss") == 1
