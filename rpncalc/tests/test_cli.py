"""Tests for the rpncalc CLI, driven through typer's CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from rpncalc.__main__ import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each test from a temp dir so file names in messages stay short."""
    monkeypatch.chdir(tmp_path)
    for key in ("RPNCALC_ON_ERROR", "RPNCALC_ALIASES", "RPNCALC_COMMENTS"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def write(workdir, name, text):
    (workdir / name).write_text(text, encoding="utf-8")
    return name


# --- run ---

def test_run_prints_one_result_per_line(workdir):
    name = write(workdir, "prog.rpn", "5 12 66 *\n15 -\n5 +\n")
    result = runner.invoke(app, ["run", name])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["3960", "3945", "3950"]


def test_run_prints_non_integral_values(workdir):
    name = write(workdir, "prog.rpn", "15 4 /\n")
    result = runner.invoke(app, ["run", name])
    assert result.output.strip() == "3.75"


def test_run_halts_on_error(workdir):
    name = write(workdir, "prog.rpn", "1 2 +\n4 0 /\n5 +\n")
    result = runner.invoke(app, ["run", name])
    assert result.exit_code == 1
    assert "prog.rpn:2:" in result.output
    assert "division by zero" in result.output
    # Line 3 would print 5 if the run carried on
    results = [line for line in result.output.splitlines() if "Error" not in line]
    assert results == ["3"]


def test_run_large_results_stay_on_one_line(workdir):
    name = write(workdir, "prog.rpn", "10 100 ^\n1 +\n")
    result = runner.invoke(app, ["run", name])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["1e+100", "1e+100"]


def test_run_reports_lex_error_column(workdir):
    name = write(workdir, "prog.rpn", "1 2 +\n\n3 foo\n")
    result = runner.invoke(app, ["run", name])
    assert result.exit_code == 1
    assert "prog.rpn:3:3:" in result.output
    assert "foo" in result.output


def test_run_reset_mode(workdir):
    name = write(workdir, "prog.rpn", "+\n2 3 +\n")
    result = runner.invoke(app, ["run", name, "--on-error", "reset"])
    assert result.exit_code == 1
    assert "stack-underflow" in result.output
    assert "5" in result.output.splitlines()


def test_run_reset_mode_from_environment(workdir):
    name = write(workdir, "prog.rpn", "+\n2 3 +\n")
    result = runner.invoke(app, ["run", name], env={"RPNCALC_ON_ERROR": "reset"})
    assert "5" in result.output.splitlines()


def test_run_invalid_policy(workdir):
    name = write(workdir, "prog.rpn", "1\n")
    result = runner.invoke(app, ["run", name, "--on-error", "skip"])
    assert result.exit_code == 2
    assert "Invalid --on-error" in result.output


def test_run_invalid_environment(workdir):
    name = write(workdir, "prog.rpn", "1\n")
    result = runner.invoke(app, ["run", name], env={"RPNCALC_ALIASES": "maybe"})
    assert result.exit_code == 2
    assert "RPNCALC_ALIASES" in result.output


def test_run_missing_file(workdir):
    result = runner.invoke(app, ["run", "nope.rpn"])
    assert result.exit_code == 2
    assert "cannot read nope.rpn" in result.output


def test_run_each_file_gets_its_own_stack(workdir):
    a = write(workdir, "a.rpn", "1 2 3\n")
    b = write(workdir, "b.rpn", "+\n")
    result = runner.invoke(app, ["run", a, b])
    assert result.exit_code == 1
    assert "==> a.rpn <==" in result.output
    assert "==> b.rpn <==" in result.output
    assert "b.rpn:1:" in result.output
    assert "stack-underflow" in result.output


def test_run_json(workdir):
    name = write(workdir, "prog.rpn", "2 3 *\n0 /\n")
    result = runner.invoke(app, ["run", name, "--json"])
    assert result.exit_code == 1
    payload = json.loads(result.output.strip().splitlines()[0])
    assert payload["source"] == "prog.rpn"
    assert payload["results"] == [{"line": 1, "value": 6.0}]
    assert payload["errors"][0]["kind"] == "division-by-zero"
    assert payload["errors"][0]["line"] == 2


def test_run_trace(workdir):
    name = write(workdir, "prog.rpn", "1 2 +\n")
    result = runner.invoke(app, ["run", name, "--trace"])
    assert result.exit_code == 0
    assert "[1 2]" in result.output
    assert "[3]" in result.output


def test_run_no_aliases(workdir):
    name = write(workdir, "prog.rpn", "1 2 plus\n")
    assert runner.invoke(app, ["run", name]).exit_code == 0
    result = runner.invoke(app, ["run", name, "--no-aliases"])
    assert result.exit_code == 1
    assert "lex-error" in result.output


def test_run_stdin(workdir):
    result = runner.invoke(app, ["run", "-"], input="10 3 -\n")
    assert result.exit_code == 0
    assert result.output.strip() == "7"


# --- eval ---

def test_eval_arguments_share_one_stack(workdir):
    result = runner.invoke(app, ["eval", "5 12 66 *", "15 -", "5 +"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["3960", "3945", "3950"]


def test_eval_underflow(workdir):
    result = runner.invoke(app, ["eval", "1", "+"])
    assert result.exit_code == 1
    assert "2:" in result.output
    assert "needs 2 operands" in result.output


# --- tokens ---

def test_tokens_table(workdir):
    name = write(workdir, "prog.rpn", "5 12 *\n")
    result = runner.invoke(app, ["tokens", name])
    assert result.exit_code == 0
    assert "number" in result.output
    assert "operator" in result.output


def test_tokens_lex_error(workdir):
    name = write(workdir, "prog.rpn", "5 12 *\n7 $\n")
    result = runner.invoke(app, ["tokens", name])
    assert result.exit_code == 1
    assert "prog.rpn:2:3:" in result.output
