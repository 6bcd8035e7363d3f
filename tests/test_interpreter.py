import io
import logging

import pytest

from lispy.config import get_log_level, get_prompt
from lispy.errors import ErrorKind
from lispy.interpreter import Interpreter
from lispy.repl import main, repl
from lispy.types.values import EvaluableList, Number


def feed(*lines):
    """Build a read_line callable that yields `lines` then signals end of input."""
    it = iter(lines)

    def read_line(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return read_line


def test_eval_treats_input_as_one_sexpr():
    interp = Interpreter()
    assert interp.eval("+ 1 2") == Number(3)
    assert interp.eval("(+ 1 2)") == Number(3)
    assert interp.eval("") == EvaluableList()


def test_eval_parse_failure_is_an_error_value():
    result = Interpreter().eval("(+ 1")
    assert result.kind is ErrorKind.PARSE_FAILURE


def test_interpreters_have_independent_roots():
    first, second = Interpreter(), Interpreter()
    first.eval("def {x} 1")
    assert first.eval("x") == Number(1)
    assert second.eval("x").kind is ErrorKind.UNBOUND_SYMBOL


def test_eval_prelude_reports_and_continues():
    reported = []
    interp = Interpreter(report=reported.append)
    interp.eval_prelude("(def {a} 1) (nope) (def {b} 2)")
    assert interp.eval("+ a b") == Number(3)
    assert len(reported) == 1


def test_interpreter_load(tmp_path):
    path = tmp_path / "prelude.lspy"
    path.write_text(r"(def {inc} (\ {n} {+ n 1}))", encoding="utf-8")
    interp = Interpreter()
    assert interp.load(str(path)) == EvaluableList()
    assert interp.eval("inc 41") == Number(42)
    assert interp.load(str(tmp_path / "nope.lspy")).kind is ErrorKind.PARSE_FAILURE


def test_repl_prints_results_and_errors(capsys):
    repl(Interpreter(), feed("+ 1 2", "foo", "", "def {a} 5", "a", "{1 \"x\"}"), prompt="")
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "3",
        "Error: unbound symbol 'foo'!",
        "()",
        "5",
        '{1 "x"}',
        "",
    ]


def test_repl_survives_runaway_recursion(capsys):
    interp = Interpreter()
    repl(interp, feed(r"def {loop} (\ {n} {loop n})", "loop 1", "+ 1 1"), prompt="")
    out = capsys.readouterr().out.splitlines()
    assert out[1] == "Error: maximum recursion depth exceeded"
    assert out[2] == "2"


def test_main_loads_files_without_repl(tmp_path, capsys):
    good = tmp_path / "good.lspy"
    good.write_text("(def {x} 1)\n(oops)\n", encoding="utf-8")
    assert main(["--no-repl", str(good)]) == 0
    assert "Error: unbound symbol 'oops'!" in capsys.readouterr().out


def test_main_reports_unloadable_file(tmp_path, capsys):
    assert main(["--no-repl", str(tmp_path / "missing.lspy")]) == 1
    assert "Could not load Library" in capsys.readouterr().out


def test_main_rejects_bad_recursion_limit(monkeypatch):
    monkeypatch.setenv("LISPY_RECURSION_LIMIT", "lots")
    with pytest.raises(ValueError):
        main(["--no-repl"])


def test_main_reports_unloadable_file_once(tmp_path, capsys, caplog):
    caplog.set_level(logging.WARNING)
    main(["--no-repl", str(tmp_path / "missing.lspy")])
    assert capsys.readouterr().out.count("Could not load Library") == 1
    assert caplog.records == []


def test_main_survives_runaway_recursion_in_file(tmp_path, capsys):
    looping = tmp_path / "loop.lspy"
    looping.write_text("(def {loop} (\\ {n} {loop n}))\n(loop 1)\n", encoding="utf-8")
    assert main(["--no-repl", str(looping)]) == 1
    assert "Error: maximum recursion depth exceeded" in capsys.readouterr().out


def test_main_prints_banner_before_loading_files(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    source = tmp_path / "lib.lspy"
    source.write_text("(oops)\n", encoding="utf-8")
    assert main([str(source)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("lispy Version")
    assert out.index("Error: unbound symbol 'oops'!") > 0


def test_no_banner_without_repl(capsys):
    assert main(["--no-repl"]) == 0
    assert capsys.readouterr().out == ""


# -------------------------------
# Configuration
# -------------------------------
def test_repl_uses_configured_prompt(monkeypatch):
    monkeypatch.setenv("LISPY_PROMPT", "λ ")
    prompts = []
    lines = feed("+ 1 2")

    def read_line(prompt):
        prompts.append(prompt)
        return lines(prompt)

    repl(Interpreter(), read_line)
    assert prompts == ["λ ", "λ "]


@pytest.mark.parametrize(
    "env_value,expected",
    [
        (None, "lispy> "),
        ("> ", "> "),
    ],
)
def test_get_prompt(monkeypatch, env_value, expected):
    if env_value is None:
        monkeypatch.delenv("LISPY_PROMPT", raising=False)
    else:
        monkeypatch.setenv("LISPY_PROMPT", env_value)
    assert get_prompt() == expected


@pytest.mark.parametrize(
    "env_value,expected",
    [
        (None, "WARNING"),
        ("debug", "DEBUG"),
        ("Error", "ERROR"),
    ],
)
def test_get_log_level(monkeypatch, env_value, expected):
    if env_value is None:
        monkeypatch.delenv("LISPY_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("LISPY_LOG_LEVEL", env_value)
    assert get_log_level() == expected
