# tests/test_repl.py
"""
Tests for the interactive loop, the tree printer and the command line.
"""

import io
import logging

import pytest

from arith.__main__ import EXIT_DIAGNOSTICS, EXIT_FATAL, EXIT_OK, build_parser, main
from arith.compilation import Compilation
from arith.parser import parse
from arith.printer import Colors, get_colors, pretty_print
from arith.repl import Repl, ReplConfig


def run_session(text, **config):
    stdin = io.StringIO(text)
    stdout = io.StringIO()
    repl = Repl(ReplConfig(color=False, **config), stdin=stdin, stdout=stdout)
    status = repl.run()
    return status, stdout.getvalue()


class TestRepl:

    def test_prints_values(self):
        status, out = run_session("1 + 2\n-5 * 2\n\n")
        assert status == 0
        assert out == "> 3\n> -10\n> "

    def test_blank_line_ends_session(self):
        _, out = run_session("\n1 + 2\n")
        assert "3" not in out

    def test_eof_ends_session(self):
        status, out = run_session("4")
        assert status == 0
        assert "4\n" in out

    def test_diagnostics_are_underlined(self):
        _, out = run_session("1 + true\n\n")
        assert "Binary operator '+' is not defined for type int and bool" in out
        assert "    1 + true\n      ^\n" in out

    def test_syntax_error(self):
        _, out = run_session("1 $ 2\n\n")
        assert "Unexpected character '$'" in out
        assert "ARITH-1001" in out

    def test_division_by_zero_is_reported(self):
        _, out = run_session("10 / 0\n2\n\n")
        assert "Division by zero" in out
        assert "ARITH-5001" in out
        assert out.endswith("> 2\n> ")

    def test_session_survives_a_chain_too_deep_to_bind(self):
        chain = " + ".join(["1"] * 2000)
        _, out = run_session(f"{chain}\n2\n\n")
        assert "Expression is nested too deeply" in out
        assert "ARITH-5002" in out
        assert out.endswith("> 2\n> ")

    def test_session_survives_deep_tree_printing(self):
        chain = " + ".join(["1"] * 2000)
        _, out = run_session(f"#showTree\n{chain}\n2\n\n")
        assert "ARITH-5002" in out
        assert out.endswith("└── BoundLiteralExpression 2 : int\n2\n> ")

    def test_show_tree_toggle(self):
        _, out = run_session("#showTree\n1 + 2\n#showTree\n\n")
        assert "Showing parse trees." in out
        assert "Not showing parse trees." in out
        assert "└── BinaryExpression" in out
        assert "BoundBinaryExpression ADDITION : int" in out

    def test_clear(self):
        _, out = run_session("#cls\n\n")
        assert "\033[2J" in out

    def test_run_line_status(self):
        repl = Repl(ReplConfig(color=False), stdin=io.StringIO(), stdout=io.StringIO())
        assert repl.run_line("1") is True
        assert repl.run_line("1 + true") is False

    def test_colors_wrap_diagnostics(self):
        stdout = io.StringIO()
        repl = Repl(ReplConfig(color=True), stdin=io.StringIO(), stdout=stdout)
        repl.run_line("-true")
        assert "\033[31m" in stdout.getvalue()


class TestReplConfig:

    def test_defaults_are_valid(self):
        assert ReplConfig().validate() == []

    def test_empty_prompt_warns(self, caplog):
        Repl(ReplConfig(prompt=""), stdin=io.StringIO(), stdout=io.StringIO())
        assert "empty prompt" in caplog.text


class TestPrinter:

    def test_syntax_tree(self):
        out = io.StringIO()
        pretty_print(parse("1 + 2").root, out)
        assert out.getvalue() == (
            "└── BinaryExpression\n"
            "    ├── LiteralExpression\n"
            "    │   └── NumberToken 1\n"
            "    ├── PlusToken\n"
            "    └── LiteralExpression\n"
            "        └── NumberToken 2\n"
        )

    def test_bound_tree(self):
        out = io.StringIO()
        pretty_print(Compilation(parse("-3")).bound_expression, out)
        assert out.getvalue() == (
            "└── BoundUnaryExpression NEGATION : int\n"
            "    └── BoundLiteralExpression 3 : int\n"
        )

    def test_false_value_is_printed(self):
        out = io.StringIO()
        pretty_print(parse("false").root, out)
        assert "FalseKeyword False" in out.getvalue()

    def test_colors_disabled_for_plain_streams(self):
        assert not get_colors(io.StringIO()).enabled
        assert Colors(enabled=False).RED == ""


class TestCommandLine:

    def test_parser_commands(self):
        args = build_parser().parse_args(["eval", "1"])
        assert args.expressions == ["1"]

    def test_eval(self, capsys):
        assert main(["eval", "1 + 2", "-5 * 2"]) == EXIT_OK
        assert capsys.readouterr().out == "3\n-10\n"

    def test_eval_diagnostics(self, capsys):
        assert main(["--no-color", "eval", "1 + true"]) == EXIT_DIAGNOSTICS
        assert "not defined for type int and bool" in capsys.readouterr().out

    def test_eval_division_by_zero(self, capsys):
        assert main(["eval", "10 / 0", "1"]) == EXIT_FATAL
        out = capsys.readouterr().out
        assert "Division by zero" in out
        assert out.endswith("1\n")

    def test_tree(self, capsys):
        assert main(["tree", "1 * 2"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "StarToken" in out
        assert "BoundBinaryExpression MULTIPLICATION : int" in out

    def test_eval_chain_too_deep(self, capsys):
        chain = " + ".join(["1"] * 2000)
        assert main(["eval", chain, "1"]) == EXIT_FATAL
        out = capsys.readouterr().out
        assert "ARITH-5002" in out
        assert out.endswith("1\n")

    def test_tree_too_deep(self, capsys):
        assert main(["tree", "(" * 500 + "1" + ")" * 500]) == EXIT_FATAL
        assert "nested too deeply" in capsys.readouterr().out

    def test_logging_handler_installed_once(self):
        main(["eval", "1"])
        main(["-v", "eval", "1"])
        logger = logging.getLogger("arith")
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
        logger.setLevel(logging.WARNING)

    def test_tree_with_diagnostics(self, capsys):
        assert main(["tree", "1 * true"]) == EXIT_DIAGNOSTICS

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--version"])
        assert info.value.code == 0
        assert "arith" in capsys.readouterr().out
