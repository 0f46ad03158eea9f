#!/usr/bin/env python3
"""
Tests for the command-line entry point, argument parsing and REPL helpers.
"""

import logging
import sys

import pytest
from prompt_toolkit.document import Document

from cmdweave.cli._repl import CommandCompleter, eval_line
from cmdweave.cli.commands.builtins.cli_script import script_lines
from cmdweave.cli.args import parse_command_args
from cmdweave.cli.main import (
    EXIT_FAILED,
    EXIT_OK,
    EXIT_USAGE,
    load_registry,
    main,
    make_context,
    make_dispatcher,
    run_command,
)
from cmdweave.config import Config, ConfigManager
from cmdweave.core import (
    CommandDescriptor,
    CommandUsageError,
    Diagnostic,
    DiagnosticKind,
)
from cmdweave.dispatch import OutcomeStatus
from cmdweave.logging import configure_logging, log_diagnostics


def run_main(*argv):
    return main(["--no-user-modules", *argv])


@pytest.fixture
def cli(temp_config):
    """Registry, dispatcher and context as the CLI builds them."""
    config = Config()
    registry = load_registry(config, include_user_modules=False)
    with make_dispatcher(config) as dispatcher:
        yield registry, dispatcher, make_context(config, registry)


# ============================================================================
# main()
# ============================================================================

class TestMain:
    """Tests for one-shot invocation."""

    def test_exact_command(self, temp_config, capsys):
        assert run_main("sys.info") == EXIT_OK
        assert "System Information:" in capsys.readouterr().out

    def test_suffix_command(self, temp_config, capsys):
        assert run_main("info") == EXIT_OK
        assert "System Information:" in capsys.readouterr().out

    def test_list(self, temp_config, capsys):
        assert run_main("--list") == EXIT_OK
        out = capsys.readouterr().out
        assert "sys.info" in out
        assert "config.set" in out
        assert "dbg.echo" not in out

    def test_unknown_command(self, temp_config, capsys):
        assert run_main("xyzzy") == EXIT_USAGE
        assert "Error (command_not_found): unknown command: xyzzy" in capsys.readouterr().err

    def test_ambiguous_command(self, temp_config, capsys):
        assert run_main("sys") == EXIT_USAGE
        err = capsys.readouterr().err
        assert "? Did you mean:\n  1. sys.cmd\n  2. sys.info" in err

    def test_hidden_command_runs(self, temp_config, capsys):
        assert run_main("dbg.echo", "hello", "world") == EXIT_OK
        assert capsys.readouterr().out.strip() == "hello world"

    def test_usage_error(self, temp_config, capsys):
        assert run_main("cli.debug", "maybe") == EXIT_USAGE
        assert "error: cli.debug:" in capsys.readouterr().err

    def test_handler_failure(self, temp_config, capsys):
        assert run_main("config.get", "no_such_key") == EXIT_FAILED
        assert "Error (command_failed):" in capsys.readouterr().err

    def test_debug_flag(self, temp_config, capsys):
        assert run_main("--debug", "config.get", "no_such_key") == EXIT_FAILED
        assert "Debug Information:" in capsys.readouterr().err

    def test_config_set_and_get(self, temp_config, capsys):
        assert run_main("config.set", "max_suggestions", "3") == EXIT_OK
        assert ConfigManager().load().max_suggestions == 3

        capsys.readouterr()
        assert run_main("config.get", "max_suggestions") == EXIT_OK
        assert capsys.readouterr().out.strip() == "max_suggestions: 3"

    def test_cli_debug_persists(self, temp_config, capsys):
        assert run_main("cli.debug", "on") == EXIT_OK
        assert ConfigManager().load().debug is True

    def test_sys_cmd(self, temp_config, capsys):
        code = run_main("sys.cmd", sys.executable, "-c", "print('hi')")
        assert code == EXIT_OK
        assert capsys.readouterr().out.strip() == "hi"

    def test_sys_cmd_nonzero_exit(self, temp_config, capsys):
        code = run_main("sys.cmd", sys.executable, "-c", "import sys; sys.exit(3)")
        assert code == EXIT_FAILED
        assert "exited with status 3" in capsys.readouterr().err

    def test_configured_module(self, temp_config, tmp_path, monkeypatch, capsys):
        (tmp_path / "cmdweave_test_cli_extra.py").write_text(
            "from cmdweave import ModuleBuilder\n"
            "module = ModuleBuilder('extra')\n"
            "module.add('extra.ping', lambda args, ctx: 'pong')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        ConfigManager().set("modules", ["cmdweave_test_cli_extra:module"])

        assert run_main("ping") == EXIT_OK
        assert capsys.readouterr().out.strip() == "pong"

    def test_user_modules_dir(self, temp_config, tmp_path, capsys):
        module_dir = tmp_path / "modules" / "greet"
        module_dir.mkdir(parents=True)
        (module_dir / "__init__.py").write_text(
            "from cmdweave import ModuleBuilder\n"
            "module = ModuleBuilder('greet')\n"
            "module.add('greet.hello', lambda args, ctx: 'hi there')\n"
        )
        ConfigManager().set("modules_dir", str(tmp_path / "modules"))

        assert main(["greet.hello"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "hi there"


# ============================================================================
# cli.script
# ============================================================================

class TestScript:
    """Tests for running commands from a script file."""

    def test_script_lines(self):
        text = "# comment\n\n  help  \n\t# indented comment\nsys.info\r\n"
        assert script_lines(text) == ["help", "sys.info"]

    def test_runs_each_line(self, temp_config, tmp_path, capsys):
        script = tmp_path / "batch.txt"
        script.write_text("# setup\n\ndbg.echo hello\n  sys.info\nxyzzy\n")

        assert run_main("cli.script", str(script)) == EXIT_OK
        out = capsys.readouterr().out
        assert "script> dbg.echo hello\nhello" in out
        assert "script> sys.info\nSystem Information:" in out
        assert "Error (command_not_found): unknown command: xyzzy" in out
        assert "# setup" not in out

    def test_failing_line_does_not_stop_script(self, temp_config, tmp_path, capsys):
        script = tmp_path / "batch.txt"
        script.write_text("cli.debug maybe\nconfig.get no_such_key\nconfig.set max_suggestions 2\n")

        assert run_main("cli.script", str(script)) == EXIT_OK
        out = capsys.readouterr().out
        assert "error: cli.debug:" in out
        assert "Error (command_failed):" in out
        assert ConfigManager().load().max_suggestions == 2

    def test_nested_script_refused(self, temp_config, tmp_path, capsys):
        script = tmp_path / "loop.txt"
        script.write_text(f"cli.script {script}\ndbg.echo after\n")

        assert run_main("cli.script", str(script)) == EXIT_OK
        out = capsys.readouterr().out
        assert "error: cli.script cannot be nested" in out
        assert out.rstrip().endswith("after")

    def test_missing_file(self, temp_config, tmp_path, capsys):
        assert run_main("cli.script", str(tmp_path / "missing.txt")) == EXIT_FAILED
        assert "FileNotFoundError" in capsys.readouterr().err

    def test_from_repl(self, cli, tmp_path, capsys):
        script = tmp_path / "batch.txt"
        script.write_text("dbg.echo from script\n")

        eval_line(f"cli.script {script}", *cli)
        assert "script> dbg.echo from script\nfrom script" in capsys.readouterr().out


# ============================================================================
# run_command and argument parsing
# ============================================================================

def _descriptor(**kwargs):
    return CommandDescriptor(
        name="demo", handler=lambda args, ctx: None, declared_in="test", **kwargs
    )


class TestArgs:
    """Tests for per-command argument parsing."""

    def test_default_parser_collects_words(self):
        args = parse_command_args(_descriptor(), ["a", "b"])
        assert args.args == ["a", "b"]

    def test_configure_parser_hook(self):
        def hook(parser):
            parser.add_argument("count", type=int)

        args = parse_command_args(_descriptor(configure_parser=hook), ["3"])
        assert args.count == 3

    def test_usage_error_raises(self):
        def hook(parser):
            parser.add_argument("count", type=int)

        with pytest.raises(CommandUsageError, match="demo"):
            parse_command_args(_descriptor(configure_parser=hook), ["three"])

    def test_run_command_skips_parsing_when_ambiguous(self, cli):
        registry, dispatcher, ctx = cli
        outcome = run_command("sys", ["--bogus"], registry, dispatcher, ctx)
        assert outcome.status is OutcomeStatus.AMBIGUOUS

    def test_run_command_parses_for_fuzzy_match(self, cli):
        registry, dispatcher, ctx = cli
        outcome = run_command("echo", ["x", "y"], registry, dispatcher, ctx)
        assert outcome.ok
        assert outcome.output == "x y"


# ============================================================================
# REPL helpers
# ============================================================================

class TestRepl:
    """Tests for REPL line evaluation and completion."""

    def test_eval_line(self, cli, capsys):
        eval_line("about", *cli)
        assert "cmdweave" in capsys.readouterr().out

    def test_eval_line_quoted_words(self, cli, capsys):
        eval_line('dbg.echo "two words" three', *cli)
        assert capsys.readouterr().out.strip() == "two words three"

    def test_eval_line_bad_quotes(self, cli, capsys):
        eval_line('dbg.echo "unterminated', *cli)
        assert capsys.readouterr().out.startswith("error:")

    def test_eval_line_blank(self, cli, capsys):
        eval_line("   ", *cli)
        assert capsys.readouterr().out == ""

    def test_eval_line_nested_repl(self, cli, capsys):
        eval_line("repl", *cli)
        assert "already running" in capsys.readouterr().out

    def test_eval_line_usage_error(self, cli, capsys):
        eval_line("cli.debug maybe", *cli)
        assert capsys.readouterr().out.startswith("error: cli.debug:")

    def test_completer_namespace(self, cli):
        registry = cli[0]
        completer = CommandCompleter(registry)
        names = [c.text for c in completer.get_completions(Document("sys."), None)]
        assert names == ["sys.cmd", "sys.info"]

    def test_completer_skips_hidden(self, cli):
        completer = CommandCompleter(cli[0])
        assert list(completer.get_completions(Document("dbg"), None)) == []

    def test_completer_only_first_word(self, cli):
        completer = CommandCompleter(cli[0])
        assert list(completer.get_completions(Document("help sys"), None)) == []


# ============================================================================
# Logging
# ============================================================================

class TestLogging:
    """Tests for logging setup and diagnostics output."""

    def test_log_diagnostics(self, caplog):
        diagnostics = [
            Diagnostic(
                kind=DiagnosticKind.DUPLICATE_COMMAND_NAME,
                subject="about",
                detail="Command 'about' declared by a, b; using the one from 'b'",
                sources=("a", "b"),
            ),
        ]
        with caplog.at_level(logging.WARNING, logger="cmdweave.core"):
            assert log_diagnostics(diagnostics) == 1
        assert "duplicate_command_name" in caplog.text

    def test_configure_logging_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cmdweave.log"
        logger = configure_logging("debug", log_file)
        try:
            assert logger.level == logging.DEBUG
            logging.getLogger("cmdweave.test").debug("written to file")
            for handler in logger.handlers:
                handler.flush()
            assert "[DEBUG] cmdweave.test: written to file" in log_file.read_text()
        finally:
            configure_logging("WARNING")

    def test_configure_logging_replaces_handlers(self):
        logger = configure_logging("INFO")
        count = len(logger.handlers)
        configure_logging("INFO")
        assert len(logger.handlers) == count
        configure_logging("WARNING")

    def test_unknown_level_falls_back(self):
        assert configure_logging("chatty").level == logging.WARNING
