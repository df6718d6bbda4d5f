"""Tests for the subprocess-backed ProcessRunner."""

import logging
import sys

from dotnet_globals import ProcessInvokerProtocol
from dotnet_globals import ProcessRunner


def test_success_returns_true():
    """Test that a zero exit status reports success."""
    assert ProcessRunner().run(sys.executable, "-c", "pass") is True


def test_nonzero_exit_returns_false():
    """Test that a non-zero exit status reports failure."""
    assert ProcessRunner().run(sys.executable, "-c", "import sys; sys.exit(3)") is False


def test_missing_command_returns_false():
    """Test that a command that cannot be spawned reports failure without raising."""
    assert ProcessRunner().run("definitely-not-a-real-command-xyz") is False


def test_timeout_returns_false():
    """Test that exceeding the deadline reports failure."""
    runner = ProcessRunner(timeout=0.5)

    assert runner.run(sys.executable, "-c", "import time; time.sleep(10)") is False


def test_output_forwarded_to_logging(caplog):
    """Test that stdout and stderr lines reach the logger."""
    with caplog.at_level(logging.INFO, logger="dotnet_globals.process"):
        ProcessRunner().run(
            sys.executable, "-c", "import sys; print('restored 3 packages'); print('careful', file=sys.stderr)"
        )

    messages = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert (logging.INFO, "restored 3 packages") in messages
    assert (logging.WARNING, "careful") in messages


def test_runner_satisfies_protocol():
    """Test that ProcessRunner can be injected wherever a process invoker is expected."""
    assert isinstance(ProcessRunner(), ProcessInvokerProtocol)
