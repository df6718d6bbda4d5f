"""Default process invoker backed by subprocess.

Output of the child process is forwarded to logging; callers only see a
success flag and raise their own domain error when it is False.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Run external commands, optionally bounded by a timeout in seconds."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def run(self, command: str, *args: str) -> bool:
        """Run command and wait for it to exit.

        Args:
            command: Executable name or path
            *args: Arguments passed verbatim to the command

        Returns:
            True if the process exited with status 0, False on non-zero exit,
            spawn failure or timeout
        """
        argv = [command, *args]
        logger.debug(f"Running: {' '.join(argv)}")

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning(f"Command not found: {command}")
            return False
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {self.timeout}s: {' '.join(argv)}")
            return False
        except OSError as e:
            logger.warning(f"Failed to start {command}: {e}")
            return False

        for line in completed.stdout.splitlines():
            logger.info(line)
        for line in completed.stderr.splitlines():
            logger.warning(line)

        if completed.returncode != 0:
            logger.debug(f"{command} exited with status {completed.returncode}")
            return False
        return True
