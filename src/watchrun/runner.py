"""Running the reaction command in a child process."""

import logging
import os
from typing import Optional, Sequence

from .config import RunOptions
from .exceptions import ConfigError, SpawnError
from .models import Reaction, SpawnState

logger = logging.getLogger(__name__)

# Environment variable carrying the path of the file that changed
TRIGGER_ENV = "WATCHRUN_PATH"

EXIT_EXEC_FAILED = 127
EXIT_DETACH_FAILED = 1


class CommandRunner:
    """
    Spawns the reaction command, either waiting for it or detaching it.

    With ``wait`` the forked child execs the command and the caller blocks
    until it exits. Without ``wait`` the forked child forks again and exits
    at once; the grandchild execs the command as an orphan adopted by init,
    and the caller only reaps the short-lived middle process, so no zombie
    is left behind and the watch loop is not held up.
    """

    def __init__(self, command: Sequence[str], options: Optional[RunOptions] = None):
        """
        Initialize the runner.

        Args:
            command: Argv of the reaction command
            options: Run options (wait/coalesce)

        Raises:
            ConfigError: If the command is empty
        """
        if not command:
            raise ConfigError("no command.")
        self.command = tuple(command)
        self.options = options or RunOptions()

    def run(self, trigger: str) -> Reaction:
        """
        Run the command once in response to a change of ``trigger``.

        Spawn failures are logged and reported through the returned
        reaction's state; they are never raised.

        Args:
            trigger: Canonical path of the changed file

        Returns:
            Reaction record in state DONE or FAILED
        """
        reaction = Reaction(command=self.command, trigger=trigger, wait=self.options.wait)

        try:
            pid = self._spawn(trigger)
        except SpawnError as e:
            logger.error(str(e))
            reaction.state = SpawnState.FAILED
            return reaction

        reaction.pid = pid
        reaction.state = SpawnState.EXECING if self.options.wait else SpawnState.DETACHING

        try:
            _, status = os.waitpid(pid, 0)
        except ChildProcessError as e:
            logger.error(f"failed to reap child {pid}: {e}")
            reaction.state = SpawnState.FAILED
            return reaction

        reaction.status = os.waitstatus_to_exitcode(status)

        if not self.options.wait and reaction.status != 0:
            logger.error(f"failed to detach command: {self.command[0]}")
            reaction.state = SpawnState.FAILED
            return reaction

        if self.options.wait:
            logger.debug(f"command {self.command[0]} exited with status {reaction.status}")
        reaction.state = SpawnState.DONE
        return reaction

    def _spawn(self, trigger: str) -> int:
        """
        Fork the immediate child.

        Returns:
            Pid of the immediate child (in the parent only)

        Raises:
            SpawnError: If the fork fails
        """
        try:
            pid = os.fork()
        except OSError as e:
            raise SpawnError(f"failed to fork: {e.strerror or e}") from e

        if pid == 0:
            try:
                if self.options.wait:
                    self._exec(trigger)
                else:
                    self._detach(trigger)
            finally:
                os._exit(EXIT_EXEC_FAILED)
        return pid

    def _detach(self, trigger: str) -> None:
        """Runs in the immediate child: fork the grandchild and exit."""
        try:
            pid = os.fork()
        except OSError as e:
            _child_error(f"failed to fork: {e.strerror or e}")
            os._exit(EXIT_DETACH_FAILED)

        if pid == 0:
            self._exec(trigger)
        os._exit(0)

    def _exec(self, trigger: str) -> None:
        """Runs in the child that becomes the command. Never returns."""
        _close_inherited_fds()
        env = dict(os.environ)
        env[TRIGGER_ENV] = trigger
        try:
            os.execvpe(self.command[0], self.command, env)
        except (OSError, ValueError) as e:
            _child_error(f"{self.command[0]}: {getattr(e, 'strerror', None) or e}")
        os._exit(EXIT_EXEC_FAILED)


def _close_inherited_fds() -> None:
    # Descriptors opened outside Python (watchdog's inotify instance) are not
    # close-on-exec; only stdin, stdout and stderr pass to the command.
    try:
        max_fd = os.sysconf("SC_OPEN_MAX")
    except (OSError, ValueError):
        max_fd = 256
    os.closerange(3, max_fd if max_fd > 3 else 256)


def _child_error(message: str) -> None:
    # Forked children write straight to fd 2; logging handlers belong to the parent.
    try:
        os.write(2, f"watchrun: {message}\n".encode(errors="replace"))
    except OSError:
        pass
