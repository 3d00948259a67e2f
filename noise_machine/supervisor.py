"""
Process supervision for the background player.

Processes are addressed by PID only, so a controller restart can pick up
a player spawned by an earlier run.
"""

import logging
import os
import shutil
import signal
import subprocess
from typing import List

from .errors import SignalError, SpawnError, StaleProcessError

logger = logging.getLogger(__name__)


class ProcessSupervisor:
    """Spawn, signal and probe OS processes by PID"""

    def spawn(self, argv: List[str]) -> int:
        raise NotImplementedError

    def signal(self, pid: int, sig: int = signal.SIGTERM) -> None:
        raise NotImplementedError

    def is_alive(self, pid: int) -> bool:
        raise NotImplementedError


class OSProcessSupervisor(ProcessSupervisor):
    """Supervisor backed by subprocess and os.kill"""

    def spawn(self, argv: List[str]) -> int:
        argv = list(argv)
        argv[0] = shutil.which(argv[0]) or argv[0]
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise SpawnError(str(e)) from e
        logger.info('Spawned %s (pid %d)', argv[0], process.pid)
        return process.pid

    def signal(self, pid: int, sig: int = signal.SIGTERM) -> None:
        try:
            os.kill(pid, sig)
        except ProcessLookupError as e:
            raise StaleProcessError(f'no process with PID {pid}') from e
        except OSError as e:
            raise SignalError(str(e)) from e
        self._reap(pid)

    def is_alive(self, pid: int) -> bool:
        if pid <= 0:
            return False
        if self._reap(pid):
            return False
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Exists but owned by another user
            return True
        return True

    @staticmethod
    def _reap(pid: int) -> bool:
        """Collect an exited child of ours so it is not left as a zombie."""
        try:
            reaped, _ = os.waitpid(pid, os.WNOHANG)
        except ChildProcessError:
            return False
        return reaped == pid
