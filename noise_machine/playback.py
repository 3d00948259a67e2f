"""
Lifecycle of the background noise player.

The PID marker file is the only record of a running player. Every check
re-reads it and asks the OS whether the PID is still alive.
"""

import logging
import os
import threading
from typing import NamedTuple, Optional

from .config import Config
from .downloader import download_if_missing
from .errors import MarkerError, SignalError, StaleProcessError
from .supervisor import OSProcessSupervisor, ProcessSupervisor
from .volume import AmixerBackend, VolumeBackend

logger = logging.getLogger(__name__)

RUNNING = 'running'
STOPPED = 'not running'


class StartResult(NamedTuple):
    pid: int
    already_running: bool


class PlaybackManager:
    def __init__(
        self,
        config: Config,
        supervisor: Optional[ProcessSupervisor] = None,
        volume: Optional[VolumeBackend] = None,
        downloader=download_if_missing,
    ):
        self.config = config
        self.supervisor = supervisor or OSProcessSupervisor()
        self.volume = volume or AmixerBackend(config.mixer_control, config.mixer_card)
        self.downloader = downloader
        self._lock = threading.Lock()

    def read_pid(self) -> Optional[int]:
        """PID recorded in the marker file, or None if absent or unreadable"""
        try:
            text = self.config.pid_file.read_text().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning('Could not read %s: %s', self.config.pid_file, e)
            return None
        try:
            return int(text)
        except ValueError:
            logger.warning('Ignoring non-numeric PID marker %r', text)
            return None

    def _write_pid(self, pid: int) -> None:
        pid_file = self.config.pid_file
        tmp_path = pid_file.with_suffix('.txt.tmp')
        try:
            tmp_path.write_text(str(pid))
            os.replace(tmp_path, pid_file)
        except OSError as e:
            raise MarkerError(str(e)) from e

    def _remove_marker(self) -> None:
        try:
            self.config.pid_file.unlink()
        except FileNotFoundError:
            pass

    def _live_pid(self) -> Optional[int]:
        pid = self.read_pid()
        if pid is None:
            # Unreadable markers are left alone
            return None
        if self.supervisor.is_alive(pid):
            return pid
        logger.info('Removing stale PID marker %s (PID %d)', self.config.pid_file, pid)
        self._remove_marker()
        return None

    def status(self) -> str:
        with self._lock:
            return RUNNING if self._live_pid() is not None else STOPPED

    def is_running(self) -> bool:
        return self.status() == RUNNING

    def start(self) -> StartResult:
        """Start the player unless it is already running"""
        with self._lock:
            pid = self._live_pid()
            if pid is not None:
                return StartResult(pid, True)

            self.downloader(self.config.noise_file, self.config.noise_url)

            pid = self.supervisor.spawn(self.config.player_command())
            try:
                self._write_pid(pid)
            except MarkerError:
                # Without a marker nothing could ever stop this child
                try:
                    self.supervisor.signal(pid)
                except (SignalError, StaleProcessError) as e:
                    logger.warning('Could not stop unrecorded PID %d: %s', pid, e)
                raise

            self.volume.set(self.config.default_volume)
            logger.info('Playback started with PID %d', pid)
            return StartResult(pid, False)

    def stop(self) -> bool:
        """Stop the player. Returns False if nothing was running."""
        with self._lock:
            pid = self._live_pid()
            if pid is None:
                return False
            try:
                self.supervisor.signal(pid)
            except StaleProcessError:
                self._remove_marker()
                raise
            self._remove_marker()
            logger.info('Playback with PID %d stopped', pid)
            return True
