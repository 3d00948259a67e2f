"""Mixer volume control through amixer"""

import logging
import re
import shutil
import subprocess
from typing import List, Optional

from .errors import VolumeError, VolumeRangeError

logger = logging.getLogger(__name__)

VOLUME_PATTERN = re.compile(r'\[(\d+)%\]')


def validate_level(level) -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        raise VolumeRangeError('volume must be an integer')
    if level < 0 or level > 100:
        raise VolumeRangeError('volume must be between 0 and 100')
    return level


def parse_volume(output: str) -> int:
    """Pull the first percentage out of `amixer sget` output"""
    match = VOLUME_PATTERN.search(output or '')
    if not match:
        raise VolumeError('failed to parse volume')
    return int(match.group(1))


class VolumeBackend:
    def get(self) -> int:
        raise NotImplementedError

    def set(self, level: int) -> None:
        raise NotImplementedError


class AmixerBackend(VolumeBackend):
    """Query and set a simple mixer control with mapped (-M) percentages"""

    def __init__(self, control: str = 'PCM', card: Optional[str] = None):
        self.control = control
        self.card = card or None

    def _base_cmd(self) -> List[str]:
        amixer_path = shutil.which('amixer') or '/usr/bin/amixer'
        cmd = [amixer_path]
        if self.card:
            cmd += ['-c', str(self.card)]
        return cmd

    def _run(self, cmd: List[str]) -> str:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or '').strip()
            raise VolumeError(stderr or f'amixer exited with status {e.returncode}') from e
        except OSError as e:
            raise VolumeError(str(e)) from e
        return result.stdout

    def get(self) -> int:
        output = self._run(self._base_cmd() + ['-M', 'sget', self.control])
        return parse_volume(output)

    def set(self, level: int) -> None:
        level = validate_level(level)
        self._run(self._base_cmd() + ['-q', '-M', 'sset', self.control, f'{level}%'])
        logger.info('Mixer %s set to %d%%', self.control, level)
