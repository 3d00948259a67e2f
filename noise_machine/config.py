"""Runtime configuration loaded from environment variables."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

log = logging.getLogger(__name__)

NOISE_DOWNLOAD_URL = 'https://soundproofinglife.com/wp-content/uploads/2023/06/ambiance_brook_calm-20028.mp3'
DEFAULT_VOLUME = 50


def _env(key: str, default: str = '') -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int = 0) -> int:
    raw = os.environ.get(key, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning('Invalid integer for %s=%r, using default %d', key, raw, default)
        return default


def _default_base_dir() -> Path:
    raw = _env('NOISE_DIR').strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / 'noise'


@dataclass
class Config:
    # Storage
    base_dir: Path = field(default_factory=_default_base_dir)
    noise_url: str = field(default_factory=lambda: _env('NOISE_URL', NOISE_DOWNLOAD_URL))

    # Player
    player: str = field(default_factory=lambda: _env('NOISE_PLAYER', 'play'))
    player_gain: int = field(default_factory=lambda: _env_int('NOISE_PLAYER_GAIN', 10))
    repeat_count: int = field(default_factory=lambda: _env_int('NOISE_REPEAT', 600))
    default_volume: int = field(default_factory=lambda: _env_int('NOISE_DEFAULT_VOLUME', DEFAULT_VOLUME))

    # Mixer
    mixer_control: str = field(default_factory=lambda: _env('NOISE_MIXER_CONTROL', 'PCM'))
    mixer_card: str = field(default_factory=lambda: _env('NOISE_MIXER_CARD', ''))

    # Server
    host: str = field(default_factory=lambda: _env('HOST', '0.0.0.0'))
    port: int = field(default_factory=lambda: _env_int('PORT', 8888))

    def __post_init__(self):
        self.base_dir = Path(self.base_dir)

    @property
    def pid_file(self) -> Path:
        return self.base_dir / 'pid.txt'

    @property
    def noise_file(self) -> Path:
        name = Path(urlparse(self.noise_url).path).name or 'noise.mp3'
        return self.base_dir / name

    def ensure_dirs(self) -> None:
        """Create the base directory. Raises OSError on failure."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def player_command(self) -> list:
        return [
            self.player, '-v', str(self.player_gain),
            str(self.noise_file), 'repeat', str(self.repeat_count),
        ]
