from __future__ import annotations

import base64
import signal
from pathlib import Path

import pytest

from noise_machine.app import create_app
from noise_machine.config import Config
from noise_machine.errors import SpawnError, StaleProcessError, VolumeError
from noise_machine.playback import PlaybackManager
from noise_machine.supervisor import ProcessSupervisor
from noise_machine.volume import VolumeBackend, validate_level


class FakeSupervisor(ProcessSupervisor):
    def __init__(self, first_pid: int = 4242) -> None:
        self.next_pid = first_pid
        self.alive: set[int] = set()
        self.spawned: list[list[str]] = []
        self.signalled: list[tuple[int, int]] = []
        self.fail_spawn = False

    def spawn(self, argv):
        if self.fail_spawn:
            raise SpawnError('[Errno 2] No such file or directory: play')
        pid = self.next_pid
        self.next_pid += 1
        self.spawned.append(list(argv))
        self.alive.add(pid)
        return pid

    def signal(self, pid, sig=signal.SIGTERM):
        self.signalled.append((pid, sig))
        if pid not in self.alive:
            raise StaleProcessError(f'no process with PID {pid}')
        self.alive.discard(pid)

    def is_alive(self, pid):
        return pid in self.alive


class FakeVolume(VolumeBackend):
    def __init__(self, level: int = 30) -> None:
        self.level = level
        self.calls: list[int] = []
        self.fail = False

    def get(self):
        if self.fail:
            raise VolumeError('failed to parse volume')
        return self.level

    def set(self, level):
        level = validate_level(level)
        if self.fail:
            raise VolumeError('amixer: Unable to find simple control')
        self.calls.append(level)
        self.level = level


class FakeDownloader:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, str]] = []
        self.error: Exception | None = None

    def __call__(self, path, url):
        self.calls.append((Path(path), url))
        if self.error is not None:
            raise self.error
        path = Path(path)
        if not path.exists():
            path.write_bytes(b'ID3')
        return True


@pytest.fixture(autouse=True)
def _no_auth_env(monkeypatch):
    monkeypatch.delenv('AUTH_USER', raising=False)
    monkeypatch.delenv('AUTH_PASSWORD', raising=False)


@pytest.fixture
def config(tmp_path):
    cfg = Config(base_dir=tmp_path / 'noise', noise_url='http://example.com/media/brook.mp3')
    cfg.default_volume = 50
    cfg.ensure_dirs()
    return cfg


@pytest.fixture
def supervisor():
    return FakeSupervisor()


@pytest.fixture
def volume():
    return FakeVolume()


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def manager(config, supervisor, volume, downloader):
    return PlaybackManager(config, supervisor=supervisor, volume=volume, downloader=downloader)


@pytest.fixture
def app(config, manager, volume):
    app = create_app(config, manager=manager, volume_backend=volume)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def basic_auth():
    def build(user: str, password: str) -> dict:
        token = base64.b64encode(f'{user}:{password}'.encode()).decode()
        return {'Authorization': f'Basic {token}'}
    return build
