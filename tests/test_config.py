from __future__ import annotations

from pathlib import Path

from noise_machine.config import NOISE_DOWNLOAD_URL, Config


def test_defaults(monkeypatch):
    for key in ('NOISE_DIR', 'NOISE_URL', 'NOISE_DEFAULT_VOLUME', 'PORT', 'HOST', 'NOISE_MIXER_CONTROL'):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv('HOME', '/home/sleeper')

    cfg = Config()

    assert cfg.base_dir == Path('/home/sleeper/noise')
    assert cfg.pid_file == Path('/home/sleeper/noise/pid.txt')
    assert cfg.noise_file == Path('/home/sleeper/noise/ambiance_brook_calm-20028.mp3')
    assert cfg.noise_url == NOISE_DOWNLOAD_URL
    assert cfg.default_volume == 50
    assert cfg.port == 8888
    assert cfg.mixer_control == 'PCM'


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv('NOISE_DIR', str(tmp_path / 'rain'))
    monkeypatch.setenv('NOISE_URL', 'https://example.com/sounds/rain.ogg')
    monkeypatch.setenv('NOISE_DEFAULT_VOLUME', '35')
    monkeypatch.setenv('PORT', '9000')

    cfg = Config()

    assert cfg.base_dir == tmp_path / 'rain'
    assert cfg.noise_file == tmp_path / 'rain' / 'rain.ogg'
    assert cfg.default_volume == 35
    assert cfg.port == 9000


def test_invalid_integer_falls_back(monkeypatch):
    monkeypatch.setenv('PORT', 'eighty')

    assert Config().port == 8888


def test_player_command(tmp_path):
    cfg = Config(base_dir=tmp_path, noise_url='http://example.com/brook.mp3', player_gain=7, repeat_count=3)

    assert cfg.player_command() == ['play', '-v', '7', str(tmp_path / 'brook.mp3'), 'repeat', '3']


def test_ensure_dirs_creates_base_dir(tmp_path):
    cfg = Config(base_dir=str(tmp_path / 'a' / 'b'))
    cfg.ensure_dirs()

    assert (tmp_path / 'a' / 'b').is_dir()
