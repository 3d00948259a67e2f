"""
Noise Machine Web Interface
Start, stop and set the volume of the ambient noise player
"""

import logging

from flask import Flask, Response, render_template, request

from .auth import requires_auth
from .config import Config
from .errors import (
    DownloadError,
    MarkerError,
    NoiseMachineError,
    SpawnError,
    VolumeError,
    VolumeRangeError,
)
from .playback import RUNNING, PlaybackManager
from .volume import AmixerBackend, VolumeBackend, validate_level

logger = logging.getLogger(__name__)


def _text(body: str, status: int = 200) -> Response:
    return Response(body + '\n', status=status, mimetype='text/plain')


def create_app(config: Config = None, manager: PlaybackManager = None,
               volume_backend: VolumeBackend = None) -> Flask:
    """Build the Flask app around a playback manager and a mixer backend"""
    config = config or (manager.config if manager else Config())
    if volume_backend is None:
        volume_backend = manager.volume if manager else AmixerBackend(config.mixer_control, config.mixer_card)
    if manager is None:
        manager = PlaybackManager(config, volume=volume_backend)

    app = Flask(__name__)
    app.config['NOISE_CONFIG'] = config
    app.extensions['playback'] = manager
    app.extensions['volume'] = volume_backend

    @app.route('/')
    @requires_auth
    def index():
        """Status page"""
        status = manager.status()
        volume = None
        volume_error = None
        try:
            volume = volume_backend.get()
        except VolumeError as e:
            volume_error = str(e)
        return render_template(
            'index.html',
            status=status,
            running=status == RUNNING,
            volume=volume,
            volume_error=volume_error,
        )

    @app.route('/start', methods=['POST'])
    @requires_auth
    def start():
        """Start playback"""
        try:
            result = manager.start()
        except DownloadError as e:
            return _text(f'Failed to download file: {e}', 500)
        except SpawnError as e:
            return _text(f'Failed to start process: {e}', 500)
        except MarkerError as e:
            return _text(f'Failed to record process: {e}', 500)
        except VolumeError as e:
            return _text(f'Failed to set volume: {e}', 500)
        if result.already_running:
            return _text('Process is already running')
        return _text(f'Process started with PID {result.pid}')

    @app.route('/stop', methods=['POST'])
    @requires_auth
    def stop():
        """Stop playback"""
        try:
            manager.stop()
        except NoiseMachineError as e:
            return _text(f'Failed to stop process: {e}', 500)
        return _text('Process stopped')

    @app.route('/volume', methods=['POST'])
    @requires_auth
    def update_volume():
        """Set mixer volume from the `volume` query parameter"""
        raw = request.args.get('volume', '')
        digits = raw[1:] if raw[:1] in ('+', '-') else raw
        if not (digits.isascii() and digits.isdigit()):
            return _text('Invalid volume parameter', 400)
        try:
            volume = validate_level(int(raw))
        except VolumeRangeError:
            return _text('Invalid volume parameter', 400)
        try:
            volume_backend.set(volume)
        except VolumeError as e:
            logger.error('Error setting volume to %d: %s', volume, e)
            return _text('Error setting volume', 500)
        return _text(f'Volume set to {volume}')

    @app.route('/icon.png')
    def icon():
        return app.send_static_file('icon.png')

    return app
