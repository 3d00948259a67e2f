#!/usr/bin/env python3
"""
Noise Machine server entry point
"""

import argparse
import logging
import signal
import sys
from pathlib import Path

from .app import create_app
from .config import Config
from .errors import NoiseMachineError
from .playback import PlaybackManager

logger = logging.getLogger('noise_machine')


def _stop_playback(manager: PlaybackManager) -> None:
    try:
        if manager.stop():
            logger.info('Stopped running playback')
    except NoiseMachineError as e:
        logger.error('Failed to stop playback: %s', e)


def install_signal_handlers(manager: PlaybackManager) -> None:
    """Stop the player before exiting on SIGINT/SIGTERM"""
    def handle_signal(signum, _frame):
        logger.info('Received %s, shutting down', signal.Signals(signum).name)
        _stop_playback(manager)
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Web control panel for a looping ambient noise player',
    )
    parser.add_argument('--host', help='Address to bind (default: $HOST or 0.0.0.0)')
    parser.add_argument('--port', type=int, help='Port to listen on (default: $PORT or 8888)')
    parser.add_argument('--base-dir', type=Path,
                        help='Directory for the PID file and cached audio (default: $NOISE_DIR or ~/noise)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    config = Config()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.base_dir:
        config.base_dir = args.base_dir

    try:
        config.ensure_dirs()
    except OSError as e:
        logger.critical('Failed to create base directory %s: %s', config.base_dir, e)
        return 1

    app = create_app(config)
    manager = app.extensions['playback']

    # A player left behind by a previous run is stopped at startup
    if manager.is_running():
        _stop_playback(manager)

    install_signal_handlers(manager)

    logger.info('Server running on %s:%d', config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False, threaded=True)
    return 0


if __name__ == '__main__':
    sys.exit(main())
