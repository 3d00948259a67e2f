"""Errors raised by the playback, download and mixer layers"""


class NoiseMachineError(Exception):
    """Base class for every failure the web handlers report"""


class DownloadError(NoiseMachineError):
    pass


class SpawnError(NoiseMachineError):
    pass


class MarkerError(NoiseMachineError):
    """PID marker file could not be read or written"""


class SignalError(NoiseMachineError):
    pass


class StaleProcessError(NoiseMachineError):
    """Marker file points at a process that no longer exists"""


class VolumeError(NoiseMachineError):
    pass


class VolumeRangeError(VolumeError, ValueError):
    pass
