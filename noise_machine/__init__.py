"""
Noise Machine
Small web control panel for a looping ambient-noise player
"""

__version__ = '0.1.0'
