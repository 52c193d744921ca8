"""
pimctl - control client for the pimd multicast routing daemon.
"""

__version__ = "3.0.0"
