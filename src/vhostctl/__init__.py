"""vhostctl - provision local development virtual hosts."""

__version__ = "0.1.0"
