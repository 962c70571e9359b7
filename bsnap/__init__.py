"""BSnapD — interactive installer and manager for snapd and snaps."""

__version__ = "0.1.0"
