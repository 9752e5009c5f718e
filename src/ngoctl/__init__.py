"""ngoctl - operator CLI for the charity admin permission engine."""

from ngo_admin import __version__


__all__ = ["__version__"]
