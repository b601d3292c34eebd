"""endecode: covert tail watermarks and numbered batch copies of media folders."""

from endecode.version import __version__

__all__ = ["__version__"]
