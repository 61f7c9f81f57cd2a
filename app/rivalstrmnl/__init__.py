"""Marvel Rivals stats to TRMNL display updater."""
from .version import __version__

__all__ = ["__version__"]
