"""quillsite - compile a directory of markdown entries into a static blog."""

from .utils import VERSION as __version__

__all__ = ["__version__"]
