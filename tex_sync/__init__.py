from tex_sync.__version__ import __version__

__all__ = ["__version__"]
