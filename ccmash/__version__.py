try:
    from .scmversion import __version__  # written by setuptools_scm at install time
except ImportError:
    __version__ = "unknown"

__all__ = ["__version__"]
