"""Command dispatch and error normalization for API command-line clients."""

__version__ = '0.1.0'

__all__ = ['__version__']
