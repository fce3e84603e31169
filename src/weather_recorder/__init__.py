"""Weather observation recorder package."""

__version__ = "0.1.0"
