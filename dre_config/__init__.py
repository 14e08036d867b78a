"""DRE account configuration tree."""

__version__ = "0.1.0"
