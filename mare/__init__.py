"""MARE attribute value transformation pipeline."""

__version__ = "1.2.0"
