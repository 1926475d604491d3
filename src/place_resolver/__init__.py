"""Address-to-venue resolution with tiered caching."""

__version__ = "0.1.0"
