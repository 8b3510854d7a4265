"""Archive of Our Own acquisition and synchronization engine."""

__version__ = "0.1.0"
