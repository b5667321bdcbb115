"""JobBoard backend: candidate profiles, job catalog, and recommendations."""

__version__ = "0.1.0"
