"""Health Hawk — concurrent HTTP(S) endpoint health checker."""

__version__ = "0.1.0"
