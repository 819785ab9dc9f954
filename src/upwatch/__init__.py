"""upwatch - multi-tenant uptime monitoring backend."""

__version__ = "0.1.0"
