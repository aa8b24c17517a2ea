"""Projects portal HTTP backend: admin-only invite management behind JWT-checked routes, on PostgreSQL."""

__version__ = "0.1.0"