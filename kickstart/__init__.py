"""kickstart -- interactive project scaffolding CLI."""

__version__ = "1.0.0"
