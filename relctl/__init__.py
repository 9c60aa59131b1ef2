"""relctl: release-candidate tagging, promotion and release verification."""

__version__ = "0.1.0"
