"""SPAC OS deal entity rule engine."""

__version__ = "0.1.0"
