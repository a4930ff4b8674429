"""atcoder_py - CLI client for the AtCoder judge."""

__version__ = "1.0.0"
