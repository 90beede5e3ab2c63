"""
Threshold secret recovery: decode base-N shares, find a consistent subset,
and interpolate the secret.

Packages:
- crypto: digit decoding, field arithmetic, Lagrange interpolation
- search: consistent-subset search over candidate share combinations
- models: share records and document ingestion
- config, utils: configuration, logging and metrics
"""

__all__ = ["config", "crypto", "errors", "models", "recovery", "search", "utils"]
