"""Chapter-aware splitting and batching of long documents for incremental dispatch."""

__version__ = "0.1.0"
