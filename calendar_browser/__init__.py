"""Calendar browser: on-demand category loading, normalization and search."""

__version__ = "0.1.0"
