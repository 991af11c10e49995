"""rskills - maintainer tooling for a Rust skill collection."""

__version__ = "0.1.0"
