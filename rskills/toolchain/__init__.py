"""Thin wrappers around the Rust toolchain."""

from rskills.toolchain.cargo import CargoResult, CargoRunner, check, clippy, fmt, test

__all__ = ["CargoResult", "CargoRunner", "check", "clippy", "fmt", "test"]
