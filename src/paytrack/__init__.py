"""Paytrack - check payment tracking."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("paytrack")
except PackageNotFoundError:
    # Running from a source checkout
    __version__ = "0.0.0"
