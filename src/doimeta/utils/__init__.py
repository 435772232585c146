"""Common utility functions for doimeta."""

from doimeta.utils.timestamps import get_iso_timestamp

__all__ = ["get_iso_timestamp"]
