"""Support utilities for ISOBUS/J1939 applications: UTF conversions,
MAC-based serial numbers, persistent settings and stack configuration."""

__version__ = "0.1.0"
__all__ = ["convertutf", "utf8", "serial_number", "settings", "isoconf"]