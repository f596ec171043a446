"""Value types, wire encodings and result-stream handling for the TDS protocol."""

__version__ = "0.1.0"
__all__ = ["temporal", "xml", "sql_value", "conversions", "stream"]