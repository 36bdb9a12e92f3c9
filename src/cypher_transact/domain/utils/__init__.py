from .identifiers import escape_identifier

__all__ = ["escape_identifier"]
