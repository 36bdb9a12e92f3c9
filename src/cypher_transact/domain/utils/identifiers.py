def escape_identifier(name: str) -> str:
    """
    Quotes ``name`` for use as a label, relationship type or property key.

    Backticks are doubled and the whole name is wrapped in backticks, whether
    or not quoting is needed. Not idempotent: escape a name exactly once.
    """
    return "`" + str(name).replace("`", "``") + "`"
