from collections.abc import Mapping
from typing import Any

from loguru import logger

from ..models.statements import QueryResult, Record


def _row_values(row: Any) -> list[Any]:
    # Neo4j wraps each row as {"row": [...], "meta": [...]}
    if isinstance(row, Mapping):
        row = row["row"]
    if not isinstance(row, (list, tuple)):
        raise TypeError(f"Row values must be a list, got {type(row).__name__}")
    return list(row)


def _normalize_group(group: Any) -> list[Record]:
    if not isinstance(group, Mapping):
        raise TypeError(f"Result group must be a mapping, got {type(group).__name__}")
    columns = group["columns"]
    data = group["data"]
    if not isinstance(columns, (list, tuple)) or not all(isinstance(c, str) for c in columns):
        raise TypeError("Result columns must be a list of names")
    if not isinstance(data, (list, tuple)):
        raise TypeError("Result data must be a list of rows")
    return [dict(zip(columns, _row_values(row))) for row in data]


def normalize_results(raw_results: Any) -> QueryResult:
    """
    Reshapes Neo4j's column/row results into one list of records per statement.

    Never raises: anything that does not look like a list of
    ``{"columns": [...], "data": [...]}`` groups yields an empty list.
    """
    if not isinstance(raw_results, (list, tuple)):
        if raw_results is not None:
            logger.warning(f"Discarding malformed results of type {type(raw_results).__name__}")
        return []
    try:
        return [_normalize_group(group) for group in raw_results]
    except (KeyError, TypeError) as e:
        logger.warning(f"Discarding malformed results: {e}")
        return []
