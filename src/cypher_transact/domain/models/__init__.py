from .statements import (
    QueryResponse,
    QueryResult,
    Record,
    ResponseInfo,
    Statement,
    TransactionHandle,
)

__all__ = [
    "QueryResponse",
    "QueryResult",
    "Record",
    "ResponseInfo",
    "Statement",
    "TransactionHandle",
]
