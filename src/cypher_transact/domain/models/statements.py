"""
Data models shared by the request builder, the composer and the HTTP client.
"""

from datetime import datetime
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# One record per row, one list of records per submitted statement.
Record = Dict[str, Any]
QueryResult = List[List[Record]]


class Statement(BaseModel):
    """
    A single Cypher statement with its server-side parameters.

    Statements are immutable and can be reused across requests: ``parameters``
    is a read-only copy of the mapping it was built from.
    """

    statement: str
    parameters: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    model_config = ConfigDict(frozen=True)

    @field_validator("parameters")
    @classmethod
    def freeze_parameters(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def to_payload(self) -> Dict[str, Any]:
        return {"statement": self.statement, "parameters": dict(self.parameters)}


class TransactionHandle(BaseModel):
    """An open transaction as reported by the server."""

    transaction_id: int
    expires: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def expires_at(self) -> Optional[datetime]:
        """
        Parses the server's RFC 1123 expiry string.

        Returns:
            The expiry as a datetime, or None if absent or unparseable.
        """
        if not self.expires:
            return None
        try:
            return parsedate_to_datetime(self.expires)
        except (TypeError, ValueError):
            return None


class ResponseInfo(BaseModel):
    """Companion data returned with every response and attached to every error."""

    statements: List[Statement] = Field(default_factory=list)
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    transaction_id: Optional[int] = None
    timeout: Optional[str] = None

    @property
    def handle(self) -> Optional[TransactionHandle]:
        if self.transaction_id is None:
            return None
        return TransactionHandle(transaction_id=self.transaction_id, expires=self.timeout)


class QueryResponse(BaseModel):
    """Successful outcome of a coordinator operation."""

    results: QueryResult = Field(default_factory=list)
    info: ResponseInfo = Field(default_factory=ResponseInfo)

    @property
    def transaction_id(self) -> Optional[int]:
        return self.info.transaction_id
