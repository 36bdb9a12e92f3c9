from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


class Neo4jHTTPSettings(BaseModel):
    """Connection details for the Neo4j transactional HTTP endpoint."""

    url: str = Field(
        default="http://localhost:7474",
        description="Base URL of the Neo4j HTTP server",
    )
    transaction_path: str = Field(
        default="db/data/transaction",
        description="Path of the transactional endpoint, relative to the base URL",
    )
    user: Optional[str] = Field(default=None, description="HTTP basic auth user")
    password: Optional[str] = Field(default=None, description="HTTP basic auth password")
    timeout: float = Field(default=20.0, gt=0, description="Request timeout in seconds")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")

    model_config = SettingsConfigDict(extra="forbid")

    @property
    def auth(self) -> Optional[tuple[str, str]]:
        if self.user is None:
            return None
        return (self.user, self.password or "")


class AppSettingsModel(BaseModel):
    """Application-level settings."""

    name: str = "cypher-transact"
    version: str = "0.1.0"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(extra="forbid")


class SettingsFileModel(BaseModel):
    """Schema for validating `settings.yaml`."""

    app: AppSettingsModel = Field(default_factory=AppSettingsModel)
    neo4j_http: Neo4jHTTPSettings = Field(default_factory=Neo4jHTTPSettings)

    model_config = SettingsConfigDict(extra="forbid")


class RuntimeSettings(BaseSettings):
    """Runtime settings loaded from YAML, environment variables and `.env`."""

    app: AppSettingsModel = Field(
        default_factory=AppSettingsModel,
        description="Application configuration",
    )
    neo4j_http: Neo4jHTTPSettings = Field(
        default_factory=Neo4jHTTPSettings,
        description="Neo4j HTTP endpoint options",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_nested_delimiter="__", extra="ignore"
    )


def validate_config_schema(config_data: dict) -> bool:
    """Validate settings data against the Pydantic schema."""

    try:
        SettingsFileModel.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
    return True


def load_runtime_settings(yaml_path: Optional[Union[str, Path]] = None) -> RuntimeSettings:
    """
    Load runtime settings from a YAML file and environment variables.

    Environment variables use ``__`` as the nesting delimiter, e.g.
    ``NEO4J_HTTP__URL`` or ``APP__LOG_LEVEL``. Values set in the YAML file
    take precedence over the environment.

    Args:
        yaml_path: Settings file to read. Defaults to ``config/settings.yaml``.

    Returns:
        RuntimeSettings: The combined settings.

    Raises:
        ValueError: If the YAML file does not match the settings schema.
    """
    path = Path(yaml_path) if yaml_path is not None else DEFAULT_SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        validate_config_schema(data)
    return RuntimeSettings(**data)
