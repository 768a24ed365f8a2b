"""
Runtime configuration for Filmtracker.

Settings are read from the environment (optionally seeded from a .env file)
once at startup and handed to create_app(). Database connection options and
the session secret are required; DATABASE_URL overrides the individual
connection options when set.
"""

import os
from typing import Optional, Mapping
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from filmtracker.errors import ConfigError

# Environment variable name -> Settings field
ENV_FIELDS = {
    "DATABASE_HOST": "database_host",
    "DATABASE_PORT": "database_port",
    "DATABASE_USER": "database_user",
    "DATABASE_PASSWORD": "database_password",
    "DATABASE": "database_name",
    "DATABASE_URL": "database_url",
    "SESSION_SECRET": "session_secret",
    "SESSION_TIMEOUT_MINUTES": "session_timeout_minutes",
}


class Settings(BaseModel):
    """
    Application settings.

    Either database_url or the full set of database_* options must be given.
    """
    database_host: Optional[str] = Field(None, description="MySQL host")
    database_port: Optional[int] = Field(None, description="MySQL port", gt=0, le=65535)
    database_user: Optional[str] = Field(None, description="MySQL user")
    database_password: Optional[str] = Field(None, description="MySQL password")
    database_name: Optional[str] = Field(None, description="MySQL database (schema) name")
    database_url: Optional[str] = Field(None, description="Full SQLAlchemy URL, overrides database_*")
    session_secret: str = Field(..., min_length=1, description="Secret used to sign the session cookie")
    session_timeout_minutes: int = Field(60, gt=0, description="Idle timeout for server-side sessions")

    model_config = ConfigDict(frozen=True)

    @field_validator("database_url", "database_host", "database_user", "database_name", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_database_options(self):
        if self.database_url:
            return self
        missing = [
            name for name in ("database_host", "database_port", "database_user",
                              "database_password", "database_name")
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"missing database options: {', '.join(missing)}")
        return self

    @property
    def sqlalchemy_database_uri(self) -> str:
        """SQLAlchemy URL for the configured store."""
        if self.database_url:
            return self.database_url
        return (
            f"mysql+pymysql://{quote_plus(self.database_user)}:{quote_plus(self.database_password)}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def engine_options(self) -> dict:
        if self.sqlalchemy_database_uri.startswith("sqlite"):
            return {}
        return {"pool_pre_ping": True, "pool_recycle": 300}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            dotenv: Load a .env file into os.environ first

        Raises:
            ConfigError: If a required option is missing or malformed
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        values = {
            field: environ[name]
            for name, field in ENV_FIELDS.items()
            if environ.get(name) not in (None, "")
        }
        try:
            return cls(**values)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"Invalid configuration: {problems}") from e
