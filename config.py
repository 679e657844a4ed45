"""Configuration management for URL shortener."""

import argparse
from typing import List, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    server_address: str = Field(
        default="localhost:8080",
        description="host:port to listen on"
    )

    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL for generating short URLs"
    )

    # Storage settings
    file_storage_path: str = Field(
        default="",
        description="JSON file for the in-memory storage snapshot (empty disables persistence)"
    )

    database_dsn: str = Field(
        default="",
        description="PostgreSQL connection string; when set, PostgreSQL storage is used"
    )

    db_pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum size of the database connection pool"
    )

    db_timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="Database connection and command timeout"
    )

    delete_batch_size: int = Field(
        default=15,
        ge=1,
        description="Number of short IDs updated per statement when deleting"
    )

    # Ownership settings
    enforce_ownership_on_redirect: bool = Field(
        default=False,
        description="Redirect only to URLs owned by the session (otherwise redirects are public "
                    "and only URLs the session deleted answer 410)"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("server_address")
    @classmethod
    def validate_server_address(cls, v: str) -> str:
        """Require host:port with a numeric port."""
        host, sep, port = v.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError("server_address must look like host:port")
        return v

    @property
    def host(self) -> str:
        return self._split_address()[0]

    @property
    def port(self) -> int:
        return self._split_address()[1]

    def _split_address(self) -> Tuple[str, int]:
        host, _, port = self.server_address.rpartition(":")
        return host or "0.0.0.0", int(port)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line flags. Only flags actually given are set."""
    parser = argparse.ArgumentParser(description="URL shortener service")
    parser.add_argument("-a", dest="server_address", help="Address (host:port)")
    parser.add_argument("-b", dest="base_url", help="Base URL")
    parser.add_argument("-f", dest="file_storage_path", help="Storage file path")
    parser.add_argument("-d", dest="database_dsn", help="Database address to connect")
    return parser.parse_args(argv)


def load_config(argv: Optional[List[str]] = None) -> Config:
    """Load configuration from environment, overridden by command line flags."""
    args = parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return Config(**overrides)
