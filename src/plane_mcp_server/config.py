"""Configuration module for the Plane MCP server.

Handles environment variables for the Plane REST backend and for the
server transport. All required values are validated eagerly so a
misconfigured process fails before serving any request.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load .env file from the working directory
load_dotenv()


class ConfigurationError(Exception):
    """Raised when a required environment variable is missing or invalid."""


@dataclass
class PlaneConfig:
    """Plane API credentials and workspace binding."""

    api_key: str
    base_url: str
    workspace_slug: str

    @classmethod
    def from_env(cls) -> "PlaneConfig":
        """Load Plane configuration from environment variables.

        Environment variables:
            PLANE_API_KEY: API key sent as ``X-API-Key``
            PLANE_BASE_URL: Plane instance URL (e.g. ``https://api.plane.so``)
            PLANE_WORKSPACE_SLUG: Slug of the workspace every call is bound to

        Returns:
            PlaneConfig populated from the environment.

        Raises:
            ConfigurationError: If any of the variables is missing or empty.
        """
        values = {
            name: os.getenv(name, "").strip()
            for name in ("PLANE_API_KEY", "PLANE_BASE_URL", "PLANE_WORKSPACE_SLUG")
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                "; ".join(f"{name} environment variable is required" for name in missing)
            )

        return cls(
            api_key=values["PLANE_API_KEY"],
            base_url=values["PLANE_BASE_URL"].rstrip("/"),
            workspace_slug=values["PLANE_WORKSPACE_SLUG"],
        )


@dataclass
class ServerConfig:
    """Transport selection and logging settings."""

    host: str = "0.0.0.0"
    port: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load server configuration from environment variables."""
        raw_port = os.getenv("PORT", "").strip()
        port: int | None = None
        if raw_port:
            try:
                port = int(raw_port)
            except ValueError as exc:
                raise ConfigurationError(
                    f"PORT must be an integer, got {raw_port!r}"
                ) from exc

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def transport(self) -> str:
        """``http`` when a port is configured, ``stdio`` otherwise."""
        return "http" if self.port is not None else "stdio"


@dataclass
class Config:
    """Complete application configuration."""

    plane: PlaneConfig
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load complete configuration from environment variables."""
        return cls(
            plane=PlaneConfig.from_env(),
            server=ServerConfig.from_env(),
        )
