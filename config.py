"""
Centralized configuration for the GA4 MCP gateway.

Loads all environment variables and provides typed configuration objects.
No hardcoded secrets - credentials must come from environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class GA4Config:
    """Google Analytics 4 property and service-account configuration."""

    property_id: Optional[str] = field(
        default_factory=lambda: os.getenv("GA4_PROPERTY_ID"))

    # Full service-account JSON document (takes precedence)
    credentials_json: Optional[str] = field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_CREDENTIALS"))

    # Alternative: separate email + private key pair
    client_email: Optional[str] = field(
        default_factory=lambda: os.getenv("CLIENT_EMAIL"))
    private_key: Optional[str] = field(
        default_factory=lambda: os.getenv("PRIVATE_KEY"))

    project_id: Optional[str] = field(
        default_factory=lambda: os.getenv("GCP_PROJECT_ID"))

    @property
    def has_credentials(self) -> bool:
        """Whether either credential form is present."""
        return bool(self.credentials_json) or bool(
            self.client_email and self.private_key)


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("SERVER_PORT", "8787")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class ProtocolConfig:
    """Tool-protocol handshake settings."""

    default_version: str = field(default_factory=lambda: os.getenv(
        "MCP_PROTOCOL_VERSION", "2024-11-05"))
    server_name: str = field(default_factory=lambda: os.getenv(
        "MCP_SERVER_NAME", "ga4-mcp-gateway"))
    server_version: str = "1.0.0"


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        property_id = config.ga4.property_id
        port = config.server.port
    """

    ga4: GA4Config = field(default_factory=GA4Config)
    server: ServerConfig = field(default_factory=ServerConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings.

        Missing GA4 settings are not fatal: the gateway still answers
        handshake and enumeration requests, and tool calls fail with a
        config error until the environment is fixed.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if not self.ga4.property_id:
            warnings.append("GA4_PROPERTY_ID not set - tool calls will fail")

        if not self.ga4.has_credentials:
            warnings.append(
                "No GA4 credentials set (GOOGLE_CLOUD_CREDENTIALS or "
                "CLIENT_EMAIL/PRIVATE_KEY) - tool calls will fail"
            )

        return warnings


# Global config instance - import and use this
config = Config()
