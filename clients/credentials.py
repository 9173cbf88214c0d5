"""
GA4 credential resolution.

Turns the process environment into an immutable ConnectionDescriptor.
Two credential forms are supported, checked in this order:

1. A full service-account JSON document (GOOGLE_CLOUD_CREDENTIALS)
2. A separate client email + private key pair (CLIENT_EMAIL / PRIVATE_KEY)
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from config import GA4Config
from errors import ConfigError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
PROPERTY_PREFIX = "properties/"


@dataclass(frozen=True)
class ServiceAccountDocument:
    """Credentials supplied as a complete service-account document."""

    info: dict[str, Any]


@dataclass(frozen=True)
class KeyPair:
    """Credentials supplied as a bare email + private key."""

    client_email: str
    private_key: str


CredentialSource = Union[ServiceAccountDocument, KeyPair]


@dataclass(frozen=True)
class ConnectionDescriptor:
    """
    Everything needed to open a GA4 Data API connection.

    Attributes:
        property_id: GA4 property identifier (may be None until used)
        project_id: Google Cloud project, explicit override or from document
        source: Which credential form was resolved
    """

    property_id: Optional[str]
    project_id: Optional[str]
    source: CredentialSource

    @property
    def client_email(self) -> str:
        if isinstance(self.source, KeyPair):
            return self.source.client_email
        return self.source.info["client_email"]

    @property
    def private_key(self) -> str:
        if isinstance(self.source, KeyPair):
            return self.source.private_key
        return self.source.info["private_key"]

    def property_path(self) -> str:
        return property_path(self.property_id)

    def service_account_info(self) -> dict[str, Any]:
        """Build the info mapping accepted by google-auth."""
        if isinstance(self.source, ServiceAccountDocument):
            info = dict(self.source.info)
        else:
            info = {
                "type": "service_account",
                "client_email": self.source.client_email,
                "private_key": self.source.private_key,
                "token_uri": TOKEN_URI,
            }
        info.setdefault("token_uri", TOKEN_URI)
        if self.project_id:
            info["project_id"] = self.project_id
        return info


def property_path(property_id: Optional[str]) -> str:
    """
    Build the GA4 property resource name.

    Accepts either a bare id ("123456") or an already-prefixed
    resource name ("properties/123456").
    """
    if property_id is None or not str(property_id).strip():
        raise ConfigError("missing property id")
    property_id = str(property_id).strip()
    if property_id.startswith(PROPERTY_PREFIX):
        return property_id
    return f"{PROPERTY_PREFIX}{property_id}"


def _parse_document(raw: str) -> dict[str, Any]:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"malformed GOOGLE_CLOUD_CREDENTIALS: {e.msg}") from e

    if not isinstance(document, dict):
        raise ConfigError("malformed GOOGLE_CLOUD_CREDENTIALS: expected a JSON object")

    missing = [key for key in ("client_email", "private_key") if not document.get(key)]
    if missing:
        raise ConfigError(
            f"malformed GOOGLE_CLOUD_CREDENTIALS: missing {', '.join(missing)}"
        )
    return document


def resolve_credentials(ga4: GA4Config) -> ConnectionDescriptor:
    """
    Resolve GA4 credentials from configuration.

    Args:
        ga4: GA4 configuration section

    Returns:
        ConnectionDescriptor for the resolved credential form

    Raises:
        ConfigError: If neither credential form is configured, or the
            service-account document is malformed
    """
    if ga4.credentials_json:
        document = _parse_document(ga4.credentials_json)
        logger.info("Using GA4 service-account document credentials")
        return ConnectionDescriptor(
            property_id=ga4.property_id,
            project_id=ga4.project_id or document.get("project_id"),
            source=ServiceAccountDocument(info=document),
        )

    if ga4.client_email and ga4.private_key:
        logger.info("Using GA4 client email/private key credentials")
        return ConnectionDescriptor(
            property_id=ga4.property_id,
            project_id=ga4.project_id,
            source=KeyPair(
                client_email=ga4.client_email,
                # Keys stored in env files often carry literal "\n" escapes
                private_key=ga4.private_key.replace("\\n", "\n"),
            ),
        )

    raise ConfigError("credentials not configured")
