"""Process-wide Firestore client, built from service account settings.

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (inline JSON) or, failing
that, FIREBASE_SERVICE_ACCOUNT_PATH.
"""

import json
from pathlib import Path
from typing import Any

from compliancehub.core.config import Settings
from compliancehub.domain.exceptions import StoreNotConfiguredException
from compliancehub.infrastructure.firebase.rest_client import (
    FirestoreRESTClient,
    service_account_credentials,
)
from compliancehub.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_client: FirestoreRESTClient | None = None


def load_service_account_info(settings: Settings) -> dict[str, Any] | None:
    """Parsed service account JSON, or None when neither setting is present."""
    if settings.firebase_service_account_key:
        raw = settings.firebase_service_account_key.get_secret_value()
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    if not settings.firebase_service_account_path:
        return None
    path = Path(settings.firebase_service_account_path).expanduser()
    if not path.is_file():
        logger.warning("Service account file not found: %s", path)
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def connect_firestore(settings: Settings) -> FirestoreRESTClient:
    """Return the shared client, creating it on first call.

    Raises:
        StoreNotConfiguredException: Credentials are missing or unusable.
    """
    global _client
    if _client is not None:
        return _client
    try:
        info = load_service_account_info(settings)
    except (ValueError, OSError) as e:
        logger.error("Cannot read Firestore service account: %s", e)
        raise StoreNotConfiguredException("firestore") from e
    if not info or not info.get("project_id"):
        logger.error("Firestore service account missing or has no project_id")
        raise StoreNotConfiguredException("firestore")
    try:
        credentials = service_account_credentials(info)
    except ValueError as e:
        logger.error("Invalid Firestore service account: %s", e)
        raise StoreNotConfiguredException("firestore") from e
    _client = FirestoreRESTClient(info["project_id"], credentials)
    logger.info("Firestore client ready for project %s", info["project_id"])
    return _client


async def close_firestore() -> None:
    """Close the shared client's HTTP pool."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
