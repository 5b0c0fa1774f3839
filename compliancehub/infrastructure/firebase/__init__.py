"""Firestore integration over the REST API."""

from compliancehub.infrastructure.firebase.client import close_firestore, connect_firestore
from compliancehub.infrastructure.firebase.rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)

__all__ = [
    "DocumentExistsError",
    "FirestoreRESTClient",
    "close_firestore",
    "connect_firestore",
]
