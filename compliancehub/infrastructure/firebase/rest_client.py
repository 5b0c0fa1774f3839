"""Firestore REST v1 client for the document operations the record store needs.

Service account tokens come from google-auth; HTTP goes through
httpx.AsyncClient. Token refresh is a blocking call, so it runs in a thread.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx

from compliancehub.infrastructure.firebase.codec import decode_fields, encode_fields

FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
LIST_PAGE_SIZE = 300


class DocumentExistsError(Exception):
    """createDocument was rejected with 409: the document id is taken."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document already exists: {path}")
        self.path = path


def service_account_credentials(info: dict[str, Any]):
    """google.oauth2 service account credentials scoped to Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(info, scopes=[FIRESTORE_SCOPE])


def _refresh_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class FirestoreRESTClient:
    """Document CRUD on the (default) database of one project.

    Documents are addressed as (collection, document id); rows are plain
    dicts and the document id is never part of the stored fields.
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.project_id = project_id
        self._credentials = credentials
        self._root = f"{FIRESTORE_BASE_URL}/projects/{project_id}/databases/(default)/documents"
        self._http = http_client or httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP pool unless it was injected."""
        if self._owns_http:
            await self._http.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """One authorized call. 404 -> None, 409 -> DocumentExistsError.

        Raises:
            httpx.HTTPError: Transport failures and any other error status.
            google.auth.exceptions.GoogleAuthError: The token could not be refreshed.
        """
        token = await asyncio.to_thread(_refresh_token, self._credentials)
        response = await self._http.request(
            method,
            f"{self._root}/{path}",
            json=body,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code == 404:
            return None
        if response.status_code == 409:
            raise DocumentExistsError(path)
        response.raise_for_status()
        return response.json() if response.content else {}

    async def list_documents(self, collection: str) -> AsyncIterator[tuple[str, dict[str, Any]]]:
        """Yield (document id, row) for every document, following nextPageToken."""
        params: dict[str, Any] = {"pageSize": LIST_PAGE_SIZE}
        while True:
            page = await self._send("GET", collection, params=params)
            if not page:
                return
            for document in page.get("documents", []):
                doc_id = document.get("name", "").rsplit("/", 1)[-1]
                yield doc_id, decode_fields(document.get("fields"))
            token = page.get("nextPageToken")
            if not token:
                return
            params = {"pageSize": LIST_PAGE_SIZE, "pageToken": token}

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        document = await self._send("GET", f"{collection}/{document_id}")
        if document is None:
            return None
        return decode_fields(document.get("fields"))

    async def set_document(self, collection: str, document_id: str, row: dict[str, Any]) -> None:
        """Create or fully replace the document (PATCH without an update mask)."""
        await self._send("PATCH", f"{collection}/{document_id}", body=encode_fields(row))

    async def create_document(
        self, collection: str, document_id: str, row: dict[str, Any]
    ) -> None:
        """createDocument with a fixed id; raises DocumentExistsError when taken."""
        await self._send(
            "POST", collection, body=encode_fields(row), params={"documentId": document_id}
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete; a missing document is not an error."""
        await self._send("DELETE", f"{collection}/{document_id}")
