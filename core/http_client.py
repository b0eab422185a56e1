# core/http_client.py
"""
HTTP client adapter for the school backend.

One configured requests.Session per signed-in user: base path and session
credentials are attached to every request. Every backend response uses the
envelope {success, data?, message?}; non-2xx responses and transport failures
surface immediately as ApiError. There are no retries and no timeout policy
beyond the transport default.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors import ApiError

logger = logging.getLogger(__name__)


class ApiEnvelope(BaseModel):
    """Response body shared by every endpoint."""
    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    message: Optional[str] = None


def is_file_handle(value: Any) -> bool:
    """Uploaded files (Streamlit UploadedFile, open files, BytesIO) are passed through raw."""
    return hasattr(value, "read") and not isinstance(value, (str, bytes))


def has_file(body: Mapping[str, Any] | None) -> bool:
    return bool(body) and any(is_file_handle(v) for v in body.values())


def encode_body(body: Mapping[str, Any] | None, multipart: bool = False) -> Dict[str, Any]:
    """
    Build the requests kwargs for a body.

    JSON unless multipart is forced or the body carries a file handle. In
    multipart mode every value becomes its own part, so the request is
    multipart/form-data even without a file: nested objects are
    JSON-stringified, file handles become file parts and None values are
    left out.
    """
    if body is None:
        return {}
    if not multipart and not has_file(body):
        return {"json": dict(body)}

    files: Dict[str, Tuple[Optional[str], Any, Optional[str]]] = {}
    for key, value in body.items():
        if value is None:
            continue
        if is_file_handle(value):
            filename = getattr(value, "name", None) or key
            mimetype = getattr(value, "type", None) or "application/octet-stream"
            if hasattr(value, "seek"):
                value.seek(0)
            files[key] = (filename, value, mimetype)
        elif isinstance(value, (dict, list)):
            files[key] = (None, json.dumps(value), None)
        elif isinstance(value, bool):
            files[key] = (None, "true" if value else "false", None)
        else:
            files[key] = (None, str(value), None)
    return {"files": files}


def _server_message(resp: requests.Response) -> Optional[str]:
    try:
        payload = resp.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
    return None


class ApiClient:
    def __init__(
        self,
        base_url: str,
        credentials: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
        verify: bool = True,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        if credentials:
            self.session.cookies.update(dict(credentials))
        self.verify = verify

    def url_for(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        multipart: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiEnvelope:
        url = self.url_for(path)
        method = method.upper()
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                verify=self.verify,
                **encode_body(body, multipart=multipart),
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(str(e) or "Network Error", kind="network") from e

        if not 200 <= resp.status_code < 300:
            message = _server_message(resp) or f"Request failed with status code {resp.status_code}"
            logger.warning("%s %s -> %s: %s", method, url, resp.status_code, message)
            raise ApiError(message, status=resp.status_code)

        try:
            envelope = ApiEnvelope.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.error("%s %s returned a malformed body: %s", method, url, e)
            raise ApiError("Malformed response from server", status=resp.status_code) from e
        return envelope

    def get(self, path: str, **kwargs) -> ApiEnvelope:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, body: Mapping[str, Any] | None = None, **kwargs) -> ApiEnvelope:
        return self.request("POST", path, body=body, **kwargs)

    def put(self, path: str, body: Mapping[str, Any] | None = None, **kwargs) -> ApiEnvelope:
        return self.request("PUT", path, body=body, **kwargs)

    def delete(self, path: str, **kwargs) -> ApiEnvelope:
        return self.request("DELETE", path, **kwargs)


def client_from_settings(settings, session_token: Optional[str] = None) -> ApiClient:
    """Client for the signed-in user; the token travels as the configured session cookie."""
    credentials = {settings.api.session_cookie: session_token} if session_token else None
    return ApiClient(settings.api.base_url, credentials=credentials, verify=settings.api.verify_tls)
