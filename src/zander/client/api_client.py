"""HTTP client for the product import endpoints"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from src.zander.config import settings
from src.zander.schemas.product_import import (
    DuplicateAction,
    ImportRequest,
    ImportResponse,
    ImportResult,
    ValidateRequest,
    ValidateResponse,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Explicit auth context for API calls, never read from global state."""
    token: str
    api_url: str = "http://localhost:8000"

    @classmethod
    def from_settings(cls) -> "Credentials":
        return cls(token=settings.API_TOKEN, api_url=settings.API_URL)

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }


class ImportApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if detail:
        return str(detail)
    return f"Request failed with status {response.status_code}"


class ProductImportClient:
    VALIDATE_PATH = "/products/import/validate"
    IMPORT_PATH = "/products/import"
    TEMPLATE_PATH = "/products/import/template"

    def __init__(
        self,
        credentials: Credentials,
        http: Optional[httpx.Client] = None,
        timeout: Optional[float] = None
    ):
        self.credentials = credentials
        self._owns_http = http is None
        self._http = http or httpx.Client(
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ProductImportClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return self.credentials.api_url.rstrip("/") + path

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> httpx.Response:
        try:
            response = self._http.request(
                method,
                self._url(path),
                json=payload,
                headers=self.credentials.auth_headers()
            )
        except httpx.HTTPError as e:
            logger.warning("Import API request %s %s failed: %s", method, path, e)
            raise ImportApiError(f"Could not reach import service: {e}") from e

        if response.status_code >= 400:
            raise ImportApiError(_error_message(response), status_code=response.status_code)
        return response

    def validate(self, rows: List[Dict[str, str]]) -> ValidateResponse:
        body = ValidateRequest(rows=rows).model_dump(by_alias=True)
        response = self._request("POST", self.VALIDATE_PATH, body)
        try:
            return ValidateResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ImportApiError(f"Unexpected validation response: {e}", response.status_code) from e

    def commit(
        self,
        rows: List[Dict[str, str]],
        duplicate_action: DuplicateAction = DuplicateAction.SKIP
    ) -> ImportResult:
        body = ImportRequest(rows=rows, duplicate_action=duplicate_action).model_dump(
            by_alias=True, mode="json"
        )
        response = self._request("POST", self.IMPORT_PATH, body)
        try:
            return ImportResponse.model_validate(response.json()).data
        except (ValueError, ValidationError) as e:
            raise ImportApiError(f"Unexpected import response: {e}", response.status_code) from e

    def download_template(self) -> str:
        return self._request("GET", self.TEMPLATE_PATH).text
