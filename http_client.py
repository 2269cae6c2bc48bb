import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from book import Book
from config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A call to the books API failed (network error, non-success status or unreadable body)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BooksApiClient:
    """Synchronous client for the /api/books REST surface."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.http_timeout),
            transport=transport,
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(f"{method} {path} failed: {exc}") from exc
        if not response.is_success:
            logger.error("%s %s returned HTTP %s", method, path, response.status_code)
            raise ApiError(f"HTTP error! status: {response.status_code}", response.status_code)
        return response

    @staticmethod
    def _decode(response: httpx.Response, parse: Callable[[Any], Any]) -> Any:
        try:
            return parse(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Unexpected response body from %s: %s", response.request.url, exc)
            raise ApiError(f"Invalid response body: {exc}", response.status_code) from exc

    def list_books(self, q: Optional[str] = None, date_from: Optional[str] = None,
                   date_to: Optional[str] = None) -> List[Book]:
        params: Dict[str, Any] = {}
        if q:
            params["q"] = q
        if date_from:
            params["dateFrom"] = date_from
        if date_to:
            params["dateTo"] = date_to
        response = self._request("GET", "/api/books", params=params)
        return self._decode(response, lambda data: [Book.from_dict(item) for item in data])

    def get_book(self, book_id: int) -> Optional[Book]:
        try:
            response = self._request("GET", f"/api/books/{book_id}")
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        return self._decode(response, Book.from_dict)

    def create_book(self, title: str, author: str, created_by: Optional[str] = None) -> int:
        payload = {"title": title, "author": author, "createdBy": created_by}
        response = self._request("POST", "/api/books", json=payload)
        return self._decode(response, lambda data: data["id"])

    def update_book(self, book: Book) -> None:
        payload = {"title": book.title, "author": book.author, "createdBy": book.created_by}
        self._request("PUT", f"/api/books/{book.id}", json=payload)

    def delete_book(self, book_id: int) -> None:
        self._request("DELETE", f"/api/books/{book_id}")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BooksApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
