"""Fetches a schema from a live GraphQL endpoint via introspection.

Handles HTTP communication, error handling, and response parsing.
"""

import logging
from typing import Any

import httpx
from graphql import get_introspection_query
from pydantic import ValidationError

from .introspection import RawSchema

logger = logging.getLogger(__name__)

# Hints shown for common HTTP failures
STATUS_HINTS = {
    400: "Bad Request - The GraphQL query may be malformed",
    401: "Unauthorized - Authentication required. Check your headers",
    403: "Forbidden - Access denied. Verify your credentials and permissions",
    404: "Not Found - GraphQL endpoint not found at the specified URL",
    500: "Internal Server Error - The GraphQL server encountered an error",
}


class IntrospectionError(Exception):
    """Raised when a schema cannot be fetched from an endpoint."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.errors = errors or []
        self.status_code = status_code
        super().__init__(message)


class SchemaIntrospector:
    """Runs the standard introspection query against an endpoint.

    Examples:
        async with SchemaIntrospector(url, headers={"Authorization": "Bearer x"}) as client:
            raw = await client.introspect()
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the introspector.

        Args:
            url: GraphQL endpoint URL
            headers: Extra request headers, e.g. authentication
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SchemaIntrospector":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self.headers)
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self) -> dict[str, Any]:
        """Post the introspection query and return the response's data object.

        Raises:
            IntrospectionError: On transport failures, non-2xx responses,
                GraphQL errors or a response without data.
        """
        client = await self._get_client()
        payload = {"query": get_introspection_query(descriptions=True)}

        logger.info("Introspecting %s", self.url)
        try:
            response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise IntrospectionError(f"Failed to reach {self.url}: {e}") from e

        if not response.is_success:
            hint = STATUS_HINTS.get(response.status_code, "HTTP request failed")
            raise IntrospectionError(
                f"GraphQL introspection failed with HTTP {response.status_code}: {hint}\n"
                f"URL: {self.url}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise IntrospectionError(f"Introspection response is not JSON: {e}") from e

        if result.get("errors"):
            errors = result["errors"]
            messages = "; ".join(e.get("message", str(e)) for e in errors)
            plural = "" if len(errors) == 1 else "s"
            raise IntrospectionError(
                f"GraphQL introspection failed with {len(errors)} error{plural}: {messages}",
                errors,
            )

        data = result.get("data")
        if not data:
            raise IntrospectionError("Introspection response contains no data")
        return data

    async def introspect(self) -> RawSchema:
        """Fetch and validate the schema."""
        data = await self.fetch()
        try:
            raw = RawSchema.from_introspection(data)
        except ValidationError as e:
            raise IntrospectionError(
                f"Introspection response from {self.url} is not a valid schema: {e}"
            ) from e
        logger.debug("Received %d types", len(raw.types))
        return raw
