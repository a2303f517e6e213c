"""Token validation client.

Every feed request is authorized by a remote oracle before any catalog
data is read. The oracle is given the caller's token, the shop's domain
and this service's version, and answers with a small JSON verdict.
"""

import json
from dataclasses import dataclass

import httpx
import structlog

from catalogfeed.domain.exceptions import AuthRejectedError, AuthTransportError
from catalogfeed.infrastructure.config import settings

logger = structlog.get_logger()


def derive_shop_domain(host: str | None) -> str:
    """Strip a leading ``www.`` from a host name."""
    if not host:
        return ""
    return host.removeprefix("www.")


@dataclass
class AuthResult:
    """Successful authorization verdict."""

    shop_domain: str


class TokenValidator:
    """HTTP client for the token validation oracle.

    One blocking round-trip per call, bounded by ``timeout``, with
    redirects disabled. Verdicts are never cached.
    """

    def __init__(
        self,
        endpoint_url: str,
        service_version: str,
        timeout: float = 12.0,
        valid_message: str = "the token is valid",
    ) -> None:
        """Initialize the validator.

        Args:
            endpoint_url: Oracle URL.
            service_version: Version of this service sent with each request.
            timeout: Request timeout in seconds.
            valid_message: Message the oracle returns for a valid token.
        """
        self.endpoint_url = endpoint_url
        self.service_version = service_version
        self.timeout = timeout
        self.valid_message = valid_message
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=False,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def authorize(
        self,
        token: str,
        shop_domain: str,
        authorization_header: str | None = None,
    ) -> AuthResult:
        """Validate a token with the oracle.

        Args:
            token: Token supplied by the caller.
            shop_domain: Domain of this shop, without ``www.``.
            authorization_header: Caller's authorization header, forwarded.

        Returns:
            AuthResult when the oracle accepts the token.

        Raises:
            AuthTransportError: The oracle was unreachable or its answer
                was not a JSON object.
            AuthRejectedError: The oracle denied the token.
        """
        client = await self._get_client()

        headers = {}
        if authorization_header:
            headers["AUTHORIZATION"] = authorization_header

        try:
            response = await client.post(
                self.endpoint_url,
                data={
                    "token": token,
                    "shop_domain": shop_domain,
                    "version": self.service_version,
                },
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Token validation timeout", shop_domain=shop_domain, error=str(e))
            raise AuthTransportError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error("Token validation request failed", shop_domain=shop_domain, error=str(e))
            raise AuthTransportError(f"Request failed: {e}") from e

        body = response.text
        try:
            verdict = json.loads(body)
        except ValueError as e:
            logger.error(
                "Token validation returned invalid JSON",
                status_code=response.status_code,
                response_body=body[:200],
            )
            raise AuthTransportError("Invalid response from token validation service") from e

        if not isinstance(verdict, dict):
            logger.error(
                "Token validation returned unexpected payload",
                status_code=response.status_code,
                response_body=body[:200],
            )
            raise AuthTransportError("Invalid response from token validation service")

        if verdict.get("success") is not True or verdict.get("message") != self.valid_message:
            logger.warning(
                "Token rejected",
                shop_domain=shop_domain,
                status_code=response.status_code,
                error=verdict.get("error"),
            )
            raise AuthRejectedError(response_body=body, error=verdict.get("error"))

        logger.info("Token accepted", shop_domain=shop_domain)
        return AuthResult(shop_domain=shop_domain)


# Global validator instance
_token_validator: TokenValidator | None = None


def get_token_validator() -> TokenValidator:
    """Get the token validator singleton.

    Returns:
        TokenValidator configured from settings.
    """
    global _token_validator
    if _token_validator is None:
        _token_validator = TokenValidator(
            endpoint_url=settings.auth_endpoint_url,
            service_version=settings.service_version,
            timeout=settings.auth_timeout,
            valid_message=settings.auth_valid_message,
        )
    return _token_validator
