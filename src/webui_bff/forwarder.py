"""HTTP forwarding to the upstream API with a per-attempt deadline and bounded retries."""

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from .runtime_config import API_TIMEOUT_MS, RuntimeConfig

logger = structlog.get_logger(__name__)

# Only these are retried. A received response is never an error here,
# whatever its status code.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, asyncio.TimeoutError)


def describe_error(error: BaseException | None) -> str | None:
    if error is None:
        return None
    return str(error) or type(error).__name__


@dataclass(frozen=True)
class RetryPolicy:
    """Timeout and retry bound for one forwarding call."""

    timeout_ms: int
    retry_count: int

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    async def resolve(cls, runtime_config: RuntimeConfig) -> 'RetryPolicy':
        """
        Read the current timeout and retry count from runtime configuration.

        A negative retry count means no retries; a non-positive timeout is
        replaced by the default timeout.
        """
        timeout_ms, retry_count = await asyncio.gather(
            runtime_config.api_timeout_ms(),
            runtime_config.api_retry_count(),
        )
        if timeout_ms <= 0:
            timeout_ms = API_TIMEOUT_MS.fallback
        return cls(timeout_ms=timeout_ms, retry_count=max(retry_count, 0))


@dataclass(frozen=True)
class AttemptOutcome:
    """What happened on one attempt. Only used for logging."""

    url: str
    attempt: int
    succeeded: bool
    status_code: int | None = None
    error: BaseException | None = None

    def to_log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {'url': self.url, 'attempt': self.attempt}
        if self.status_code is not None:
            fields['status'] = self.status_code
        if self.error is not None:
            fields['error'] = describe_error(self.error)
            fields['error_type'] = type(self.error).__name__
        return fields


class ResilientForwarder:
    """
    Issues upstream HTTP requests with a timeout and retry policy.

    The policy is re-read from runtime configuration on every call and
    applies to the whole call. Each attempt gets its own deadline, so the
    worst case is ``(retry_count + 1) * timeout``. Attempts run strictly one
    after another with no wait in between.

    Logs per call: one ``forward.attempt_failed`` warning per failed attempt,
    then either ``forward.recovered`` (only if an earlier attempt failed) or
    ``forward.exhausted`` before the last transport error is re-raised.
    """

    def __init__(self, runtime_config: RuntimeConfig, client: httpx.AsyncClient | None = None):
        """
        Args:
            runtime_config: Source of the timeout and retry count
            client: Shared HTTP client; when omitted a client is opened per call
        """
        self.runtime_config = runtime_config
        self._client = client

    async def forward(
        self,
        url: str,
        method: str = 'GET',
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> httpx.Response:
        """
        Send a request and return the upstream response.

        Args:
            url: Fully built upstream URL
            method: HTTP method
            headers: Request headers
            content: Raw request body, sent unchanged

        Returns:
            The first response received, whatever its status code

        Raises:
            httpx.TransportError | asyncio.TimeoutError: every attempt failed
        """
        policy = await RetryPolicy.resolve(self.runtime_config)

        if self._client is not None:
            return await self._send(self._client, policy, url, method, headers, content)
        async with httpx.AsyncClient() as client:
            return await self._send(client, policy, url, method, headers, content)

    async def _send(
        self,
        client: httpx.AsyncClient,
        policy: RetryPolicy,
        url: str,
        method: str,
        headers: Mapping[str, str] | None,
        content: str | bytes | None,
    ) -> httpx.Response:
        def log_failed_attempt(retry_state: RetryCallState) -> None:
            outcome = AttemptOutcome(
                url=url,
                attempt=retry_state.attempt_number - 1,
                succeeded=False,
                error=retry_state.outcome.exception() if retry_state.outcome else None,
            )
            logger.warning(
                'forward.attempt_failed',
                retry_count=policy.retry_count,
                **outcome.to_log_fields(),
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.max_attempts),
            retry=retry_if_exception_type(TRANSPORT_ERRORS),
            after=log_failed_attempt,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    response = await asyncio.wait_for(
                        client.request(
                            method,
                            url,
                            headers=headers,
                            content=content,
                            timeout=policy.timeout_seconds,
                        ),
                        timeout=policy.timeout_seconds,
                    )
        except TRANSPORT_ERRORS as e:
            logger.error(
                'forward.exhausted',
                url=url,
                retry_count=policy.retry_count,
                error=describe_error(e),
                error_type=type(e).__name__,
            )
            raise

        attempt_index = attempt.retry_state.attempt_number - 1
        if attempt_index > 0:
            outcome = AttemptOutcome(
                url=url,
                attempt=attempt_index,
                succeeded=True,
                status_code=response.status_code,
            )
            logger.info('forward.recovered', **outcome.to_log_fields())
        return response
