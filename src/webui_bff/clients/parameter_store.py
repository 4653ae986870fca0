"""
Parameter store clients for the web UI backend-for-frontend.

Handles:
- A minimal async capability (``get(key) -> str``) that the runtime
  configuration depends on, so tests and offline runs can substitute it
- AWS Systems Manager Parameter Store access via Powertools' SSMProvider
- A disabled variant used when no store endpoint is configured

No defaulting happens here: a client either returns the stored value or
raises a ``ParameterStoreError``. Fallbacks belong to ``RuntimeConfig``.
"""

import asyncio
from typing import Any, Protocol

import boto3
from aws_lambda_powertools.utilities.parameters import SSMProvider
from aws_lambda_powertools.utilities.parameters.exceptions import GetParameterError
from botocore.config import Config as BotoConfig

from ..config import Settings
from ..errors import (
    ParameterNotFoundError,
    ParameterStoreDisabledError,
    wrap_ssm_error,
)


class ParameterStore(Protocol):
    """Anything that can fetch a single parameter value by full key."""

    async def get(self, key: str) -> str:
        ...


class DisabledParameterStore:
    """
    Parameter store stand-in for deployments without a store endpoint.

    Every lookup fails immediately without any I/O, which lets the service
    run fully offline on fallback values.
    """

    async def get(self, key: str) -> str:
        raise ParameterStoreDisabledError(
            'Parameter store is disabled (no endpoint configured)',
            context={'key': key},
        )

    def __repr__(self) -> str:
        return 'DisabledParameterStore()'


class SSMParameterStore:
    """
    Async wrapper around AWS SSM Parameter Store.

    Values are always fetched fresh (``force_fetch=True``): configuration
    changes take effect on the next lookup. The blocking SDK call runs in a
    worker thread so the event loop keeps serving other requests.
    """

    def __init__(
        self,
        region: str,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        timeout_seconds: float = 2.0,
        provider: SSMProvider | None = None,
    ):
        """
        Initialize the SSM parameter store.

        Args:
            region: AWS region of the store
            endpoint_url: Endpoint override (e.g. a local emulator)
            access_key_id: Optional static access key
            secret_access_key: Optional static secret key
            timeout_seconds: Connect/read timeout for a single fetch
            provider: Pre-built SSMProvider (mainly for tests)
        """
        self.region = region
        self.endpoint_url = endpoint_url

        if provider is None:
            client_kwargs: dict[str, Any] = {
                'region_name': region,
                'endpoint_url': endpoint_url,
                # One SDK attempt per lookup; the caller falls back instead of waiting
                'config': BotoConfig(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={'mode': 'standard', 'total_max_attempts': 1},
                ),
            }
            if access_key_id and secret_access_key:
                client_kwargs['aws_access_key_id'] = access_key_id
                client_kwargs['aws_secret_access_key'] = secret_access_key
            provider = SSMProvider(boto3_client=boto3.client('ssm', **client_kwargs))

        self._provider = provider

    async def get(self, key: str) -> str:
        """
        Fetch the value stored at ``key``.

        Raises:
            ParameterNotFoundError: key absent or value empty
            ParameterStoreUnavailableError: store unreachable or any other SDK failure
        """
        try:
            value = await asyncio.to_thread(self._provider.get, key, force_fetch=True)
        except GetParameterError as e:
            raise wrap_ssm_error(e, context={'key': key}) from e

        if not value:
            raise ParameterNotFoundError('Parameter has no value', context={'key': key})
        return str(value)

    def __repr__(self) -> str:
        return f'SSMParameterStore(region={self.region!r}, endpoint_url={self.endpoint_url!r})'


def create_parameter_store(settings: Settings) -> ParameterStore:
    """
    Build the process-wide parameter store from service settings.

    Returns the disabled variant when no endpoint override is configured.
    """
    if not settings.parameter_store_enabled:
        return DisabledParameterStore()
    return SSMParameterStore(
        region=settings.AWS_REGION,
        endpoint_url=settings.AWS_SSM_ENDPOINT,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        timeout_seconds=settings.PARAMETER_STORE_TIMEOUT_SECONDS,
    )
