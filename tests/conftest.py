"""
Pytest configuration and shared fixtures.

Key fixtures:
- fake_store: in-memory parameter store keyed by full parameter path
- runtime_config: RuntimeConfig over fake_store in the test namespace
- make_upstream: builds an httpx.AsyncClient whose transport replays a script

No AWS credentials or upstream API are needed; everything is faked.
"""

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from webui_bff.errors import ParameterNotFoundError, ParameterStoreUnavailableError  # noqa: E402
from webui_bff.runtime_config import RuntimeConfig  # noqa: E402

NAMESPACE = 'astro-webui'


class FakeParameterStore:
    """Parameter store double: values by full key, optional total outage."""

    def __init__(self, values: dict[str, str] | None = None, unreachable: bool = False):
        self.values = dict(values or {})
        self.unreachable = unreachable
        self.requested: list[str] = []

    async def get(self, key: str) -> str:
        self.requested.append(key)
        if self.unreachable:
            raise ParameterStoreUnavailableError('connection refused', context={'key': key})
        if key not in self.values:
            raise ParameterNotFoundError('not found', context={'key': key})
        return self.values[key]

    def set(self, leaf: str, value: str) -> None:
        self.values[f'/{NAMESPACE}/{leaf}'] = value


class ScriptedUpstream:
    """
    httpx transport handler that plays back a list of steps.

    Each step is either an exception instance (raised as a transport
    failure) or an ``httpx.Response``. The last step repeats once the
    script runs out.
    """

    def __init__(self, steps: list):
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.steps) - 1)
        step = self.steps[index]
        if isinstance(step, BaseException):
            raise step
        return step

    @property
    def attempts(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_store() -> FakeParameterStore:
    return FakeParameterStore()


@pytest.fixture
def runtime_config(fake_store: FakeParameterStore) -> RuntimeConfig:
    return RuntimeConfig(fake_store, namespace=NAMESPACE)


@pytest.fixture
def make_upstream() -> Callable[[list], tuple[httpx.AsyncClient, ScriptedUpstream]]:
    """Factory: ``client, upstream = make_upstream([httpx.ConnectError('x'), httpx.Response(200)])``."""

    def _make(steps: list) -> tuple[httpx.AsyncClient, ScriptedUpstream]:
        upstream = ScriptedUpstream(steps)
        client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        return client, upstream

    return _make
