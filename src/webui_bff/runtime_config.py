"""
Runtime configuration resolved from the parameter store.

Every setting is looked up at ``/{namespace}/{leaf}`` on each call, so a
changed value takes effect on the next request without a restart. Lookups
never fail: a store error, a missing or empty value, or an unparsable
number all resolve to the setting's static fallback.

Diagnostics use the standard-library ``logging`` channel rather than the
structured logger, because the structured logger takes its level from
this module (see ``webui_bff.logging.refresh_log_level``).
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from .clients.parameter_store import ParameterStore
from .errors import InvalidSettingValueError

T = TypeVar('T')

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r'[+-]?[0-9]+')


def parse_int(raw: str) -> int:
    """
    Parse a base-10 integer.

    Surrounding whitespace and a leading sign are accepted; anything else
    (decimals, trailing text, digit separators, non-ASCII digits) is not.

    Raises:
        InvalidSettingValueError: raw is not an integer
    """
    text = raw.strip()
    if not _INT_PATTERN.fullmatch(text):
        raise InvalidSettingValueError(f"Not a base-10 integer: {raw!r}")
    return int(text, 10)


def parse_int_or_default(raw: str, fallback: int) -> int:
    """Parse ``raw`` as a base-10 integer, returning ``fallback`` if it is not one."""
    try:
        return parse_int(raw)
    except InvalidSettingValueError:
        return fallback


@dataclass(frozen=True)
class Setting(Generic[T]):
    """A named runtime setting with its static fallback and value parser."""

    name: str
    fallback: T
    parser: Callable[[str], T]


DEFAULT_DESCRIPTION = (
    'This application manages a greeting service. '
    'You can create new greetings, look up existing ones by ID, '
    'delete greetings, and browse all stored messages. '
    'It communicates with the Spring Cloud Service API backend.'
)

DESCRIPTION = Setting('app.description', DEFAULT_DESCRIPTION, str)
API_BACKEND_URL = Setting('api.backend.url', 'http://localhost:8080', str)
API_TIMEOUT_MS = Setting('api.timeout.ms', 5000, parse_int)
API_RETRY_COUNT = Setting('api.retry.count', 3, parse_int)
LOG_LEVEL = Setting('log.level', 'info', str)
RATE_LIMIT_RPM = Setting('rate.limit.rpm', 60, parse_int)

ALL_SETTINGS: tuple[Setting, ...] = (
    DESCRIPTION,
    API_BACKEND_URL,
    API_TIMEOUT_MS,
    API_RETRY_COUNT,
    LOG_LEVEL,
    RATE_LIMIT_RPM,
)


class RuntimeConfig:
    """
    Typed accessors for the settings held in the parameter store.

    The store is injected once at startup and shared read-only across
    requests. Nothing is cached.
    """

    def __init__(self, store: ParameterStore, namespace: str):
        """
        Args:
            store: Parameter store client (may be the disabled variant)
            namespace: Service namespace, the first path segment of every key
        """
        self.store = store
        self.namespace = namespace.strip('/')

    def key_for(self, setting: Setting) -> str:
        return f'/{self.namespace}/{setting.name}'

    async def resolve(self, setting: Setting[T]) -> T:
        """Resolve one setting, falling back on any failure. Never raises."""
        key = self.key_for(setting)
        try:
            raw = await self.store.get(key)
        except Exception as e:
            logger.warning('Parameter %s fetch failed, using fallback: %s', key, e)
            return setting.fallback

        if not raw:
            logger.warning('Parameter %s is empty, using fallback', key)
            return setting.fallback

        try:
            return setting.parser(raw)
        except (InvalidSettingValueError, ValueError) as e:
            logger.warning('Parameter %s has an invalid value, using fallback: %s', key, e)
            return setting.fallback

    async def description(self) -> str:
        return await self.resolve(DESCRIPTION)

    async def api_backend_url(self) -> str:
        return await self.resolve(API_BACKEND_URL)

    async def api_timeout_ms(self) -> int:
        return await self.resolve(API_TIMEOUT_MS)

    async def api_retry_count(self) -> int:
        return await self.resolve(API_RETRY_COUNT)

    async def log_level(self) -> str:
        return await self.resolve(LOG_LEVEL)

    async def rate_limit_rpm(self) -> int:
        # Read-only: no throttling is applied anywhere in the service.
        return await self.resolve(RATE_LIMIT_RPM)
