"""
Web UI Backend-for-Frontend

A thin HTTP proxy between the browser UI and the greeting REST API. Runtime
settings come from a parameter store with static fallbacks; upstream calls
get a per-attempt timeout, bounded retries and structured attempt logs.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .clients import (
    DisabledParameterStore,
    ParameterStore,
    SSMParameterStore,
    create_parameter_store,
)
from .errors import (
    InvalidSettingValueError,
    ParameterNotFoundError,
    ParameterStoreDisabledError,
    ParameterStoreError,
    ParameterStoreUnavailableError,
    WebUiBffError,
)
from .forwarder import AttemptOutcome, ResilientForwarder, RetryPolicy
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    refresh_log_level,
    set_log_level,
)
from .runtime_config import (
    RuntimeConfig,
    Setting,
    parse_int,
    parse_int_or_default,
)

__all__ = [
    # Version
    '__version__',
    # Runtime configuration
    'RuntimeConfig',
    'Setting',
    'parse_int',
    'parse_int_or_default',
    # Parameter store
    'ParameterStore',
    'SSMParameterStore',
    'DisabledParameterStore',
    'create_parameter_store',
    # Forwarding
    'ResilientForwarder',
    'RetryPolicy',
    'AttemptOutcome',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'refresh_log_level',
    'set_log_level',
    # Errors
    'WebUiBffError',
    'ParameterStoreError',
    'ParameterStoreUnavailableError',
    'ParameterNotFoundError',
    'ParameterStoreDisabledError',
    'InvalidSettingValueError',
]
