"""
External service clients for the web UI backend-for-frontend.
"""

from .parameter_store import (
    DisabledParameterStore,
    ParameterStore,
    SSMParameterStore,
    create_parameter_store,
)

__all__ = [
    'DisabledParameterStore',
    'ParameterStore',
    'SSMParameterStore',
    'create_parameter_store',
]
