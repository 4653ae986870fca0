"""Request-scoped access to the clients created at startup."""

from fastapi import Request

from webui_bff.forwarder import ResilientForwarder
from webui_bff.runtime_config import RuntimeConfig


def get_runtime_config(request: Request) -> RuntimeConfig:
    return request.app.state.runtime_config


def get_forwarder(request: Request) -> ResilientForwarder:
    return request.app.state.forwarder


def get_greetings_path(request: Request) -> str:
    return request.app.state.greetings_path
