"""resultflow: retrying network calls as flows of results and view states.

Public API:
    - perform_network_operation(): Retrying call as a flow of Success/Failure
    - view_state_flow(): Loading/RenderSuccess/RenderFailure projection
    - network_view_state_flow(): Both, composed
    - RetryPolicy: Bounded exponential backoff configuration
"""

from __future__ import annotations

import logging

from resultflow.config import Settings, load_settings
from resultflow.errors import (
    ConfigurationError,
    EmptyResponseBodyError,
    InternalError,
    NetworkIOError,
    ResponseBodyParseError,
    ResultFlowError,
)
from resultflow.projection import (
    collect,
    first_success,
    last_result,
    to_view_state,
    view_state_flow,
)
from resultflow.response import HttpxResponse, Response, SimpleResponse
from resultflow.result import Failure, Result, Success
from resultflow.retry import RetryPolicy, perform_network_operation
from resultflow.state import Loading, RenderFailure, RenderSuccess, ViewState
from resultflow.usecase import Repository, UseCase, network_view_state_flow
from resultflow.worker import flow_on

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("resultflow")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("resultflow").addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "EmptyResponseBodyError",
    "Failure",
    "HttpxResponse",
    "InternalError",
    "Loading",
    "NetworkIOError",
    "RenderFailure",
    "RenderSuccess",
    "Repository",
    "Response",
    "ResponseBodyParseError",
    "Result",
    "ResultFlowError",
    "RetryPolicy",
    "Settings",
    "SimpleResponse",
    "Success",
    "UseCase",
    "ViewState",
    "collect",
    "first_success",
    "flow_on",
    "last_result",
    "load_settings",
    "network_view_state_flow",
    "perform_network_operation",
    "to_view_state",
    "view_state_flow",
]
