"""Regex-routed ASGI dispatcher with composable middleware for JSON APIs."""

__version__ = "0.1.0"

from switchyard.app import Router
from switchyard.errors import (
    ConfigurationError,
    DecodeError,
    InvalidHandlerError,
    InvalidPatternError,
    ParamNotFoundError,
    ParamParseError,
    ParamsUnavailableError,
    SwitchyardError,
)
from switchyard.handlers import HandlerFunc
from switchyard.middleware import basic_auth, recoverer, request_logger
from switchyard.params import PathParams, params
from switchyard.request import Request, bind_json
from switchyard.response import H, ResponseWriter, respond_json, respond_json_error
from switchyard.routing import Route, RouteTable

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "H",
    "HandlerFunc",
    "InvalidHandlerError",
    "InvalidPatternError",
    "ParamNotFoundError",
    "ParamParseError",
    "ParamsUnavailableError",
    "PathParams",
    "Request",
    "ResponseWriter",
    "Route",
    "RouteTable",
    "Router",
    "SwitchyardError",
    "basic_auth",
    "bind_json",
    "params",
    "recoverer",
    "request_logger",
    "respond_json",
    "respond_json_error",
]
