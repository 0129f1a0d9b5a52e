"""API modules for HTTP interface."""

from api.base import APIError, error_response, ErrorCodes
