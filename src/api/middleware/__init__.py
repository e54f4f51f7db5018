"""Middlewares HTTP da API."""

from api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
