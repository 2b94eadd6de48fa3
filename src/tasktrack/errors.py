# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API errors rendered as ``{"error": message}`` bodies."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ApiError):
    status_code = 404


class AuthRequired(ApiError):
    status_code = 401


class CredentialInvalid(ApiError):
    status_code = 401


class Conflict(ApiError):
    status_code = 400


class Internal(ApiError):
    status_code = 500


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)
