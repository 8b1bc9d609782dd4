from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from poportal.config import Config
from poportal.web.middleware import PUBLIC_PATHS


def set_custom_openapi(app: FastAPI, config: Config) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="PO Portal API",
            version="0.1.0",
            summary="Purchase order and transaction data portal",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BasicAuth": {
                "type": "http",
                "scheme": "basic",
                "description": "Shared portal credentials, exchanged for a session cookie",
            },
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": config.session_cookie_name,
                "description": "Session token issued after Basic authentication",
            },
        }

        # Apply security globally (overridden for public endpoints)
        openapi_schema["security"] = [
            {"SessionCookie": []},
            {"BasicAuth": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            if path in PUBLIC_PATHS:
                for operation in path_item.values():
                    # Public as far as the request gate is concerned
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "authentication_error"},
                {"message": "Session expired or invalid", "type": "session_expired"},
            ]
        }
    }
