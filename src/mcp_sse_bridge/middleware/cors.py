"""
CORS middleware for FastAPI
Handles Cross-Origin Resource Sharing (CORS) headers
"""
from typing import List, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def add_cors_middleware(app: FastAPI, allow_origins: Optional[List[str]] = None) -> None:
    """
    Add CORS middleware to the FastAPI application.

    SSE clients in browsers need GET for the stream and POST for messages.

    Args:
        app: FastAPI application instance
        allow_origins: Origins permitted to make cross-origin requests, defaults to all
    """
    if allow_origins is None:
        allow_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
