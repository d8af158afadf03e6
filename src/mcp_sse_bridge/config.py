"""
Global configuration module for the server.

This module provides central configuration variables used throughout the application.
Values are read from the environment (and an optional .env file) once, at import time.
"""
import os
from mcp_sse_bridge.logger import logger
from mcp_sse_bridge._version import __version__

APP_NAME = os.getenv("MCP_SERVER_NAME", "mcp-sse-bridge")
APP_VERSION = os.getenv("MCP_SERVER_VERSION", str(__version__))

# Endpoint layout
SSE_PATH = os.getenv("MCP_SSE_PATH", "/sse")
MESSAGE_URL = os.getenv("MCP_MESSAGE_URL", "/api/messages")

# Seconds between keep-alive comments on open SSE streams
try:
    KEEPALIVE_INTERVAL = int(os.getenv("SSE_KEEPALIVE_INTERVAL", "15"))
except ValueError:
    logger.warning(f"Invalid SSE_KEEPALIVE_INTERVAL: {os.getenv('SSE_KEEPALIVE_INTERVAL')}, using 15")
    KEEPALIVE_INTERVAL = 15

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3031"))
