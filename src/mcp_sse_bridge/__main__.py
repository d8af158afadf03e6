"""
Main entry point for running the server as a module.

This allows running the server with `python -m mcp_sse_bridge`
"""
import sys
import argparse
import uvicorn
from loguru import logger
from mcp_sse_bridge.config import HOST, PORT


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="mcp-sse-bridge - JSON-RPC over Server-Sent Events")
    parser.add_argument("--host", type=str, default=HOST, help="Host to bind the server to")
    parser.add_argument("--port", type=int, default=PORT, help="Port to bind the server to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    return parser.parse_args()


def main():
    """Run the server."""
    try:
        args = parse_args()
        logger.info(f"Starting mcp-sse-bridge on {args.host}:{args.port}")
        uvicorn.run(
            "mcp_sse_bridge.main:fastapi",
            host=args.host,
            port=args.port,
            reload=args.reload
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
