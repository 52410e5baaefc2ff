#!/usr/bin/env python3
"""Run the report service."""
import uvicorn

from repo_health.api.dependencies import get_config

if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "repo_health.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
    )
