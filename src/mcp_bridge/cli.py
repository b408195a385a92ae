from __future__ import annotations

import logging

import click

from .app import create_app
from .utils.config import BridgeConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=3000, help="Port to listen on for HTTP")
@click.option("--path", "mount_path", default="/mcp", help="Path the bridge is mounted under")
@click.option("--upstream-base-url", default="http://127.0.0.1:8080", help="Base URL of the categories API")
@click.option("--upstream-path", default="/categories", help="Path of the categories listing on the upstream")
@click.option("--upstream-timeout", default=10.0, help="Upstream request timeout in seconds")
@click.option(
    "--log-level",
    default="INFO",
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
def main(
    host: str,
    port: int,
    mount_path: str,
    upstream_base_url: str,
    upstream_path: str,
    upstream_timeout: float,
    log_level: str,
) -> int:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = BridgeConfig.from_dict(
        {
            "upstream": {
                "base_url": upstream_base_url,
                "path": upstream_path,
                "timeout_seconds": upstream_timeout,
            },
            "http": {"host": host, "port": port, "mount_path": mount_path},
        }
    )
    app = create_app(config)
    logger.info("Serving %s at http://%s:%d%s", config.upstream.resource_uri, host, port, mount_path)

    import uvicorn

    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    main()
