"""aiohttp preview server for built sites.

Serves the output directory the way a static host would: directory URLs
map to their index file.
"""

import logging
from pathlib import Path

from aiohttp import web

from sitestage.app_keys import index_filename_key, output_dir_key

logger = logging.getLogger(__name__)


async def serve_output(request: web.Request) -> web.FileResponse:
    """Serve a file of the built site.

    Directory paths serve their index file; anything outside the output
    directory or missing is a 404.
    """
    output_dir: Path = request.app[output_dir_key]
    relative = request.match_info.get("path", "")

    target = (output_dir / relative).resolve()
    if not target.is_relative_to(output_dir):
        raise web.HTTPNotFound()
    if target.is_dir():
        target = target / request.app[index_filename_key]
    if not target.is_file():
        raise web.HTTPNotFound()
    return web.FileResponse(target)


def create_app(output_dir: Path, *, index_filename: str = "index.html") -> web.Application:
    """Create aiohttp application.

    Args:
        output_dir: Built site directory
        index_filename: File served for directory URLs

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[output_dir_key] = output_dir.resolve()
    app[index_filename_key] = index_filename
    app.router.add_get("/{path:.*}", serve_output)
    return app


def run_server(
    output_dir: Path,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    index_filename: str = "index.html",
) -> None:
    """Run the server.

    Args:
        output_dir: Built site directory
        host: Host to bind to
        port: Port to bind to
        index_filename: File served for directory URLs
    """
    logger.info(f"Serving {output_dir} on http://{host}:{port}/")
    app = create_app(output_dir, index_filename=index_filename)
    web.run_app(app, host=host, port=port)
