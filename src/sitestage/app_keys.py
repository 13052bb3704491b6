"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

output_dir_key = web.AppKey("output_dir", Path)
index_filename_key = web.AppKey("index_filename", str)
