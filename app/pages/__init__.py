"""Server-rendered HTML pages."""

from app.pages.file_listing import render_file_listing

__all__ = ["render_file_listing"]
