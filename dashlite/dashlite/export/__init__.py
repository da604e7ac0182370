from .html import export_filename, export_html  # noqa: F401
