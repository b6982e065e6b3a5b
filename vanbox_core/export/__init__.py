from .markdown import (
    ExportDocument,
    build_export,
    export_filename,
    render_entry_block,
    render_markdown,
)

__all__ = ["ExportDocument", "build_export", "export_filename", "render_entry_block", "render_markdown"]
