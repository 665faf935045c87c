class RenderError(Exception):
    """Raised when HTML cannot be rendered to PDF."""
