"""
Photo Transform

Vision-guided photo transformations: a vision-language model describes how an
image should change, and deterministic numpy pixel engines apply that guidance.
"""

__version__ = "0.1.0"

try:
    import importlib.metadata

    __version__ = importlib.metadata.version("photo-transform")
except (importlib.metadata.PackageNotFoundError, ImportError):
    # Fallback for development mode
    pass

__all__ = ["__version__"]
