from .factory import EngineFactory

__all__ = ["EngineFactory"]
