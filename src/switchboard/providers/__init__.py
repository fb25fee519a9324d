from .base import BaseProvider, ModelProvider, get_ai_provider

__all__ = ["BaseProvider", "ModelProvider", "get_ai_provider"]
