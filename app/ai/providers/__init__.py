"""Provider implementations."""

from app.ai.providers.base import DesignAnalyzer, ImageModel
from app.ai.providers.gemini import GeminiDesignAnalyzer, GeminiImageModel

__all__ = ["DesignAnalyzer", "GeminiDesignAnalyzer", "GeminiImageModel", "ImageModel"]
