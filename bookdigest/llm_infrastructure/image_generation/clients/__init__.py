"""Image client implementations.

Available clients:
- OpenAIImagesClient: OpenAI images API (gpt-image-1, base64 output)
"""

from bookdigest.llm_infrastructure.image_generation.clients.openai_images import OpenAIImagesClient

__all__ = ["OpenAIImagesClient"]
