from .coze import CozePlatform
from .n8n import N8nPlatform
from .registry import get_platform_class

__all__ = [
    "CozePlatform",
    "N8nPlatform",
    "get_platform_class",
]
