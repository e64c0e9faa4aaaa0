from typing import Dict, Type, Any
from workflow_gateway.core.logging import logger

_PLATFORM_REGISTRY: Dict[str, Type[Any]] = {}

# Sources without a dedicated shaper get the n8n body shape
DEFAULT_PLATFORM = "n8n"

def register_platform(source: str):
    """Decorator to register a platform body shaper"""
    def decorator(cls):
        _PLATFORM_REGISTRY[source] = cls
        logger.debug(f"Registered platform shaper: {source} -> {cls.__name__}")
        return cls
    return decorator

def get_platform_class(source: str):
    return _PLATFORM_REGISTRY.get(source, _PLATFORM_REGISTRY[DEFAULT_PLATFORM])

def get_all_platforms():
    return _PLATFORM_REGISTRY
