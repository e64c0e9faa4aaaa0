"""Project-scoped registry and invocation gateway for Coze / n8n workflows."""

__version__ = "0.1.0"
