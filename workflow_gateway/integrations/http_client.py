import httpx
from fastapi import Request
from workflow_gateway.config import Settings
from workflow_gateway.core.logging import logger

def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for outbound workflow calls, owned by the app lifespan."""
    logger.info("Initializing outbound HTTP client")
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.WORKFLOW_EXECUTION_TIMEOUT),
        limits=httpx.Limits(
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
            max_connections=settings.HTTP_MAX_CONNECTIONS,
        ),
    )

async def close_http_client(client: httpx.AsyncClient) -> None:
    if not client.is_closed:
        logger.info("Closing outbound HTTP client")
        await client.aclose()

def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client
