import asyncio
import json
from typing import Any, Dict, Optional

import httpx

from workflow_gateway.core.exceptions import BadInputError, WorkflowExecutionError, WorkflowTimeoutError
from workflow_gateway.core.logging import get_logger
from workflow_gateway.engine.platforms import get_platform_class
from workflow_gateway.schemas.execution import (
    ExecutionRequestInfo,
    ExecutionResponseInfo,
    WorkflowExecuteRequest,
    WorkflowExecuteResult,
)
from workflow_gateway.schemas.workflow import WorkflowRead

logger = get_logger("engine.executor")

DEFAULT_TIMEOUT = 30.0


def _as_object(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise BadInputError(f"Invalid {name}: expected a JSON object")
    return value


def resolve_parameters(workflow: WorkflowRead, override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Caller parameters replace the stored defaults wholesale when non-empty."""
    if override:
        return dict(_as_object(override, "parameters"))
    return dict(_as_object(workflow.parameters, "parameters"))


def resolve_headers(workflow: WorkflowRead, override: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Baseline auth/content-type headers overlaid with the caller's headers,
    or with the stored defaults when the caller sent none.

    Every header may be overridden, Authorization included.
    """
    custom = _as_object(override, "headers") if override else _as_object(workflow.headers, "headers")

    headers = {
        "Authorization": f"Bearer {workflow.bearer_token}",
        "Content-Type": "application/json",
    }
    for key, value in custom.items():
        if not isinstance(value, str):
            raise BadInputError(f"Invalid headers: value of '{key}' must be a string")
        headers[key] = value
    return headers


def _first_value_headers(response: httpx.Response) -> Dict[str, str]:
    """First value per header name, keeping the name as the upstream cased it."""
    encoding = response.headers.encoding
    headers: Dict[str, str] = {}
    seen = set()
    for raw_key, raw_value in response.headers.raw:
        key = raw_key.decode(encoding)
        if key.lower() in seen:
            continue
        seen.add(key.lower())
        headers[key] = raw_value.decode(encoding)
    return headers


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        # Not JSON (or not decodable): echo the raw text
        return response.text


class WorkflowInvoker:
    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.timeout = timeout

    def build_request(self, workflow: WorkflowRead, overrides: WorkflowExecuteRequest) -> ExecutionRequestInfo:
        """Everything that can fail on bad input happens here, before any I/O."""
        parameters = resolve_parameters(workflow, overrides.parameters)
        platform = get_platform_class(workflow.source)(workflow.external_workflow_id)
        body = platform.shape_body(parameters)
        headers = resolve_headers(workflow, overrides.headers)
        return ExecutionRequestInfo(
            method=workflow.http_method,
            url=workflow.base_url,
            headers=headers,
            body=body,
        )

    async def _send(self, request_info: ExecutionRequestInfo) -> httpx.Response:
        # Non-streaming request: the body has been read in full when this returns
        return await self.client.request(
            method=request_info.method,
            url=request_info.url,
            headers=request_info.headers,
            content=json.dumps(request_info.body).encode("utf-8"),
            timeout=self.timeout,
        )

    async def invoke(self, workflow: WorkflowRead, overrides: WorkflowExecuteRequest) -> WorkflowExecuteResult:
        request_info = self.build_request(workflow, overrides)

        # httpx timeouts apply per phase; wait_for caps the whole exchange
        try:
            response = await asyncio.wait_for(self._send(request_info), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise WorkflowTimeoutError(
                f"request to {request_info.url} timed out after {self.timeout}s"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise WorkflowExecutionError(str(e) or e.__class__.__name__) from e

        logger.info(
            f"Workflow {workflow.workflow_id} executed",
            extra={"extra_fields": {
                "workflow_id": workflow.workflow_id,
                "method": request_info.method,
                "url": request_info.url,
                "status": response.status_code,
            }},
        )

        return WorkflowExecuteResult(
            request=request_info,
            response=ExecutionResponseInfo(
                status=response.status_code,
                status_text=httpx.codes.get_reason_phrase(response.status_code),
                headers=_first_value_headers(response),
                body=_parse_body(response),
            ),
        )
