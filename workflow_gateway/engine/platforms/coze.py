from typing import Any, Dict
from workflow_gateway.engine.platforms.base import BasePlatform
from workflow_gateway.engine.platforms.registry import register_platform

@register_platform("coze")
class CozePlatform(BasePlatform):
    def shape_body(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        # {"workflow_id": ..., "parameters": {...}}; the id never goes inside parameters
        return {
            "workflow_id": self.external_workflow_id,
            "parameters": parameters,
        }
