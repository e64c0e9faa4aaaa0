from typing import Any, Dict
from workflow_gateway.engine.platforms.base import BasePlatform
from workflow_gateway.engine.platforms.registry import register_platform

@register_platform("n8n")
class N8nPlatform(BasePlatform):
    def shape_body(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        # Flat body: the parameters themselves, with workflow_id injected
        parameters["workflow_id"] = self.external_workflow_id
        return parameters
