from abc import ABC, abstractmethod
from typing import Any, Dict

class BasePlatform(ABC):
    """Turns resolved workflow parameters into the platform's request body."""

    def __init__(self, external_workflow_id: str):
        self.external_workflow_id = external_workflow_id

    @abstractmethod
    def shape_body(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        pass
