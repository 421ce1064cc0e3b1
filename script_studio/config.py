from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
import yaml

class ServiceConfig(BaseModel):
    generate_url: str = Field(default="http://localhost:5678/webhook/frontend")
    decision_url: str = Field(default="http://localhost:5678/webhook/approve")
    video_approve_url: str = Field(default="http://localhost:5678/webhook/approve-video")
    video_reject_url: str = Field(default="http://localhost:5678/webhook/reject-video")
    timeout: float = Field(default=60.0, gt=0)

class WorkflowConfig(BaseModel):
    status_duration_ms: int = Field(default=2000, gt=0)
    error_duration_ms: int = Field(default=4000, gt=0)

class Config(BaseModel):
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(default=None)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path):
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
