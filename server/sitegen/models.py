from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class GeneratedSite(BaseModel):
    # unknown keys from the model are kept; missing ones stay unset
    model_config = ConfigDict(extra="allow")

    html: str = ""
    css: str = ""
    js: str = ""


class PromptRequest(BaseModel):
    prompt: str


class PublishRequest(BaseModel):
    html: str = ""
    css: str = ""
    js: str = ""


class PublishResponse(BaseModel):
    message: str
    url: str


class ErrorResponse(BaseModel):
    error: str


class StagingProject(BaseModel):
    directory: Path
    files: List[Tuple[str, str]] = Field(default_factory=list)


class DeployResult(BaseModel):
    success: bool
    url: Optional[str] = None
    output: str = ""
