"""Report models for validation, apply and search results."""

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=False)

    path: str       # dotted field path, "root" or "file"
    message: str


class ValidationOutcome(BaseModel):
    model_config = ConfigDict(frozen=False)

    file_name: str
    file_path: str
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    model_config = ConfigDict(frozen=False)

    valid: bool                 # True if every file is valid (vacuously for none)
    files: list[ValidationOutcome] = Field(default_factory=list)


class ApplyResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    message: str
    modules_processed: int = 0
    parts_processed: int = 0


class ModuleSearchResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    module_id: str
    type: str
    description: str
    category: str
    similarity: float   # 0-1, 1 is most similar
