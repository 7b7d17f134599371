"""Pydantic models for contract definitions loaded from the registry."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Part(BaseModel):
    """An exportable unit of a module (function, class, endpoint...)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)  # unique within the parent module
    type: str = Field(min_length=1)


class DependencyPart(BaseModel):
    """Reference to a part of another module. Must match that part's id and type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    part_id: str = Field(min_length=1)
    type: str = Field(min_length=1)


class Dependency(BaseModel):
    """Unidirectional dependency on the parts of another module."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    module_id: str = Field(min_length=1)
    parts: list[DependencyPart] = Field(min_length=1)


class ContractContent(BaseModel):
    """Schema of a contract file body.

    Unknown keys are rejected so that downstream code never has to deal with
    open-ended content.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str = Field(min_length=1)
    parts: list[Part] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)


class ContractDocument(BaseModel):
    """A raw registry entry before schema validation."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    file_path: str
    file_hash: str  # SHA256 of the raw file text
    data: Optional[Any] = None  # yaml.safe_load() result
    parse_error: Optional[str] = None  # set when the YAML could not be parsed


class ContractFile(BaseModel):
    """A schema-valid contract. Identity is ``file_path``."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    file_path: str
    content: ContractContent
    file_hash: str = ""
