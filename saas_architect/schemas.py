# saas_architect/schemas.py
from enum import Enum
from typing import List, Optional, Any, Dict
from pydantic import BaseModel, Field, field_validator, ConfigDict


class MonetizationType(str, Enum):
    SUBSCRIPTION = "subscription"
    ONE_TIME = "one-time"
    FREEMIUM = "freemium"
    MARKETPLACE = "marketplace"
    INTERNAL_TOOL = "internal-tool"


class TenantType(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    idea: str = Field(..., min_length=30)
    roles: List[str] = Field(..., min_length=1)
    monetization: MonetizationType
    tenant_type: TenantType = Field(..., alias="tenantType")
    tech_stack: List[str] = Field(default_factory=list, alias="techStack")

    @field_validator("idea")
    @classmethod
    def idea_not_blank(cls, v: str) -> str:
        if len(v.strip()) < 30:
            raise ValueError("idea must be at least 30 characters")
        return v

    @field_validator("roles")
    @classmethod
    def roles_not_blank(cls, v: List[str]) -> List[str]:
        cleaned = [r.strip() for r in v]
        if any(not r for r in cleaned):
            raise ValueError("roles must not contain empty values")
        return cleaned


# --- Blueprint shape (mock generator output)
class ColumnSpec(BaseModel):
    name: str
    type: str
    description: str


class DatabaseTable(BaseModel):
    table_name: str
    columns: List[ColumnSpec]


class RoleSpec(BaseModel):
    name: str
    description: str
    permissions: List[str]


class FolderStructure(BaseModel):
    frontend: List[str]
    backend: List[str]


class ArchitectureBlueprint(BaseModel):
    project_summary: str
    mvp_features: List[str]
    future_features: List[str]
    roles: List[RoleSpec]
    database_schema: List[DatabaseTable]
    folder_structure: FolderStructure


# --- API responses
class GenerateResponse(BaseModel):
    id: str
    data: Dict[str, Any]
    isMock: bool


class GenerationRecordOut(BaseModel):
    id: str
    idea: str
    roles_input: str
    monetization_type: str
    tenant_type: str
    tech_stack: List[str]
    ai_response: Dict[str, Any]
    created_at: Optional[str] = None
