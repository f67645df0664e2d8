from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DEFAULTS = {
    "job_role": "General",
    "experience_level": "professional",
    "industry": "Technology",
}


class ImproveResumeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume: str = Field(default="", max_length=60000)
    job_role: str = Field(default="General", alias="jobRole", max_length=120)
    experience_level: str = Field(default="professional", alias="experienceLevel", max_length=60)
    industry: str = Field(default="Technology", max_length=120)
    tool: str = Field(default="", max_length=40)

    @field_validator("job_role", "experience_level", "industry", mode="before")
    @classmethod
    def _blank_to_default(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            return _DEFAULTS[info.field_name]
        return value.strip() if isinstance(value, str) else value


class ImproveErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    validation_error: bool | None = Field(default=None, alias="validationError")


class ParseDocumentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    text: str
    char_count: int = Field(alias="charCount", ge=0)


class ParseDocumentError(BaseModel):
    success: bool = False
    error: str


class ToolDescriptor(BaseModel):
    id: str
    title: str
    description: str


class ToolsCatalogResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tools: list[ToolDescriptor]
    job_roles: list[str] = Field(alias="jobRoles")
    industries: list[str]
    experience_levels: list[str] = Field(alias="experienceLevels")
