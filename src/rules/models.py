from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str
    api_version: str = "v1"


class TokenRules(BaseModel):
    access_ttl_minutes: int = Field(gt=0)
    refresh_ttl_minutes: int = Field(gt=0)


class AuthRules(BaseModel):
    password_min_length: int = Field(default=8, ge=1)
    tokens: TokenRules


class UploadsRules(BaseModel):
    max_upload_bytes: int = Field(gt=0)
    allowlist_extensions: list[str]
    allowlist_mime_types: list[str]
    folder: str
    public_base_url: str = "/media"


class PaginationRules(BaseModel):
    default_limit: int = Field(gt=0)
    max_limit: int = Field(gt=0)
    featured_limit: int = Field(gt=0)
    latest_by_stock_limit: int = Field(gt=0)
    popular_tags_limit: int = Field(default=10, gt=0)


class CorsRules(BaseModel):
    allow_origins: list[str]
    allow_credentials: bool = True


class Rules(BaseModel):
    project: ProjectRules
    auth: AuthRules
    uploads: UploadsRules
    pagination: PaginationRules
    cors: CorsRules
