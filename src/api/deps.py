import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.repos import (
    SQLiteAnalysisRepo,
    SQLiteCategoryRepo,
    SQLiteNewsRepo,
    SQLiteTagRepo,
    SQLiteUserRepo,
)
from src.components.analysis import AnalysisComponent
from src.components.auth import run_authenticate_token
from src.components.category import CategoryComponent
from src.components.news import NewsComponent
from src.components.tag import TagComponent
from src.components.upload import UploadRules
from src.domain.errors import AuthenticationError, PermissionDeniedError
from src.domain.user import UserEntity
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("FIN_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "editorial.db")
        self.media_dir = self.data_dir / "media"
        self.rules_path = Path(os.environ.get("FIN_RULES_PATH", str(self.base_dir / "rules.yaml")))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


def get_api_version(rules: Rules = Depends(get_rules)) -> str:
    return rules.project.api_version


# --- Repos ---
def get_news_repo(settings: Settings = Depends(get_settings)) -> SQLiteNewsRepo:
    return SQLiteNewsRepo(settings.db_path)


def get_analysis_repo(settings: Settings = Depends(get_settings)) -> SQLiteAnalysisRepo:
    return SQLiteAnalysisRepo(settings.db_path)


def get_category_repo(settings: Settings = Depends(get_settings)) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(settings.db_path)


def get_tag_repo(settings: Settings = Depends(get_settings)) -> SQLiteTagRepo:
    return SQLiteTagRepo(settings.db_path)


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


# --- Adapters ---
# Clock for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def get_auth_adapter(rules: Rules = Depends(get_rules)) -> JWTAuthAdapter:
    tokens = rules.auth.tokens
    return JWTAuthAdapter(
        access_ttl_minutes=tokens.access_ttl_minutes,
        refresh_ttl_minutes=tokens.refresh_ttl_minutes,
    )


def get_file_store(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> FileSystemStore:
    return FileSystemStore(
        base_path=str(settings.media_dir), public_base_url=rules.uploads.public_base_url
    )


def get_upload_rules(rules: Rules = Depends(get_rules)) -> UploadRules:
    uploads = rules.uploads
    return UploadRules(
        max_upload_bytes=uploads.max_upload_bytes,
        allowed_extensions=tuple(e.lower() for e in uploads.allowlist_extensions),
        allowed_mime_types=tuple(m.lower() for m in uploads.allowlist_mime_types),
        folder=uploads.folder,
    )


# --- Components ---
def get_news_component(
    news_repo: SQLiteNewsRepo = Depends(get_news_repo),
    category_repo: SQLiteCategoryRepo = Depends(get_category_repo),
    tag_repo: SQLiteTagRepo = Depends(get_tag_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> NewsComponent:
    return NewsComponent(
        news_repo, category_repo, tag_repo, clock, max_page_size=rules.pagination.max_limit
    )


def get_analysis_component(
    analysis_repo: SQLiteAnalysisRepo = Depends(get_analysis_repo),
    category_repo: SQLiteCategoryRepo = Depends(get_category_repo),
    tag_repo: SQLiteTagRepo = Depends(get_tag_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> AnalysisComponent:
    return AnalysisComponent(
        analysis_repo, category_repo, tag_repo, clock, max_page_size=rules.pagination.max_limit
    )


def get_category_component(
    category_repo: SQLiteCategoryRepo = Depends(get_category_repo),
    clock: SystemClock = Depends(get_clock),
) -> CategoryComponent:
    return CategoryComponent(category_repo, clock)


def get_tag_component(
    tag_repo: SQLiteTagRepo = Depends(get_tag_repo),
    clock: SystemClock = Depends(get_clock),
) -> TagComponent:
    return TagComponent(tag_repo, clock)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def _request_token(request: Request, token: str | None) -> str | None:
    # Header first, then the HttpOnly cookie set on login
    if not token:
        cookie_token = request.cookies.get("access_token")
        if cookie_token and cookie_token.startswith("Bearer "):
            token = cookie_token.split(" ", 1)[1]
    return token or None


def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
) -> UserEntity:
    token = _request_token(request, token)
    if not token:
        raise AuthenticationError("Not authenticated")

    return run_authenticate_token(token, user_repo, auth)


def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
) -> UserEntity | None:
    """Like get_current_user, but anonymous callers get None."""
    token = _request_token(request, token)
    if not token:
        return None
    return run_authenticate_token(token, user_repo, auth)


def require_publisher(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    """Only editors and admins may publish."""
    if not current_user.can_publish_content():
        raise PermissionDeniedError("Only editors and admins can publish content")
    return current_user
