import secrets

from functools import lru_cache
from dotenv import find_dotenv
from pydantic import AnyHttpUrl, PostgresDsn, ValidationInfo, field_validator
from typing import Any, Optional, List, Union
from pydantic_settings import BaseSettings

from paperplay.utils.aws import get_database_url_from_secret_manager


class Settings(BaseSettings):
    PROJECT_NAME: str = "PaperPlay API"
    PROJECT_DESCRIPTION: str = "PaperPlay binds video messages and digital letters to printable " \
                               "sticker codes and share links, with optional time-locked reveal."
    PROJECT_VERSION: str = "1.0.0"

    API_V1_STR: str = "/api/v1"

    # operator tokens are issued by the auth service, which shares SECRET_KEY
    SECRET_KEY: str = secrets.token_urlsafe(32)
    # 60 minutes * 12 hours = 12 hours
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    OPERATOR_SCOPE: str = "operator"
    OPERATOR_TOKEN_URL: str = "/auth/token"

    # BACKEND_CORS_ORIGINS is a JSON-formatted list of origins
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    LOG_LEVEL: str = "INFO"

    # links printed on stickers and shared with receivers are <SHARE_BASE_URL>/<code>
    SHARE_BASE_URL: str = "https://paperplay-nu.vercel.app"

    # codes
    MAX_BATCH_SIZE: int = 500
    DEFAULT_BATCH_SIZE: int = 12
    BATCH_ID_LENGTH: int = 6
    LETTER_CODE_LENGTH: int = 8
    REQUEST_CODE_PREFIX: str = "REQ-"
    REQUEST_CODE_LENGTH: int = 6
    CODE_GENERATION_MAX_RETRIES: int = 5

    # assets
    STORAGE_BACKEND: str = "local"
    FILE_STORAGE: str = "./storage"
    MEDIA_BASE_URL: str = "http://localhost:8000/media"
    MAX_UPLOAD_SIZE_IN_MB: int = 200
    CREATE_TABLES_ON_STARTUP: bool = True

    @field_validator("STORAGE_BACKEND", mode='before')
    def check_storage_backend(cls, v: str) -> str:
        v = (v or "local").lower()
        if v not in ("local", "s3"):
            raise ValueError(f"Unknown storage backend {v}")
        return v

    AWS_S3_BUCKET: Optional[str] = None
    AWS_S3_REGION: Optional[str] = None
    AWS_S3_PUBLIC_URL: Optional[str] = None

    @field_validator("AWS_S3_PUBLIC_URL", mode='before')
    def assemble_s3_public_url(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if isinstance(v, str):
            return v.rstrip("/")
        if check_parameter('AWS_S3_BUCKET', info):
            region = info.data['AWS_S3_REGION'] if check_parameter('AWS_S3_REGION', info) else 'us-east-1'
            return f"https://{info.data['AWS_S3_BUCKET']}.s3.{region}.amazonaws.com"
        return None

    AWS_SECRET_MANAGER_REGION: Optional[str] = None
    AWS_SECRET_MANAGER_RDS_CREDENTIALS: Optional[str] = None
    AWS_SECRET_MANAGER_RDS_PARAMETERS: Optional[str] = None

    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    @field_validator("SQLALCHEMY_DATABASE_URI", mode='after')
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str):
            return v

        if (check_parameter('AWS_SECRET_MANAGER_REGION', info) and
                check_parameter('AWS_SECRET_MANAGER_RDS_CREDENTIALS', info)):
            return get_database_url_from_secret_manager(
                info.data["AWS_SECRET_MANAGER_REGION"],
                info.data["AWS_SECRET_MANAGER_RDS_CREDENTIALS"],
                info.data["AWS_SECRET_MANAGER_RDS_PARAMETERS"]
                if check_parameter('AWS_SECRET_MANAGER_RDS_PARAMETERS', info) else None
            ).unicode_string()

        if (check_parameter('POSTGRES_USER', info) and
                check_parameter('POSTGRES_PASSWORD', info) and
                check_parameter('POSTGRES_SERVER', info)):
            return PostgresDsn.build(
                scheme="postgresql",
                username=info.data["POSTGRES_USER"],
                password=info.data["POSTGRES_PASSWORD"],
                host=info.data["POSTGRES_SERVER"],
                path=f"{info.data['POSTGRES_DB'] if check_parameter('POSTGRES_DB', info) else ''}",
            ).unicode_string()

        return "sqlite:///./paperplay.db"

    REDIS_HOST: Optional[str] = 'localhost'
    REDIS_PORT: Optional[str] = '6379'
    REDIS_URL: Optional[str] = None

    @field_validator("REDIS_URL", mode='before')
    def assemble_redis_url(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str):
            return v
        else:
            host = info.data['REDIS_HOST'] if check_parameter('REDIS_HOST', info) else 'localhost'
            port = info.data['REDIS_PORT'] if check_parameter('REDIS_PORT', info) else '6379'
            return f"redis://{host}:{port}/0"

    # celery config
    CELERY_TASK_ALWAYS_EAGER: bool = False
    # 5 retries with exponential delays starting from 30 seconds, capped at 1 hour
    ASSET_REMOVAL_RETRY_BACKOFF: int = 30
    ASSET_REMOVAL_RETRY_BACKOFF_MAX: int = 3600
    ASSET_REMOVAL_MAX_RETRIES: int = 5

    class Config:
        env_file = find_dotenv(usecwd=True) or None


def check_parameter(name: str, info: ValidationInfo) -> bool:
    return name in info.data and info.data[name]


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
