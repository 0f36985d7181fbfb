from typing import List, Optional, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Hypesoft 商品目录"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # 环境配置
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # 数据库配置
    DATABASE_URL: str = "sqlite+aiosqlite:///./catalog.db"
    DATABASE_NAME: str = "catalog"
    SQL_DEBUG: bool = False

    # Keycloak 身份提供方
    KEYCLOAK_AUTHORITY: str = "http://localhost:8080/realms/hypesoft"
    KEYCLOAK_CLIENT_ID: str = "hypesoft-api"
    KEYCLOAK_CLIENT_SECRET: str = ""
    KEYCLOAK_TIMEOUT: float = 10.0

    # JWT 校验（生产环境必须通过 .env 文件或环境变量设置）
    JWT_ISSUER: Optional[str] = None
    JWT_AUDIENCE: Optional[str] = None
    JWT_SECRET_KEY: str = Field(
        default="dev-only-secret-key-please-change-in-production",
        description="HS256 为共享密钥，RS256 为 PEM 公钥"
    )
    JWT_ALGORITHM: str = "HS256"

    # CORS配置
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 日志配置
    LOG_LEVEL: str = "INFO"
    # 为空时只输出到控制台
    LOG_DIR: Optional[str] = "logs"

    # 分页配置
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def keycloak_token_endpoint(self) -> str:
        return f"{self.KEYCLOAK_AUTHORITY.rstrip('/')}/protocol/openid-connect/token"

    @property
    def keycloak_logout_endpoint(self) -> str:
        return f"{self.KEYCLOAK_AUTHORITY.rstrip('/')}/protocol/openid-connect/logout"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
