from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_docs: bool = Field(default=True, alias="ENABLE_DOCS")

    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="ALLOWED_ORIGINS"
    )
    enable_hsts: bool = Field(default=False, alias="ENABLE_HSTS")
    content_security_policy: str | None = Field(default=None, alias="CONTENT_SECURITY_POLICY")
    content_security_policy_report_only: bool = Field(
        default=False, alias="CONTENT_SECURITY_POLICY_REPORT_ONLY"
    )
    rate_limit_per_minute: int = Field(default=120, alias="RATE_LIMIT_PER_MINUTE")
    rate_limit_storage_uri: str = Field(default="memory://", alias="RATE_LIMIT_STORAGE_URI")

    jwt_algorithm: Literal["RS256", "RS384", "RS512"] = Field(default="RS256", alias="JWT_ALGORITHM")
    jwt_private_key: str | None = Field(default=None, alias="JWT_PRIVATE_KEY")
    jwt_private_key_path: str | None = Field(default=None, alias="JWT_PRIVATE_KEY_PATH")
    jwt_public_key: str | None = Field(default=None, alias="JWT_PUBLIC_KEY")
    jwt_public_key_path: str | None = Field(default=None, alias="JWT_PUBLIC_KEY_PATH")
    access_token_expire_minutes: int = Field(default=15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Loan operation policies; role names are validated in app.core.permissions.
    admin_bypass: bool = Field(default=False, alias="ADMIN_BYPASS")
    loan_create_roles: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["user"], alias="LOAN_CREATE_ROLES"
    )
    loan_review_roles: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["officer"], alias="LOAN_REVIEW_ROLES"
    )
    loan_decide_roles: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["manager"], alias="LOAN_DECIDE_ROLES"
    )
    loan_list_roles: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["officer", "manager"], alias="LOAN_LIST_ROLES"
    )

    @field_validator(
        "allowed_origins",
        "loan_create_roles",
        "loan_review_roles",
        "loan_decide_roles",
        "loan_list_roles",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
