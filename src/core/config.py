"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    Feature credentials default to empty strings and are checked when
    the feature is used, so one missing provider does not take down
    the whole relay.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="reset-relay", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("PORT", "RAILWAY_PORT"),
        description="Server port",
    )
    max_request_body_size: int = Field(default=100 * 1024, description="Maximum request body size in bytes")

    # CORS
    cors_origins: str = Field(default="*", description="Comma-separated list of allowed CORS origins")

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(
        ...,
        validation_alias=AliasChoices(
            "SUPABASE_SECRET_KEY",
            "SUPABASE_SERVICE_ROLE",
            "SERVICE_ROLE_KEY",
            "SUPABASE_KEY",
        ),
        description="Supabase service role key for backend operations",
    )
    reset_table: str = Field(default="password_resets", description="Table holding one-time reset codes")
    verify_rpc: str = Field(default="verify_reset_code", description="RPC that validates a reset code")
    profiles_table: str = Field(default="profiles", description="Table holding user profiles")
    room_members_table: str = Field(default="room_members", description="Table holding room membership rows")
    room_upsert_rpc: str = Field(default="upsert_room_member", description="RPC that upserts room presence")
    room_page_size: int = Field(
        default=1000,
        description="Rows fetched per page when listing rooms; must not exceed the PostgREST max-rows setting",
    )
    identity_page_size: int = Field(default=200, description="Users fetched per admin list page")
    identity_max_pages: int = Field(default=50, description="Upper bound on admin list pages scanned per lookup")
    identity_lookup_timeout_seconds: float = Field(
        default=30.0,
        description="Deadline for a whole paged user lookup, across all pages",
    )

    # Outbound calls
    upstream_timeout_seconds: float = Field(default=10.0, description="Timeout applied to every collaborator call")

    # Email
    email_provider: str = Field(default="resend", description="Email transport: 'resend' or 'smtp'")
    resend_api_key: str = Field(default="", description="Resend API key for sending emails")
    email_from_address: str = Field(default="", description="From address for transactional emails")
    email_subject: str = Field(default="Your password reset code", description="Subject line of reset emails")
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")
    smtp_port: int = Field(default=465, description="SMTP server port")
    smtp_use_ssl: bool = Field(default=True, description="Use implicit TLS (SMTP_SSL) instead of STARTTLS")
    smtp_user: str = Field(
        default="",
        validation_alias=AliasChoices("SMTP_USER", "EMAIL_USER"),
        description="SMTP login user",
    )
    smtp_password: str = Field(
        default="",
        validation_alias=AliasChoices("SMTP_PASSWORD", "EMAIL_PASS"),
        description="SMTP login password",
    )

    # Avatar / image host
    avatar_api_key: str = Field(default="", description="Shared secret callers present to update avatars")
    delete_token: str = Field(default="", description="Shared secret callers present to delete images")
    cloudinary_cloud_name: str = Field(default="", description="Cloudinary cloud name")
    cloudinary_api_key: str = Field(default="", description="Cloudinary API key")
    cloudinary_api_secret: str = Field(default="", description="Cloudinary API secret")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def supabase_base_url(self) -> str:
        """Supabase URL without a trailing slash."""
        return self.supabase_url.strip().rstrip("/")

    @property
    def email_sender(self) -> str:
        """Sender address, falling back to the SMTP login."""
        return self.email_from_address or self.smtp_user

    @property
    def cloudinary_configured(self) -> bool:
        """Check if all Cloudinary credentials are present."""
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )

    def missing_credentials(self) -> list[str]:
        """Names of optional feature credentials that are not set."""
        missing = []
        if self.email_provider == "smtp":
            if not (self.smtp_user and self.smtp_password):
                missing.append("SMTP_USER/SMTP_PASSWORD")
        elif not (self.resend_api_key and self.email_sender):
            missing.append("RESEND_API_KEY/EMAIL_FROM_ADDRESS")
        if not self.avatar_api_key:
            missing.append("AVATAR_API_KEY")
        if not self.delete_token:
            missing.append("DELETE_TOKEN")
        if not self.cloudinary_configured:
            missing.append("CLOUDINARY_*")
        return missing


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
