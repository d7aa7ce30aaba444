from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for auth admin calls and RLS-bypassing reads

    # Supabase Storage buckets
    templates_bucket: str = "templates"
    template_source_bucket: str = "templatesource"
    signed_url_ttl_seconds: int = 60 * 60

    # Cloudflare R2 (S3 compatible)
    r2_account_id: Optional[str] = None
    r2_endpoint: Optional[str] = None
    r2_access_key_id: Optional[str] = None
    r2_secret_access_key: Optional[str] = None
    r2_source_bucket: str = "celite-source-files"
    r2_previews_bucket: str = "celite-previews"
    r2_previews_domain: str = "preview.celite.in"

    # Razorpay (settings table values take precedence)
    razorpay_key_id: Optional[str] = None
    razorpay_key_secret: Optional[str] = None
    razorpay_currency: str = "INR"
    razorpay_monthly_amount: Optional[int] = None
    razorpay_yearly_amount: Optional[int] = None
    razorpay_webhook_secret: Optional[str] = None

    # ElevenLabs
    elevenlabs_api_key: Optional[str] = None
    sfx_creator_shop_id: Optional[str] = None
    sfx_generation_delay_seconds: float = 2.0

    # SMTP
    smtp_host: str = "smtp.hostinger.com"
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    email_from: str = "celitecontactsupport@celite.in"
    email_from_name: str = "Celite"

    # Cron / background jobs
    cron_secret: Optional[str] = None
    expiry_scheduler_enabled: bool = False
    expiry_scheduler_interval_seconds: int = 24 * 60 * 60

    # Analytics
    ga_measurement_id: Optional[str] = None

    # App
    app_name: str = "template-marketplace-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def r2_endpoint_url(self) -> Optional[str]:
        if self.r2_endpoint:
            return self.r2_endpoint
        if self.r2_account_id:
            return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"
        return None

    @property
    def r2_configured(self) -> bool:
        return all([self.r2_endpoint_url, self.r2_access_key_id, self.r2_secret_access_key])

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
