from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docvault"
    db_username: str = "docvault"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    storage_backend: str = "local"
    storage_root: str = "/app/files"
    storage_base_url: str | None = None
    storage_timeout_seconds: int = 30
    storage_signing_secret: str = "change-me"
    s3_bucket: str = "documents"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    signed_url_ttl_seconds: int = 3600

    pdf_engine: str = "pdfplumber"

    ocr_language: str = "spa"
    ocr_timeout_seconds: int = 60

    image_max_dimension: int = 2000
    image_quality: int = 85

    disable_ai_processing: bool = False
    processing_timeout_seconds: int = 90

    classification_provider: str = "openai"
    classification_temperature: float = 0.3
    classification_openai_api_key: str = ""
    classification_openai_model_name: str = "gpt-4o-mini"
    classification_openai_timeout_seconds: int = 30
    classification_openai_compatible_base_url: str | None = None
    classification_openai_compatible_api_key: str = ""
    classification_openai_compatible_model_name: str = ""
    classification_openai_compatible_timeout_seconds: int = 30
    classification_openrouter_api_key: str = ""
    classification_openrouter_model_name: str = ""
    classification_groq_api_key: str = ""
    classification_groq_model_name: str = ""
    classification_ollama_api_key: str = "ollama"
    classification_ollama_model_name: str = ""

    default_quota_bytes: int = 5 * 1024 * 1024 * 1024
