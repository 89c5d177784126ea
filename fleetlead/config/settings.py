from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "fleetlead"
    db_username: str = "fleetlead"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    image_queue_name: str = "image-processing"
    enrichment_queue_name: str = "contact-enrichment"
    email_queue_name: str = "email-generation"
    extraction_batch_size: int = 5
    extraction_visibility_timeout_seconds: int = 15
    enrichment_batch_size: int = 5
    enrichment_visibility_timeout_seconds: int = 60
    worker_poll_interval_seconds: int = 5

    webhook_secret: str = ""
    signature_max_age_seconds: int = 300
    max_attachments: int = 5
    max_attachment_bytes: int = 50 * 1024 * 1024
    storage_root: str = "/app/files"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    relay_ingest_url: str = "http://localhost:8000/ingest"
    relay_timeout_seconds: int = 60

    ocr_engine: str = "vision"
    vision_api_url: str = "https://vision.googleapis.com/v1/images:annotate"
    vision_api_key: str = ""
    vision_timeout_seconds: int = 30

    parsing_provider: str = "openai"
    parsing_openai_api_key: str = ""
    parsing_openai_model_name: str = "gpt-4o-mini"
    parsing_openai_timeout_seconds: int = 30
    parsing_openai_temperature: float = 0.0
    parsing_openai_compatible_base_url: str = ""
    parsing_openai_compatible_api_key: str = ""
    parsing_openai_compatible_model_name: str = ""
    parsing_openai_compatible_timeout_seconds: int = 30
    parsing_openrouter_api_key: str = ""
    parsing_openrouter_model_name: str = ""
    parsing_groq_api_key: str = ""
    parsing_groq_model_name: str = ""
    parsing_together_api_key: str = ""
    parsing_together_model_name: str = ""
    parsing_deepseek_api_key: str = ""
    parsing_deepseek_model_name: str = ""
    parsing_ollama_api_key: str = ""
    parsing_ollama_model_name: str = ""

    media_converter: str = "none"
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_timeout_seconds: int = 60

    geocoding_enabled: bool = True
    geocoding_base_url: str = "https://nominatim.openstreetmap.org"
    geocoding_user_agent: str = "fleetlead-pipeline"
    geocoding_timeout_seconds: int = 10

    vendor_provider: str = "zoominfo"
    zoominfo_base_url: str = "https://api.zoominfo.com"
    zoominfo_username: str = ""
    zoominfo_password: str = ""
    zoominfo_timeout_seconds: int = 30
    zoominfo_retry_attempts: int = 3

    min_company_revenue: int = 2_000_000
