from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/benefits.db"
    storage_backend: str = "local"  # local | cloud
    cloud_store_url: str = ""
    cloud_timeout_seconds: float = 10.0
    expiring_days: int = 30
    timezone: str = ""  # IANA name, empty uses the host's local time
    allowed_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()

# Key under which the whole record set is stored by the local backend
STORAGE_KEY = "creditCardBenefitTracker"
