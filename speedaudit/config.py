from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "SpeedAudit"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    API_V1_STR: str = "/api/v1"

    CORS_ORIGINS: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    # Reachability and discovery probes (HEAD requests)
    REACHABILITY_TIMEOUT_SECONDS: float = 3.0
    DISCOVERY_TIMEOUT_SECONDS: float = 3.0
    DISCOVERY_CONCURRENT: bool = True

    # Page driving
    NAVIGATION_TIMEOUT_MS: int = 30000
    SETTLE_MS: int = 3000
    DEVICE_NAME: str = "iPhone 12"

    # Browser: "chromium", "firefox" or "webkit"
    BROWSER_TYPE: str = "chromium"
    BROWSER_HEADLESS: bool = True
    BROWSER_ARGS: str = "--no-sandbox,--disable-setuid-sandbox"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [o.strip() for o in self.CORS_ORIGINS.split(",")]
        return self.CORS_ORIGINS

    @property
    def browser_args_list(self) -> List[str]:
        return [a.strip() for a in self.BROWSER_ARGS.split(",") if a.strip()]


settings = Settings()
