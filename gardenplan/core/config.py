from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Layout optimization
    MIN_SPACE_UTILIZATION: float = 30.0
    LAYOUT_CACHE_TTL_SECONDS: int = 86_400  # 24 hours
    LAYOUT_CACHE_BACKEND: Literal["memory", "redis"] = "memory"

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Reminders
    REMINDER_TIME: str = "09:00"
    QUIET_HOURS_START: str = "22:00"
    QUIET_HOURS_END: str = "06:00"

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
