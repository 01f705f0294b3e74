from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_HOST: str = Field("0.0.0.0")
    PORT: int = Field(3000)
    ENV: str = Field("development")

    LOG_LEVEL: str = Field("INFO")


settings = Settings()
