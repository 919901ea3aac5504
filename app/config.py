# app/config.py
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"
    APP_ROLE: Literal["input", "temperature"] = "input"
    PORT: int = 8080

    # OpenTelemetry
    OTEL_SERVICE_NAME: str = "zipcode-weather"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None  # e.g. http://otel-collector:4318/v1/traces
    OTEL_EXPORT_TIMEOUT_SECONDS: float = 5.0

    # Temperature service (called by the input service)
    TEMPERATURE_SERVICE_URL: str = "http://service-b:8081/temperatura"

    # ViaCEP
    VIACEP_URL: str = "https://viacep.com.br/ws/{cep}/json/"

    # WeatherAPI
    WEATHER_API_URL: str = "https://api.weatherapi.com/v1/current.json"
    WEATHER_API_KEY: str = ""

    # Outbound HTTP
    HTTP_CONNECT_TIMEOUT_SECONDS: float = 3.0
    HTTP_READ_TIMEOUT_SECONDS: float = 10.0
    REQUEST_DEADLINE_SECONDS: float = 20.0  # whole inbound request, upstream calls included

    # read .env and ignore any extra keys so this doesn't break again
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
