from pydantic_settings import BaseSettings

PLACEHOLDER_KEYS = {"YOUR_GEMINI_API_KEY_HERE", "YOUR_OPENWEATHER_API_KEY_HERE"}


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./database.db"
    gemini_api_key: str = ""  # empty = simulated assessments
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    openweather_api_key: str = ""  # empty = simulated weather
    openweather_weather_url: str = "https://api.openweathermap.org/data/2.5/weather"
    openweather_air_url: str = "https://api.openweathermap.org/data/2.5/air_pollution"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    upstream_timeout: float = 30.0
    damage_threshold: int = 75
    visibility_threshold: float = 1.0  # km
    emergency_radius: int = 5000  # meters
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MB
    default_lat: float = 22.5726
    default_lng: float = 88.3639
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def is_configured(key: str | None) -> bool:
    """False for missing keys and the placeholders shipped in example configs."""
    return bool(key) and key not in PLACEHOLDER_KEYS


settings = Settings()
