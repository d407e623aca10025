from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    google_places_api_key: str
    places_region: str = "gb"
    autocomplete_debounce_ms: int = 300
    autocomplete_min_length: int = 3
    http_timeout: float = 10.0
    postcodes_io_url: str = "https://api.postcodes.io"
    log_level: str = "INFO"
