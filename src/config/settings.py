"""Global service settings"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized configuration.
    Reads configs from env variables.
    """

    app_name: str = "Message Cat API"
    server_host: str = "0.0.0.0"
    server_port: int = 8080

    # Base URL this service advertises for its own routes (image_url).
    public_base_url: str | None = None

    allowed_origin: str = "http://localhost:3000"

    cat_base_url: str = "https://http.cat"
    upstream_timeout: float = 10.0

    idle_timeout: int = 60

    log_level: str = "INFO"

    model_config = {"env_file": ".env"}


settings = Settings()

if not settings.public_base_url:
    settings.public_base_url = f"http://localhost:{settings.server_port}"
