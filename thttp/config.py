from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    default_url: str = "https://httpbin.org/get"
    default_method: str = "GET"
    request_timeout: float = 30.0
    body_preview_limit: int = 1000
    spinner_interval: float = 0.1
    url_max_length: int = 500
    method_max_length: int = 10


DEFAULT_SETTINGS = Settings()
