from pydantic_settings import BaseSettings


# Models that require max_completion_tokens instead of max_tokens
_MAX_COMPLETION_TOKENS_MODELS = {"gpt-5.2", "gpt-5", "o1", "o3", "o3-mini", "o1-mini"}


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./workbench.db"
    openai_api_key: str = ""
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 60.0
    projects_root: str = "./projects"
    python_executable: str = "python3"
    python_timeout_seconds: float = 30.0
    confirmation_ttl_seconds: int = 900
    confirmation_max_pending: int = 500
    context_file_chars: int = 500
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def max_tokens_param(self, n: int) -> dict:
        """Return the right max-tokens kwarg for the current model."""
        if self.openai_model in _MAX_COMPLETION_TOKENS_MODELS:
            return {"max_completion_tokens": n}
        return {"max_tokens": n}


settings = Settings()
