# helphood_chat/config.py
import os
from collections.abc import Mapping


class Settings:
    def __init__(self, env: Mapping[str, str] | None = None):
        env = os.environ if env is None else env

        # Gemini credential; unset means fallback-only mode
        self.GEMINI_API_KEY: str | None = (env.get("GEMINI_API_KEY") or "").strip() or None
        self.GEMINI_MODEL: str = env.get("GEMINI_MODEL", "gemini-pro")
        self.GEMINI_BASE_URL: str = env.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"
        ).rstrip("/")

        # Hard deadline for the outbound call
        self.CHAT_TIMEOUT_SECS: float = float(env.get("CHAT_TIMEOUT_SECS", "10"))
        self.CHAT_MAX_MESSAGE_CHARS: int = int(env.get("CHAT_MAX_MESSAGE_CHARS", "500"))

        # Env-configured runtime info
        self.APP_HOST: str = env.get("APP_HOST", "0.0.0.0")
        self.APP_PORT: int = int(env.get("APP_PORT", "8001"))
        self.APP_WORKERS: int = int(env.get("APP_WORKERS", "1"))

    @property
    def ai_configured(self) -> bool:
        return self.GEMINI_API_KEY is not None


settings = Settings()
