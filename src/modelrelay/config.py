"""Environment-based configuration for ModelRelay."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from modelrelay.classify.models import ClassifierKind


@dataclass(frozen=True)
class EndpointConfig:
    """Where the classifier client sends each kind of request."""

    base_url: str
    paths: dict[ClassifierKind, str]
    timeout: float

    def url_for(self, kind: ClassifierKind) -> str:
        return f"{self.base_url.rstrip('/')}{self.paths[kind]}"


@dataclass(frozen=True)
class ProxyConfig:
    """Fixed upstream target for the forwarding proxy."""

    upstream_url: str
    timeout: float


class Settings(BaseSettings):
    """Application settings loaded from MODELRELAY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MODELRELAY_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=3001, validation_alias=AliasChoices("MODELRELAY_PORT", "PORT"))
    log_level: str = "INFO"

    # Classifier client endpoints
    api_base_url: str = "http://localhost:3001"
    image_path: str = "/predict/aircraft"
    intent_path: str = "/api/predict/intent"
    emotion_path: str = "/predict/emotion"

    # Forwarding proxy
    intent_upstream_url: str = "https://DanishCodes-CVNLAIINTENT.hf.space/predict"

    # Outbound requests, seconds
    request_timeout: float = Field(default=30.0, gt=0)

    def endpoint_config(self) -> EndpointConfig:
        return EndpointConfig(
            base_url=self.api_base_url,
            paths={
                ClassifierKind.IMAGE: self.image_path,
                ClassifierKind.INTENT: self.intent_path,
                ClassifierKind.EMOTION: self.emotion_path,
            },
            timeout=self.request_timeout,
        )

    def proxy_config(self) -> ProxyConfig:
        return ProxyConfig(upstream_url=self.intent_upstream_url, timeout=self.request_timeout)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
