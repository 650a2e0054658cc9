"""YAML config loader with environment variable expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from fritzcheck.device.models import Connection

PASSWORD_ENV = "FRITZCHECK_PASSWORD"


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


class RouterConfig(BaseModel):
    hostname: str = "fritz.box"
    port: int = Field(default=49443, ge=1, le=65535)
    username: str = "dslf-config"
    password: str | None = None
    scheme: str = "https"
    verify_tls: bool = False

    @field_validator("scheme")
    @classmethod
    def _known_scheme(cls, value: str) -> str:
        value = value.lower()
        if value not in ("http", "https"):
            raise ValueError(f"Unsupported scheme '{value}'")
        return value

    def connection(self) -> Connection:
        return Connection(
            host=self.hostname, port=self.port, username=self.username,
            password=self.password, scheme=self.scheme,
        )


class ProbeConfig(BaseModel):
    method: str = "downstream_max"
    modelgroup: str = "DSL"
    timeout: float = Field(default=90.0, gt=0)
    divisor_max: float = Field(default=1000.0, gt=0)          # DSL kbit/s -> Mbit/s
    divisor_current: float = Field(default=1000000.0, gt=0)   # bit/s -> Mbit/s
    warning: str | None = None
    critical: str | None = None
    debug: bool = False

    @property
    def is_dsl(self) -> bool:
        return self.modelgroup.lower() == "dsl"


class Settings(BaseModel):
    router: RouterConfig = Field(default_factory=RouterConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)


def load_config(path: str | Path | None = None) -> Settings:
    """Load configuration from a YAML file, falling back to defaults.

    A password from the environment fills in when the file sets none.
    """
    if path is None:
        candidates = [
            Path("fritzcheck.yaml"),
            Path("fritzcheck.yml"),
            Path.home() / ".fritzcheck" / "config.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    if path is not None:
        path = Path(path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _walk_and_expand(raw)
        settings = Settings.model_validate(raw)
    else:
        settings = Settings()

    if settings.router.password is None and os.environ.get(PASSWORD_ENV):
        settings.router.password = os.environ[PASSWORD_ENV]
    return settings


def apply_overrides(settings: Settings, **overrides: object) -> Settings:
    """Return a copy of *settings* with every non-None override applied.

    Override names are matched against the router section first, then the
    probe section. Unknown names raise ValueError.
    """
    router: dict[str, object] = {}
    probe: dict[str, object] = {}
    for name, value in overrides.items():
        if value is None:
            continue
        if name in RouterConfig.model_fields:
            router[name] = value
        elif name in ProbeConfig.model_fields:
            probe[name] = value
        else:
            raise ValueError(f"Unknown setting '{name}'")

    return Settings(
        router=RouterConfig.model_validate(
            {**settings.router.model_dump(), **router}),
        probe=ProbeConfig.model_validate(
            {**settings.probe.model_dump(), **probe}),
    )
