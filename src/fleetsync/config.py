"""Client configuration for fleetsync."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fleetsync._constants import DEFAULT_CONFIG_URL, DEFAULT_SAMPLE_CONFIG_URL
from fleetsync._transport import Transport
from fleetsync.exceptions import FleetConfigError, FleetTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Controller configuration.

    Parameters
    ----------
    config_url : str
        Primary configuration source carrying ``API_BASE``. Either an
        ``http(s)://`` URL or a local file path.
    sample_config_url : str
        Bundled fallback used when the primary source cannot be loaded.
    api_base : str or None
        Explicit API base URL. When set, the configuration sources are
        still consulted but this value wins.
    storage_path : str or None
        JSON file used to persist view settings. ``None`` keeps them in
        memory for the lifetime of the controller.
    request_timeout : float or None
        Total timeout per HTTP request in seconds. ``None`` disables the
        timeout, so a hung endpoint hangs the whole sync cycle.
    """

    config_url: str = DEFAULT_CONFIG_URL
    sample_config_url: str = DEFAULT_SAMPLE_CONFIG_URL
    api_base: str | None = None
    storage_path: str | None = None
    request_timeout: float | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from ``FLEETSYNC_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETSYNC_CONFIG_URL": "config_url",
            "FLEETSYNC_SAMPLE_CONFIG_URL": "sample_config_url",
            "FLEETSYNC_API_BASE": "api_base",
            "FLEETSYNC_STORAGE_PATH": "storage_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # request_timeout is numeric, handle separately
        timeout_env = env.get("FLEETSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


class ApiConfig(BaseModel):
    """Parsed ``config.json``: at minimum the ``API_BASE`` prefix."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    api_base: str = Field(default="", alias="API_BASE")

    @field_validator("api_base", mode="before")
    @classmethod
    def _default_non_string(cls, value: Any) -> Any:
        # A missing, null or non-string API_BASE means same-origin.
        return value if isinstance(value, str) else ""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def read_config_source(transport: Transport, source: str) -> ApiConfig:
    """Load a single configuration source.

    Raises
    ------
    FleetConfigError
        The source could not be read, was not JSON, or was not an object.
    """
    try:
        if _is_url(source):
            payload = await transport.get_json(source)
        else:
            payload = json.loads(Path(source).read_text(encoding="utf-8"))
    except FleetTransportError as exc:
        raise FleetConfigError(f"Could not load {source}: {exc}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise FleetConfigError(f"Could not load {source}: {exc}") from exc

    if not isinstance(payload, dict):
        raise FleetConfigError(f"{source} is not a JSON object")
    try:
        return ApiConfig.model_validate(payload)
    except ValidationError as exc:
        raise FleetConfigError(f"{source} is not a valid config: {exc}") from exc


async def load_api_config(transport: Transport, config: DashboardConfig) -> ApiConfig:
    """Load ``API_BASE`` with the primary -> sample -> empty fallback chain.

    Never raises; every failed step is logged.
    """
    try:
        api_config = await read_config_source(transport, config.config_url)
    except FleetConfigError as primary_error:
        _logger.warning("%s load failed, trying %s: %s", config.config_url, config.sample_config_url, primary_error)
        try:
            api_config = await read_config_source(transport, config.sample_config_url)
        except FleetConfigError as error:
            _logger.warning("Could not load %s, using defaults: %s", config.sample_config_url, error)
            api_config = ApiConfig()

    if config.api_base is not None:
        api_config = api_config.model_copy(update={"api_base": config.api_base})
    return api_config
