"""Configuration for the remote API connection.

Reads settings from explicit arguments, environment variables, .env
files, and YAML config file fallbacks.

Precedence (highest to lowest):
    Arguments > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    OFFLINE_DOCS_API_URL: Remote API base URL (required)
    OFFLINE_DOCS_TIMEOUT: Request timeout in seconds (optional, default: 30)
    OFFLINE_DOCS_INSECURE: Skip SSL verification (optional, default: false)
    OFFLINE_DOCS_DEBUG: Enable debug logging (optional, default: false)
    OFFLINE_DOCS_FENCE_STALE_ACKS: Keep documents edited during a sync
        dirty (optional, default: true)
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


@dataclass
class Config:
    api_url: str
    timeout: float = 30.0
    insecure: bool = False
    debug: bool = False
    fence_stale_acks: bool = True


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the URL format is invalid or the timeout is out
            of range.
    """
    config.api_url = config.api_url.strip()

    if not config.api_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid API URL '{config.api_url}': must start with http:// or https://"
        )

    parsed = urlparse(config.api_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid API URL '{config.api_url}': URL must include a hostname"
        )

    config.api_url = config.api_url.removesuffix("/")

    if not (1 <= config.timeout <= 600):
        raise ValueError(
            f"Invalid timeout '{config.timeout}': must be between 1 and 600 seconds"
        )

    if config.insecure:
        logger.warning(
            "WARNING: SSL verification disabled (insecure=True). Use only for development."
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _resolve_bool(
    explicit: bool | None, env_key: str, fallback: object, default: bool
) -> bool:
    if explicit is not None:
        return explicit
    env_val = _get_bool_env(env_key)
    if env_val is not None:
        return env_val
    if fallback is not None:
        return bool(fallback)
    return default


def load_config(
    api_url: str | None = None,
    timeout: float | None = None,
    insecure: bool | None = None,
    debug: bool | None = None,
    fence_stale_acks: bool | None = None,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        argument > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        api_url: Override the API base URL.
        timeout: Override the request timeout in seconds.
        insecure: Skip SSL verification.
        debug: Enable debug logging.
        fence_stale_acks: Keep documents edited during a sync dirty.
        yaml_fallbacks: Dict of values from the YAML config ``api``
            section.  Used when argument and env var are both unset.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the API URL is missing after checking all sources,
            or any value is invalid.
    """
    fb = yaml_fallbacks or {}

    final_url = api_url or os.getenv("OFFLINE_DOCS_API_URL") or fb.get("url")
    if not final_url:
        raise ValueError(
            "API URL not found. Set OFFLINE_DOCS_API_URL environment variable, "
            "pass api_url, or add 'url' to the 'api' section of config.yml."
        )

    if timeout is not None:
        final_timeout = float(timeout)
    else:
        timeout_raw = os.getenv("OFFLINE_DOCS_TIMEOUT")
        if timeout_raw is not None:
            try:
                final_timeout = float(timeout_raw)
            except ValueError:
                raise ValueError(
                    f"Invalid OFFLINE_DOCS_TIMEOUT '{timeout_raw}': must be a number between 1 and 600"
                ) from None
        elif "timeout" in fb:
            final_timeout = float(fb["timeout"])
        else:
            final_timeout = 30.0

    config = Config(
        api_url=final_url,
        timeout=final_timeout,
        insecure=_resolve_bool(
            insecure, "OFFLINE_DOCS_INSECURE", fb.get("insecure"), False
        ),
        debug=_resolve_bool(
            debug, "OFFLINE_DOCS_DEBUG", fb.get("debug"), False
        ),
        fence_stale_acks=_resolve_bool(
            fence_stale_acks,
            "OFFLINE_DOCS_FENCE_STALE_ACKS",
            fb.get("fence_stale_acks"),
            True,
        ),
    )

    validate_config(config)

    return config
