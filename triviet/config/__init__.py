from typing import Any

from .settings import Settings, get_settings


def env(key: str, default: Any = None) -> Any:
    """Read a setting by key, falling back to raw environment values.

    Declared fields win (they are validated and type-converted); anything else
    comes from the extra values pydantic-settings collected from the
    environment and the .env files.
    """
    settings = get_settings()

    value = getattr(settings, key.upper(), None)
    if value is not None:
        return value

    extras = settings.model_extra or {}
    return extras.get(key.lower(), extras.get(key.upper(), default))


__all__ = ["Settings", "env", "get_settings"]
