import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; development is the default.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def env_map(name: str, default: str) -> dict[str, list[str]]:
    # "AIDS=AID|CSM|IOT;CSE=CSE" -> {"AIDS": ["AID", "CSM", "IOT"], "CSE": ["CSE"]}
    mapping: dict[str, list[str]] = {}
    for entry in os.getenv(name, default).split(";"):
        key, sep, values = entry.partition("=")
        if sep and key.strip():
            mapping[key.strip()] = [v.strip() for v in values.split("|") if v.strip()]
    return mapping
