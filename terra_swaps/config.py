import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from terra_swaps.errors import ConfigError

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ScanConfig:
    """Everything one scan run needs, read once at startup."""

    result_file_name: str
    start_height: int
    end_height: int
    terra_url: str
    terra_chain_id: str
    load_unit: int
    #: Pause after each height, in seconds
    delay: float = 0.01
    state_file_name: Optional[str] = None
    skip_malformed: bool = False
    timeout: Optional[float] = None
    show_progress: bool = True
    check_chain_id: bool = True


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is not set")
    return value


def _int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name, "").strip().lower()
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def config_from_env(env: Mapping[str, str]) -> ScanConfig:
    """Build a ScanConfig from an environment mapping.

    Raises ConfigError naming the first missing or invalid variable.
    """
    start_height = _int("START_HEIGHT", _required(env, "START_HEIGHT"))
    end_height = _int("END_HEIGHT", _required(env, "END_HEIGHT"))
    load_unit = _int("TERRA_TXS_LOAD_UNIT", _required(env, "TERRA_TXS_LOAD_UNIT"))

    if start_height < 0:
        raise ConfigError(f"START_HEIGHT must be >= 0, got {start_height}")
    if end_height < start_height:
        raise ConfigError(f"END_HEIGHT {end_height} is below START_HEIGHT {start_height}")
    if load_unit <= 0:
        raise ConfigError(f"TERRA_TXS_LOAD_UNIT must be positive, got {load_unit}")

    delay_ms = env.get("HEIGHT_DELAY_MS", "").strip()
    delay = _float("HEIGHT_DELAY_MS", delay_ms) / 1000 if delay_ms else 0.01
    if delay < 0:
        raise ConfigError(f"HEIGHT_DELAY_MS must be >= 0, got {delay_ms}")

    timeout = env.get("LCD_TIMEOUT", "").strip()

    return ScanConfig(
        result_file_name=_required(env, "RESULT_FILE_NAME"),
        start_height=start_height,
        end_height=end_height,
        terra_url=_required(env, "TERRA_URL").rstrip("/"),
        terra_chain_id=_required(env, "TERRA_CHAIN_ID"),
        load_unit=load_unit,
        delay=delay,
        state_file_name=env.get("STATE_FILE_NAME", "").strip() or None,
        skip_malformed=_flag(env, "SKIP_MALFORMED_TXS", False),
        timeout=_float("LCD_TIMEOUT", timeout) if timeout else None,
        show_progress=_flag(env, "SHOW_PROGRESS", True),
        check_chain_id=_flag(env, "CHECK_CHAIN_ID", True),
    )


def load_config(dotenv_path: Optional[str] = None) -> ScanConfig:
    """Load .env into the process environment, then read the scan settings."""
    load_dotenv(dotenv_path)
    return config_from_env(os.environ)
