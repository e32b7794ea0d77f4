"""
Configuration management using Pydantic Settings with safe access wrapper
"""
from pydantic_settings import BaseSettings
from typing import Dict, Optional, Any, Union
import codecs
import re

# Binary multiples, matching how buffer limits are usually written ("1 MB")
DATA_SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 ** 2,
    "GB": 1024 ** 3,
    "TB": 1024 ** 4,
}

UNBOUNDED_SIZES = {"unbounded", "none", ""}

_DATA_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")


def parse_data_size(value: Union[int, str, None]) -> Optional[int]:
    """
    Convert a data size to a byte count

    Accepts an integer byte count, a string such as "3 B" or "1 MB",
    or an unbounded marker (None, "unbounded", "none").

    Returns:
        Byte count, or None for unbounded
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid data size: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Data size must not be negative: {value}")
        return value

    text = str(value).strip()
    if text.lower() in UNBOUNDED_SIZES:
        return None

    match = _DATA_SIZE_RE.match(text)
    if not match:
        raise ValueError(f"Invalid data size: {value!r}")

    number, unit = match.groups()
    unit = (unit or "B").upper()
    if unit not in DATA_SIZE_UNITS:
        raise ValueError(f"Unknown data size unit '{unit}' in {value!r}")

    return int(float(number) * DATA_SIZE_UNITS[unit])


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Regex Extraction"
    version: str = "1.0.0"
    debug: bool = False
    environment: str = "production"

    # Regex behavior switches
    unix_lines: bool = False
    case_insensitive: bool = False
    comments: bool = False
    multiline: bool = False
    literal: bool = False
    dotall: bool = False
    unicode_case: bool = False
    canon_eq: bool = False
    unicode_character_class: bool = False

    # Content window
    max_buffer_size: Optional[Union[int, str]] = "1 MB"
    character_set: str = "UTF-8"

    # Pattern definitions (name -> raw pattern)
    patterns: Dict[str, str] = {}
    patterns_file: Optional[str] = None

    # Evaluation
    match_timeout_seconds: Optional[float] = None
    routing_policy: str = "evaluated"

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True
    log_file_max_bytes: int = 10485760
    log_file_backup_count: int = 10

    # Monitoring
    enable_metrics: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"   # allow unknown env vars without error

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validated = False
        self.validate_settings()

    def validate_settings(self):
        """Validate critical settings on startup"""
        if self._validated:
            return

        errors = []

        # Validate environment
        if self.environment not in ["development", "testing", "production"]:
            errors.append(f"Invalid environment: {self.environment}")

        # Validate buffer size
        try:
            parse_data_size(self.max_buffer_size)
        except ValueError as e:
            errors.append(str(e))

        # Validate character set
        try:
            codecs.lookup(self.character_set)
        except LookupError:
            errors.append(f"Unknown character set: {self.character_set}")

        # Validate routing policy
        valid_policies = ["evaluated", "any_match"]
        if self.routing_policy.lower() not in valid_policies:
            errors.append(f"Invalid routing policy: {self.routing_policy}. Valid options: {valid_policies}")

        if self.match_timeout_seconds is not None and self.match_timeout_seconds <= 0:
            errors.append(f"Match timeout must be positive: {self.match_timeout_seconds}")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        self._validated = True

    @property
    def max_buffer_bytes(self) -> Optional[int]:
        """Configured buffer limit in bytes (None means unbounded)"""
        return parse_data_size(self.max_buffer_size)


class SafeSettings:
    """Safe wrapper for settings with fallback defaults"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._defaults = {
            "character_set": "UTF-8",
            "patterns": {},
            "routing_policy": "evaluated",
            "log_level": "INFO",
            "log_dir": "logs",
            "log_file_max_bytes": 10485760,
            "log_file_backup_count": 10,
            "environment": "production",
            "debug": False,
            "enable_metrics": True,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Safely get setting value with fallback"""
        try:
            value = getattr(self._settings, key, None)
            if value is None:
                value = self._defaults.get(key, default)
            return value
        except Exception:
            return self._defaults.get(key, default)

    def __getattr__(self, key: str) -> Any:
        """Proxy attribute access with safety"""
        return self.get(key)

    @property
    def raw(self) -> Settings:
        """Get raw settings object"""
        return self._settings


# Initialize settings with safety wrapper
_raw_settings = Settings()
settings = SafeSettings(_raw_settings)
