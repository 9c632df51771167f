import os
import toml
import logging
from dataclasses import dataclass, field
from typing import Optional, Any, Dict, List, Tuple
from dotenv import load_dotenv

from .errors import ConfigError
from .safety import SafetyScreener, ScreeningOptions, build_rules

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
PROVIDERS = ("openai", "gemini")
LANGUAGES = ("en", "zh")

# Persisted keys: env-style name -> (TOML section, value kind)
CONFIG_KEYS: Dict[str, Tuple[str, str]] = {
    "OPENAI_BASE_URL": ("api", "str"),
    "OPENAI_API_KEY": ("api", "str"),
    "OPENAI_MODEL": ("api", "str"),
    "GEMINI_MODEL": ("api", "str"),
    "ASK_PROVIDER": ("api", "str"),
    "GEMINI_API_KEY": ("api", "str"),
    "ASK_LANGUAGE": ("interface", "str"),
    "ASK_MAX_ATTEMPTS": ("interface", "int"),
    "ASK_CASE_SENSITIVE": ("safety", "bool"),
    "ASK_COLLAPSE_WHITESPACE": ("safety", "bool"),
    "ASK_BLOCKED_PATTERNS": ("safety", "list"),
    "ASK_BLOCKED_PREFIXES": ("safety", "list"),
    "ASK_LOG_DIR": ("application", "str"),
}

KEY_ALIASES: Dict[str, str] = {
    "base_url": "OPENAI_BASE_URL",
    "api_key": "OPENAI_API_KEY",
    "model": "OPENAI_MODEL",
    "provider": "ASK_PROVIDER",
    "gemini_api_key": "GEMINI_API_KEY",
    "gemini_model": "GEMINI_MODEL",
    "language": "ASK_LANGUAGE",
    "lang": "ASK_LANGUAGE",
    "max_attempts": "ASK_MAX_ATTEMPTS",
    "case_sensitive": "ASK_CASE_SENSITIVE",
    "collapse_whitespace": "ASK_COLLAPSE_WHITESPACE",
    "blocked_patterns": "ASK_BLOCKED_PATTERNS",
    "blocked_prefixes": "ASK_BLOCKED_PREFIXES",
    "log_dir": "ASK_LOG_DIR",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _default_config_dir() -> str:
    return os.environ.get("ASK_CONFIG_DIR") or os.path.expanduser("~/.config/ask")


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _to_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if str(item)]
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _coerce(value: Any, kind: str) -> Any:
    if kind == "int":
        return int(value)
    if kind == "bool":
        return _to_bool(value)
    if kind == "list":
        return _to_list(value)
    return str(value)


@dataclass
class Config:
    """Configuration handler for the ask command."""

    config_dir: str = field(default_factory=_default_config_dir)
    config_file: str = field(init=False)
    _file_config: dict = field(init=False, repr=False)

    # API configuration
    provider: str = field(init=False)
    base_url: Optional[str] = field(init=False)
    api_key: Optional[str] = field(init=False)
    gemini_api_key: Optional[str] = field(init=False)
    model: Optional[str] = field(init=False)

    # Interface
    language: str = field(init=False)
    max_attempts: int = field(init=False)

    # Screening
    case_sensitive: bool = field(init=False)
    collapse_whitespace: bool = field(init=False)
    blocked_patterns: List[str] = field(init=False)
    blocked_prefixes: List[str] = field(init=False)

    log_dir: str = field(init=False)

    def __post_init__(self):
        """Resolve every setting from the environment, the file and defaults."""
        self.config_file = os.path.join(self.config_dir, "config.toml")
        self._file_config = self._load_config_from_file()

        self.provider = str(self._get_config("ASK_PROVIDER", "openai")).strip().lower()
        self.base_url = self._get_config("OPENAI_BASE_URL", DEFAULT_BASE_URL)
        self.api_key = self._get_config("OPENAI_API_KEY")
        self.gemini_api_key = self._get_config("GEMINI_API_KEY")
        default_model = DEFAULT_GEMINI_MODEL if self.provider == "gemini" else DEFAULT_MODEL
        self.model = self._get_config(self.model_key, default_model)

        self.language = str(self._get_config("ASK_LANGUAGE", "en")).strip().lower()
        self.max_attempts = self._get_typed("ASK_MAX_ATTEMPTS", 3)
        self.case_sensitive = self._get_typed("ASK_CASE_SENSITIVE", True)
        self.collapse_whitespace = self._get_typed("ASK_COLLAPSE_WHITESPACE", False)
        self.blocked_patterns = self._get_typed("ASK_BLOCKED_PATTERNS", [])
        self.blocked_prefixes = self._get_typed("ASK_BLOCKED_PREFIXES", [])
        self.log_dir = self._get_config("ASK_LOG_DIR", os.path.join(self.config_dir, "logs"))

    def _load_config_from_file(self) -> dict:
        """Loads configuration from the TOML file, if there is one."""
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file, 'r') as f:
                return toml.load(f)
        except (toml.TomlDecodeError, IOError) as e:
            logger.warning(f"Could not read config file at {self.config_file}: {e}")
            return {}

    def _get_config(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Get a configuration value, prioritizing environment variables,
        then the config file, and finally a default value.
        """
        # 1. Check environment variable
        value = os.environ.get(key)
        if value is not None:
            return value

        # 2. Check config file
        for section in self._file_config.values():
            if isinstance(section, dict) and key in section:
                return section[key]

        # 3. Return default
        return default

    def _get_typed(self, key: str, default: Any) -> Any:
        value = self._get_config(key, default)
        try:
            return _coerce(value, CONFIG_KEYS[key][1])
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid value {value!r} for {key}")
            return default

    @property
    def active_api_key(self) -> Optional[str]:
        return self.gemini_api_key if self.provider == "gemini" else self.api_key

    @property
    def api_key_name(self) -> str:
        return "GEMINI_API_KEY" if self.provider == "gemini" else "OPENAI_API_KEY"

    @property
    def model_key(self) -> str:
        """Each provider reads its model from its own key."""
        return "GEMINI_MODEL" if self.provider == "gemini" else "OPENAI_MODEL"

    def screening_options(self) -> ScreeningOptions:
        return ScreeningOptions(
            case_sensitive=self.case_sensitive,
            collapse_whitespace=self.collapse_whitespace,
        )

    def screener(self) -> SafetyScreener:
        """Build the safety screener for the configured rules and options."""
        rules = build_rules(self.blocked_patterns, self.blocked_prefixes)
        return SafetyScreener(rules, self.screening_options())

    def validate(self) -> List[str]:
        """Return a list of configuration problems; empty when usable."""
        problems = []
        if self.provider not in PROVIDERS:
            problems.append(f"Unknown provider '{self.provider}' (expected one of: {', '.join(PROVIDERS)}).")
        else:
            if self.provider == "openai" and not self.base_url:
                problems.append("OPENAI_BASE_URL is not set.")
            if not self.active_api_key:
                problems.append(f"{self.api_key_name} is not set.")
            if not self.model:
                problems.append(f"{self.model_key} is not set.")
        if self.language not in LANGUAGES:
            problems.append(f"Unsupported language '{self.language}' (expected one of: {', '.join(LANGUAGES)}).")
        if self.max_attempts < 1:
            problems.append("ASK_MAX_ATTEMPTS must be at least 1.")
        return problems

    def __str__(self) -> str:
        """Return string representation of the configuration."""
        config_dict = self.__dict__.copy()
        for name in ("api_key", "gemini_api_key"):
            config_dict[name] = _mask(config_dict.get(name))
        del config_dict['_file_config']  # Don't print the raw file contents
        return str(config_dict)


def _mask(secret: Optional[str]) -> Optional[str]:
    if not secret:
        return secret
    return f"{secret[:4]}...{secret[-4:]}" if len(secret) > 8 else "****"


def resolve_key(key: str) -> str:
    """Map a user-supplied key (alias or env-style name) to its env-style name."""
    name = key.strip()
    if name.upper() in CONFIG_KEYS:
        return name.upper()
    alias = KEY_ALIASES.get(name.lower())
    if alias is None:
        known = ", ".join(sorted(KEY_ALIASES))
        raise ConfigError(f"Unknown configuration key '{key}'. Known keys: {known}")
    return alias


def set_config_value(key: str, value: str, config_file: str) -> Tuple[str, Any]:
    """
    Persist a single configuration value to the TOML file.

    Args:
        key: Short alias (e.g. ``model``) or env-style name (e.g. ``OPENAI_MODEL``).
        value: Raw string value from the command line.
        config_file: Path of the TOML file to update.

    Returns:
        The env-style key and the coerced value that was written.
    """
    name = resolve_key(key)
    section, kind = CONFIG_KEYS[name]
    try:
        coerced = _coerce(value, kind)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {name}: {e}")

    data: Dict[str, Any] = {}
    if os.path.exists(config_file):
        try:
            with open(config_file, 'r') as f:
                data = toml.load(f)
        except (toml.TomlDecodeError, IOError) as e:
            raise ConfigError(f"Could not read config file at {config_file}: {e}")

    data.setdefault(section, {})[name] = coerced
    try:
        os.makedirs(os.path.dirname(config_file) or ".", exist_ok=True)
        with open(config_file, 'w') as f:
            toml.dump(data, f)
    except IOError as e:
        raise ConfigError(f"Could not write config file at {config_file}: {e}")

    logger.info(f"Saved {name} to {config_file}")
    return name, coerced


# Singleton instance holder
_config_instance: Optional[Config] = None

def get_config() -> Config:
    """Returns the singleton Config instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
