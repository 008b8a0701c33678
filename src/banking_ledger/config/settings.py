from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
import json
from typing import Dict, Any, Optional

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'ledger.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_ledger_config() -> Dict[str, Any]:
        """Load ledger settings"""
        return ConfigLoader.load_config('ledger.json')


@dataclass(frozen=True)
class LedgerSettings:
    """Typed view over ledger.json"""
    db_path: Optional[str] = None
    initial_balance: Decimal = Decimal("5847.32")
    currency: str = "EUR"
    display_currency: str = "KES"
    page_size: int = 20
    locale: str = "de-DE"
    exchange_rate_url: str = "https://open.er-api.com/v6/latest/EUR"
    exchange_rate_cache_seconds: int = 300
    exchange_rate_timeout: float = 2.0

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "LedgerSettings":
        """
        Build settings from a config dict.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Unknown keys are ignored, missing keys keep their defaults.
        """
        if config is None:
            config = ConfigLoader.load_ledger_config()

        known = {k: v for k, v in config.items() if k in cls.__dataclass_fields__}
        if "initial_balance" in known:
            known["initial_balance"] = Decimal(str(known["initial_balance"]))
        return cls(**known)
