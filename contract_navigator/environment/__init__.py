"""Environment-driven configuration."""

from contract_navigator.environment.config import NavigatorConfig

__all__ = ["NavigatorConfig"]
