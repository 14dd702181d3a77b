"""Process-wide runtime flags, fixed at startup."""

from dataclasses import dataclass
from enum import Enum


class Environment(str, Enum):
    """Deployment mode that gates the private-host blocklist."""

    PRODUCTION = "production"
    NON_PRODUCTION = "non-production"

    @classmethod
    def from_name(cls, name: str) -> "Environment":
        """Map an environment name (e.g. NODE_ENV style) to a mode."""
        if name and name.strip().lower() == "production":
            return cls.PRODUCTION
        return cls.NON_PRODUCTION


@dataclass(frozen=True)
class RuntimeFlags:
    """Immutable flags injected into the service and route handlers."""

    environment: Environment = Environment.NON_PRODUCTION
    development: bool = False
    logging_enabled: bool = True

    @property
    def production(self) -> bool:
        return self.environment is Environment.PRODUCTION
