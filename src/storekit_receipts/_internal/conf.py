from dataclasses import dataclass
from types import MappingProxyType

from environs import Env, EnvError

from .defaults import (
    DEFAULT_STOREKIT_RECEIPTS_ENVIRONMENT,
    DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS,
    DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S,
    DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS,
)
from .enums import EndpointTable, Environment
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class VerifierSettings:
    shared_secret: str | None = None
    environment: Environment = Environment(DEFAULT_STOREKIT_RECEIPTS_ENVIRONMENT)
    timeout: float = DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S
    transport_attempts: int = DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS
    max_workers: int = DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS
    relay_production_url: str | None = None
    relay_sandbox_url: str | None = None

    def __post_init__(self):
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")
        if self.transport_attempts < 1:
            raise ConfigurationError(f"Transport attempts must be at least 1, got {self.transport_attempts}")
        if self.max_workers < 1:
            raise ConfigurationError(f"Max workers must be at least 1, got {self.max_workers}")
        if bool(self.relay_production_url) != bool(self.relay_sandbox_url):
            raise ConfigurationError("Relay URLs must be set for both production and sandbox, or for neither")

    @classmethod
    def from_env(cls, env: Env | None = None) -> "VerifierSettings":
        env = env or Env()
        try:
            environment = env.str("STOREKIT_RECEIPTS_ENVIRONMENT", DEFAULT_STOREKIT_RECEIPTS_ENVIRONMENT)
            return cls(
                shared_secret=env.str("STOREKIT_RECEIPTS_SHARED_SECRET", default=None) or None,
                environment=Environment(environment.lower()),
                timeout=env.float("STOREKIT_RECEIPTS_TIMEOUT_S", DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S),
                transport_attempts=env.int(
                    "STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS", DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS
                ),
                max_workers=env.int("STOREKIT_RECEIPTS_MAX_WORKERS", DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS),
                relay_production_url=env.str("STOREKIT_RECEIPTS_RELAY_PRODUCTION_URL", default=None) or None,
                relay_sandbox_url=env.str("STOREKIT_RECEIPTS_RELAY_SANDBOX_URL", default=None) or None,
            )
        except EnvError as exc:
            raise ConfigurationError(f"Invalid receipt verifier settings: {exc}") from exc
        except ValueError as exc:
            raise ConfigurationError(f"Unknown environment, expected one of {[e.value for e in Environment]}") from exc

    @property
    def uses_relay(self) -> bool:
        return bool(self.relay_production_url and self.relay_sandbox_url)

    @property
    def relay_endpoints(self) -> EndpointTable:
        if not self.uses_relay:
            raise ConfigurationError("Relay URLs are not configured")
        return MappingProxyType(
            {
                Environment.PRODUCTION: self.relay_production_url,
                Environment.SANDBOX: self.relay_sandbox_url,
            }
        )
