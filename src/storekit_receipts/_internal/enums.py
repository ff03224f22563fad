import enum
from collections.abc import Mapping
from types import MappingProxyType

from .defaults import APP_STORE_PRODUCTION_URL, APP_STORE_SANDBOX_URL


@enum.unique
class Environment(str, enum.Enum):
    PRODUCTION = "production"
    SANDBOX = "sandbox"


EndpointTable = Mapping[Environment, str]

APP_STORE_ENDPOINTS: EndpointTable = MappingProxyType(
    {
        Environment.PRODUCTION: APP_STORE_PRODUCTION_URL,
        Environment.SANDBOX: APP_STORE_SANDBOX_URL,
    }
)


@enum.unique
class ReceiptStatus(int, enum.Enum):
    # Sentinels, never sent by the backend.
    UNKNOWN = -2
    NONE = -1

    OK = 0
    NOT_A_POST = 21000
    NO_LONGER_SENT = 21001
    MALFORMED_DATA_OR_SERVICE_ISSUE = 21002
    RECEIPT_AUTHENTICATION_FAILED = 21003
    INVALID_SHARED_SECRET = 21004
    SERVICE_UNAVAILABLE = 21005
    # Only returned for iOS 6-style transaction receipts for auto-renewable subscriptions.
    SUBSCRIPTION_EXPIRED = 21006
    SANDBOX_RECEIPT_ON_PRODUCTION_ENV = 21007
    PRODUCTION_RECEIPT_ON_SANDBOX_ENV = 21008
    INTERNAL_SERVICE_ERROR = 21009
    USER_ACCOUNT_DOESNT_EXIST = 21010

    @classmethod
    def from_code(cls, code: int) -> "ReceiptStatus":
        if code in (cls.UNKNOWN, cls.NONE):
            return cls.UNKNOWN
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_valid(self) -> bool:
        return self is ReceiptStatus.OK
