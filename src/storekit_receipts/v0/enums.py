from .._internal.enums import (  # noqa: F401
    APP_STORE_ENDPOINTS,
    EndpointTable,
    Environment,
    ReceiptStatus,
)
