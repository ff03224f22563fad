from .._internal.transport import (  # noqa: F401
    AppStoreTransport,
    CallableFunctionTransport,
    HTTPTransport,
    Transport,
)
