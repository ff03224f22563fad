from collections.abc import Callable
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor
from functools import partial
from logging import getLogger

import requests

from .conf import VerifierSettings
from .defaults import (
    APP_STORE_PROCEDURE,
    DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS,
    RELAY_PROCEDURE,
)
from .enums import (
    APP_STORE_ENDPOINTS,
    EndpointTable,
    Environment,
)
from .exceptions import (
    ConfigurationError,
    InternalFailure,
    TransportFailure,
)
from .interpreter import (
    Attempt,
    ResponseInterpreter,
)
from .metrics import (
    remote_call_seconds,
    validations_total,
)
from .models import VerificationRequest
from .results import (
    ValidationFailure,
    ValidationResult,
)
from .transport import (
    AppStoreTransport,
    CallableFunctionTransport,
    Transport,
)

log = getLogger(__name__)

Completion = Callable[[ValidationResult], None]


def _deliver(completion: Completion, future: Future) -> None:
    if future.cancelled():
        result = ValidationFailure(InternalFailure(CancelledError()))
    elif (exc := future.exception()) is not None:
        result = ValidationFailure(InternalFailure(exc))
    else:
        result = future.result()
    completion(result)


class ReceiptVerifier:
    """Validates receipts against a remote verification backend.

    Every `validate` call runs on the verifier's executor and resolves to exactly
    one ValidationResult. A production call answered with "sandbox receipt" is
    re-submitted to sandbox once, within the same call.
    """

    def __init__(
        self,
        transport: Transport,
        endpoints: EndpointTable = APP_STORE_ENDPOINTS,
        procedure: str = APP_STORE_PROCEDURE,
        shared_secret: str | None = None,
        default_environment: Environment = Environment.PRODUCTION,
        interpreter: ResponseInterpreter | None = None,
        executor: Executor | None = None,
        max_workers: int = DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS,
    ):
        if missing := set(Environment) - set(endpoints):
            raise ConfigurationError(f"No endpoint configured for {sorted(env.value for env in missing)}")

        self._transport = transport
        self._endpoints = endpoints
        self._procedure = procedure
        self._shared_secret = shared_secret
        self._default_environment = default_environment
        self._interpreter = interpreter or ResponseInterpreter()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="storekit-receipts",
        )

    def __enter__(self) -> "ReceiptVerifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def validate(
        self,
        receipt_data: bytes,
        environment: Environment | str | None = None,
        shared_secret: str | None = None,
        completion: Completion | None = None,
    ) -> "Future[ValidationResult]":
        """Submit `receipt_data` for verification without blocking.

        `shared_secret` overrides the one the verifier was built with. `completion`,
        when given, is called exactly once with the terminal result.
        """
        attempt = Attempt(
            receipt_data=receipt_data,
            environment=Environment(environment or self._default_environment),
            shared_secret=self._shared_secret if shared_secret is None else shared_secret,
        )
        future = self._executor.submit(self._run, attempt)
        if completion is not None:
            future.add_done_callback(partial(_deliver, completion))
        return future

    def validate_sync(
        self,
        receipt_data: bytes,
        environment: Environment | str | None = None,
        shared_secret: str | None = None,
    ) -> ValidationResult:
        return self.validate(receipt_data, environment, shared_secret).result()

    def _run(self, attempt: Attempt) -> ValidationResult:
        try:
            result = self._attempt(attempt)
        except Exception as exc:  # every attempt resolves to a result
            log.exception("Receipt validation failed unexpectedly")
            result = ValidationFailure(InternalFailure(exc))
        validations_total.labels(environment=attempt.environment.value, outcome=result.outcome).inc()
        log.debug("Receipt validation finished with %s", result.outcome)
        return result

    def _attempt(self, attempt: Attempt) -> ValidationResult:
        endpoint = self._endpoints[attempt.environment]
        request = VerificationRequest.from_receipt(attempt.receipt_data, attempt.shared_secret)
        log.debug(
            "Submitting receipt of %d bytes to %s (%s environment)",
            len(attempt.receipt_data),
            endpoint,
            attempt.environment.value,
        )

        try:
            with remote_call_seconds.labels(environment=attempt.environment.value).time():
                payload = self._transport.call(endpoint, self._procedure, request.to_payload())
        except Exception as exc:  # any failure of the remote call itself ends the attempt
            log.exception("Remote verification call to %s failed", endpoint)
            return ValidationFailure(TransportFailure(exc))

        return self._interpreter.interpret(payload, attempt, revalidate=self._attempt)


def build_verifier(
    settings: VerifierSettings | None = None,
    session: requests.Session | None = None,
    **kwargs,
) -> ReceiptVerifier:
    """Build a verifier from settings, by default read from the environment.

    Talks to the App Store directly unless relay URLs are configured, in which
    case the relay's `validate` callable function is used.
    """
    settings = settings or VerifierSettings.from_env()
    transport_class = CallableFunctionTransport if settings.uses_relay else AppStoreTransport
    transport = transport_class(
        session=session,
        timeout=settings.timeout,
        attempts=settings.transport_attempts,
    )
    if settings.uses_relay:
        endpoints, procedure = settings.relay_endpoints, RELAY_PROCEDURE
    else:
        endpoints, procedure = APP_STORE_ENDPOINTS, APP_STORE_PROCEDURE

    return ReceiptVerifier(
        transport,
        endpoints=endpoints,
        procedure=procedure,
        shared_secret=settings.shared_secret,
        default_environment=settings.environment,
        max_workers=settings.max_workers,
        **kwargs,
    )
