from prometheus_client import Counter, Histogram

validations_total = Counter(
    "storekit_receipt_validations",
    "Number of finished receipt validations",
    ["environment", "outcome"],
)
sandbox_redirects_total = Counter(
    "storekit_receipt_sandbox_redirects",
    "Number of receipts re-submitted to the sandbox environment",
)
remote_call_seconds = Histogram(
    "storekit_receipt_remote_call_seconds",
    "Duration of a single call to the verification backend",
    ["environment"],
)
