DEFAULT_STOREKIT_RECEIPTS_ENVIRONMENT = "production"
DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S = 30.0
DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS = 1
DEFAULT_STOREKIT_RECEIPTS_MAX_WORKERS = 4

APP_STORE_PRODUCTION_URL = "https://buy.itunes.apple.com"
APP_STORE_SANDBOX_URL = "https://sandbox.itunes.apple.com"
APP_STORE_PROCEDURE = "verifyReceipt"

RELAY_PROCEDURE = "validate"
