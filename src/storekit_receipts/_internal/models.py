import base64
import datetime
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

from .enums import (
    Environment,
    ReceiptStatus,
)

ReceiptInfo = Mapping[str, Any]


class VerificationRequest(BaseModel):
    # https://developer.apple.com/documentation/appstorereceipts/requestbody
    # Omitting 'exclude-old-transactions', it only matters for recurring subscriptions.
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    receipt_data: str = Field(alias="receipt-data")
    # Only required for receipts that contain auto-renewable subscriptions.
    shared_secret: str | None = Field(alias="password", default=None)

    @classmethod
    def from_receipt(cls, receipt_data: bytes, shared_secret: str | None = None) -> "VerificationRequest":
        return cls(
            receipt_data=base64.b64encode(receipt_data).decode("ascii"),
            shared_secret=shared_secret,
        )

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AppleInApp(BaseModel):
    # Several fields were omitted. For a full list go to
    # https://developer.apple.com/documentation/appstorereceipts/responsebody/receipt/in_app
    model_config = ConfigDict(extra="ignore")

    # From documentation: For auto-renewable subscriptions, the time the App Store charged the user's account
    # for a subscription purchase or renewal after a lapse (...otherwise) the time the App Store charged
    # the user's account for a purchased or restored product.
    purchase_date: datetime.datetime = Field(alias="purchase_date_ms")
    # Absent for consumables and non-renewing purchases.
    expires_date: datetime.datetime | None = Field(alias="expires_date_ms", default=None)
    # Only available if it was cancelled or refunded.
    cancellation_date: datetime.datetime | None = Field(alias="cancellation_date_ms", default=None)

    product_id: str
    quantity: int

    original_transaction_id: str
    transaction_id: str


class AppleReceipt(BaseModel):
    # https://developer.apple.com/documentation/appstorereceipts/responsebody/receipt
    model_config = ConfigDict(extra="ignore")

    application_version: str
    bundle_id: str

    in_apps: list[AppleInApp] = Field(alias="in_app", default_factory=list)


class VerifyReceiptResponse(BaseModel):
    """Typed view over a decoded verification response.

    The validation flow itself only passes the raw mapping around, this model is
    for callers that want attribute access to the well-known fields.
    """

    # https://developer.apple.com/documentation/appstorereceipts/responsebody
    model_config = ConfigDict(extra="ignore")

    RETRYABLE_CODES: ClassVar[range] = range(21100, 21200)

    # The environment for which the receipt was generated.
    environment: Environment = Field(default=Environment.PRODUCTION)

    latest_receipt_info: list[AppleInApp] = Field(default_factory=list)
    receipt: AppleReceipt | None = Field(default=None)

    is_retryable: bool = Field(alias="is-retryable", default=False)

    status: int

    @classmethod
    def from_receipt_info(cls, receipt_info: ReceiptInfo) -> "VerifyReceiptResponse":
        data = dict(receipt_info)
        # Backend sends "Sandbox"/"Production".
        if isinstance(data.get("environment"), str):
            data["environment"] = data["environment"].lower()
        return cls.model_validate(data)

    @property
    def receipt_status(self) -> ReceiptStatus:
        return ReceiptStatus.from_code(self.status)

    @property
    def is_valid(self) -> bool:
        return self.receipt_status.is_valid

    @property
    def should_be_retried(self) -> bool:
        return self.is_retryable or self.status in self.RETRYABLE_CODES
