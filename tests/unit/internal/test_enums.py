import pytest

from storekit_receipts.v0.enums import APP_STORE_ENDPOINTS, Environment, ReceiptStatus


@pytest.mark.parametrize(
    "code, status",
    [
        (0, ReceiptStatus.OK),
        (21000, ReceiptStatus.NOT_A_POST),
        (21002, ReceiptStatus.MALFORMED_DATA_OR_SERVICE_ISSUE),
        (21007, ReceiptStatus.SANDBOX_RECEIPT_ON_PRODUCTION_ENV),
        (21008, ReceiptStatus.PRODUCTION_RECEIPT_ON_SANDBOX_ENV),
        (21010, ReceiptStatus.USER_ACCOUNT_DOESNT_EXIST),
        (21100, ReceiptStatus.UNKNOWN),
        (1, ReceiptStatus.UNKNOWN),
        (-1, ReceiptStatus.UNKNOWN),
        (-2, ReceiptStatus.UNKNOWN),
    ],
)
def test__enums__status_from_code(code, status):
    assert ReceiptStatus.from_code(code) is status


def test__enums__only_ok_is_valid():
    assert [status for status in ReceiptStatus if status.is_valid] == [ReceiptStatus.OK]


def test__enums__app_store_endpoints():
    assert dict(APP_STORE_ENDPOINTS) == {
        Environment.PRODUCTION: "https://buy.itunes.apple.com",
        Environment.SANDBOX: "https://sandbox.itunes.apple.com",
    }
    with pytest.raises(TypeError):
        APP_STORE_ENDPOINTS[Environment.SANDBOX] = "https://example.com"
