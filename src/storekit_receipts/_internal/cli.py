import argparse
import base64
import binascii
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .conf import VerifierSettings
from .enums import Environment
from .exceptions import ConfigurationError
from .results import ValidationResult
from .verifier import build_verifier

log = logging.getLogger(__name__)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storekit-receipts",
        description="Validate an App Store receipt against the verification backend.",
    )
    parser.add_argument("receipt", type=Path, help="path to the receipt file, '-' for stdin")
    parser.add_argument("--sandbox", action="store_true", help="start with the sandbox environment")
    parser.add_argument("--shared-secret", help="overrides STOREKIT_RECEIPTS_SHARED_SECRET")
    parser.add_argument("--base64", action="store_true", help="receipt file holds base64 text, not raw bytes")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def read_receipt(path: Path, is_base64: bool) -> bytes:
    data = sys.stdin.buffer.read() if str(path) == "-" else path.read_bytes()
    if is_base64:
        data = base64.b64decode(b"".join(data.split()), validate=True)
    return data


def render(result: ValidationResult) -> dict:
    rendered = {"outcome": result.outcome, "receipt_info": result.receipt_info}
    if not result.is_success:
        error = result.error
        rendered["error"] = str(error)
        if (status := getattr(error, "status", None)) is not None:
            rendered["status"] = status.name
        if (raw_text := getattr(error, "raw_text", None)) is not None:
            rendered["raw_text"] = raw_text
    return rendered


def main(argv: Sequence[str] | None = None) -> int:
    args = make_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        receipt_data = read_receipt(args.receipt, args.base64)
    except OSError as exc:
        log.error("Cannot read receipt: %s", exc)
        return 2
    except binascii.Error as exc:
        log.error("Receipt is not valid base64: %s", exc)
        return 2

    try:
        settings = VerifierSettings.from_env()
    except ConfigurationError as exc:
        log.error("%s", exc)
        return 2

    environment = Environment.SANDBOX if args.sandbox else settings.environment
    with build_verifier(settings) as verifier:
        result = verifier.validate_sync(receipt_data, environment, args.shared_secret)

    json.dump(render(result), sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0 if result.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
