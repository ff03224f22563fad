from .._internal.conf import VerifierSettings  # noqa: F401
