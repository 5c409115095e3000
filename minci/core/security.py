"""Report signing: canonical message construction and signature checks.

A runner signs every submission by hashing a fixed serialization of its
fields with the user's API secret appended. The server rebuilds the same
bytes from the parsed fields and compares digests.
"""

import hashlib
import hmac

from minci.core.config import settings
from minci.schemas.report import ReportSubmission


def digest_hex(data: bytes | str, algorithm: str | None = None) -> str:
    """
    Hash data with the configured signature digest.

    Args:
        data: Bytes, or text to be UTF-8 encoded
        algorithm: hashlib algorithm name, defaults to SIGNATURE_DIGEST
    Returns:
        str: Lower-case hex digest
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.new(algorithm or settings.SIGNATURE_DIGEST, data).hexdigest()


def signature_length(algorithm: str | None = None) -> int:
    """Length of a hex signature for the configured digest (32 for md5)."""
    return hashlib.new(algorithm or settings.SIGNATURE_DIGEST).digest_size * 2


def build_canonical_message(
    submission: ReportSubmission,
    secret: str,
    algorithm: str | None = None,
    log_bytes: bytes | None = None,
) -> bytes:
    """
    Serialize a submission into the exact bytes that get signed.

    The pair order is fixed and shared with every runner. The log is
    represented by its digest so arbitrary log text never enters the
    signed payload.

    Args:
        submission: Parsed submission fields
        secret: The submitting user's API secret
        algorithm: hashlib algorithm name for the log digest
        log_bytes: The log as posted, when it may not survive decoding;
            defaults to the UTF-8 encoding of submission.log
    Returns:
        bytes: UTF-8 encoded canonical message
    """
    pairs = [
        ("project-name", submission.project_name),
        ("report-build", submission.build),
        ("report-distcheck", submission.distcheck),
        ("report-env", submission.env),
    ]
    if submission.fetchhead is not None:
        pairs.append(("report-fetchhead", submission.fetchhead))
    pairs += [
        ("report-depend", submission.depend),
        ("report-install", submission.install),
        ("report-log", digest_hex(submission.log if log_bytes is None else log_bytes, algorithm)),
        ("report-start", submission.start),
        ("report-test", submission.test),
        ("report-unamem", submission.unamem),
        ("report-unamen", submission.unamen),
        ("report-unamer", submission.unamer),
        ("report-unames", submission.unames),
        ("report-unamev", submission.unamev),
        ("user-apisecret", secret),
    ]
    return "&".join(f"{key}={value}" for key, value in pairs).encode("utf-8")


def sign_message(message: bytes, algorithm: str | None = None) -> str:
    """Compute the signature a runner would send for message."""
    return digest_hex(message, algorithm)


def verify_signature(
    message: bytes, candidate: str | None, algorithm: str | None = None
) -> bool:
    """
    Check a client signature against the canonical message.

    Case-insensitive, constant-time, and closed on anything unexpected:
    a missing or wrong-length candidate never verifies.

    Args:
        message: Canonical message bytes
        candidate: Hex signature supplied by the client
        algorithm: hashlib algorithm name
    Returns:
        bool: True if the signature matches
    """
    if not candidate or len(candidate) != signature_length(algorithm):
        return False
    expected = sign_message(message, algorithm)
    try:
        return hmac.compare_digest(expected, candidate.lower())
    except TypeError:
        # compare_digest refuses non-ASCII str
        return False


def machine_hash(unamem: str, unamen: str, unamer: str, unames: str, unamev: str) -> str:
    """Stable digest identifying a reporting machine."""
    return digest_hex("|".join((unamem, unamen, unamer, unames, unamev)))


def project_machine_hash(
    project_id: int, unamem: str, unamen: str, unamer: str, unames: str, unamev: str
) -> str:
    """Stable digest identifying one machine building one project."""
    return digest_hex("|".join((str(project_id), unamem, unamen, unamer, unames, unamev)))
