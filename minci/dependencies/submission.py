"""Parsing of form-encoded report submissions"""
from urllib.parse import parse_qsl

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from minci.core.errors import MalformedRequest
from minci.core.security import signature_length
from minci.schemas.report import ReportSubmission, SignedSubmission

FORM_URLENCODED = "application/x-www-form-urlencoded"
LOG_FIELD = "report-log"


async def _form_fields(request: Request) -> dict[str, bytes]:
    """
    Collect form fields as the bytes the runner sent.

    Url-encoded bodies are split by hand so a log that is not valid UTF-8
    keeps its exact bytes; latin-1 maps every byte to one character and back.
    Other bodies go through Starlette's form parser.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == FORM_URLENCODED:
        body = (await request.body()).decode("latin-1")
        items = [
            (key.encode("latin-1").decode("utf-8", errors="replace"), value.encode("latin-1"))
            for key, value in parse_qsl(body, keep_blank_values=True, encoding="latin-1")
        ]
    else:
        try:
            form = await request.form()
        except (HTTPException, MultiPartException) as e:
            raise MalformedRequest("unparseable form body") from e
        items = []
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                raise MalformedRequest(f"unexpected file in {key}")
            items.append((key, value.encode("utf-8")))

    fields = {}
    for key, value in items:
        # First occurrence wins for repeated keys
        fields.setdefault(key, value)
    return fields


async def signed_submission(request: Request) -> SignedSubmission:
    """
    Dependency that parses a runner's form post into a SignedSubmission.

    Missing or mistyped fields, and bodies that do not parse at all, raise
    MalformedRequest rather than FastAPI's usual 400 or 422, so the response
    never says what was wrong.

    Args:
        request: Incoming request with a form-encoded body

    Returns:
        SignedSubmission: Typed fields, the raw log bytes and the client signature

    Raises:
        MalformedRequest: If the body or any field is missing or invalid
    """
    raw = await _form_fields(request)
    log_bytes = raw.pop(LOG_FIELD, None)

    fields = {}
    try:
        for key, value in raw.items():
            fields[key] = value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedRequest(f"{key} is not UTF-8") from e
    if log_bytes is not None:
        # The log is stored as readable text but signed as sent
        fields[LOG_FIELD] = log_bytes.decode("utf-8", errors="replace")

    signature = fields.pop("signature", None)
    if not signature or len(signature) != signature_length():
        raise MalformedRequest("missing or malformed signature")

    try:
        submission = ReportSubmission.model_validate(fields)
    except ValidationError as e:
        names = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise MalformedRequest(names or "invalid fields") from e

    return SignedSubmission(submission=submission, signature=signature, log_bytes=log_bytes)
