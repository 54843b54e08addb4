"""Schema-validated parsing of engine output into utterances.

Engine replies are supposed to be a bare JSON array but routinely arrive
wrapped in code fences, preceded by commentary, or with trailing commas.
``parse_engine_output`` tolerates those wrappers, then validates every
record strictly. Anything that still does not fit becomes ``ParseFailed``;
no exception escapes this module.
"""

import json
import re
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from tutorsim.models.results import Parsed, ParseFailed, ParseResult
from tutorsim.models.transcript import Utterance, new_utterance_id

logger = structlog.get_logger(__name__)

CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")
ARRAY_START_PATTERN = re.compile(r"\[")

TIMESTAMP_ADAPTER = TypeAdapter(datetime)


def _clean_json_string(text: str) -> str:
    """Clean common issues in JSON strings from LLM output."""
    # Remove any BOM or zero-width characters
    text = text.strip("\ufeff\u200b\u200c\u200d")

    # Remove trailing commas before } or ] (invalid JSON but common LLM mistake)
    return TRAILING_COMMA_PATTERN.sub(r"\1", text)


def _extract_json_array(text: str) -> Optional[str]:
    """Return the first JSON array of objects embedded in ``text``.

    Every ``[`` is tried as the start of a JSON value, so stray quotes or
    brackets in the surrounding prose do not hide the array.
    """
    decoder = json.JSONDecoder()

    for match in ARRAY_START_PATTERN.finditer(text):
        start = match.start()
        try:
            payload, end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if isinstance(payload, list) and payload and all(isinstance(item, dict) for item in payload):
            return text[start:end]

    return None


def _usable_timestamp(value: Any) -> bool:
    try:
        TIMESTAMP_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _load_array(raw: str) -> tuple[Optional[list], str]:
    """Locate and decode the JSON array in an engine reply.

    Returns:
        Tuple of (decoded list or None, failure reason).
    """
    text = raw.strip()

    block = CODE_BLOCK_PATTERN.search(text)
    if block and block.group(1).lstrip().startswith("["):
        text = block.group(1).strip()

    candidates = [text]
    extracted = _extract_json_array(_clean_json_string(text))
    if extracted and extracted != text:
        candidates.append(extracted)

    reason = "no JSON array found"
    for candidate in candidates:
        try:
            payload = json.loads(_clean_json_string(candidate))
        except json.JSONDecodeError as e:
            reason = f"invalid JSON: {e.msg}"
            continue
        if isinstance(payload, list):
            return payload, ""
        reason = f"expected a JSON array, got {type(payload).__name__}"

    return None, reason


def _validate_records(records: list[Any]) -> ParseResult:
    """Validate decoded records against the utterance schema."""
    utterances: list[Utterance] = []
    seen_ids: set[str] = set()

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            return ParseFailed(f"record {index} is {type(record).__name__}, not an object")

        text = record.get("text")
        if isinstance(text, str) and not text.strip():
            logger.debug("blank_record_dropped", index=index)
            continue

        data = dict(record)
        record_id = data.get("id")
        if not isinstance(record_id, str) or not record_id.strip() or record_id in seen_ids:
            data["id"] = new_utterance_id()
        timestamp = data.get("timestamp")
        if timestamp in (None, ""):
            data.pop("timestamp", None)
        elif not _usable_timestamp(timestamp):
            logger.debug("record_timestamp_replaced", index=index, timestamp=str(timestamp)[:40])
            data.pop("timestamp")

        try:
            utterance = Utterance.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "record"
            return ParseFailed(f"record {index} invalid at {location}: {first['msg']}")

        seen_ids.add(utterance.id)
        utterances.append(utterance)

    if not utterances:
        return ParseFailed("no utterances in response")

    return Parsed(utterances)


def parse_engine_output(raw: Optional[str]) -> ParseResult:
    """Parse an engine reply into utterances.

    Args:
        raw: Raw engine text.

    Returns:
        ``Parsed`` with a non-empty utterance list, or ``ParseFailed``.
    """
    if raw is None or not raw.strip():
        return ParseFailed("empty response")

    records, reason = _load_array(raw)
    if records is None:
        logger.debug(
            "engine_output_unparseable",
            reason=reason,
            preview=raw[:200],
        )
        return ParseFailed(reason)

    return _validate_records(records)


def parse_serialized_sequence(text: str) -> ParseResult:
    """Strictly parse a sequence produced by ``serialize_sequence``.

    No wrapper tolerance: the input must be exactly a JSON array.
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return ParseFailed(f"input is not JSON: {e}")

    if not isinstance(payload, list):
        return ParseFailed(f"input is {type(payload).__name__}, not an array")

    return _validate_records(payload)


def serialize_sequence(utterances: list[Utterance]) -> str:
    """Serialize utterances as a JSON array with wire field names."""
    return json.dumps([u.to_wire() for u in utterances], ensure_ascii=False)
