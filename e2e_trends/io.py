"""Report acquisition and timestamp helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import datetime as dt
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import ReportShapeError, format_validation_error
from .schema import ReportModel

LOGGER = logging.getLogger(__name__)

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.UTC)
# instants to_iso can render
_MIN_MS = (dt.datetime.min.replace(tzinfo=dt.UTC) - _EPOCH) // dt.timedelta(milliseconds=1)
_MAX_MS = (dt.datetime.max.replace(tzinfo=dt.UTC) - _EPOCH) // dt.timedelta(milliseconds=1)

__all__ = [
    "parse_iso8601",
    "to_epoch_ms",
    "datetime_to_epoch_ms",
    "to_iso",
    "coerce_report",
    "load_report",
    "acquire_report",
]


def parse_iso8601(value: str | None) -> dt.datetime | None:
    if not value:
        return None
    value = value.strip()
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed


def to_epoch_ms(value: str | None) -> int | None:
    """Return epoch milliseconds for an ISO 8601 string.

    ``None`` when unparseable or when the UTC instant falls outside the
    years 1..9999.
    """
    parsed = parse_iso8601(value)
    if parsed is None:
        return None
    epoch_ms = datetime_to_epoch_ms(parsed)
    if not _MIN_MS <= epoch_ms <= _MAX_MS:
        return None
    return epoch_ms


def datetime_to_epoch_ms(moment: dt.datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt.UTC)
    return (moment - _EPOCH) // dt.timedelta(milliseconds=1)


def to_iso(epoch_ms: int) -> str:
    moment = _EPOCH + dt.timedelta(milliseconds=epoch_ms)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def coerce_report(raw: ReportModel | Mapping[str, object], *, source: str = "<memory>") -> ReportModel:
    if isinstance(raw, ReportModel):
        return raw
    try:
        return ReportModel.model_validate(raw)
    except ValidationError as exc:
        message = format_validation_error(f"report does not match the expected shape ({source})", exc)
        raise ReportShapeError(message, source=source) from exc


def load_report(path: str | Path) -> ReportModel:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReportShapeError(f"cannot read report {path}: {exc}", source=str(path)) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReportShapeError(
            f"report is not valid JSON ({path}:{exc.lineno})", source=str(path)
        ) from exc
    if not isinstance(data, Mapping):
        raise ReportShapeError(f"report root must be an object: {path}", source=str(path))
    report = coerce_report(data, source=str(path))
    LOGGER.info("loaded report %s", path)
    return report


async def acquire_report(path: str | Path) -> ReportModel:
    """Load a report off the event loop. Resolves once; nothing is computed before it does."""
    return await asyncio.to_thread(load_report, path)
