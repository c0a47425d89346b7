"""Loading of the YAML analysis configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import datetime as dt
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError
import yaml

from .errors import ConfigError, format_validation_error
from .models import SuiteKind
from .schema import AnalysisConfigModel, FilterConfigModel
from .table import ColumnFilter, DateRange, FilterConfig, SortMode
from .windows import DEFAULT_WINDOWS

__all__ = ["AnalysisConfig", "load_config", "build_config"]


@dataclass(frozen=True)
class AnalysisConfig:
    windows: tuple[int, ...] = DEFAULT_WINDOWS
    timezone: dt.tzinfo = dt.UTC
    titles: Mapping[SuiteKind, str] = field(default_factory=dict)
    filter: FilterConfig = field(default_factory=FilterConfig)

    def title_for(self, kind: SuiteKind) -> str:
        return self.titles.get(kind, kind.title)


def _build_filter(model: FilterConfigModel, source: Path | str) -> FilterConfig:
    try:
        sort = SortMode(model.sort)
        columns = {key: ColumnFilter(value) for key, value in model.columns.items()}
    except ValueError as exc:
        raise ConfigError(f"invalid configuration ({source}): filter: {exc}") from exc
    return FilterConfig(
        text=model.text,
        flaky_only=model.flaky_only,
        latest_fail_only=model.latest_fail_only,
        new_failure_only=model.new_failure_only,
        recovered_only=model.recovered_only,
        date_range=DateRange(model.date_from, model.date_to),
        column_filters=columns,
        sort=sort,
    )


def build_config(data: Mapping[str, object] | None, *, source: Path | str = "<memory>") -> AnalysisConfig:
    try:
        model = AnalysisConfigModel.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(format_validation_error(f"invalid configuration ({source})", exc)) from exc

    try:
        timezone: dt.tzinfo = dt.UTC if model.timezone.upper() == "UTC" else ZoneInfo(model.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"invalid configuration ({source}): unknown timezone {model.timezone!r}") from exc

    titles: dict[SuiteKind, str] = {}
    for key, suite in model.suites.items():
        try:
            kind = SuiteKind(key)
        except ValueError as exc:
            raise ConfigError(f"invalid configuration ({source}): unknown suite kind {key!r}") from exc
        if suite.title:
            titles[kind] = suite.title

    return AnalysisConfig(
        windows=tuple(model.windows),
        timezone=timezone,
        titles=titles,
        filter=_build_filter(model.filter, source),
    )


def load_config(path: str | Path | None) -> AnalysisConfig:
    """Read a YAML config; ``None`` gives the defaults."""
    if path is None:
        return AnalysisConfig()
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"configuration is not valid YAML ({path}): {exc}") from exc
    if data is not None and not isinstance(data, Mapping):
        raise ConfigError(f"configuration root must be a mapping: {path}")
    return build_config(data, source=path)
