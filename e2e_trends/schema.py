"""Pydantic models for the raw report and the configuration file."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .models import SuiteKind

__all__ = [
    "TestOutcomeModel",
    "ResultModel",
    "RunStatsModel",
    "RunRecordModel",
    "ReportModel",
    "FilterConfigModel",
    "SuiteConfigModel",
    "AnalysisConfigModel",
]


class TestOutcomeModel(BaseModel):
    """A single test entry inside ``results[*].tests``."""

    __test__ = False

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str
    passed: bool = Field(alias="pass")
    duration: float | None = None


class ResultModel(BaseModel):
    """Top-level suite of a run. Nested ``suites`` and hooks are kept but never read."""

    model_config = ConfigDict(extra="allow")

    tests: list[TestOutcomeModel] = Field(default_factory=list)


class RunStatsModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    start: str | None
    tests: int
    passes: int
    pass_percent: float = Field(alias="passPercent")
    duration: float | None = None


class RunRecordModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    stats: RunStatsModel
    results: list[ResultModel] = Field(default_factory=list)


class ReportModel(BaseModel):
    """Runs keyed by run identifier, grouped by suite kind. Absent kinds are empty."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    smoke_tests: dict[str, RunRecordModel] = Field(default_factory=dict, alias="smokeTests")
    ui_uat_tests: dict[str, RunRecordModel] = Field(default_factory=dict, alias="uiUatTests")
    pricing_override: dict[str, RunRecordModel] = Field(
        default_factory=dict, alias="pricingOverride"
    )

    def runs_for(self, kind: SuiteKind) -> dict[str, RunRecordModel]:
        return getattr(self, _FIELD_BY_KIND[kind])


_FIELD_BY_KIND = {
    SuiteKind.SMOKE: "smoke_tests",
    SuiteKind.UI_UAT: "ui_uat_tests",
    SuiteKind.PRICING_OVERRIDE: "pricing_override",
}


class FilterConfigModel(BaseModel):
    """Schema of the ``filter`` section."""

    model_config = ConfigDict(extra="forbid")

    text: str = ""
    flaky_only: bool = False
    latest_fail_only: bool = False
    new_failure_only: bool = False
    recovered_only: bool = False
    date_from: dt.date | None = None
    date_to: dt.date | None = None
    sort: str = "none"
    columns: dict[str, str] = Field(default_factory=dict)


class SuiteConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None


class AnalysisConfigModel(BaseModel):
    """Schema of the whole configuration file."""

    model_config = ConfigDict(extra="forbid")

    windows: list[PositiveInt] = Field(default_factory=lambda: [3, 7, 14, 30])
    timezone: str = "UTC"
    suites: dict[str, SuiteConfigModel] = Field(default_factory=dict)
    filter: FilterConfigModel = Field(default_factory=FilterConfigModel)
