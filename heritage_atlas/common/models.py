"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from heritage_atlas.common.constants import CONFIDENCE_NONE
from heritage_atlas.common.geometry import BBox

SOURCE_FIELDS = (
    "record_id",
    "name",
    "address",
    "gps",
    "erf_no",
    "erf_size",
    "est_value",
    "zoning",
    "usage",
    "owner",
    "significance",
    "municipal_value",
    "rates_estimate",
)

# Snapshot property names read by the viewer.
SOURCE_PROPERTY_NAMES = {
    "record_id": "id",
    "name": "name",
    "address": "address",
    "erf_no": "erfNo",
    "erf_size": "erfSize",
    "est_value": "estValue",
    "zoning": "zoning",
    "usage": "usage",
    "owner": "owner",
    "significance": "significance",
    "gps": "cmaGps",
    "municipal_value": "cmaMunicipalValue2023",
    "rates_estimate": "cmaRatesEstimate",
}

HERITAGE_ATTRIBUTE_KEYS = (
    "heritageInventoryKey",
    "heritageStatus",
    "heritageSiteName",
    "heritageResourceCategory",
    "heritageTypePrimary",
    "heritageTypeSecondary",
    "heritageCityGrade",
    "heritageCouncilGrade",
    "heritageManagementGrade",
    "nhraStatus",
    "heritageStatement",
    "heritageAddress",
    "heritageParcelKey",
)


@dataclass(frozen=True)
class SourceRecord:
    row_number: int
    record_id: str = ""
    name: str = ""
    address: str = ""
    gps: str = ""
    erf_no: str = ""
    erf_size: str = ""
    est_value: str = ""
    zoning: str = ""
    usage: str = ""
    owner: str = ""
    significance: str = ""
    municipal_value: str = ""
    rates_estimate: str = ""

    def to_properties(self, record_id: str) -> dict[str, str]:
        values = asdict(self)
        values["record_id"] = record_id
        return {prop: values[attr] for attr, prop in SOURCE_PROPERTY_NAMES.items()}


@dataclass(frozen=True)
class HeritageCandidate:
    polygons: tuple
    bbox: BBox
    address_norm: str
    site_name_norm: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MatchResult:
    candidate: HeritageCandidate | None = None
    method: str | None = None
    score: int | None = None
    confidence: str = CONFIDENCE_NONE
    explanation: dict[str, Any] | None = None

    @property
    def matched(self) -> bool:
        return self.candidate is not None

    def to_properties(self) -> dict[str, Any]:
        attributes = self.candidate.attributes if self.candidate is not None else {}
        properties: dict[str, Any] = {key: attributes.get(key) for key in HERITAGE_ATTRIBUTE_KEYS}
        properties.update(
            {
                "heritageMatchMethod": self.method,
                "heritageMatchScore": self.score,
                "heritageMatchConfidence": self.confidence,
                "hasHeritageMatch": self.matched,
            }
        )
        return properties
