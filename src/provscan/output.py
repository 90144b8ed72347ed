"""Text and JSON rendering of scan results."""

from __future__ import annotations

import json
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from provscan.models import ScanResult


class ScanResultPayload(BaseModel):
    """Structured form of a :class:`ScanResult`."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(alias="filePath")
    creator: str
    pk: str
    timestamp: Optional[int] = None
    bundle_id: Optional[str] = Field(default=None, alias="bundleId")
    team_identifier: Optional[str] = Field(default=None, alias="teamIdentifier")
    signing_identifier: Optional[str] = Field(default=None, alias="signingIdentifier")

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanResultPayload":
        return cls(
            file_path=str(result.file_path),
            creator=result.creator,
            pk=result.pk,
            timestamp=result.timestamp,
            bundle_id=result.bundle_id,
            team_identifier=result.team_identifier,
            signing_identifier=result.signing_identifier,
        )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def render_text(result: ScanResult) -> str:
    return f"{result.file_path} was created/modified by {result.creator}"


def result_document(result: ScanResult) -> str:
    """Serialize a single result as a JSON object."""
    return _dumps(ScanResultPayload.from_result(result).to_dict())


def results_document(results: Iterable[ScanResult]) -> str:
    """Serialize results as a JSON array ordered by file path."""
    payloads = sorted(
        (ScanResultPayload.from_result(result) for result in results),
        key=lambda payload: payload.file_path,
    )
    return _dumps([payload.to_dict() for payload in payloads])


def _dumps(data: object) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
