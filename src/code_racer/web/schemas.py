"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContentPayload(BaseModel):
    name: str
    type: str = "file"
    size: int = 0
    path: str = ""


class ComplexityPayload(BaseModel):
    score: float = Field(ge=0)
    complexity: str | None = None
    metrics: dict[str, float] = Field(default_factory=dict)


class MetricsPayload(BaseModel):
    """Repository metrics as sent by the analysis front end (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    file_count: int = Field(alias="fileCount", ge=0)
    languages: dict[str, float] = Field(default_factory=dict)
    complexity: ComplexityPayload
    contributor_count: int = Field(default=0, alias="contributorCount", ge=0)
    dependencies: int = Field(default=0, ge=0)
    contents: list[ContentPayload] = Field(default_factory=list)


class TrackRequest(BaseModel):
    metrics: MetricsPayload
    seed: int | None = None
    repo: str = ""
    save: bool = False


class HealthResponse(BaseModel):
    status: str
    version: str


class TrackResponse(BaseModel):
    track: dict
    seed: int
    repo: str = ""
    track_id: int | None = None


class TrackRecord(BaseModel):
    id: int
    repo: str
    seed: int | None
    complexity: str
    length: float
    turns: int
    width: float
    approximately_closed: bool
    created_at: str


class StoredTrackResponse(TrackRecord):
    track: dict


class TracksResponse(BaseModel):
    repo: str
    tracks: list[TrackRecord]


class DemosResponse(BaseModel):
    demos: list[str]
