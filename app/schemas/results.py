from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from app.schemas.address import AddressPrediction, PlaceDetails


class Outcome(StrEnum):
    ok = "ok"
    empty = "empty"
    failure = "failure"


class FailureReason(StrEnum):
    transport = "transport"
    quota_exceeded = "quota_exceeded"
    permission_denied = "permission_denied"
    invalid_request = "invalid_request"
    unknown = "unknown"


class Failure(BaseModel):
    reason: FailureReason
    status: str | None = None  # provider status string, if the provider answered
    message: str | None = None
    http_status: int | None = None


class PredictionResult(BaseModel):
    outcome: Outcome
    predictions: list[AddressPrediction] = []
    failure: Failure | None = None

    @classmethod
    def ok(cls, predictions: list[AddressPrediction]) -> PredictionResult:
        return cls(outcome=Outcome.ok, predictions=predictions)

    @classmethod
    def empty(cls) -> PredictionResult:
        return cls(outcome=Outcome.empty)

    @classmethod
    def failed(cls, failure: Failure) -> PredictionResult:
        return cls(outcome=Outcome.failure, failure=failure)


class PlaceDetailsResult(BaseModel):
    outcome: Outcome
    details: PlaceDetails | None = None
    failure: Failure | None = None

    @classmethod
    def ok(cls, details: PlaceDetails) -> PlaceDetailsResult:
        return cls(outcome=Outcome.ok, details=details)

    @classmethod
    def empty(cls) -> PlaceDetailsResult:
        return cls(outcome=Outcome.empty)

    @classmethod
    def failed(cls, failure: Failure) -> PlaceDetailsResult:
        return cls(outcome=Outcome.failure, failure=failure)
