from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    query: str = ""
    category: str = "all"


class SearchResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    category: str
    results: dict[str, list[Any]]
    total_matches: int = Field(alias="totalMatches")
    timestamp: datetime


class DocumentSearchRequest(BaseModel):
    query: str = ""
    category: str | None = None
    max_results: int | None = Field(default=None, ge=1, le=50)


class DocumentHit(BaseModel):
    document_id: str
    title: str
    category: str
    relevance_score: int
    snippets: list[str]


class DocumentSearchResponse(BaseModel):
    query: str
    results: list[DocumentHit]


class UploadResponse(BaseModel):
    success: bool = True
    filename: str
    content_length: int
    extracted_at: datetime
    summary: str
    concept_counts: dict[str, int]


class RecommendationRequest(BaseModel):
    context: str = ""


class RecommendationResponse(BaseModel):
    context: str
    recommendations: list[str]
    total_recommendations: int
    source: str


class DocResource(BaseModel):
    uri: str
    name: str
    doc_type: str
    category: str
    source: str


class DocContent(BaseModel):
    uri: str
    doc_type: str
    text: str


class GuidanceResponse(BaseModel):
    topic: str
    text: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)


class IntentModel(BaseModel):
    primary: str
    question_type: str
    specificity: str


class ChatResponse(BaseModel):
    response: str
    provider: str
    intent: IntentModel
    fallback_reason: str | None = None
    request_id: str
    timestamp: datetime


class ChatEvent(BaseModel):
    event: Literal["chat_response", "chat_error"]
    message: Any = None
    format: Literal["ai_text", "structured"] | None = None
    provider: str | None = None
    error: str | None = None
    timestamp: datetime
