"""FastAPI layer that exposes ingest, search, topic and recommendation operations."""
from __future__ import annotations

import base64
import binascii
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Literal

from fastapi import FastAPI, HTTPException, Query as FastAPIQuery
from pydantic import BaseModel, Field, field_validator

from application.services.topics import build_search_terms, extract_concepts, extract_topics
from application.use_cases.ingest_documents import ingest_documents
from application.use_cases.recommend import recommend
from application.use_cases.search import search
from domain.entities import Concept, Document, PageText, Topic
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging

NO_RESULTS_MESSAGE = "No relevant content found."


class PagePayload(BaseModel):
    page_number: int = Field(..., ge=1)
    text: str


class DocumentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    pages: list[PagePayload]

    @field_validator("pages")
    @classmethod
    def pages_in_order(cls, pages: list[PagePayload]) -> list[PagePayload]:
        numbers = [page.page_number for page in pages]
        if any(later <= earlier for earlier, later in zip(numbers, numbers[1:])):
            raise ValueError("page numbers must be strictly increasing")
        return pages


class SourcePayload(BaseModel):
    name: str = Field(..., min_length=1)
    content: str
    encoding: Literal["text", "base64"] = "text"


class IngestRequest(BaseModel):
    documents: list[SourcePayload]


class DocumentResponse(BaseModel):
    id: str
    display_name: str
    page_count: int
    ingested_at: datetime
    chunk_count: int


class IngestFailurePayload(BaseModel):
    name: str
    reason: str


class IngestResponse(BaseModel):
    ingested: list[DocumentResponse]
    failed: list[IngestFailurePayload]


class RemoveResponse(BaseModel):
    removed: bool


class HitPayload(BaseModel):
    chunk_id: str
    document_id: str
    document_name: str
    pages: list[int]
    snippet: str
    score: float


class SearchResponse(BaseModel):
    query: str
    results: list[HitPayload]
    message: str | None = None


class TopicPayload(BaseModel):
    word: str
    frequency: int
    score: float


class ConceptPayload(BaseModel):
    name: str
    confidence: float
    related_topics: list[str]


class TopicsResponse(BaseModel):
    document_id: str
    topics: list[TopicPayload]
    concepts: list[ConceptPayload]
    search_terms: list[str]


class RecommendationsResponse(BaseModel):
    document_id: str
    search_terms: list[str]
    items: list[Any]
    errors: dict[str, str]


class StatsResponse(BaseModel):
    document_count: int
    chunk_count: int
    cache_size: int
    cache_max_entries: int
    cache_hit_rate: float


def _decode(source: SourcePayload) -> bytes:
    if source.encoding == "text":
        return source.content.encode("utf-8")
    try:
        return base64.b64decode(source.content, validate=True)
    except binascii.Error as exc:
        raise HTTPException(status_code=422, detail=f"{source.name}: invalid base64 content") from exc


def create_app(container: Container | None = None) -> FastAPI:
    container = container or build_default_container(ContainerConfig.from_env())
    index = container.index

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        setup_logging()
        yield
        index.dispose()

    app = FastAPI(title="StudySearch API", lifespan=lifespan)
    app.state.container = container

    def _document_response(document: Document) -> DocumentResponse:
        return DocumentResponse(
            id=document.id,
            display_name=document.display_name,
            page_count=document.page_count,
            ingested_at=document.ingested_at,
            chunk_count=len(index.get_document_chunks(document.id)),
        )

    def _require_document(document_id: str) -> Document:
        document = index.get_document(document_id)
        if document is None:
            raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
        return document

    def _document_topics(document: Document) -> tuple[list[Topic], list[Concept], list[str]]:
        # Chunks overlap, so this over-counts boundary words slightly.
        text = " ".join(chunk.text for chunk in index.get_document_chunks(document.id))
        topics = extract_topics(text)
        concepts = extract_concepts(topics)
        terms = build_search_terms(topics, concepts=concepts, document_name=document.display_name)
        return topics, concepts, terms

    @app.post("/documents", response_model=DocumentResponse, status_code=201)
    def add_document_endpoint(payload: DocumentRequest) -> DocumentResponse:
        pages = [PageText(page_number=page.page_number, text=page.text) for page in payload.pages]
        return _document_response(index.add_document(payload.name, pages))

    @app.post("/ingest", response_model=IngestResponse)
    def ingest_endpoint(payload: IngestRequest) -> IngestResponse:
        sources = [(source.name, _decode(source)) for source in payload.documents]
        report = ingest_documents(sources, extractor=container.extractor, index=index)
        return IngestResponse(
            ingested=[_document_response(result.document) for result in report.succeeded],
            failed=[IngestFailurePayload(name=result.name, reason=result.reason) for result in report.failed],
        )

    @app.get("/documents", response_model=list[DocumentResponse])
    def documents_endpoint() -> list[DocumentResponse]:
        return [_document_response(document) for document in index.list_documents()]

    @app.get("/documents/{document_id}", response_model=DocumentResponse)
    def document_endpoint(document_id: str) -> DocumentResponse:
        return _document_response(_require_document(document_id))

    @app.delete("/documents/{document_id}", response_model=RemoveResponse)
    def remove_document_endpoint(document_id: str) -> RemoveResponse:
        return RemoveResponse(removed=index.remove_document(document_id))

    @app.get("/documents/{document_id}/topics", response_model=TopicsResponse)
    def topics_endpoint(document_id: str) -> TopicsResponse:
        topics, concepts, terms = _document_topics(_require_document(document_id))
        return TopicsResponse(
            document_id=document_id,
            topics=[TopicPayload(word=topic.word, frequency=topic.frequency, score=topic.score) for topic in topics],
            concepts=[
                ConceptPayload(
                    name=concept.name,
                    confidence=concept.confidence,
                    related_topics=list(concept.related_topics),
                )
                for concept in concepts
            ],
            search_terms=terms,
        )

    @app.get("/documents/{document_id}/recommendations", response_model=RecommendationsResponse)
    async def recommendations_endpoint(document_id: str) -> RecommendationsResponse:
        document = _require_document(document_id)
        lookup = container.recommendation_lookup
        if lookup is None:
            raise HTTPException(status_code=503, detail="No recommendation source configured")
        _topics, _concepts, terms = _document_topics(document)
        report = await recommend(terms, scope=document_id, cache=container.recommendation_cache, lookup=lookup)
        return RecommendationsResponse(
            document_id=document_id,
            search_terms=report.search_terms,
            items=report.items,
            errors=report.errors,
        )

    @app.get("/search", response_model=SearchResponse)
    def search_endpoint(
        q: str = FastAPIQuery(..., description="User query"),
        document_id: list[str] | None = FastAPIQuery(None, description="Restrict to these documents"),
        top_k: int | None = FastAPIQuery(None, ge=1, le=50),
    ) -> SearchResponse:
        hits = search(q, index=index, scope_document_ids=document_id, top_k=top_k)
        return SearchResponse(
            query=q,
            results=[
                HitPayload(
                    chunk_id=hit.chunk_id,
                    document_id=hit.document_id,
                    document_name=hit.document_name,
                    pages=hit.pages,
                    snippet=hit.snippet,
                    score=hit.score,
                )
                for hit in hits
            ],
            message=None if hits else NO_RESULTS_MESSAGE,
        )

    @app.get("/stats", response_model=StatsResponse)
    def stats_endpoint() -> StatsResponse:
        index_stats = index.stats()
        cache_stats = container.recommendation_cache.stats()
        return StatsResponse(
            document_count=index_stats.document_count,
            chunk_count=index_stats.chunk_count,
            cache_size=cache_stats.size,
            cache_max_entries=cache_stats.max_entries,
            cache_hit_rate=cache_stats.hit_rate,
        )

    @app.delete("/index", response_model=StatsResponse)
    def clear_endpoint() -> StatsResponse:
        index.clear()
        return stats_endpoint()

    return app


app = create_app()
