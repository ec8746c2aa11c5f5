"""Tests for QueryEngine retrieval and generation."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage

from pdf_rag.core.document_processing.models import Chunk
from pdf_rag.core.document_processing.tasks import EmbeddingTask
from pdf_rag.core.exceptions import (
    ConsistencyError,
    DependencyRejected,
    DependencyUnavailable,
    InputError,
    QueryValidationError,
)
from pdf_rag.core.query_engine import QueryEngine, validate_query
from pdf_rag.core.query_engine.query_engine import message_text
from pdf_rag.core.query_engine.query_prompt import NO_CONTEXT_MARKER

from tests.fakes import EMBEDDING_SIZE


def recording_chat_model(answer: str = "Employees receive 24 days.") -> MagicMock:
    chat_model = MagicMock()
    chat_model.ainvoke = AsyncMock(return_value=AIMessage(content=answer))
    return chat_model


class TestValidateQuery:
    """Test query validation."""

    def test_accepts_text(self) -> None:
        """Should return a valid query unchanged."""
        assert validate_query("What is the leave policy?") == "What is the leave policy?"

    @pytest.mark.parametrize("query", [None, "", "   ", 42, ["q"]])
    def test_rejects_invalid(self, query) -> None:
        """Should reject missing, blank and non-string queries."""
        with pytest.raises(QueryValidationError, match="Query is required"):
            validate_query(query)


class TestMessageText:
    """Test extraction of response text."""

    def test_string_content(self) -> None:
        """Should return string content as is."""
        assert message_text(AIMessage(content="hello")) == "hello"

    def test_content_blocks(self) -> None:
        """Should join text blocks and skip others."""
        message = AIMessage(
            content=[{"type": "text", "text": "Hello "}, {"type": "image_url"}, "world"]
        )

        assert message_text(message) == "Hello world"


class TestQueryEngine:
    """Test end-to-end answering over the in-process store."""

    @pytest.mark.asyncio
    async def test_embedder_model_must_match_gateway(self, gateway, fake_chat_model) -> None:
        """Should refuse an embedder with a different model than the store."""
        other = EmbeddingTask(DeterministicFakeEmbedding(size=EMBEDDING_SIZE), model_name="other")

        with pytest.raises(ConsistencyError):
            QueryEngine(gateway, other, fake_chat_model)

    @pytest.mark.asyncio
    async def test_answer_with_context(
        self, gateway, embedder, processing_config
    ) -> None:
        """Should retrieve the closest chunks and pass them to the model."""
        texts = ["Annual leave is 24 days.", "Sick leave needs a certificate.", "Parking is free."]
        await gateway.upsert([Chunk(text=text) for text in texts])
        chat_model = recording_chat_model()
        engine = QueryEngine(gateway, embedder, chat_model)

        answer = await engine.answer("Annual leave is 24 days.", processing_config, top_k=2)

        assert answer.answer == "Employees receive 24 days."
        assert len(answer.results) == 2
        assert answer.results[0].record.text == "Annual leave is 24 days."
        messages = chat_model.ainvoke.await_args.args[0]
        assert "Context #1" in messages[1].content
        assert "Annual leave is 24 days." in messages[1].content

    @pytest.mark.asyncio
    async def test_answer_without_context(self, gateway, embedder, processing_config) -> None:
        """Should still call the model, telling it nothing was found."""
        chat_model = recording_chat_model("I don't have that specific information")
        engine = QueryEngine(gateway, embedder, chat_model)

        answer = await engine.answer("Anything?", processing_config)

        assert answer.results == []
        messages = chat_model.ainvoke.await_args.args[0]
        assert NO_CONTEXT_MARKER in messages[1].content

    @pytest.mark.asyncio
    async def test_fake_chat_model(
        self, gateway, embedder, fake_chat_model, processing_config
    ) -> None:
        """Should return the chat model's text."""
        engine = QueryEngine(gateway, embedder, fake_chat_model)

        answer = await engine.answer("What is annual leave?", processing_config)

        assert answer.answer == "Here's what I found about your leave question."

    @pytest.mark.asyncio
    async def test_invalid_query(self, gateway, embedder, fake_chat_model, processing_config) -> None:
        """Should reject a blank query before embedding."""
        engine = QueryEngine(gateway, embedder, fake_chat_model)

        with pytest.raises(QueryValidationError):
            await engine.answer("  ", processing_config)

    @pytest.mark.asyncio
    async def test_invalid_top_k(self, gateway, embedder, fake_chat_model, processing_config) -> None:
        """Should reject top_k below one."""
        engine = QueryEngine(gateway, embedder, fake_chat_model)

        with pytest.raises(InputError):
            await engine.answer("Question?", processing_config, top_k=0)

    @pytest.mark.asyncio
    async def test_config_model_mismatch(
        self, gateway, embedder, fake_chat_model, processing_config
    ) -> None:
        """Should refuse a config naming a different embedding model."""
        engine = QueryEngine(gateway, embedder, fake_chat_model)
        config = processing_config.with_overrides(embedding_model="embedding-001")

        with pytest.raises(ConsistencyError):
            await engine.answer("Question?", config)

    @pytest.mark.asyncio
    async def test_empty_answer(self, gateway, embedder, processing_config) -> None:
        """Should treat an empty model answer as a rejected request."""
        engine = QueryEngine(gateway, embedder, FakeListChatModel(responses=["   "]))

        with pytest.raises(DependencyRejected):
            await engine.answer("Question?", processing_config)

    @pytest.mark.asyncio
    async def test_generation_timeout(self, gateway, embedder, processing_config) -> None:
        """Should raise DependencyUnavailable when generation is too slow."""

        async def slow(messages):
            await asyncio.sleep(5)

        chat_model = MagicMock()
        chat_model.ainvoke = slow
        engine = QueryEngine(gateway, embedder, chat_model)
        config = processing_config.with_overrides(request_timeout_seconds=0.01)

        with pytest.raises(DependencyUnavailable) as exc_info:
            await engine.answer("Question?", config)

        assert exc_info.value.service == "generation"
