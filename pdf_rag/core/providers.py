"""
Model provider factories.

Builds the Gemini embedding and chat models from a ProcessingConfig so the
API key and model names travel with the config instead of the environment.

Dependencies: langchain_google_genai
System role: Construction of external model clients
"""

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from pdf_rag.core.processing_config import ProcessingConfig


def _qualified_model_name(model: str) -> str:
    """Gemini embedding endpoints expect the 'models/' resource prefix."""
    return model if model.startswith("models/") else f"models/{model}"


def build_embeddings(config: ProcessingConfig) -> Embeddings:
    """
    Create the embedding model named in config.

    Args:
        config: Processing configuration

    Returns:
        Embeddings: Gemini embeddings client
    """
    return GoogleGenerativeAIEmbeddings(
        model=_qualified_model_name(config.embedding_model),
        google_api_key=config.api_key,
    )


def build_chat_model(config: ProcessingConfig) -> BaseChatModel:
    """
    Create the generation model named in config.

    Args:
        config: Processing configuration

    Returns:
        BaseChatModel: Gemini chat client
    """
    return ChatGoogleGenerativeAI(
        model=config.chat_model,
        google_api_key=config.api_key,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
    )
