"""
Embedding client factory.

Builds the LangChain Embeddings client for the configured provider. The
client is always asked for `dimension`-sized vectors, the same value the
embedding generator records on every stored vector.

Dependencies: langchain_openai, langchain_google_genai, resume_knowledge.configs
System role: Embedding provider instantiation and selection
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings

from resume_knowledge.boundary.vdb.embeddings_wrapper import FixedDimensionEmbeddings
from resume_knowledge.configs import get_settings
from resume_knowledge.configs.embedding import EmbeddingSettings

logger = logging.getLogger(__name__)


def get_embeddings(config: EmbeddingSettings | None = None) -> Embeddings:
    """
    Factory function to get the embedding client from configuration.

    Args:
        config: Embedding section to build from (the configured one if None)

    Returns:
        Embeddings: OpenAI or Google embeddings client

    Raises:
        ValueError: If the provider is invalid
    """
    config = config or get_settings().embedding
    provider = config.provider.lower()

    if provider == "openai":
        logger.info(f"{__name__}:get_embeddings - Using OpenAI model {config.model}")
        kwargs = {"model": config.model}
        # ada-002 rejects the dimensions parameter
        if config.model.startswith("text-embedding-3"):
            kwargs["dimensions"] = config.dimension
        if config.api_key:
            kwargs["api_key"] = config.api_key
        return OpenAIEmbeddings(**kwargs)

    elif provider == "google":
        logger.info(f"{__name__}:get_embeddings - Using Google model {config.model} at {config.dimension} dims")
        kwargs = {"model": config.model, "dimension": config.dimension}
        if config.api_key:
            kwargs["google_api_key"] = config.api_key
        return FixedDimensionEmbeddings(**kwargs)

    else:
        raise ValueError(
            f"Invalid EMBEDDING_PROVIDER: {provider}. Must be 'openai' or 'google'."
        )
