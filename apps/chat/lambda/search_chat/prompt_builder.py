"""Prompt construction for search-augmented and direct answers."""

import logging

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.prompts import ChatPromptTemplate

from .search.base import DispatchOutcome

logger = logging.getLogger(__name__)

RAG_PROMPT_TEMPLATE = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You are a helpful AI assistant. Answer the user's questions truthfully and "
            "informatively based on the provided search context. "
            "Cite your sources from the context clearly using numbers like [1], [2] next to "
            "the relevant information. "
            "If the search context does not contain enough information to answer the question, "
            "state that you don't know.\n"
            "Search Context:\n\n{search_context}\n\n",
        ),
        ("human", "{user_input}"),
    ]
)

DIRECT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Respond directly to the user's question."
)

ERROR_FALLBACK_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", "You are an AI assistant. Explain politely that an error occurred."),
        (
            "human",
            "I'm very sorry, but I encountered an internal error while processing your "
            "request. Please try again or rephrase your question. "
            "(Original user query: {original_query})",
        ),
    ]
)


def build_prompt_messages(message: str, search: DispatchOutcome) -> list[BaseMessage]:
    if search.used and search.result.success:
        logger.info(
            "Using RAG prompt",
            extra={"context_length": len(search.result.content)},
        )
        return RAG_PROMPT_TEMPLATE.format_messages(
            search_context=search.result.content,
            user_input=message,
        )

    logger.info("Using direct prompt (no search context)")
    return [SystemMessage(content=DIRECT_SYSTEM_PROMPT), HumanMessage(content=message)]


def build_fallback_messages(original_query: str) -> list[BaseMessage]:
    return ERROR_FALLBACK_PROMPT.format_messages(original_query=original_query)
