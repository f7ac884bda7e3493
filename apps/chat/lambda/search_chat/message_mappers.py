"""Conversion helpers between provider message chunks and plain text deltas."""

from langchain_core.messages import BaseMessageChunk


def chunk_text(chunk: BaseMessageChunk) -> str:
    """Extract the text of a streamed chunk, joining content blocks when present."""
    content = chunk.content
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return ""
