import unittest

from langchain_core.messages import HumanMessage, SystemMessage

from search_chat.prompt_builder import (
    DIRECT_SYSTEM_PROMPT,
    build_fallback_messages,
    build_prompt_messages,
)
from search_chat.search.base import DispatchOutcome, SearchResult


class PromptBuilderTests(unittest.TestCase):
    def test_successful_search_builds_context_augmented_prompt(self) -> None:
        search = DispatchOutcome(
            result=SearchResult(
                content="Paris: 21C and sunny {not a template}",
                tool_used="perplexity_web_search",
                success=True,
            ),
            used=True,
        )

        messages = build_prompt_messages("What's the weather in Paris?", search)

        self.assertEqual(len(messages), 2)
        self.assertIsInstance(messages[0], SystemMessage)
        self.assertIn("Paris: 21C and sunny {not a template}", messages[0].content)
        self.assertIn("[1]", messages[0].content)
        self.assertIsInstance(messages[1], HumanMessage)
        self.assertEqual(messages[1].content, "What's the weather in Paris?")

    def test_failed_search_builds_direct_prompt(self) -> None:
        search = DispatchOutcome(
            result=SearchResult(content="Error: search failed", success=False), used=True
        )

        messages = build_prompt_messages("hi", search)

        self.assertEqual(messages[0].content, DIRECT_SYSTEM_PROMPT)
        self.assertEqual(messages[1].content, "hi")

    def test_no_search_builds_direct_prompt(self) -> None:
        search = DispatchOutcome(result=SearchResult(content="", tool_used="none"), used=False)

        messages = build_prompt_messages("hi", search)

        self.assertEqual([m.content for m in messages], [DIRECT_SYSTEM_PROMPT, "hi"])

    def test_fallback_prompt_embeds_original_query(self) -> None:
        messages = build_fallback_messages("tell me a joke")

        self.assertIn("Explain politely", messages[0].content)
        self.assertIn("(Original user query: tell me a joke)", messages[1].content)


if __name__ == "__main__":
    unittest.main()
