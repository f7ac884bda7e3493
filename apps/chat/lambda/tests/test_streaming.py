import unittest

from langchain_core.messages import HumanMessage

from search_chat.model_registry import ModelRegistry
from search_chat.streaming import StreamingGenerator
from stubs import StubChatModel, build_registry

PROMPT = [HumanMessage(content="tell me a joke")]


async def collect(generator: StreamingGenerator, client: StubChatModel, provider: str) -> list[str]:
    return [
        delta async for delta in generator.generate(client, PROMPT, "tell me a joke", provider)
    ]


class StreamingGeneratorTests(unittest.IsolatedAsyncioTestCase):
    async def test_yields_non_empty_deltas_in_order(self) -> None:
        registry, _ = build_registry(("openai",))
        client = StubChatModel(deltas=("Why", "", " did", " the"))

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["Why", " did", " the"])
        self.assertEqual(client.calls, [PROMPT])

    async def test_content_blocks_are_joined_into_text(self) -> None:
        registry, _ = build_registry(("anthropic",))
        client = StubChatModel(
            deltas=([{"type": "text", "text": "Hello"}], [{"type": "text", "text": "!"}])
        )

        deltas = await collect(StreamingGenerator(registry), client, "anthropic")

        self.assertEqual(deltas, ["Hello", "!"])

    async def test_failure_streams_apology_from_same_provider_fast_model(self) -> None:
        registry, _ = build_registry(("openai", "google"))
        client = StubChatModel(deltas=("partial",), error=ConnectionError("reset by peer"))

        deltas = await collect(StreamingGenerator(registry), client, "google")

        fast = registry.profiles["google"].fast
        self.assertEqual(deltas, ["partial", "google:gemini-2.5-flash"])
        self.assertEqual(len(fast.calls), 1)
        self.assertIn("tell me a joke", fast.calls[0][1].content)

    async def test_failure_uses_other_provider_when_primary_has_no_profile(self) -> None:
        registry, _ = build_registry(("anthropic",))
        client = StubChatModel(deltas=(), error=RuntimeError("boom"))

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["anthropic:claude-3-haiku-20240307"])

    async def test_failing_fast_client_falls_back_to_other_provider(self) -> None:
        registry, _ = build_registry(("openai", "google"))
        client = registry.profiles["openai"].fast
        client.deltas = ()
        client.error = RuntimeError("openai outage")

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["google:gemini-2.5-flash"])
        self.assertEqual(len(client.calls), 1)

    async def test_failing_fallback_moves_to_next_candidate(self) -> None:
        registry, _ = build_registry(("openai", "google"))
        registry.profiles["openai"].fast.error = RuntimeError("fallback down")
        registry.profiles["openai"].fast.deltas = ()
        client = StubChatModel(deltas=(), error=RuntimeError("boom"))

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["google:gemini-2.5-flash"])

    async def test_failure_without_fallback_yields_synthetic_error(self) -> None:
        registry = ModelRegistry({}, model_factory=lambda *args: None)
        client = StubChatModel(deltas=(), error=RuntimeError("boom"))

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["Error generating response: boom"])

    async def test_failing_fallback_does_not_raise(self) -> None:
        registry, _ = build_registry(("openai",))
        registry.profiles["openai"].fast.error = RuntimeError("fallback down")
        registry.profiles["openai"].fast.deltas = ()
        client = StubChatModel(deltas=(), error=RuntimeError("boom"))

        deltas = await collect(StreamingGenerator(registry), client, "openai")

        self.assertEqual(deltas, ["Error generating response: boom"])


if __name__ == "__main__":
    unittest.main()
