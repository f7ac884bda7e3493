import unittest

from search_chat.model_registry import ModelRegistry
from stubs import build_registry


class ModelRegistryTests(unittest.TestCase):
    def test_build_creates_capable_and_fast_clients_per_provider(self) -> None:
        _, factory = build_registry(("openai", "google"))

        self.assertEqual(
            factory.calls,
            [
                ("openai", "gpt-4-turbo", 0.2),
                ("openai", "gpt-3.5-turbo", 0.7),
                ("google", "gemini-2.5-pro", 0.2),
                ("google", "gemini-2.5-flash", 0.7),
            ],
        )

    def test_unconfigured_or_unknown_provider_resolves_to_none(self) -> None:
        registry, _ = build_registry(("openai",))

        self.assertIsNone(registry.resolve("anthropic", None))
        self.assertIsNone(registry.resolve("unknown_provider", "gpt-4-turbo"))

    def test_fast_marker_selects_fast_client(self) -> None:
        registry, _ = build_registry(("openai",))
        profile = registry.profiles["openai"]

        self.assertIs(registry.resolve("openai", "fast"), profile.fast)
        self.assertIs(registry.resolve("openai", "gpt-fast-preview"), profile.fast)

    def test_default_identifiers_select_capable_client(self) -> None:
        registry, _ = build_registry(("openai",))
        profile = registry.profiles["openai"]

        self.assertIs(registry.resolve("openai", "gpt-4-turbo"), profile.capable)
        self.assertIs(registry.resolve("openai", "gpt-3.5-turbo"), profile.capable)
        self.assertIs(registry.resolve("openai", None), profile.capable)

    def test_explicit_model_builds_dedicated_capable_tier_client(self) -> None:
        registry, factory = build_registry(("openai",))

        client = registry.resolve("openai", "gpt-4o")

        self.assertEqual(factory.calls[-1], ("openai", "gpt-4o", 0.2))
        self.assertIs(client, factory.models["openai:gpt-4o"])

    def test_fallback_prefers_same_provider_fast_client(self) -> None:
        registry, _ = build_registry(("openai", "google"))

        self.assertEqual(
            registry.fallback_clients("google"),
            [registry.profiles["google"].fast, registry.profiles["openai"].fast],
        )

    def test_fallback_uses_any_configured_fast_client(self) -> None:
        registry, _ = build_registry(("anthropic",))

        self.assertEqual(registry.fallback_clients("openai"), [registry.profiles["anthropic"].fast])

    def test_fallback_skips_the_failed_client(self) -> None:
        registry, _ = build_registry(("openai", "google"))
        failed = registry.profiles["openai"].fast

        self.assertEqual(
            registry.fallback_clients("openai", failed), [registry.profiles["google"].fast]
        )

    def test_fallback_is_empty_without_profiles(self) -> None:
        registry = ModelRegistry({}, model_factory=lambda *args: None)

        self.assertEqual(registry.fallback_clients("openai"), [])

    def test_profiles_are_read_only(self) -> None:
        registry, _ = build_registry(("openai",))

        with self.assertRaises(TypeError):
            registry.profiles["google"] = registry.profiles["openai"]


if __name__ == "__main__":
    unittest.main()
