"""Tests for zeit/ratelimit/registry.py — per-token state registry."""

import threading

from zeit.ratelimit.registry import RateLimitRegistry, shared_registry


class TestRateLimitRegistry:

    def test_lazy_creation_with_permissive_default(self):
        registry = RateLimitRegistry()
        assert "tok" not in registry
        state = registry.get("tok")
        assert "tok" in registry
        snap = state.snapshot()
        assert snap.limit == 1
        assert snap.remaining == 1

    def test_new_state_seeded_with_now(self):
        registry = RateLimitRegistry()
        state = registry.get("tok", now=1_700_000_000.0)
        assert state.snapshot().reset_at == 1_700_000_000.0
        # Existing state is not reseeded
        assert registry.get("tok", now=5.0).snapshot().reset_at == 1_700_000_000.0

    def test_same_token_same_state(self):
        registry = RateLimitRegistry()
        assert registry.get("tok") is registry.get("tok")
        assert len(registry) == 1

    def test_different_tokens_independent(self):
        registry = RateLimitRegistry()
        a = registry.get("a")
        b = registry.get("b")
        a.apply_headers(remaining=0)
        assert b.snapshot().remaining == 1

    def test_separate_registries_are_isolated(self):
        assert RateLimitRegistry().get("tok") is not RateLimitRegistry().get("tok")

    def test_discard(self):
        registry = RateLimitRegistry()
        first = registry.get("tok")
        registry.discard("tok")
        assert "tok" not in registry
        assert registry.get("tok") is not first

    def test_discard_unknown_token(self):
        """Discarding an unknown token should not raise."""
        RateLimitRegistry().discard("nonexistent")

    def test_concurrent_get_creates_one_state(self):
        registry = RateLimitRegistry()
        seen = []

        def worker():
            seen.append(registry.get("tok"))

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(s) for s in seen}) == 1


class TestSharedRegistry:

    def test_is_cached(self):
        assert shared_registry() is shared_registry()
