"""Tests for TTLCache."""

from shopcache import TTLCache


class TestTTLCache:
    """Validity, reads and writes against a fake clock."""

    def test_ttl_is_parsed(self, clock) -> None:
        assert TTLCache("5m", clock=clock).ttl == 300_000

    def test_read_missing_returns_none(self, clock) -> None:
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        assert cache.read("missing") is None

    def test_write_then_read(self, clock) -> None:
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        entry = cache.write("k", "v")
        assert entry.value == "v"
        assert entry.created_at == clock.now
        assert cache.read("k") == "v"

    def test_entry_valid_just_before_ttl(self, clock) -> None:
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        cache.write("k", "v")
        clock.advance(9_999)
        assert cache.is_valid(cache.entry("k"))
        assert cache.read("k") == "v"

    def test_entry_expires_at_ttl(self, clock) -> None:
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        cache.write("k", "v")
        clock.advance(10_000)
        assert not cache.is_valid(cache.entry("k"))
        assert cache.read("k") is None

    def test_expired_entry_is_kept(self, clock) -> None:
        """Stale entries stay around as fallback material."""
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        cache.write("k", "v")
        clock.advance(60_000)
        entry = cache.entry("k")
        assert entry is not None
        assert entry.value == "v"
        assert "k" in cache

    def test_write_restarts_ttl(self, clock) -> None:
        cache: TTLCache[str] = TTLCache("10s", clock=clock)
        cache.write("k", "old")
        clock.advance(9_000)
        cache.write("k", "new")
        clock.advance(9_000)
        assert cache.read("k") == "new"

    def test_none_entry_is_not_valid(self, clock) -> None:
        assert not TTLCache("10s", clock=clock).is_valid(None)

    def test_delete_and_clear(self, clock) -> None:
        cache: TTLCache[int] = TTLCache("10s", clock=clock)
        cache.write("a", 1)
        cache.write("b", 2)
        cache.delete("a")
        cache.delete("missing")
        assert list(cache.keys()) == ["b"]
        cache.clear()
        assert len(cache) == 0

    def test_keys_can_be_mutated_while_iterating(self, clock) -> None:
        cache: TTLCache[int] = TTLCache("10s", clock=clock)
        cache.write("a", 1)
        cache.write("b", 2)
        for key in cache.keys():
            cache.delete(key)
        assert len(cache) == 0
