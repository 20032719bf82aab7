"""Tests for the generation cache: freshness policy, stores and sweeper."""

from factories import START, make_case, stale_entry
from prompt_detective.core.cache import (
    ANON_SESSION,
    CacheEntry,
    EvictionSweeper,
    OptionsStore,
    SessionBundle,
    SessionStore,
    is_fresh,
    options_key,
    session_key,
    should_rate_limit,
)

TTL = 15 * 60
WINDOW = 10


def test_new_entry_sets_all_timestamps():
    """Test that a new entry is created, generated and served at the same instant."""
    entry = CacheEntry.new("case", START)
    assert entry.created_at == entry.last_generated_at == entry.last_served_at == START


def test_touch_updates_only_last_served():
    """Test that touching an entry leaves creation time alone."""
    entry = CacheEntry.new("case", START)
    entry.touch(START + 30)
    assert entry.last_served_at == START + 30
    assert entry.created_at == START


def test_missing_entry_is_never_fresh():
    assert is_fresh(None, START, TTL) is False
    assert should_rate_limit(None, START, WINDOW) is False


def test_is_fresh_boundaries():
    """Test freshness at age 0, just under TTL, exactly TTL and beyond."""
    entry = CacheEntry.new("case", START)
    assert is_fresh(entry, START, TTL) is True
    assert is_fresh(entry, START + TTL - 0.001, TTL) is True
    assert is_fresh(entry, START + TTL, TTL) is False
    assert is_fresh(entry, START + 2 * TTL, TTL) is False


def test_should_rate_limit_boundaries():
    """Test the rate-limit window is measured from the last generation."""
    entry = CacheEntry.new("case", START)
    assert should_rate_limit(entry, START + 9.999, WINDOW) is True
    assert should_rate_limit(entry, START + WINDOW, WINDOW) is False


def test_stale_entry_can_still_be_rate_limited():
    """Test that freshness reads created_at while rate limiting reads last_generated_at."""
    entry = CacheEntry("case", created_at=START - TTL, last_generated_at=START - 5, last_served_at=START - 5)
    assert is_fresh(entry, START, TTL) is False
    assert should_rate_limit(entry, START, WINDOW) is True


def test_session_key_defaults_to_anon():
    assert session_key(None) == ANON_SESSION
    assert session_key("") == ANON_SESSION
    assert session_key("s1") == "s1"


def test_options_key_embeds_case_content():
    """Test that changing the faulty prompt changes the options key."""
    original = make_case()
    regenerated = make_case(faultyPrompt="Write a lasagna recipe card.")
    assert options_key("s1", original) != options_key("s1", regenerated)
    assert options_key("s1", original) == options_key("s1", make_case())
    assert options_key(None, original).startswith("anon:417:tone:")


def test_session_store_creates_bundle_once():
    """Test that get_or_create registers a bundle and returns it again."""
    store = SessionStore()
    bundle = store.get_or_create("s1")
    assert isinstance(bundle, SessionBundle)
    assert bundle.is_empty()
    assert store.get_or_create("s1") is bundle
    assert "s1" in store
    assert len(store) == 1


def test_options_store_has_no_implicit_creation():
    store = OptionsStore()
    assert store.get("missing") is None
    assert len(store) == 0
    entry = CacheEntry.new(["A"], START)
    store.set("k", entry)
    assert store.get("k") is entry


def _sweeper(interval: int = 50):
    sessions = SessionStore()
    options = OptionsStore()
    return sessions, options, EvictionSweeper(sessions, options, max_idle=2 * TTL, interval=interval)


def test_sweeper_only_runs_on_interval():
    """Test that only every 50th call performs a sweep."""
    sessions, _, sweeper = _sweeper()
    sessions.get_or_create("idle")

    results = [sweeper.maybe_sweep(START) for _ in range(50)]

    assert results[:49] == [False] * 49
    assert results[49] is True
    assert "idle" not in sessions


def test_sweep_drops_idle_slots_and_keeps_read_ones():
    """Test that a recently read slot survives even past its TTL."""
    sessions, _, sweeper = _sweeper()
    bundle = sessions.get_or_create("s1")
    bundle.detective = stale_entry("old case", START, age=3 * TTL)
    bundle.audit = stale_entry("old audit", START, age=3 * TTL)
    bundle.audit.touch(START - TTL)

    evicted = sweeper.sweep(START)

    assert evicted == 1
    assert bundle.detective is None
    assert bundle.audit is not None
    assert "s1" in sessions


def test_sweep_removes_empty_bundles():
    sessions, _, sweeper = _sweeper()
    sessions.get_or_create("s1").detective = stale_entry("old", START, age=3 * TTL)
    sessions.get_or_create("s2").detective = CacheEntry.new("new", START)

    sweeper.sweep(START)

    assert "s1" not in sessions
    assert "s2" in sessions


def test_sweep_keeps_entry_exactly_at_idle_limit():
    sessions, _, sweeper = _sweeper()
    sessions.get_or_create("s1").detective = stale_entry("edge", START, age=2 * TTL)
    sweeper.sweep(START)
    assert "s1" in sessions


def test_sweep_removes_idle_option_sets():
    _, options, sweeper = _sweeper()
    options.set("old", stale_entry(["A", "B", "C", "D"], START, age=3 * TTL))
    options.set("new", CacheEntry.new(["A", "B", "C", "D"], START))

    sweeper.sweep(START)

    assert "old" not in options
    assert "new" in options
