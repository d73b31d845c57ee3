"""Tests for version comparison and the update cache protocol."""

import itertools
import json
import math

import pytest
from conftest import MemoryStore

from deepflow.versioning import (
    TriggerThrottle,
    VersionCache,
    VersionRecord,
    is_newer_version,
    parse_version,
)


class TestParseVersion:
    """Test cases for parse_version."""

    def test_three_components(self):
        assert parse_version("1.2.3") == [1, 2, 3]

    def test_missing_components_are_zero(self):
        assert parse_version("2") == [2, 0, 0]
        assert parse_version("2.5") == [2, 5, 0]

    def test_extra_components_are_ignored(self):
        assert parse_version("1.2.3.4") == [1, 2, 3]

    def test_surrounding_whitespace(self):
        assert parse_version(" 1.2.3\n") == [1, 2, 3]

    def test_non_numeric_component_is_nan(self):
        major, minor, patch = parse_version("1.x.3")
        assert major == 1
        assert math.isnan(minor)
        assert patch == 3

    def test_prerelease_suffix_is_nan(self):
        assert math.isnan(parse_version("1.2.3-beta")[2])


class TestIsNewerVersion:
    """Test cases for is_newer_version."""

    @pytest.mark.parametrize("latest,current", [
        ("1.3.0", "1.2.0"),
        ("2.0.0", "1.9.9"),
        ("1.2.10", "1.2.9"),
        ("1.0.1", "1"),
    ])
    def test_newer(self, latest, current):
        assert is_newer_version(latest, current) is True

    @pytest.mark.parametrize("latest,current", [
        ("1.2.0", "1.3.0"),
        ("1.9.9", "2.0.0"),
        ("1.2", "1.2.0"),
        ("0.4.0", "0.4.0"),
    ])
    def test_not_newer(self, latest, current):
        assert is_newer_version(latest, current) is False

    def test_irreflexive(self):
        for version in ["0.0.0", "1.2.3", "10", "3.1"]:
            assert is_newer_version(version, version) is False

    def test_matches_tuple_ordering(self):
        """Comparison agrees with lexicographic ordering of integer triples."""
        triples = list(itertools.product([0, 1, 2], repeat=3))
        for a, b in itertools.product(triples, repeat=2):
            latest = ".".join(str(n) for n in a)
            current = ".".join(str(n) for n in b)
            assert is_newer_version(latest, current) == (a > b)
            assert not (is_newer_version(latest, current) and is_newer_version(current, latest))

    def test_nan_component_never_decides(self):
        """A NaN component compares neither greater nor smaller; the next one decides."""
        assert is_newer_version("1.x.5", "1.2.3") is True
        assert is_newer_version("1.x.1", "1.2.3") is False
        assert is_newer_version("x.y.z", "1.2.3") is False
        assert is_newer_version("1.2.3", "x.y.z") is False


class TestVersionRecord:
    """Test cases for VersionRecord serialization."""

    def test_to_dict_uses_wire_keys(self):
        record = VersionRecord("1.0.0", "1.1.0", update_available=True, timestamp=42)
        assert record.to_dict() == {
            'updateAvailable': True,
            'currentVersion': '1.0.0',
            'latestVersion': '1.1.0',
            'timestamp': 42
        }

    def test_from_dict_requires_current_version(self):
        with pytest.raises(ValueError):
            VersionRecord.from_dict({'latestVersion': '1.0.0'})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ValueError):
            VersionRecord.from_dict(["1.0.0"])


class TestVersionCache:
    """Test cases for VersionCache."""

    def test_read_absent(self, version_cache: VersionCache):
        assert version_cache.read() is None

    def test_initialize_then_read(self, version_cache: VersionCache):
        version_cache.initialize("0.4.0")

        record = version_cache.read()
        assert record is not None
        assert record.update_available is False
        assert record.current_version == "0.4.0"
        assert record.latest_version == "0.4.0"
        assert isinstance(record.timestamp, int)

    def test_initialize_writes_pretty_json(self, version_cache: VersionCache, memory_store: MemoryStore):
        version_cache.initialize("0.4.0")

        data = json.loads(memory_store.content)
        assert set(data) == {'updateAvailable', 'currentVersion', 'latestVersion', 'timestamp'}
        assert '\n  ' in memory_store.content

    def test_record_check_result_update_available(self, version_cache: VersionCache):
        record = version_cache.record_check_result(current="1.2.0", latest="1.3.0")

        assert record.update_available is True
        assert version_cache.read().update_available is True
        assert version_cache.read().latest_version == "1.3.0"

    def test_record_check_result_up_to_date(self, version_cache: VersionCache):
        record = version_cache.record_check_result("1.3.0", "1.3.0")

        assert record.update_available is False
        assert version_cache.read().update_available is False

    def test_record_overwrites_wholesale(self, version_cache: VersionCache):
        version_cache.initialize("1.0.0")
        version_cache.record_check_result("1.0.0", "2.0.0")

        record = version_cache.read()
        assert record.current_version == "1.0.0"
        assert record.latest_version == "2.0.0"

    @pytest.mark.parametrize("content", ["", "not json{", "[]", "{}", '{"currentVersion": 3}'])
    def test_read_unparsable_returns_none(self, content):
        assert VersionCache(MemoryStore(content)).read() is None

    def test_read_store_error_returns_none(self):
        class BrokenStore(MemoryStore):
            def read(self):
                raise OSError("Permission denied")

        assert VersionCache(BrokenStore()).read() is None

    def test_clear(self, version_cache: VersionCache, memory_store: MemoryStore):
        version_cache.initialize("1.0.0")

        assert version_cache.clear() is True
        assert memory_store.content is None
        assert version_cache.clear() is False


class TestTriggerThrottle:
    """Test cases for TriggerThrottle."""

    def test_triggers_when_never_marked(self, throttle: TriggerThrottle):
        assert throttle.last_triggered() is None
        assert throttle.should_trigger(now=1_000_000) is True

    def test_does_not_trigger_within_window(self, throttle: TriggerThrottle):
        throttle.mark(now=1_000_000)

        assert throttle.should_trigger(now=1_000_000 + 30_000) is False
        assert throttle.should_trigger(now=1_000_000 + 60_000) is False

    def test_triggers_after_window(self, throttle: TriggerThrottle):
        throttle.mark(now=1_000_000)

        assert throttle.should_trigger(now=1_000_000 + 60_001) is True

    def test_mark_stores_raw_integer(self):
        store = MemoryStore()
        TriggerThrottle(store).mark(now=1234)

        assert store.content == "1234"

    def test_unparsable_record_triggers(self):
        assert TriggerThrottle(MemoryStore("yesterday")).should_trigger(now=0) is True

    def test_clear(self, throttle: TriggerThrottle):
        throttle.mark(now=1)

        assert throttle.clear() is True
        assert throttle.last_triggered() is None
