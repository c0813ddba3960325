"""
Test 2: Enumeration (core.py)

Tests iterate_libraries, list_libraries, for_each_library, count_libraries,
library_exists and get_version.
"""

import pytest

from librarium import LibraryEntry


NAMES = ["LibZeta", "LibAlpha", "LibMu", "AceLib", "libLower"]


@pytest.fixture
def populated(registry):
    for i, name in enumerate(NAMES, start=1):
        registry.new_library(name, i)
    return registry


# ============================================================================
# iterate_libraries
# ============================================================================

class TestIterateLibraries:

    def test_yields_every_pair_once(self, populated):
        pairs = list(populated.iterate_libraries())
        assert sorted(name for name, _ in pairs) == sorted(NAMES)
        assert len(pairs) == len(NAMES)

    def test_sorted(self, populated):
        names = [name for name, _ in populated.iterate_libraries(sorted=True)]
        assert names == sorted(NAMES)
        assert all(a < b for a, b in zip(names, names[1:]))

    def test_pairs_carry_payloads(self, populated):
        expected = {name: populated.get_library(name)[0] for name in NAMES}
        for name, payload in populated.iterate_libraries():
            assert payload is expected[name]

    def test_restartable(self, populated):
        first = list(populated.iterate_libraries(sorted=True))
        second = list(populated.iterate_libraries(sorted=True))
        assert first == second

    def test_mutation_during_iteration(self, populated):
        seen = []
        for name, _ in populated.iterate_libraries(sorted=True):
            seen.append(name)
            populated.remove_library(name)
        assert seen == sorted(NAMES)
        assert populated.count_libraries() == 0

    def test_empty(self, registry):
        assert list(registry.iterate_libraries()) == []


# ============================================================================
# list_libraries
# ============================================================================

class TestListLibraries:

    def test_sorted_entries(self, populated):
        entries = populated.list_libraries(sorted=True)
        assert [e.name for e in entries] == sorted(NAMES)
        assert all(isinstance(e, LibraryEntry) for e in entries)

    def test_entries_include_version(self, populated):
        versions = {e.name: e.version for e in populated.list_libraries()}
        assert versions == {name: i for i, name in enumerate(NAMES, start=1)}

    def test_unsorted_same_multiset(self, populated):
        unsorted = populated.list_libraries()
        ordered = populated.list_libraries(sorted=True)
        key = lambda e: e.name
        assert sorted(unsorted, key=key) == sorted(ordered, key=key)

    def test_entry_to_dict(self, registry):
        payload, _ = registry.new_library("LibA", 2)
        entry = registry.list_libraries()[0]
        assert entry.to_dict() == {"name": "LibA", "payload": payload, "version": 2}


# ============================================================================
# for_each_library
# ============================================================================

class TestForEachLibrary:

    def test_visits_all(self, populated):
        visited = {}

        def visitor(name, payload, version):
            visited[name] = version

        populated.for_each_library(visitor)
        assert visited == {name: i for i, name in enumerate(NAMES, start=1)}

    def test_visitor_may_use_registry(self, populated):
        def visitor(name, payload, version):
            populated.update_library(name, version + 10)

        populated.for_each_library(visitor)
        assert populated.get_version("LibZeta") == 11

    def test_visitor_exception_propagates(self, populated):
        def visitor(name, payload, version):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            populated.for_each_library(visitor)


# ============================================================================
# Counts and pure lookups
# ============================================================================

class TestLookups:

    def test_count(self, populated):
        assert populated.count_libraries() == len(NAMES)
        populated.remove_library("LibMu")
        assert populated.count_libraries() == len(NAMES) - 1

    def test_exists(self, populated):
        assert populated.library_exists("LibAlpha")
        assert not populated.library_exists("LibBeta")
        assert not populated.library_exists(None)

    def test_get_version(self, populated):
        assert populated.get_version("LibMu") == 3
        assert populated.get_version("LibBeta") is None
        assert populated.get_version(["not", "hashable"]) is None
