"""
Test 11: Concurrency (core.py)

Hammers one registry from several threads and checks the stores stay
consistent.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from librarium import LibraryCallbacks, LibraryRegistry


def test_concurrent_new_library_keeps_max(registry):
    versions = list(range(1, 201))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda v: registry.new_library("LibShared", v), versions))

    assert registry.get_version("LibShared") == 200
    payloads = {id(payload) for payload, _ in results if payload is not None}
    assert len(payloads) == 1


def test_concurrent_distinct_names(registry):
    def load(i):
        registry.new_library(f"Lib{i}", i)
        registry.register_dependency(f"Lib{i}", "LibBase", 1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(load, range(100)))

    assert registry.count_libraries() == 100
    assert len(registry.dependents_of("LibBase")) == 100


def test_iterate_while_mutating(registry):
    for i in range(50):
        registry.new_library(f"Lib{i}", 1)

    stop = threading.Event()

    def churn():
        i = 0
        while not stop.is_set():
            registry.new_library(f"Tmp{i % 10}", 1)
            registry.remove_library(f"Tmp{i % 10}")
            i += 1

    worker = threading.Thread(target=churn)
    worker.start()
    try:
        for _ in range(20):
            names = [name for name, _ in registry.iterate_libraries(sorted=True)]
            assert {f"Lib{i}" for i in range(50)} <= set(names)
    finally:
        stop.set()
        worker.join()


def test_notifier_reentry_from_other_thread():
    callbacks = LibraryCallbacks()
    registry = LibraryRegistry(notifier=callbacks)
    seen = []

    def on_remove(name, payload, previous_version):
        # Runs after the registry lock is released, so another thread can write
        t = threading.Thread(target=registry.new_library, args=(name, previous_version + 1))
        t.start()
        t.join(timeout=5)
        seen.append(registry.get_version(name))

    callbacks.register_callback("OnLibraryRemove", on_remove)
    registry.new_library("LibFoo", 1)
    registry.remove_library("LibFoo")
    assert seen == [2]
