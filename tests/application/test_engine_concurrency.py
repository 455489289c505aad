"""Substitutes shared between threads."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from understudy import SubstituteEngine
from tests.fakes import UserRepository


def test_calls_from_many_threads_are_all_recorded(engine: SubstituteEngine):
    repository = engine.create(UserRepository)
    workers = 8
    per_worker = 250
    barrier = threading.Barrier(workers)

    def call(worker_id: int) -> None:
        barrier.wait()
        for index in range(per_worker):
            repository.exists(worker_id * per_worker + index)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(call, range(workers)))

    records = engine.invocations_of(repository, "exists")
    assert engine.count_invocations(repository, "exists") == workers * per_worker
    assert sorted(record.arguments[0] for record in records) == list(
        range(workers * per_worker)
    )


def test_configuration_races_with_calls(engine: SubstituteEngine):
    """Calls observe either the old or the new stub, never a torn state."""
    repository = engine.create(UserRepository)
    engine.configure(repository, "count", None, 0)
    done = threading.Event()
    seen: list[int] = []

    def reconfigure() -> None:
        for value in range(1, 300):
            engine.configure(repository, "count", None, value)
        done.set()

    def call() -> None:
        while not done.is_set():
            seen.append(repository.count())

    threads = [threading.Thread(target=reconfigure)] + [
        threading.Thread(target=call) for _ in range(3)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(0 <= value < 300 for value in seen)
    assert repository.count() == 299
    assert engine.count_invocations(repository, "count") == len(seen) + 1


def test_concurrent_creation_shares_one_generated_class(engine: SubstituteEngine):
    with ThreadPoolExecutor(max_workers=6) as pool:
        substitutes = list(pool.map(lambda _: engine.create(UserRepository), range(30)))

    assert len({type(substitute) for substitute in substitutes}) == 1
    assert all(engine.is_substitute(substitute) for substitute in substitutes)
