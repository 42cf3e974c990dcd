"""Tests for thread safety of Container."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import pytest

from scopewire.container import Container
from scopewire.exceptions import CircularDependencyError
from scopewire.providers import Lifetime


class ServiceA:
    pass


class ServiceB:
    def __init__(self, a: ServiceA) -> None:
        self.a = a


class SlowInit:
    instance_count = 0
    _count_lock = threading.Lock()

    def __init__(self) -> None:
        time.sleep(0.01)
        with SlowInit._count_lock:
            SlowInit.instance_count += 1


@pytest.fixture(autouse=True)
def _reset_slow_init() -> None:
    SlowInit.instance_count = 0


def _resolve_concurrently(container: Container, contract: object, workers: int) -> list[object]:
    barrier = threading.Barrier(workers)

    def resolve() -> object:
        barrier.wait()
        return container.resolve(contract)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(resolve) for _ in range(workers)]
        return [future.result() for future in as_completed(futures)]


class TestConcurrentResolution:
    def test_concurrent_singleton_resolution_constructs_once(self, container: Container) -> None:
        """N concurrent first-time resolutions invoke the factory once."""
        container.register(SlowInit, SlowInit, lifetime=Lifetime.SINGLETON)

        results = _resolve_concurrently(container, SlowInit, workers=20)

        assert len(results) == 20
        assert all(result is results[0] for result in results)
        assert SlowInit.instance_count == 1

    def test_concurrent_scoped_resolution_constructs_once_per_scope(self, container: Container) -> None:
        container.register(SlowInit, SlowInit, lifetime=Lifetime.SCOPED)
        scope = container.create_scope()

        results = _resolve_concurrently(scope, SlowInit, workers=10)

        assert all(result is results[0] for result in results)
        assert SlowInit.instance_count == 1

    def test_concurrent_singleton_from_sibling_scopes(self, container: Container) -> None:
        container.register(SlowInit, SlowInit, lifetime=Lifetime.SINGLETON)
        scopes = [container.create_scope() for _ in range(10)]
        barrier = threading.Barrier(len(scopes))

        def resolve_in(scope: Container) -> object:
            barrier.wait()
            return scope.resolve(SlowInit)

        with ThreadPoolExecutor(max_workers=len(scopes)) as executor:
            results = list(executor.map(resolve_in, scopes))

        assert all(result is results[0] for result in results)
        assert SlowInit.instance_count == 1

    def test_concurrent_transient_resolution_different_instances(self, container: Container) -> None:
        """Concurrent transient resolution creates different instances."""
        container.register(ServiceA, ServiceA)

        results = _resolve_concurrently(container, ServiceA, workers=10)

        assert len({id(result) for result in results}) == 10

    def test_many_concurrent_graph_resolutions(self, container: Container) -> None:
        """100 threads resolving a graph with a shared singleton."""
        container.register(ServiceA, ServiceA, lifetime=Lifetime.SINGLETON)
        container.register(ServiceB, ServiceB, [ServiceA])

        with ThreadPoolExecutor(max_workers=16) as executor:
            futures = [executor.submit(container.resolve, ServiceB) for _ in range(100)]
            results = [future.result() for future in as_completed(futures)]

        shared = container.resolve(ServiceA)
        assert all(isinstance(result, ServiceB) for result in results)
        assert all(result.a is shared for result in results)


class TestConcurrentRegistration:
    def test_concurrent_registration_no_corruption(self) -> None:
        """Concurrent registration doesn't corrupt registry."""
        container = Container()
        errors: list[Exception] = []

        def register_service(i: int) -> None:
            try:
                container.register(f"service.{i}", lambda i=i: i)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=register_service, args=(i,)) for i in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(container.registry) == 50
        assert container.resolve("service.7") == 7


class TestCircularDetectionThreadSafety:
    def test_circular_detection_thread_isolated(self) -> None:
        """Each resolve call has its own resolution stack."""
        container = Container()
        container.register("X", lambda y: y, ["Y"])
        container.register("Y", lambda x: x, ["X"])
        circular_errors: list[CircularDependencyError] = []
        unexpected_errors: list[Exception] = []

        def resolve_circular() -> None:
            try:
                container.resolve("X")
            except CircularDependencyError as e:
                circular_errors.append(e)
            except Exception as e:
                unexpected_errors.append(e)

        threads = [threading.Thread(target=resolve_circular) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not unexpected_errors
        assert len(circular_errors) == 10
        assert all(error.cycle == ["X", "Y", "X"] for error in circular_errors)

    def test_no_false_cycles_between_concurrent_resolutions(self) -> None:
        """Two threads resolving the same contract never see each other's stack."""
        container = Container()
        entered = threading.Event()
        release = threading.Event()

        def slow_leaf() -> str:
            entered.set()
            release.wait(timeout=5)
            return "leaf"

        container.register("leaf", slow_leaf)
        container.register("branch", lambda leaf: f"branch({leaf})", ["leaf"])

        with ThreadPoolExecutor(max_workers=2) as executor:
            first = executor.submit(container.resolve, "branch")
            entered.wait(timeout=5)
            second = executor.submit(container.resolve, "branch")
            release.set()

            assert first.result() == "branch(leaf)"
            assert second.result() == "branch(leaf)"

    def test_cross_singleton_construction_does_not_deadlock(self) -> None:
        """Singletons depending on each other's dependencies resolve from many threads."""
        container = Container()
        container.register("db", lambda: "db", lifetime=Lifetime.SINGLETON)
        container.register("cache", lambda db: f"cache({db})", ["db"], Lifetime.SINGLETON)
        container.register("users", lambda db, cache: (db, cache), ["db", "cache"], Lifetime.SINGLETON)
        container.register("orders", lambda cache, db: (cache, db), ["cache", "db"], Lifetime.SINGLETON)

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [executor.submit(container.resolve, name) for name in ["users", "orders"] * 20]
            results = [future.result(timeout=5) for future in futures]

        assert results[0] is container.resolve("users")
        assert results[1] is container.resolve("orders")
