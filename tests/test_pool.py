# File: tests/test_pool.py
import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List

import pytest
import pytest_asyncio
from aiohttp import web

from api_pool.config import PoolConfig
from api_pool.engine import FetchEngine
from api_pool.errors import InvalidUrlError
from api_pool.models import DecodedValue, FetchOutcome, HttpError, Success
from api_pool.pool import APIPool
from api_pool.report import ResultReporter

from conftest import log_messages


class StubEngine:
    """Returns canned outcomes and records every call."""

    def __init__(self, outcomes: Dict[str, FetchOutcome]) -> None:
        self.outcomes = outcomes
        self.calls: List[List[str]] = []

    def fetch_all(self, endpoints, timeout=None):
        self.calls.append(list(endpoints))
        return {ep: self.outcomes[ep] for ep in dict.fromkeys(endpoints)}


class RecordingReporter(ResultReporter):
    def __init__(self, logger):
        super().__init__(logger, echo=lambda _: None)
        self.reports = []

    def report(self, results):
        self.reports.append(results)
        super().report(results)


@pytest.fixture()
def outcomes():
    return {
        "https://a.example.com": Success(DecodedValue.structured({"a": 1})),
        "https://b.example.com": HttpError(404),
    }


@pytest.fixture()
def pool(pool_config, audit_logger, outcomes):
    return APIPool(
        pool_config,
        logger=audit_logger,
        engine=StubEngine(outcomes),
        reporter=RecordingReporter(audit_logger),
    )


def test_init_is_logged(pool, log_file):
    assert log_messages(log_file, "INFO")[0] == "API pool initialized"


def test_add_endpoint(pool):
    assert pool.add_endpoint("https://a.example.com") is None
    assert pool.get_endpoints() == ["https://a.example.com"]


def test_add_invalid_endpoint(pool, log_file):
    err = pool.add_endpoint("not a url")
    assert isinstance(err, InvalidUrlError)
    assert pool.get_endpoints() == []
    assert "Invalid URL provided: not a url" in log_messages(log_file, "ERROR")


def test_run_fetches_registered_endpoints_and_reports(pool):
    pool.add_endpoint("https://a.example.com")
    pool.add_endpoint("not a url")
    pool.add_endpoint("https://b.example.com")

    results = pool.run()

    assert pool.engine.calls == [["https://a.example.com", "https://b.example.com"]]
    assert list(results) == ["https://a.example.com", "https://b.example.com"]
    assert pool.results is results
    assert pool.reporter.reports == [results]


def test_each_run_is_independent(pool):
    pool.add_endpoint("https://a.example.com")
    first = pool.run()
    pool.add_endpoint("https://b.example.com")
    second = pool.run()

    assert first is not second
    assert list(first) == ["https://a.example.com"]
    assert list(second) == ["https://a.example.com", "https://b.example.com"]


def test_duplicates_yield_one_entry(pool):
    pool.add_endpoint("https://a.example.com")
    pool.add_endpoint("https://a.example.com")
    assert len(pool.get_endpoints()) == 2
    assert list(pool.run()) == ["https://a.example.com"]


def test_run_without_endpoints(pool):
    assert pool.run() == {}


def test_config_endpoints_are_preloaded(tmp_path, audit_logger, log_file):
    config = PoolConfig(
        log_file=tmp_path / "pool.log",
        endpoints=["https://a.example.com", "bogus", "https://b.example.com"],
    )
    pool = APIPool(config, logger=audit_logger, engine=StubEngine({}))

    assert pool.get_endpoints() == ["https://a.example.com", "https://b.example.com"]
    assert "Invalid URL provided: bogus" in log_messages(log_file, "ERROR")


def test_default_engine_follows_config(pool_config, audit_logger):
    config = pool_config.model_copy(update={"max_concurrency": 4, "strict_validation": False})
    pool = APIPool(config, logger=audit_logger)

    assert isinstance(pool.engine, FetchEngine)
    assert pool.engine.timeout == 2.0
    assert pool.engine.max_concurrency == 4
    assert pool.engine.strict_validation is False
    assert pool.engine.logger is audit_logger


def test_run_prints_report(pool_config, audit_logger, outcomes, capsys):
    pool = APIPool(pool_config, logger=audit_logger, engine=StubEngine(outcomes))
    pool.add_endpoint("https://b.example.com")
    pool.run()
    assert capsys.readouterr().out == "Error for https://b.example.com: HTTP status code 404\n"


def test_default_logger_writes_config_log_file(pool_config):
    pool = APIPool(pool_config, engine=StubEngine({}))
    pool.add_endpoint("https://a.example.com")
    lines = pool_config.log_file.read_text(encoding="utf-8").splitlines()
    assert lines[-1].endswith("[INFO] Added endpoint: https://a.example.com")
    for handler in list(pool.logger.handlers):
        pool.logger.removeHandler(handler)
        handler.close()


def test_pools_keep_separate_audit_logs(tmp_path):
    first = APIPool(PoolConfig(log_file=tmp_path / "a.log"), engine=StubEngine({}))
    second = APIPool(PoolConfig(log_file=tmp_path / "b.log"), engine=StubEngine({}))

    first.add_endpoint("https://only-a.example.com")
    second.add_endpoint("https://only-b.example.com")

    assert first.logger is not second.logger
    assert log_messages(tmp_path / "a.log", "INFO") == [
        "API pool initialized",
        "Added endpoint: https://only-a.example.com",
    ]
    assert log_messages(tmp_path / "b.log", "INFO") == [
        "API pool initialized",
        "Added endpoint: https://only-b.example.com",
    ]
    for pool in (first, second):
        for handler in list(pool.logger.handlers):
            pool.logger.removeHandler(handler)
            handler.close()


class ReentrantEngine:
    """Tries to touch the pool from inside a run and records what happened."""

    def __init__(self) -> None:
        self.pool = None
        self.errors: List[str] = []

    def fetch_all(self, endpoints, timeout=None):
        for action in (self.pool.run, lambda: self.pool.add_endpoint("https://late.example.com")):
            try:
                action()
            except RuntimeError as exc:
                self.errors.append(str(exc))
        return {}


def test_pool_refuses_reentry_during_run(pool_config, audit_logger):
    engine = ReentrantEngine()
    pool = APIPool(pool_config, logger=audit_logger, engine=engine)
    engine.pool = pool

    assert pool.run() == {}
    assert engine.errors == [
        "APIPool.run() is already in progress",
        "Cannot add endpoints while a run is in progress",
    ]
    assert pool.get_endpoints() == []
    # the lock is released afterwards
    assert pool.add_endpoint("https://a.example.com") is None


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def json_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_json(_):
        return web.Response(text='{"a":1}', content_type="application/json")

    async def handle_missing(_):
        return web.Response(status=404, text="gone")

    app.router.add_get("/json", handle_json)
    app.router.add_get("/missing", handle_missing)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_run_against_live_server(pool_config, audit_logger, log_file, json_server, capsys):
    pool = APIPool(pool_config, logger=audit_logger)
    ok = f"{json_server}/json"
    missing = f"{json_server}/missing"
    pool.add_endpoint(ok)
    pool.add_endpoint(missing)

    # run() blocks on its own event loop, so it goes to a worker thread
    results = await asyncio.to_thread(pool.run)

    assert results == {
        ok: Success(DecodedValue.structured({"a": 1})),
        missing: HttpError(404),
    }
    assert capsys.readouterr().out == (
        f'Response for {ok}: {{\n    "a": 1\n}}\n'
        f"Error for {missing}: HTTP status code 404\n"
    )
    errors = log_messages(log_file, "ERROR")
    assert f"Error fetching data from {missing}: HTTP status code 404" in errors
    assert f"Error for {missing}: HTTP status code 404" in errors
    assert f"Successfully fetched data from {ok}" in log_messages(log_file, "INFO")
