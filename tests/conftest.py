"""Pytest fixtures for PayForeman tests."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from payforeman.api.app import create_app
from payforeman.calculators.clock import FixedClock
from payforeman.config import Settings, UpstreamSettings
from payforeman.database import Database
from payforeman.models import Base, Invoice, Project
from payforeman.services.lien_rule_seeder import seed_lien_rules
from payforeman.upstream.llm import LlmClient

TODAY = date(2026, 3, 16)
USER_ID = UUID("00000000-0000-0000-0000-0000000000a1")
OTHER_USER_ID = UUID("00000000-0000-0000-0000-0000000000b2")


class FakePlatform:
    """Stands in for the hosted LLM service behind an httpx.MockTransport.

    Routes are registered per test as (method, path) -> handler returning
    an httpx.Response; every request is recorded for inspection.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: httpx.Response) -> None:
        """Serve the given responses in order, repeating the last one."""
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            template = queue.pop(0) if len(queue) > 1 else queue[0]
            return httpx.Response(
                template.status_code,
                headers=template.headers,
                content=template.content,
            )

        self.routes[(method, path)] = handler

    def json_body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)


@pytest.fixture
def upstream_settings() -> UpstreamSettings:
    return UpstreamSettings(
        llm_api_url="https://llm.test",
        tenant_id="tenant-1",
        project_id="project-1",
        api_key="key-1",
        secret_api_key="secret-1",
        timeout_seconds=5.0,
        read_retry_attempts=3,
        retry_backoff_seconds=0.0,
    )


@pytest.fixture
def test_settings(tmp_path, upstream_settings) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'payforeman.db'}",
        host="127.0.0.1",
        port=3001,
        debug=False,
        log_level="DEBUG",
        upstream=upstream_settings,
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """File-backed SQLite database with tables created and rules seeded."""
    database = Database.from_url(test_settings.database_url)
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with database.session() as session:
        await seed_lien_rules(session)

    yield database

    await database.dispose()


@pytest_asyncio.fixture
async def session(database) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest_asyncio.fixture
async def llm_client(upstream_settings, platform) -> AsyncGenerator[LlmClient, None]:
    client = LlmClient.from_settings(
        upstream_settings, transport=httpx.MockTransport(platform)
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(
    test_settings, database, llm_client, clock
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, sharing the test database and clock."""
    app = create_app(
        test_settings, database=database, llm_client=llm_client, clock=clock
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def project(session) -> Project:
    """A private project with both work dates set."""
    project = Project(
        user_id=USER_ID,
        project_name="Riverside Lofts",
        general_contractor="Summit Builders",
        project_type="private",
        work_start_date=date(2026, 3, 1),
        work_end_date=date(2026, 6, 30),
    )
    session.add(project)
    await session.commit()
    return project


@pytest.fixture
def make_invoice(session) -> Callable[..., Any]:
    """Factory for persisted invoices with sensible defaults."""

    async def _make(**overrides: Any) -> Invoice:
        fields: dict[str, Any] = {
            "id": uuid4(),
            "user_id": USER_ID,
            "invoice_number": f"INV-{uuid4().hex[:6]}",
            "invoice_date": date(2026, 2, 1),
            "due_date": date(2026, 4, 1),
            "amount": Decimal("1000.00"),
            "retainage_percent": Decimal("0"),
            "retainage_amount": Decimal("0"),
            "amount_paid": Decimal("0"),
            "payment_status": "pending",
        }
        fields.update(overrides)
        invoice = Invoice(**fields)
        session.add(invoice)
        await session.commit()
        return invoice

    return _make
