from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from edustream.db import get_db, init_db
from edustream.main import app
from edustream.portal import JsonSlotStore, LocalStateAdapter, RemoteStateAdapter
from edustream.settings import Settings

API_BASE = "http://portal.test/api"


@pytest.fixture()
def slots(tmp_path: Path) -> JsonSlotStore:
	return JsonSlotStore(tmp_path / "slots")


@pytest.fixture()
def local_adapter(slots: JsonSlotStore) -> LocalStateAdapter:
	return LocalStateAdapter(slots)


@pytest.fixture()
def portal_settings(tmp_path: Path) -> Settings:
	return Settings(
		_env_file=None,
		gemini_api_key=None,
		api_base_url=API_BASE,
		app_origin=None,
		local_store_dir=str(tmp_path / "slots"),
		demo_mode=False,
	)


@pytest.fixture()
def mock_remote() -> Callable[..., RemoteStateAdapter]:
	"""Build a RemoteStateAdapter whose requests go to ``handler``."""

	def factory(handler: Callable[[httpx.Request], httpx.Response]) -> RemoteStateAdapter:
		transport = httpx.MockTransport(handler)
		return RemoteStateAdapter(httpx.AsyncClient(transport=transport, base_url=API_BASE))

	return factory


@pytest.fixture()
def api_db() -> Iterator[sessionmaker]:
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
	)
	init_db(engine)
	testing_session = sessionmaker(bind=engine, autoflush=False, autocommit=False)

	def override_get_db():
		db = testing_session()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_db] = override_get_db
	try:
		yield testing_session
	finally:
		app.dependency_overrides.pop(get_db, None)
		engine.dispose()


@pytest.fixture()
def api_client(api_db: sessionmaker) -> TestClient:
	return TestClient(app)


@pytest.fixture()
def asgi_remote(api_db: sessionmaker) -> Callable[[], RemoteStateAdapter]:
	"""Build a RemoteStateAdapter wired to the in-process API app."""

	def factory() -> RemoteStateAdapter:
		transport = httpx.ASGITransport(app=app)
		return RemoteStateAdapter(httpx.AsyncClient(transport=transport, base_url=API_BASE))

	return factory
