"""
Persistence adapters for the portal.

``LocalStateAdapter`` keeps the whole AppState in one durable slot (demo /
offline mode). ``RemoteStateAdapter`` talks to the REST API, one request per
mutation. In both modes the adapter that persists a record assigns its id.
"""

from __future__ import annotations

import json
import logging
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol, Tuple

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import BackendUnreachable, HttpError, LocalStoreError, NotFoundError
from ..schemas import AppState, EntityKind, Record, RecordPatch
from ..seed import DEMO_STATE
from ..settings import Settings

logger = logging.getLogger(__name__)

STORAGE_KEY = "edustream_local_db"


class PersistenceMode(str, Enum):
	LOCAL = "local"
	REMOTE = "remote"


class StateAdapter(Protocol):
	mode: PersistenceMode

	async def load(self) -> AppState:
		...

	async def create(self, kind: EntityKind, fields: BaseModel) -> Record:
		...

	async def update(self, kind: EntityKind, current: Record, patch: RecordPatch) -> Record:
		...

	async def delete(self, kind: EntityKind, record: Record) -> None:
		...

	async def commit(self, state: AppState) -> None:
		...

	async def aclose(self) -> None:
		...


class JsonSlotStore:
	"""Durable key-value slots, one JSON file per key."""

	def __init__(self, directory: Path | str) -> None:
		self._directory = Path(directory)

	def _path(self, key: str) -> Path:
		return self._directory / f"{key}.json"

	def read(self, key: str) -> Optional[str]:
		path = self._path(key)
		if not path.exists():
			return None
		return path.read_text(encoding="utf-8")

	def write(self, key: str, text: str) -> None:
		path = self._path(key)
		path.parent.mkdir(parents=True, exist_ok=True)
		tmp_path = path.with_suffix(".tmp")
		tmp_path.write_text(text, encoding="utf-8")
		tmp_path.replace(path)


class LocalStateAdapter:
	mode = PersistenceMode.LOCAL

	def __init__(self, slots: JsonSlotStore, *, key: str = STORAGE_KEY, seed: AppState = DEMO_STATE) -> None:
		self._slots = slots
		self._key = key
		self._seed = seed

	async def load(self) -> AppState:
		try:
			raw = self._slots.read(self._key)
		except (OSError, UnicodeDecodeError) as exc:
			raise LocalStoreError(f"cannot read local slot {self._key}: {exc}") from exc
		if not raw:
			logger.info("local slot %s is empty, seeding demo data", self._key)
			await self.commit(self._seed)
			return self._seed
		try:
			return AppState.model_validate_json(raw)
		except ValidationError as exc:
			raise LocalStoreError(f"local slot {self._key} is corrupt: {exc.error_count()} errors") from exc

	async def create(self, kind: EntityKind, fields: BaseModel) -> Record:
		data = fields.model_dump()
		data["id"] = uuid.uuid4().hex
		return kind.record_type(**data)

	async def update(self, kind: EntityKind, current: Record, patch: RecordPatch) -> Record:
		return current.model_copy(update=patch.changes())

	async def delete(self, kind: EntityKind, record: Record) -> None:
		# Nothing to do until commit rewrites the slot
		return None

	async def commit(self, state: AppState) -> None:
		try:
			self._slots.write(self._key, json.dumps(state.to_wire(), indent=2))
		except OSError as exc:
			raise LocalStoreError(f"cannot write local slot {self._key}: {exc}") from exc

	async def aclose(self) -> None:
		return None


def _error_message(response: httpx.Response) -> str:
	try:
		body = response.json()
	except ValueError:
		return response.text[:200] or response.reason_phrase
	if isinstance(body, dict):
		message = body.get("error") or body.get("detail")
		if message:
			return message if isinstance(message, str) else json.dumps(message)
	return response.reason_phrase


class RemoteStateAdapter:
	mode = PersistenceMode.REMOTE

	def __init__(self, client: httpx.AsyncClient) -> None:
		self._client = client

	@classmethod
	def from_settings(cls, config: Settings) -> "RemoteStateAdapter":
		return cls(httpx.AsyncClient(base_url=config.api_base_url))

	@property
	def client(self) -> httpx.AsyncClient:
		return self._client

	async def load(self) -> AppState:
		data = await self._send("GET", "data")
		try:
			return AppState.model_validate(data)
		except ValidationError as exc:
			raise HttpError(502, f"malformed aggregate from server: {exc.error_count()} errors") from exc

	async def create(self, kind: EntityKind, fields: BaseModel) -> Record:
		data = await self._send("POST", kind.value, json=fields.to_wire())
		return self._parse(kind, data)

	async def update(self, kind: EntityKind, current: Record, patch: RecordPatch) -> Record:
		data = await self._send(
			"PUT",
			f"{kind.value}/{current.id}",
			json=patch.to_wire(),
			target=(kind, current.id),
		)
		return self._parse(kind, data)

	async def delete(self, kind: EntityKind, record: Record) -> None:
		await self._send("DELETE", f"{kind.value}/{record.id}", target=(kind, record.id))

	async def commit(self, state: AppState) -> None:
		# Each mutation was already persisted by its own request
		return None

	async def aclose(self) -> None:
		await self._client.aclose()

	def _parse(self, kind: EntityKind, data: Any) -> Record:
		try:
			return kind.record_type.model_validate(data)
		except ValidationError as exc:
			raise HttpError(502, f"malformed {kind.label} from server: {exc.error_count()} errors") from exc

	async def _send(
		self,
		method: str,
		path: str,
		*,
		json: Any = None,
		target: Optional[Tuple[EntityKind, str]] = None,
	) -> Any:
		try:
			r = await self._client.request(method, path, json=json)
		except httpx.RequestError as exc:
			logger.warning("%s %s failed: %r", method, path, exc)
			raise BackendUnreachable(str(exc) or exc.__class__.__name__) from exc
		if r.status_code == 404 and target is not None:
			raise NotFoundError(target[0].label, target[1])
		if r.is_error:
			raise HttpError(r.status_code, _error_message(r))
		try:
			return r.json()
		except ValueError as exc:
			raise HttpError(r.status_code, "response body was not JSON") from exc
