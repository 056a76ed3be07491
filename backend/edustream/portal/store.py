from __future__ import annotations

from ..schemas import AppState


class EntityStore:
	"""Holds the current AppState snapshot. Writers replace it whole."""

	def __init__(self, state: AppState | None = None) -> None:
		self._state = state or AppState()

	@property
	def snapshot(self) -> AppState:
		return self._state

	def replace(self, state: AppState) -> None:
		self._state = state
