from __future__ import annotations


class PortalError(Exception):
	"""Base class for errors raised by the portal data-access layer."""


class BackendUnreachable(PortalError):
	"""The remote store could not be contacted at all (connect/transport failure)."""


class HttpError(PortalError):
	"""The remote store answered but rejected the request."""

	def __init__(self, status: int, message: str) -> None:
		super().__init__(f"HTTP {status}: {message}")
		self.status = status
		self.message = message


class NotFoundError(PortalError):
	def __init__(self, kind: str, record_id: str) -> None:
		super().__init__(f"{kind} record {record_id!r} not found")
		self.kind = kind
		self.record_id = record_id


class AiGenerationUnavailable(PortalError):
	"""Raised by text generators; always recovered by TextAssist."""


class ConnectivityStateError(PortalError):
	pass


class LocalStoreError(PortalError):
	"""The local slot could not be read, parsed or written."""
