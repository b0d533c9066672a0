"""Typed parameter object for session bootstrap.

Purpose
-------
Carry the settings needed to open an authenticated session to the remote
management endpoint (host, port, credentials, transport selection). The
factory and the CLI pass this object instead of long argument lists.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Failure modes & side effects
----------------------------
- Pure data container: no I/O. ``pydantic.ValidationError`` is raised for
  out-of-range ports, unknown protocols or wrongly typed values.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


class ConnectionParams(BaseModel):
    """Session bootstrap parameters.

    Attributes
    ----------
    transport:
        Transport key understood by ``SessionFactory`` (``"jolokia"`` or ``"mock"``).
    host, port:
        Management endpoint location.
    username, password:
        Credentials for the management endpoint (HTTP basic auth for Jolokia).
    protocol:
        ``"http"`` or ``"https"``.
    base_path:
        Path of the bridge agent on the server (``/jolokia`` by default).
    verify_tls:
        Verify server certificates when ``protocol`` is ``https``.
    timeout_seconds:
        Optional per-request timeout override; defaults come from
        :func:`realm_providers.base.timeouts.get_timeout_config`.
    headers:
        Static HTTP headers added to every request.
    extra:
        Transport-specific settings (e.g. ``fixture`` for the mock transport).
    """

    transport: str = "jolokia"
    host: str = "localhost"
    port: int = Field(default=7001, ge=1, le=65535)
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    protocol: Literal["http", "https"] = "http"
    base_path: str = "/jolokia"
    verify_tls: bool = True
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    headers: Mapping[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("transport")
    @classmethod
    def _normalize_transport(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, v: str) -> str:
        v = (v or "").strip()
        if not v.startswith("/"):
            v = "/" + v
        return v.rstrip("/") or "/"

    @property
    def base_url(self) -> str:
        """Return the endpoint URL, e.g. ``http://localhost:7001/jolokia``."""
        path = "" if self.base_path == "/" else self.base_path
        return f"{self.protocol}://{self.host}:{self.port}{path}"


__all__ = ["ConnectionParams"]
