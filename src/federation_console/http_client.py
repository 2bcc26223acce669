from __future__ import annotations

import json
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ConsoleConfig
from .error_mapper import map_error
from .exceptions import RequestCancelledError, TransportError

TRACE_HEADER = "X-Trace-ID"
TRACE_HEADER_ALIASES = (TRACE_HEADER, "X-Trace-Id", "x-trace-id")

CancelCheck = Callable[[], bool]


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def absorb(self, headers: Mapping[str, str], payload: object = None) -> None:
        if isinstance(payload, Mapping):
            from_payload = payload.get("trace_id")
            if isinstance(from_payload, str) and from_payload:
                self.trace_id = from_payload
                return
        for key in TRACE_HEADER_ALIASES:
            trace_id = headers.get(key)
            if trace_id:
                self.trace_id = trace_id
                return


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ConsoleConfig
    session: requests.Session | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry_mutation: bool = False,
        module: str = "unknown",
        operation: str = "unknown",
        cancel_check: CancelCheck | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        response, trace = self._send(
            method,
            path,
            accept="application/json",
            headers=headers,
            json_body=json_body,
            params=params,
            retry_mutation=retry_mutation,
            module=module,
            operation=operation,
            cancel_check=cancel_check,
        )
        if not response.content:
            return None
        parsed = response.json()
        trace.absorb(response.headers, parsed)
        return parsed

    def request_bytes(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "download",
    ) -> tuple[bytes, str | None]:
        response, _ = self._send(
            "GET",
            path,
            accept="*/*",
            headers=headers,
            params=params,
            module=module,
            operation=operation,
        )
        return response.content, response.headers.get("Content-Type")

    def _send(
        self,
        method: str,
        path: str,
        *,
        accept: str,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry_mutation: bool = False,
        module: str,
        operation: str,
        cancel_check: CancelCheck | None = None,
    ) -> tuple[requests.Response, TraceContext]:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        trace = TraceContext()
        request_headers = {"Accept": accept, TRACE_HEADER: trace.ensure()}
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        url = self._build_url(path)
        if cancel_check and cancel_check():
            raise _cancelled("Request cancelled before dispatch", trace.trace_id)

        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1
        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "error", trace.trace_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=trace.trace_id,
                        status_code=0,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            if cancel_check and cancel_check():
                raise _cancelled("Request cancelled between retries", trace.trace_id)
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        trace.absorb(response.headers)
        if cancel_check and cancel_check():
            self._record_operation(module, operation, started, "cancelled", trace.trace_id)
            raise _cancelled("Request superseded while in flight", trace.trace_id)

        if response.ok:
            self._record_operation(module, operation, started, "success", trace.trace_id)
            return response, trace

        payload: object
        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError):
            payload = {"message": response.text}
        trace.absorb(response.headers, payload)
        self._record_operation(module, operation, started, "error", trace.trace_id)
        raise map_error(response.status_code, payload if isinstance(payload, dict) else None, trace.trace_id)

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )


def _cancelled(message: str, trace_id: str | None) -> RequestCancelledError:
    return RequestCancelledError(
        code="REQUEST_CANCELLED",
        message=message,
        details={"type": "superseded"},
        trace_id=trace_id,
        status_code=0,
    )
