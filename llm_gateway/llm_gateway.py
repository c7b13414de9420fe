from __future__ import annotations  # Chat-completion gateway for the generation collaborators

import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute


logger = logging.getLogger(__name__)


_ROUTE_LOCKS: Dict[str, threading.Lock] = {}
_ROUTE_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Subset of httpx.Client used by the gateway
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Subset of httpx.Response used by the gateway
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...


class LlmGatewayError(RuntimeError):  # Transport, status or validation failure
    pass


T = TypeVar("T", bound=BaseModel)


def call(
    prompt: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    system: str = "",
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:  # Single-prompt convenience wrapper
    messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": prompt})
    return chat(messages, schema, cfg=cfg, client=client, options=options)


def chat(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:
    """Send ``messages`` to the route and parse the reply into ``schema``.

    Replies that fail schema validation are retried up to
    ``cfg.max_retries`` times with the validation error fed back to the
    model. Transport errors and HTTP error statuses are not retried.
    """

    if cfg.sequential:
        with _lock_for(cfg):
            return _complete(messages, schema, cfg, client, options)
    return _complete(messages, schema, cfg, client, options)


def as_model(route: LlmRoute, schema: Type[BaseModel]) -> Callable[..., Dict[str, Any]]:  # Registry-compatible callable
    def _invoke(*, prompt: str, system: str = "", **options: Any) -> Dict[str, Any]:
        result = call(prompt, schema, cfg=route, system=system, options=options or None)
        return result.model_dump(by_alias=True)

    return _invoke


def _complete(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    cfg: LlmRoute,
    client: Optional[HttpClient],
    options: Optional[Dict[str, Any]],
) -> T:
    conversation = _with_schema_prompt(_normalize_messages(messages), schema, cfg.enforce_json)
    attempts = cfg.max_retries + 1
    url = f"{cfg.base_url}{cfg.endpoint}"
    last_error: Optional[Exception] = None
    logger.info("LLM request start route=%s model=%s attempts=%d", cfg.name, cfg.model, attempts)
    for attempt in range(1, attempts + 1):
        turn = list(conversation)
        if last_error is not None:
            turn.append({"role": "system", "content": _retry_hint(str(last_error), cfg.enforce_json)})
        data = _send(url, _payload(cfg, turn, options), _headers(cfg), cfg.timeout_s, client)
        content = _extract_content(data)
        try:
            parsed = _validate(schema, content)
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("LLM output validation failed route=%s attempt=%d/%d: %s", cfg.name, attempt, attempts, exc)
            last_error = exc
            continue
        logger.info("LLM request done route=%s model=%s attempt=%d", cfg.name, cfg.model, attempt)
        return parsed
    raise LlmGatewayError("LLM output validation failed") from last_error


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
    with _ROUTE_LOCKS_GUARD:
        return _ROUTE_LOCKS.setdefault(key, threading.Lock())


def _with_schema_prompt(messages: list[Dict[str, str]], schema: Type[BaseModel], enforce_json: bool) -> list[Dict[str, str]]:
    if not enforce_json:
        return messages
    schema_json = json.dumps(schema.model_json_schema(), indent=2)
    instruction = {"role": "system", "content": "Reply with a single JSON object matching this schema:\n" + schema_json}
    return [instruction, *messages]


def _payload(cfg: LlmRoute, messages: list[Dict[str, str]], options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"model": cfg.model, "messages": messages}
    if options:
        payload.update(options)
    if cfg.response_format:
        payload["response_format"] = {"type": cfg.response_format}
    return payload


def _headers(cfg: LlmRoute) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    api_key = os.getenv(cfg.api_key_env) if cfg.api_key_env else None
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


def _send(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Any:
    try:
        if client is not None:
            response = client.post(url, json=payload, headers=headers, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as http_client:
                response = http_client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("LLM transport failure: %s", exc)
        raise LlmGatewayError("LLM transport failed") from exc
    if response.status_code >= 400:
        logger.error("LLM error status: %s", response.status_code)
        raise LlmGatewayError(f"LLM returned status {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        logger.error("Invalid JSON payload from LLM: %s", exc)
        raise LlmGatewayError("LLM payload was not JSON") from exc


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:
    normalized: list[Dict[str, str]] = []
    for item in messages:
        role = str(item.get("role", "")).strip()
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": str(item.get("content", ""))})
    return normalized


def _extract_content(data: Any) -> str:  # OpenAI-compatible choices[0].message.content
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")


def _validate(schema: Type[T], content: str) -> T:
    return schema.model_validate_json(_strip_code_fences(content))


def _strip_code_fences(content: str) -> str:  # Models often wrap JSON in ```json fences
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _retry_hint(error_text: str, enforce_json: bool) -> str:
    reason = error_text.splitlines()[0].strip() if error_text else ""
    if len(reason) > 200:
        reason = reason[:197] + "..."
    base = "The previous reply failed validation."
    if reason:
        base += f" Reason: {reason}."
    if enforce_json:
        return base + " Return a single JSON object that matches the schema."
    return base + " Follow the requested format precisely."
