"""
Schema canônico de definição de workflow (v1).

Valida a forma serializada (dicts vindos de JSON/YAML) e materializa os
Steps tipados de `triggerflow.core.pipeline.step`. Toda rejeição de tipo
de Step ou de operação desconhecida acontece aqui, em tempo de
validação, nunca durante a execução.

Esta implementação evita dependências externas de validação para manter
o core leve; as mensagens de erro carregam a localização do campo
(`steps[1].ops[0].op`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from triggerflow.core.config.settings import EngineSettings
from triggerflow.core.exceptions import StepValidationError
from triggerflow.core.pipeline.step import (
    CtxBody,
    CustomBody,
    DefaultOp,
    FilterCondition,
    FilterStep,
    HttpBody,
    HttpRequestStep,
    LogStep,
    PickOp,
    Step,
    TemplateOp,
    TransformOp,
    TransformStep,
)
from triggerflow.core.pipeline.types import (
    BodyMode,
    FilterOperator,
    HttpMethod,
    StepKind,
    TransformOperator,
)
from triggerflow.core.templating import MISSING


_STEP_KINDS = [k.value for k in StepKind]
_FILTER_OPS = [o.value for o in FilterOperator]
_TRANSFORM_OPS = [o.value for o in TransformOperator]
_HTTP_METHODS = [m.value for m in HttpMethod]
_BODY_MODES = [m.value for m in BodyMode]


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _expect(cond: bool, msg: str, *, where: str, received: Any = MISSING) -> None:
    if not cond:
        details: Dict[str, Any] = {"path": where}
        if received is not MISSING:
            details["received"] = received
        raise StepValidationError(f"{where}: {msg}", details=details)


@dataclass(frozen=True)
class WorkflowDefinition:
    """Workflow validado: nome, flag de habilitação e Steps tipados."""

    name: str
    steps: Tuple[Step, ...]
    enabled: bool = True
    id: Optional[str] = None
    trigger_path: Optional[str] = None


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _parse_filter(raw: Dict[str, Any], where: str) -> FilterStep:
    conditions = raw.get("conditions")
    _expect(isinstance(conditions, list), "conditions must be a list", where=f"{where}.conditions")

    parsed: List[FilterCondition] = []
    for i, c in enumerate(conditions):
        at = f"{where}.conditions[{i}]"
        _expect(isinstance(c, dict), "condition must be a mapping", where=at)
        _expect(_is_non_empty_str(c.get("path")), "path is required", where=f"{at}.path")
        op = c.get("op")
        _expect(op in _FILTER_OPS, f"op must be one of {_FILTER_OPS}", where=f"{at}.op", received=op)
        # condição sem `value` compara contra ausência (MISSING), não contra null
        parsed.append(FilterCondition(path=c["path"], op=FilterOperator(op), value=c.get("value", MISSING)))

    return FilterStep(conditions=tuple(parsed))


def _parse_transform_op(raw: Any, where: str) -> TransformOp:
    _expect(isinstance(raw, dict), "operation must be a mapping", where=where)
    op = raw.get("op")
    _expect(op in _TRANSFORM_OPS, f"op must be one of {_TRANSFORM_OPS}", where=f"{where}.op", received=op)

    if op == TransformOperator.DEFAULT.value:
        _expect(_is_non_empty_str(raw.get("path")), "path is required", where=f"{where}.path")
        return DefaultOp(path=raw["path"], value=raw.get("value"))

    if op == TransformOperator.TEMPLATE.value:
        _expect(_is_non_empty_str(raw.get("to")), "to is required", where=f"{where}.to")
        _expect(isinstance(raw.get("template"), str), "template must be a string", where=f"{where}.template")
        return TemplateOp(to=raw["to"], template=raw["template"])

    paths = raw.get("paths")
    _expect(isinstance(paths, list), "paths must be a list", where=f"{where}.paths")
    for i, p in enumerate(paths):
        _expect(_is_non_empty_str(p), "path must be a non-empty string", where=f"{where}.paths[{i}]")
    return PickOp(paths=tuple(paths))


def _parse_transform(raw: Dict[str, Any], where: str) -> TransformStep:
    ops = raw.get("ops")
    _expect(isinstance(ops, list), "ops must be a list", where=f"{where}.ops")
    return TransformStep(ops=tuple(_parse_transform_op(op, f"{where}.ops[{i}]") for i, op in enumerate(ops)))


def _parse_body(raw: Any, where: str) -> Optional[HttpBody]:
    if raw is None:
        return None
    _expect(isinstance(raw, dict), "body must be a mapping", where=where)
    mode = raw.get("mode")
    _expect(mode in _BODY_MODES, f"mode must be one of {_BODY_MODES}", where=f"{where}.mode", received=mode)
    if mode == BodyMode.CTX.value:
        return CtxBody()
    value = raw.get("value")
    _expect(isinstance(value, dict), "value must be a mapping", where=f"{where}.value")
    return CustomBody(value=value)


def _parse_http(raw: Dict[str, Any], where: str, settings: EngineSettings) -> HttpRequestStep:
    method = raw.get("method")
    _expect(method in _HTTP_METHODS, f"method must be one of {_HTTP_METHODS}", where=f"{where}.method", received=method)

    url = raw.get("url")
    _expect(_is_non_empty_str(url), "url is required", where=f"{where}.url")
    parts = urlsplit(url)
    _expect(parts.scheme in {"http", "https"} and bool(parts.netloc), "url must be an absolute http(s) URL", where=f"{where}.url", received=url)

    headers = raw.get("headers") or {}
    _expect(isinstance(headers, dict), "headers must be a mapping", where=f"{where}.headers")
    for k, v in headers.items():
        _expect(isinstance(k, str) and isinstance(v, str), "header names and values must be strings", where=f"{where}.headers.{k}")

    timeout_ms = raw.get("timeoutMs", settings.default_timeout_ms)
    _expect(_is_number(timeout_ms) and timeout_ms > 0, "timeoutMs must be a positive number", where=f"{where}.timeoutMs", received=timeout_ms)

    retries = raw.get("retries", settings.default_retries)
    _expect(_is_number(retries) and retries >= 0 and int(retries) == retries, "retries must be an integer >= 0", where=f"{where}.retries", received=retries)

    return HttpRequestStep(
        method=HttpMethod(method),
        url=url,
        headers=dict(headers),
        body=_parse_body(raw.get("body"), f"{where}.body"),
        timeout_ms=timeout_ms,
        retries=int(retries),
    )


def _parse_log(raw: Dict[str, Any], where: str) -> LogStep:
    _expect(isinstance(raw.get("message"), str), "message must be a string", where=f"{where}.message")
    return LogStep(message=raw["message"])


def parse_step(raw: Any, *, settings: Optional[EngineSettings] = None, where: str = "step") -> Step:
    """Valida e materializa um único Step serializado."""
    settings = settings or EngineSettings()
    _expect(isinstance(raw, dict), "step must be a mapping", where=where)

    kind = raw.get("type")
    _expect(kind in _STEP_KINDS, f"type must be one of {_STEP_KINDS}", where=f"{where}.type", received=kind)

    if kind == StepKind.FILTER.value:
        return _parse_filter(raw, where)
    if kind == StepKind.TRANSFORM.value:
        return _parse_transform(raw, where)
    if kind == StepKind.HTTP_REQUEST.value:
        return _parse_http(raw, where, settings)
    return _parse_log(raw, where)


def parse_steps(raw: Any, *, settings: Optional[EngineSettings] = None) -> Tuple[Step, ...]:
    """Valida uma lista de Steps serializados, preservando a ordem."""
    _expect(isinstance(raw, list), "steps must be a list", where="steps")
    return tuple(parse_step(s, settings=settings, where=f"steps[{i}]") for i, s in enumerate(raw))


def parse_workflow(raw: Any, *, settings: Optional[EngineSettings] = None) -> WorkflowDefinition:
    """Valida e materializa uma definição completa de workflow."""
    _expect(isinstance(raw, dict), "workflow must be a mapping", where="workflow")
    _expect(_is_non_empty_str(raw.get("name")), "Workflow name is required", where="name")

    enabled = raw.get("enabled", True)
    _expect(isinstance(enabled, bool), "enabled must be a boolean", where="enabled", received=enabled)

    steps = parse_steps(raw.get("steps"), settings=settings)
    _expect(len(steps) >= 1, "Workflow must have at least one step", where="steps")

    wf_id = raw.get("id")
    trigger_path = raw.get("triggerPath")
    _expect(trigger_path is None or _is_non_empty_str(trigger_path), "triggerPath must be a non-empty string", where="triggerPath")

    return WorkflowDefinition(
        name=raw["name"],
        steps=steps,
        enabled=enabled,
        id=None if wf_id is None else str(wf_id),
        trigger_path=trigger_path,
    )
