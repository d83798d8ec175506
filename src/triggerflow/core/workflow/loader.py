"""Loader canônico de definições de workflow (YAML/JSON).

Notas:
- YAML é preferencial, JSON é alternativo.
- O formato é inferido pela extensão do arquivo.
- O conteúdo é sempre validado por `parse_workflow` antes de ser devolvido.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

import yaml

from triggerflow.core.config.settings import EngineSettings
from triggerflow.core.exceptions import WorkflowParseError

from .schema import WorkflowDefinition, parse_workflow


def load_workflow(
    path: Union[str, Path],
    *,
    settings: Optional[EngineSettings] = None,
) -> WorkflowDefinition:
    """Carrega e valida um workflow a partir de YAML/JSON.

    Raises:
        WorkflowParseError: arquivo ausente, extensão não suportada ou parsing falhou.
        StepValidationError: conteúdo estruturalmente inválido.
    """
    p = Path(path)
    if not p.exists():
        raise WorkflowParseError(f"workflow file not found: {p}", details={"path": str(p)})

    suffix = p.suffix.lower()
    if suffix not in {".yml", ".yaml", ".json"}:
        raise WorkflowParseError(f"unsupported workflow format: {suffix}", details={"path": str(p)})

    raw = p.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise WorkflowParseError(str(e) or "failed to parse workflow", details={"path": str(p)}) from e

    if data is None:
        raise WorkflowParseError("workflow file is empty", details={"path": str(p)})

    return parse_workflow(data, settings=settings)
