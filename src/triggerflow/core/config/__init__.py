# src/triggerflow/core/config/__init__.py
"""
Configuração do TriggerFlow.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Materialização tipada (`EngineSettings`) consumida pelo Engine

Princípios fundamentais:
    - Configuração não contém lógica de execução
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidSettingError,
    UnsupportedConfigFormatError,
)
from .loader import DEFAULT_CONFIG, load_config
from .merge import deep_merge
from .settings import EngineSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidSettingError",
    "UnsupportedConfigFormatError",
    "DEFAULT_CONFIG",
    "load_config",
    "deep_merge",
    "EngineSettings",
]
