# src/triggerflow/core/config/errors.py
"""
Exceções da camada de configuração do TriggerFlow.

Todas herdam de `ConfigError`, o que permite ao chamador separar problemas
de configuração (detectados antes de qualquer run) de falhas de execução
de workflows (que viram runs `failed`, nunca exceções de configuração).
"""


class ConfigError(Exception):
    """Raiz da hierarquia: qualquer problema ao montar a configuração do Engine."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de defaults foi informado explicitamente e não existe.

    O loader não cai de volta para `DEFAULT_CONFIG` neste caso: um caminho
    informado e ausente é tratado como erro de implantação.
    """


class UnsupportedConfigFormatError(ConfigError):
    """Extensão de arquivo sem leitor registrado (aceitas: .yaml, .yml, .json)."""


class InvalidConfigRootTypeError(ConfigError):
    """O arquivo foi lido, mas a raiz não é um mapping (ex.: uma lista YAML)."""


class ConfigTypeConflictError(ConfigError):
    """
    Override incompatível com o tipo do valor base durante o `deep_merge`.

    Exemplo:
        base:     {"http": {"retries": 3}}
        override: {"http": {"retries": true}}
    """


class InvalidSettingError(ConfigError):
    """
    Valor resolvido fora do domínio aceito pelo Engine.

    Exemplos: `http.timeout_ms <= 0`, `http.retries` fracionário,
    `retry.factor < 1`.
    """
