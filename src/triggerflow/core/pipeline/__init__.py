# src/triggerflow/core/pipeline/__init__.py
"""
# Pipeline Core — TriggerFlow

Estruturas fundamentais de um workflow em execução.

## Componentes

- **types**
  - `StepKind`, operadores, `HttpMethod`, `BodyMode`
  - `RunStatus`: estados terminais de uma run
  - `StepResult` / `RunOutcome`: resultados imutáveis

- **step**
  - definições tipadas e imutáveis de cada Step (`FilterStep`,
    `TransformStep`, `HttpRequestStep`, `LogStep`)

- **context**
  - `RunContext`: payload da run, eventos e warnings

## Princípios Fundamentais

- Steps não conhecem o Runner
- O payload é exclusivo de uma run
- Definições não são mutadas durante a execução
"""
