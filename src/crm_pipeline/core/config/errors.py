# src/crm_pipeline/core/config/errors.py
"""
Exceções canônicas da camada de configuração do CRM Pipeline.

As exceções aqui definidas representam falhas estruturais ao carregar
ou mesclar arquivos de configuração (defaults + overrides locais).
Valores semanticamente inválidos (ex.: `chunk_size` negativo) não são
responsabilidade deste módulo: são reportados por `resolve_settings`
via `EngineConfigurationError`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro do gesto de drag-and-drop
"""


class ConfigError(Exception):
    """Exceção base para erros estruturais de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de defaults não existe no caminho informado.

    Sem defaults não existe configuração efetiva: o loader não tenta
    inferir nem criar o arquivo.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada.

    Formatos aceitos (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"persistence": {"chunk_size": 50}}
        - override: {"persistence": "rest"}

    Nenhum merge parcial é produzido em caso de conflito.
    """
