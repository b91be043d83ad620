# src/crm_pipeline/core/config/__init__.py
"""
Camada de configuração do CRM Pipeline.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Conversão para `ReorderSettings` tipados, com validação dos valores

Invariantes:
    - A configuração carregada é um dicionário puro (dict)
    - Conflitos estruturais são tratados como erro
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .loader import load_config
from .merge import deep_merge
from .settings import ReorderSettings, resolve_settings, settings_to_dict

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "load_config",
    "deep_merge",
    "ReorderSettings",
    "resolve_settings",
    "settings_to_dict",
]
