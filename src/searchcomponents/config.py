"""Configuration utilities for searchcomponents.

Loads the deployment configuration from YAML, resolves environment variables,
and builds the immutable objects the normalization layer reads: the field
registry and the domain resolver. Log levels come from ``LOG_LEVEL``
through ``LoggerFactory.configure_from_env``.

Environment Variable Syntax:
    - ${VAR}: Substitute with environment variable VAR, empty string if unset
    - ${VAR:-default}: Substitute with VAR if set, otherwise use 'default'

Configuration Layout:
    domain: ${APP_DOMAIN:-acme}
    public_indexes: [wiki_eng, news_eng]     # optional
    fields:
      authors:
        display_name: Author
        names: [author, DRECONTENT_AUTHOR]
        type: string                         # string | date | number | boolean
        advanced: false
        parametric: true

Usage:
    >>> from searchcomponents.config import load_config, build_registry
    >>> config = load_config("search.yaml")
    >>> holder = RegistryHolder(build_registry(config))
    >>> # On refresh
    >>> holder.swap(build_registry(load_config("search.yaml")))
"""

import os
import re
from pathlib import Path
from typing import Any, Union

import yaml

from searchcomponents.errors import ConfigurationError
from searchcomponents.fields import FieldTypeRegistry
from searchcomponents.namespaces import (
    PUBLIC_INDEX_NAMES,
    PUBLIC_INDEXES_DOMAIN,
    DomainResolver,
)


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: Any) -> Any:
    """Resolve environment variables in configuration values.

    Supports both simple ${VAR} and ${VAR:-default} syntax, including
    multiple substitutions within a single string.

    Args:
        value: The value to resolve, can be a string, dict, or list.

    Returns:
        The resolved value with environment variables expanded.
    """
    if isinstance(value, str):

        def replacer(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                var, default = expr.split(":-", 1)
                return os.environ.get(var, default)
            return os.environ.get(expr, "")

        return _ENV_PATTERN.sub(replacer, value)
    if isinstance(value, dict):
        return {k: resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_env_vars(item) for item in value]
    return value


def load_config(config_or_path: Union[dict[str, Any], str, Path]) -> dict[str, Any]:
    """Load configuration from a dict or a YAML file, resolving env vars.

    Args:
        config_or_path: Configuration dict or path to a YAML file.

    Returns:
        Configuration dictionary with environment variables resolved.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        yaml.YAMLError: If the YAML file is malformed.
        ConfigurationError: If the document is not a mapping.
    """
    if isinstance(config_or_path, dict):
        config = config_or_path
    else:
        with open(config_or_path) as f:
            config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        msg = f"Configuration must be a mapping, got {type(config).__name__}"
        raise ConfigurationError(msg)
    return resolve_env_vars(config)


def build_registry(config: dict[str, Any]) -> FieldTypeRegistry:
    """Build the field registry from the ``fields`` section.

    Raises:
        ConfigurationError: If the section is malformed.
    """
    fields_config = config.get("fields") or {}
    if not isinstance(fields_config, dict):
        raise ConfigurationError("'fields' must be a mapping of field id to definition")
    return FieldTypeRegistry.from_config(fields_config)


def build_domain_resolver(config: dict[str, Any]) -> DomainResolver:
    """Build the domain resolver from ``public_indexes`` and ``public_domain``."""
    public_indexes = config.get("public_indexes")
    if public_indexes is None:
        public_indexes = PUBLIC_INDEX_NAMES
    return DomainResolver(
        public_index_names=public_indexes,
        public_domain=config.get("public_domain", PUBLIC_INDEXES_DOMAIN),
    )
