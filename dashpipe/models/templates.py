"""Secret reference resolution for source configs.

Three forms are recognised anywhere in a config:

- ``{{API_KEY}}``: the named environment variable, substituted in place
- ``{{ env_var('API_KEY') }}``: same, in function-call spelling
- ``{"secret": "API_KEY"}``: a whole value replaced by the variable

References are resolved once, when the config is loaded. A reference whose
variable is not set raises ``ConfigError`` instead of leaking the
placeholder to an upstream API.
"""

import os
import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from dashpipe.core.exceptions import ConfigError

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")
ENV_VAR_CALL = re.compile(r"^env_var\(['\"]([^'\"]+)['\"]\)$")
BARE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SecretRef(BaseModel):
    """Explicit reference to a secret held in the environment."""

    secret: str = Field(description="Name of the environment variable holding the secret")

    def resolve(self, secrets: Mapping[str, str]) -> str:
        value = secrets.get(self.secret)
        if value is None:
            raise ConfigError(
                f"Secret '{self.secret}' is not set",
                context={"secret": self.secret},
            )
        return value


def render_secrets(
    config: dict[str, Any], secrets: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Return a copy of ``config`` with every secret reference resolved.

    Args:
        config: Raw source config dictionary
        secrets: Secret lookup (defaults to the process environment)

    Raises:
        ConfigError: If a referenced secret is not set or a placeholder is malformed
    """
    lookup = os.environ if secrets is None else secrets
    return _render_dict(config, lookup)


def _render_dict(data: dict[str, Any], secrets: Mapping[str, str]) -> dict[str, Any]:
    return {key: _render_value(value, secrets) for key, value in data.items()}


def _render_value(value: Any, secrets: Mapping[str, str]) -> Any:
    if isinstance(value, dict):
        if set(value.keys()) == {"secret"}:
            return SecretRef.model_validate(value).resolve(secrets)
        return _render_dict(value, secrets)
    elif isinstance(value, list):
        return [_render_value(item, secrets) for item in value]
    elif isinstance(value, str):
        return _render_string(value, secrets)
    else:
        return value


def _render_string(text: str, secrets: Mapping[str, str]) -> str:
    def replace(match: re.Match) -> str:
        expr = match.group(1).strip()
        call = ENV_VAR_CALL.match(expr)
        if call:
            name = call.group(1)
        elif BARE_NAME.match(expr):
            name = expr
        else:
            raise ConfigError(
                f"Unsupported placeholder: {{{{{expr}}}}}",
                context={"expression": expr},
            )
        return SecretRef(secret=name).resolve(secrets)

    return PLACEHOLDER_PATTERN.sub(replace, text)
