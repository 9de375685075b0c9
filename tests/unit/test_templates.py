"""Tests for secret reference rendering."""

import pytest

from dashpipe.core.exceptions import ConfigError
from dashpipe.models.templates import SecretRef, render_secrets


class TestSecretRendering:
    """Tests for render_secrets."""

    def test_bare_placeholder(self):
        """Test {{API_KEY}} substitution inside a string."""
        config = {"headers": {"Authorization": "Bearer {{API_KEY}}"}}
        result = render_secrets(config, {"API_KEY": "abc"})
        assert result["headers"]["Authorization"] == "Bearer abc"

    def test_env_var_call(self, env_vars):
        """Test {{ env_var('KEY') }} resolved from the environment."""
        config = {"url": "https://api.example.com/{{ env_var('SALES_TOKEN') }}"}
        assert render_secrets(config)["url"] == "https://api.example.com/token-456"

    def test_double_quoted_env_var_call(self):
        config = {"token": '{{ env_var("API_KEY") }}'}
        assert render_secrets(config, {"API_KEY": "abc"}) == {"token": "abc"}

    def test_secret_object(self):
        """Test {"secret": NAME} replaces the whole value."""
        config = {"headers": {"X-Api-Key": {"secret": "API_KEY"}}}
        assert render_secrets(config, {"API_KEY": "abc"}) == {"headers": {"X-Api-Key": "abc"}}

    def test_dict_with_more_keys_is_not_a_secret(self):
        config = {"body": {"secret": "API_KEY", "other": 1}}
        assert render_secrets(config, {}) == config

    def test_lists_are_rendered(self):
        config = {"params": {"tags": ["{{A}}", "plain", 3]}}
        assert render_secrets(config, {"A": "x"}) == {"params": {"tags": ["x", "plain", 3]}}

    def test_multiple_placeholders_in_one_string(self):
        config = {"url": "https://{{HOST}}/v1/{{PATH}}"}
        result = render_secrets(config, {"HOST": "api.test", "PATH": "items"})
        assert result["url"] == "https://api.test/v1/items"

    def test_non_string_values_pass_through(self):
        config = {"limit": 5, "enabled": True, "missing": None}
        assert render_secrets(config, {}) == config

    def test_input_is_not_mutated(self):
        config = {"headers": {"Authorization": "Bearer {{API_KEY}}"}}
        render_secrets(config, {"API_KEY": "abc"})
        assert config["headers"]["Authorization"] == "Bearer {{API_KEY}}"

    def test_missing_secret_raises(self):
        with pytest.raises(ConfigError, match="Secret 'NOPE' is not set") as exc_info:
            render_secrets({"token": "{{NOPE}}"}, {})
        assert exc_info.value.context["secret"] == "NOPE"

    def test_unsupported_placeholder_raises(self):
        with pytest.raises(ConfigError, match="Unsupported placeholder"):
            render_secrets({"name": "{{ foo bar }}"}, {})


def test_secret_ref_resolve():
    assert SecretRef(secret="TOKEN").resolve({"TOKEN": "t"}) == "t"
    with pytest.raises(ConfigError):
        SecretRef(secret="TOKEN").resolve({})
