import base64
import binascii
import os
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, StrictUndefined
from jinja2.exceptions import TemplateError
from jinja2.nativetypes import NativeEnvironment

from mistral_chat.exceptions import InvalidConfigurationException


class RunContext:
    r"""Resolves the templated properties of a task before it runs.

    Properties may contain `{{ ... }}` expressions referring to run variables and to secrets through
    `secret('NAME')`. Secrets are looked up in the given mapping first, then in the base64 encoded
    `SECRET_NAME` environment variable and finally in the plain `NAME` environment variable.

    Examples:
        >>> run_context = RunContext(variables={"model": "open-mistral-7b"}, secrets={"KEY": "s3cr3t"})
        >>> run_context.render("{{ model }}")
        'open-mistral-7b'
        >>> run_context.render("{{ secret('KEY') }}")
        's3cr3t'
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        secrets: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.variables: Dict[str, Any] = dict(variables or {})
        self._secrets: Dict[str, str] = dict(secrets or {})

        self._environment = Environment(undefined=StrictUndefined, autoescape=False)
        self._native_environment = NativeEnvironment(undefined=StrictUndefined, autoescape=False)
        for environment in (self._environment, self._native_environment):
            environment.globals["secret"] = self.secret

    def secret(self, name: str) -> str:
        r"""Returns the value of a secret.

        Raises:
            InvalidConfigurationException: If the secret is unknown or badly encoded.
        """
        if name in self._secrets:
            return self._secrets[name]

        encoded = os.environ.get(f"SECRET_{name}")
        if encoded is not None:
            try:
                return base64.b64decode(encoded, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as e:
                raise InvalidConfigurationException(f"Secret `{name}` is not valid base64.") from e

        value = os.environ.get(name)
        if value is not None:
            return value

        raise InvalidConfigurationException(f"Secret `{name}` not found.")

    def render(self, value: Optional[str]) -> Optional[str]:
        r"""Renders a string property.

        Args:
            value: The property, possibly holding expressions.

        Returns:
            The rendered string, or `None` if the property is not set.

        Raises:
            InvalidConfigurationException: If the template is invalid or refers to an unknown variable.
        """
        if value is None:
            return None
        try:
            return self._environment.from_string(value).render(**self.variables)
        except TemplateError as e:
            raise InvalidConfigurationException(f"Unable to render `{value}`: {e}") from e

    def render_native(self, value: Any) -> Any:
        r"""Renders a property to a native Python value.

        A string holding a single expression such as `{{ messages }}` renders to the value of the
        expression. Strings nested in lists and dictionaries are rendered as strings.

        Raises:
            InvalidConfigurationException: If the template is invalid or refers to an unknown variable.
        """
        if isinstance(value, str):
            try:
                return self._native_environment.from_string(value).render(**self.variables)
            except TemplateError as e:
                raise InvalidConfigurationException(f"Unable to render `{value}`: {e}") from e
        return self._render_nested(value)

    def _render_nested(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.render(value)
        if isinstance(value, list):
            return [self._render_nested(item) for item in value]
        if isinstance(value, dict):
            return {key: self._render_nested(item) for key, item in value.items()}
        return value
