"""Output service - validates and renders command results.

Pipeline for every structured command result:
    parse JSON -> validate against the declared schema -> format -> print

``json`` format pretty-prints the payload. ``human`` format renders the
command's Jinja2 template, or a key/value listing when it has none.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, Union

import jsonschema
from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment
from pydantic import BaseModel, ValidationError
from rich.console import Console

from core.constants import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS

logger = logging.getLogger(__name__)

OutputSchema = Union[Type[BaseModel], Dict[str, Any], None]


class OutputRenderError(Exception):
    """Raised when a command result cannot be parsed, validated or formatted."""

    pass


def format_key_value(data: Any, indent: int = 0) -> str:
    """Readable fallback rendering used when a command has no template."""
    spaces = " " * indent

    if data is None:
        return f"{spaces}null"

    if isinstance(data, list):
        if not data:
            return f"{spaces}[]"
        return "\n".join(
            f"{spaces}[{index}]\n{format_key_value(item, indent + 2)}"
            for index, item in enumerate(data)
        )

    if isinstance(data, dict):
        if not data:
            return f"{spaces}{{}}"
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                lines.append(f"{spaces}{key}:\n{format_key_value(value, indent + 2)}")
            else:
                lines.append(f"{spaces}{key}: {_scalar(value)}")
        return "\n".join(lines)

    return f"{spaces}{_scalar(data)}"


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class OutputService:
    """Renders structured command output to stdout or a file."""

    def __init__(self, format: str = DEFAULT_OUTPUT_FORMAT, console: Optional[Console] = None):
        self._format = DEFAULT_OUTPUT_FORMAT
        self.set_format(format)
        self.console = console or Console(soft_wrap=True, highlight=False)
        self.jinja_env = SandboxedEnvironment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        self.jinja_env.filters["add1"] = lambda value: value + 1

    def get_format(self) -> str:
        return self._format

    def set_format(self, format: str) -> None:
        if format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format '{format}', expected one of {', '.join(OUTPUT_FORMATS)}")
        self._format = format

    def handle_command_output(
        self,
        output_json: str,
        schema: OutputSchema = None,
        template: Optional[str] = None,
        format: Optional[str] = None,
    ) -> None:
        """Validate and print a command's serialized result.

        Raises:
            OutputRenderError: If any step of the pipeline fails
        """
        try:
            data = json.loads(output_json)
        except (TypeError, json.JSONDecodeError) as e:
            raise OutputRenderError(f"Failed to parse output JSON: {e}") from e

        if schema is not None:
            self.validate(data, schema)

        rendered = self.format_data(data, format or self._format, template)
        self.console.out(rendered, highlight=False)

    def validate(self, data: Any, schema: OutputSchema) -> None:
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            try:
                schema.model_validate(data)
            except ValidationError as e:
                raise OutputRenderError(f"Output does not match {schema.__name__}: {e}") from e
            return

        try:
            jsonschema.validate(instance=data, schema=schema)
        except jsonschema.ValidationError as e:
            raise OutputRenderError(f"Output does not match schema: {e.message}") from e
        except jsonschema.SchemaError as e:
            raise OutputRenderError(f"Invalid output schema: {e.message}") from e

    def format_data(self, data: Any, format: str, template: Optional[str] = None) -> str:
        if format == "json":
            return json.dumps(data, indent=2, ensure_ascii=False)
        if format != "human":
            raise OutputRenderError(f"Unsupported output format '{format}'")
        if template:
            return self.render_template(template, data)
        return format_key_value(data)

    def render_template(self, template: str, data: Any) -> str:
        context = data if isinstance(data, dict) else {"data": data}
        try:
            return self.jinja_env.from_string(template).render(context).rstrip("\n")
        except (TemplateError, TypeError) as e:
            logger.debug(f"Template rendering failed: {e}")
            raise OutputRenderError(f"Failed to render template: {e}") from e
