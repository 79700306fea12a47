"""Plugin manifest model - describes a plugin's identity, commands and state needs."""

import re
from typing import Any, Callable, Dict, List, Literal, Optional, Union

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OptionType = Literal["string", "number", "boolean", "array"]
StateScope = Literal["global", "profile", "plugin"]

_KEBAB_CASE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
_CARET_RANGE = re.compile(r"^\^(\d+)\.(\d+)\.(\d+)$")
_TILDE_RANGE = re.compile(r"^~(\d+)\.(\d+)\.(\d+)$")


def normalize_version_range(value: str) -> str:
    """Translate npm-style ranges into a PEP 440 specifier string.

    ``^1.2.3`` becomes ``>=1.2.3,<2.0.0`` (``^0.2.3`` stays below ``0.3.0``),
    ``~1.2.3`` becomes ``>=1.2.3,<1.3.0`` and ``*`` matches everything.
    Anything else is returned stripped and left for ``SpecifierSet`` to parse.
    """
    value = value.strip()
    if value in ("", "*"):
        return ""

    match = _CARET_RANGE.match(value)
    if match:
        major, minor, patch = (int(part) for part in match.groups())
        if major > 0:
            upper = f"{major + 1}.0.0"
        else:
            upper = f"0.{minor + 1}.0"
        return f">={major}.{minor}.{patch},<{upper}"

    match = _TILDE_RANGE.match(value)
    if match:
        major, minor, patch = (int(part) for part in match.groups())
        return f">={major}.{minor}.{patch},<{major}.{minor + 1}.0"

    return value


def version_satisfies(version: str, version_range: str) -> bool:
    """Check whether ``version`` falls inside ``version_range``."""
    return Version(version) in SpecifierSet(normalize_version_range(version_range))


class CompatibilityRange(BaseModel):
    """Version ranges of the host components a plugin was built against."""

    cli: str = Field(default=">=1.0.0", description="Supported CLI versions")
    core: str = Field(default=">=1.0.0", description="Supported core versions")
    api: str = Field(default=">=1.0.0", description="Supported Core API versions")

    @field_validator("cli", "core", "api")
    @classmethod
    def _check_range(cls, value: str) -> str:
        try:
            SpecifierSet(normalize_version_range(value))
        except InvalidSpecifier as e:
            raise ValueError(f"Invalid version range '{value}': {e}") from e
        return value


class CommandOption(BaseModel):
    """A single command-line flag declared by a command."""

    name: str = Field(..., description="Flag name in kebab-case, exposed as --<name>")
    type: OptionType = Field(default="string", description="Value type of the flag")
    required: bool = Field(default=False, description="Fail before the handler runs when absent")
    default: Any = Field(default=None, description="Value bound when the flag is absent")
    description: str = Field(default="", description="Help text")
    short: Optional[str] = Field(default=None, description="Single-character alias, exposed as -<short>")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _KEBAB_CASE.match(value):
            raise ValueError(f"Option name must be kebab-case: '{value}'")
        return value

    @field_validator("short")
    @classmethod
    def _check_short(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) != 1 or not value.isalnum():
            raise ValueError(f"Short alias must be a single alphanumeric character: '{value}'")
        if value == "h":
            raise ValueError("Short alias 'h' is reserved for help")
        return value

    @property
    def has_default(self) -> bool:
        """True when the manifest explicitly declared a default."""
        return "default" in self.model_fields_set

    @property
    def dest(self) -> str:
        """Key of the option in the handler's argument bundle."""
        return self.name.replace("-", "_")


class CommandOutputSpec(BaseModel):
    """Shape of a command's machine-readable result plus an optional human template."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    output_schema: Any = Field(
        ...,
        alias="schema",
        description="pydantic model class or JSON Schema dict describing the output payload",
    )
    human_template: Optional[str] = Field(
        default=None,
        alias="humanTemplate",
        description="Jinja2 template rendered against the payload in human format",
    )

    @field_validator("output_schema")
    @classmethod
    def _check_schema(cls, value: Any) -> Any:
        if isinstance(value, type) and issubclass(value, BaseModel):
            return value
        if isinstance(value, dict):
            _check_json_schema(value)
            return value
        raise ValueError("Output schema must be a pydantic model class or a JSON Schema dict")


class CommandSpec(BaseModel):
    """A single command contributed by a plugin."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Command name, unique within the plugin")
    summary: str = Field(default="", description="One-line summary")
    description: str = Field(default="", description="Help text")
    options: List[CommandOption] = Field(default_factory=list)
    handler: Union[Callable[..., Any], str] = Field(
        ...,
        description="Handler function, or a module path relative to the plugin root",
    )
    output: Optional[CommandOutputSpec] = Field(
        default=None,
        description="Declared output; its presence selects the structured result contract",
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _KEBAB_CASE.match(value):
            raise ValueError(f"Command name must be kebab-case: '{value}'")
        return value

    @model_validator(mode="after")
    def _check_options_unique(self) -> "CommandSpec":
        names = set()
        shorts = set()
        for option in self.options:
            if option.name in names:
                raise ValueError(f"Duplicate option '--{option.name}' in command '{self.name}'")
            names.add(option.name)
            if option.short is None:
                continue
            if option.short in shorts:
                raise ValueError(f"Duplicate short alias '-{option.short}' in command '{self.name}'")
            shorts.add(option.short)
        return self

    @property
    def uses_output_contract(self) -> bool:
        return self.output is not None


class PluginStateSchema(BaseModel):
    """A state namespace declared by a plugin."""

    model_config = ConfigDict(populate_by_name=True)

    namespace: str = Field(..., description="Namespace name in the state store")
    version: int = Field(default=1, description="Schema version")
    json_schema: Dict[str, Any] = Field(default_factory=dict, alias="jsonSchema")
    scope: StateScope = Field(default="profile", description="Visibility of the namespace")

    @field_validator("json_schema")
    @classmethod
    def _validate_json_schema(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        _check_json_schema(value)
        return value


class PluginManifest(BaseModel):
    """Plugin manifest exported as ``manifest`` from a plugin's manifest.py."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    name: str = Field(..., description="Unique plugin identifier (kebab-case), also the command group")
    version: str = Field(default="1.0.0", description="Plugin version")
    display_name: str = Field(default="", alias="displayName", description="Human-readable plugin name")
    description: str = Field(default="", description="Plugin description")
    compatibility: CompatibilityRange = Field(default_factory=CompatibilityRange)
    capabilities: List[str] = Field(
        default_factory=list,
        description="Advisory tokens naming the Core API surfaces the plugin uses",
    )
    commands: List[CommandSpec] = Field(default_factory=list)
    state_schemas: List[PluginStateSchema] = Field(default_factory=list, alias="stateSchemas")
    init: Optional[Callable[..., Any]] = Field(default=None, description="Called with a PluginContext after loading")
    teardown: Optional[Callable[..., Any]] = Field(default=None, description="Called with a PluginContext on shutdown")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _KEBAB_CASE.match(value):
            raise ValueError(f"Plugin name must be kebab-case: '{value}'")
        return value

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        try:
            Version(value)
        except InvalidVersion as e:
            raise ValueError(f"Invalid plugin version '{value}'") from e
        return value

    @model_validator(mode="after")
    def _check_commands_unique(self) -> "PluginManifest":
        seen = set()
        for command in self.commands:
            if command.name in seen:
                raise ValueError(f"Duplicate command '{command.name}' in plugin '{self.name}'")
            seen.add(command.name)
        return self

    @property
    def namespaces(self) -> List[str]:
        return [schema.namespace for schema in self.state_schemas]

    def get_command(self, name: str) -> Optional[CommandSpec]:
        return next((command for command in self.commands if command.name == name), None)

    def is_compatible_with(self, cli_version: str) -> bool:
        """Check the manifest's ``cli`` range against the running CLI version."""
        return version_satisfies(cli_version, self.compatibility.cli)


def _check_json_schema(schema: Dict[str, Any]) -> None:
    try:
        validator_for(schema).check_schema(schema)
    except SchemaError as e:
        raise ValueError(f"Invalid JSON Schema: {e.message}") from e
