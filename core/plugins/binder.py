"""Command binder - maps manifest commands onto argparse sub-parsers."""

import argparse
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.constants import CLI_NAME, CLI_VERSION, OUTPUT_FORMATS
from core.plugins.errors import ParameterError
from core.plugins.manifest import CommandOption, CommandSpec
from core.plugins.registry import LoadedPlugin

logger = logging.getLogger(__name__)

POSITIONAL_KEY = "_"

# Namespace keys owned by the host; option dests are kebab-derived and never start with "_"
_PLUGIN_DEST = "_plugin"
_COMMAND_DEST = "_command"
_BOUND_DEST = "_bound"
FORMAT_DEST = "_format"
VERBOSE_DEST = "_verbose"

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGER = re.compile(r"^[+-]?\d+$")
_NEGATIVE_NUMBER = re.compile(r"^-\d+$|^-\d*\.\d+$")


class CliArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ParameterError instead of exiting with status 2."""

    def error(self, message: str):
        raise ParameterError(f"{self.prog}: {message}")


def parse_number(value: str):
    """Locale-independent decimal parse used for ``number`` options.

    Integral literals become ``int``; everything else becomes ``float``.
    """
    text = value.strip()
    if not _NUMBER.match(text):
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'")
    if _INTEGER.match(text):
        return int(text)
    return float(text)


def split_array(value: str) -> List[str]:
    """Split an ``array`` option on commas. Embedded commas cannot be escaped."""
    return value.split(",")


def add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        dest=FORMAT_DEST,
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format for command results",
    )
    parser.add_argument(
        "--verbose",
        dest=VERBOSE_DEST,
        action="store_true",
        help="Enable debug logging on stderr",
    )


def build_global_parser() -> CliArgumentParser:
    """Parser for the host-wide flags, used before any plugin is loaded."""
    parser = CliArgumentParser(prog=CLI_NAME, add_help=False, allow_abbrev=False)
    add_global_options(parser)
    return parser


def split_global_args(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split argv into the host-flag prefix and the rest, starting at the plugin name.

    Flags after the plugin name belong to the command, so a plugin may
    declare its own ``--format`` or ``--verbose``.
    """
    argv = list(argv)
    index = 0
    while index < len(argv) and argv[index].startswith("-"):
        if argv[index] == "--format":
            index += 1
        index += 1
    return argv[:index], argv[index:]


def parse_global_args(argv: Sequence[str]) -> Tuple[argparse.Namespace, List[str]]:
    """Pre-parse host flags; unknown prefix flags are kept for the full parser."""
    head, tail = split_global_args(argv)
    namespace, unknown = build_global_parser().parse_known_args(head)
    return namespace, unknown + tail


@dataclass
class BoundCommand:
    """A registered command together with the plugin that owns it."""

    plugin: LoadedPlugin
    command: CommandSpec


@dataclass
class ParsedInvocation:
    """Result of parsing one command line."""

    bound: BoundCommand
    args: Dict[str, Any]
    output_format: Optional[str] = None
    verbose: bool = False


class CommandBinder:
    """Host CLI registry: one group per plugin, one sub-parser per command."""

    def __init__(self, prog: str = CLI_NAME):
        self.parser = CliArgumentParser(
            prog=prog,
            description="Ledger wallet and administration CLI",
        )
        add_global_options(self.parser)
        self.parser.add_argument("--version", action="version", version=f"%(prog)s {CLI_VERSION}")
        self._groups = self.parser.add_subparsers(
            dest=_PLUGIN_DEST,
            metavar="<plugin>",
            parser_class=CliArgumentParser,
        )
        self._groups.required = True
        self._group_commands: Dict[str, argparse._SubParsersAction] = {}

    @property
    def groups(self) -> List[str]:
        return list(self._group_commands)

    def add_group(self, name: str, description: str = "") -> argparse._SubParsersAction:
        """Create the command group for a plugin, or return the existing one."""
        if name in self._group_commands:
            logger.debug(f"Command group '{name}' already registered")
            return self._group_commands[name]
        group_parser = self._groups.add_parser(name, help=description, description=description)
        commands = group_parser.add_subparsers(
            dest=_COMMAND_DEST,
            metavar="<command>",
            parser_class=CliArgumentParser,
        )
        commands.required = True
        self._group_commands[name] = commands
        return commands

    def register_command(self, plugin: LoadedPlugin, command: CommandSpec) -> argparse.ArgumentParser:
        """Bind one command under its plugin's group, creating the group if needed."""
        commands = self._group_commands.get(plugin.name)
        if commands is None:
            commands = self.add_group(plugin.name, plugin.manifest.description)

        command_parser = commands.add_parser(
            command.name,
            help=command.summary or command.description,
            description=command.description or command.summary,
        )
        for option in command.options:
            self._add_option(command_parser, option)
        command_parser.add_argument(POSITIONAL_KEY, nargs="*", metavar="args", help="Positional arguments")
        command_parser.set_defaults(**{_BOUND_DEST: BoundCommand(plugin=plugin, command=command)})

        logger.debug(f"Registered command: {plugin.name} {command.name}")
        return command_parser

    def _add_option(self, parser: argparse.ArgumentParser, option: CommandOption) -> None:
        flags = [f"--{option.name}"]
        if option.short:
            flags.insert(0, f"-{option.short}")

        kwargs: Dict[str, Any] = {
            "dest": option.dest,
            "help": option.description,
            "default": option.default if option.has_default else argparse.SUPPRESS,
            "required": option.required,
        }
        if option.type == "boolean":
            kwargs["action"] = "store_true"
        else:
            if option.type == "number":
                kwargs["type"] = parse_number
                kwargs["metavar"] = "NUMBER"
            elif option.type == "array":
                kwargs["type"] = split_array
                kwargs["metavar"] = "A,B,..."
            else:
                kwargs["metavar"] = option.name.upper().replace("-", "_")

        parser.add_argument(*flags, **kwargs)

    def parse(self, argv: Sequence[str]) -> ParsedInvocation:
        """Parse a full command line into the bound command and its argument bundle.

        Raises:
            ParameterError: On unknown commands, missing required options or bad values
        """
        namespace, extras = self.parser.parse_known_args(list(argv))
        # argparse stops filling a positional list at the first option; later ones land in extras
        unknown = [arg for arg in extras if arg.startswith("-") and not _NEGATIVE_NUMBER.match(arg)]
        if unknown:
            self.parser.error(f"unrecognized arguments: {' '.join(unknown)}")
        bound: BoundCommand = getattr(namespace, _BOUND_DEST)

        args: Dict[str, Any] = {}
        for option in bound.command.options:
            if hasattr(namespace, option.dest):
                args[option.dest] = getattr(namespace, option.dest)
        args[POSITIONAL_KEY] = list(getattr(namespace, POSITIONAL_KEY, [])) + extras

        return ParsedInvocation(
            bound=bound,
            args=args,
            output_format=getattr(namespace, FORMAT_DEST, None),
            verbose=bool(getattr(namespace, VERBOSE_DEST, False)),
        )
