"""
structflags entry point: parse an argument vector into a dataclass schema.

Quick start
    from dataclasses import dataclass, field
    from structflags import parse

    @dataclass
    class Build:
        target: str = field(default="", metadata={"short": "t", "usage": "build target"})

    @dataclass
    class Schema:
        debug: bool = field(default=False, metadata={"short": "d", "usage": "verbose logs"})
        build: Build = field(default_factory=Build)

    schema = Schema()
    parse(schema, "-d build -t release")
    # schema.debug is True, schema.build.target == "release"

Run
- validate: the prompt must not be empty; the schema must be a dataclass instance.
- global scope: top-level scalar fields are defined and parsed from the start of
  the prompt until the first non-flag token, then bound back.
- command scope: the first non-dash token naming a command selects it (a global
  flag value included); the tokens after it among those the global scope left
  over are parsed by a scope holding only that command's fields, then bound
  back into the command's dataclass.

Faults
- NoArgumentsProvidedError, InvalidSchemaRootError before anything is defined.
- FlagRedefinedError when two fields derive the same flag name, InvalidFlagNameError
  when a short alias cannot be spelled as a flag.
- UnderlyingParseError subclasses for whatever either scope rejects; the run
  stops at the first one and earlier bindings are kept.
"""
import logging as logmod
import os.path
import shlex
import sys
from collections.abc import Iterable

from .binding import register, command_flagset, bind
from .commands import identify_command, command_args
from .faults import *
from .flagset import FlagSet
from .schema import Context, isschema, walk
from .utils import *

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging


def _tokens(prompt):
    """
    normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like splitting via shlex.split.
    - Iterable[str]: taken as-is (each element must be a string).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() prompt must be a string or an iterable of strings")


def parse(schema, prompt=Unset, /, *, shell=False, fancy=False, colorful=True):
    """
    Parse `prompt` into `schema` (a dataclass instance), in place.

    Parameters
    - schema: dataclass instance whose fields describe flags and commands.
    - prompt: Unset (read sys.argv[1:]), a shell-like string, or an iterable of strings.
    - shell: render faults on stderr and exit instead of raising them.
    - fancy: render faults and usage inside panels.
    - colorful: style faults and usage.

    Returns
    - None. Fields whose flags were not given keep their current values.
    """
    tokens = _tokens(prompt)
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "structflags"
    options = {"shell": shell, "fancy": fancy, "colorful": colorful}

    if not tokens:
        return trigger(NoArgumentsProvidedError(
            "no flags or commands provided",
            title="no arguments",
            code=FaultCode.NO_ARGUMENTS,
            prog=prog,
            hint="run '%s -h' to see the available flags" % prog,
            docs=getdoc(FaultCode.NO_ARGUMENTS),
        ), **options)

    if not isschema(schema):
        # a programming error, never rendered for the end user
        return trigger(InvalidSchemaRootError(
            "expected a dataclass instance for the schema, got %s" % type(schema).__name__,
            title="invalid schema",
            code=FaultCode.INVALID_SCHEMA_ROOT,
            prog=prog,
            hint="pass an instance of a @dataclass class (not the class itself)",
            docs=getdoc(FaultCode.INVALID_SCHEMA_ROOT),
        ), **(options | {"shell": False}))

    context = Context()

    flagset = FlagSet(prog, **options)
    for visit in walk(context, schema):
        register(flagset, visit)

    flagset.parse(tokens)
    bind(flagset, walk(context, schema))

    command = identify_command(context.commands.keys(), tokens)
    if not command:
        logging.debug("no command in %r", tokens)
        return

    rest = command_args(command, flagset.args)
    logging.debug("command %r with %r", command, rest)

    commandset = command_flagset(context, command, schema, prog="%s %s" % (prog, command), **options)
    commandset.parse(rest)
    bind(commandset, (visit for visit in walk(context, schema, deep=True) if visit.command == command))


__all__ = (
    "parse",
)
