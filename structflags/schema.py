"""
structflags schema walking: turn a dataclass instance into flag and command visits.

Conventions
- the schema is a dataclass instance; its scalar fields (bool, int, str) are flags.
- a field holding a nested dataclass is a command; its own scalar fields are the
  command's flags. only one level of nesting is walked.
- flag metadata lives in the dataclass field metadata:
    debug: bool = field(default=False, metadata={"short": "d", "usage": "verbose logs"})
- private fields (leading underscore) and fields of frozen dataclasses are not
  writable and are never visited.

The walker yields Visit records lazily; registration and binding both consume
the same stream, in shallow mode (global flags) or deep mode (command flags).
"""
import dataclasses
import logging as logmod
import typing
from typing import NamedTuple

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

_scalars = (bool, int, str)
_builtins = {scalar.__name__: scalar for scalar in _scalars}


class Context:
    """
    per-run state shared by the walker and the command identifier.

    `commands` maps every lower-cased command name to the field it came from;
    the first field registered under a name keeps it.
    """

    def __init__(self):
        self.commands = {}

    def register(self, field, /):
        name = field.name.lower()
        if name not in self.commands:
            self.commands[name] = field.name
        elif self.commands[name] != field.name:
            logging.debug("command %r from field %r shadowed by field %r", name, field.name, self.commands[name])
        return name

    def __contains__(self, name):
        return name in self.commands

    def __repr__(self):
        return "context(commands=%r)" % sorted(self.commands)


class Visit(NamedTuple):
    owner: typing.Any
    field: dataclasses.Field
    type: type
    metadata: typing.Mapping
    command: str | None = None

    @property
    def name(self):
        return self.field.name.lower()

    @property
    def short(self):
        return self.metadata.get("short", "")

    @property
    def usage(self):
        return self.metadata.get("usage", "")

    def get(self):
        return getattr(self.owner, self.field.name)

    def set(self, value, /):
        setattr(self.owner, self.field.name, value)


def isschema(object, /):
    """true for dataclass instances (dataclass classes are not schemas)."""
    return dataclasses.is_dataclass(object) and not isinstance(object, type)


def _settable(owner, field):
    if field.name.startswith("_"):
        return False
    return not type(owner).__dataclass_params__.frozen


def _fields(owner):
    # postponed annotations ("from __future__ import annotations") are strings until resolved
    try:
        hints = typing.get_type_hints(type(owner))
    except NameError:
        # locally defined classes cannot be resolved; scalar names still can
        hints = {}
    for field in dataclasses.fields(owner):
        hint = hints.get(field.name, field.type)
        if isinstance(hint, str):
            hint = _builtins.get(hint, hint)
        yield field, hint


def _iscommand(owner, field, hint):
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return True
    return isschema(getattr(owner, field.name, None))


def walk(context, schema, /, *, deep=False):
    """
    Yield Visit records for the flag fields of `schema`.

    Modes
    - shallow (deep=False): the scalar fields of `schema` itself, with command=None.
      command fields are registered in `context` but not descended into.
    - deep (deep=True): the scalar fields of every command field, with command set
      to the command's lower-cased name. top-level scalars are not yielded.

    Notes
    - `schema` must be a dataclass instance; the caller checks it (see isschema).
    - a command field whose value is not a dataclass instance, or whose name is
      private, is registered but skipped silently.
    - fields of other types (floats, lists, ...) are ignored.
    """
    for field, hint in _fields(schema):
        if _iscommand(schema, field, hint):
            command = context.register(field)
            value = getattr(schema, field.name, None)
            if not deep or field.name.startswith("_") or not isschema(value):
                continue
            for nested, nestedhint in _fields(value):
                if nestedhint in _scalars and _settable(value, nested):
                    yield Visit(value, nested, nestedhint, nested.metadata, command)
        elif not deep and hint in _scalars and _settable(schema, field):
            yield Visit(schema, field, hint, field.metadata)


__all__ = (
    "Context",
    "Visit",
    "isschema",
    "walk",
)
