"""
structflags binding: define flags from schema visits and write results back.

- register(): one visit → a long flag and (when given) its short alias, both
  writing into the same Cell.
- command_flagset(): a fresh FlagSet holding the flags of a single command.
- bind(): copy every explicitly set flag back into its schema field.
"""
import logging as logmod

from .flagset import Cell, FlagSet
from .schema import walk

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging


def register(flagset, visit, /):
    """
    define the flags of one schema field in `flagset`.

    - long name: the lower-cased field name, usage from metadata["usage"].
    - short alias: metadata["short"] when non-empty, usage suffixed with
      "(shorthand)"; skipped when it equals the long name.
    - unsupported field types are ignored.

    two fields deriving the same name raise FlagRedefinedError from the flag set;
    an alias no token could spell raises InvalidFlagNameError.
    """
    if visit.type not in (bool, int, str):
        return
    cell = Cell(visit.type)
    flagset.define(visit.name, cell, visit.usage)
    if visit.short and visit.short != visit.name:
        flagset.define(visit.short, cell, visit.usage + " (shorthand)")
    logging.debug("[Register] %s: -%s/-%s (%s)", flagset.name or "-", visit.name, visit.short, visit.type.__name__)


def command_flagset(context, command, schema, /, **options):
    """
    build the flag set of `command`: only the fields of that command group.

    the deep walk also meets the fields of every other command; those are
    filtered out here and never defined in this scope.
    """
    flagset = FlagSet(command, **options)
    for visit in walk(context, schema, deep=True):
        if visit.command == command:
            register(flagset, visit)
    return flagset


def bind(flagset, visits, /):
    """
    write explicitly set flag values into their schema fields.

    a field is written when its long name or its short alias was set during
    parsing; the stored value must already be of the field's type (the
    registrar guarantees it), anything else is skipped. untouched fields keep
    whatever value they had.
    """
    for visit in visits:
        for name in (visit.name, visit.short):
            if not name or not flagset.isset(name):
                continue
            value = flagset.lookup(name).get()
            if type(value) is visit.type:
                visit.set(value)
                logging.debug("[Bind] %s.%s = %r", type(visit.owner).__name__, visit.field.name, value)
            break


__all__ = (
    "register",
    "command_flagset",
    "bind",
)
