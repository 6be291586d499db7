r"""
structflags flag sets: one isolated parsing scope per call site.

What this module provides
- Cell: one mutable storage slot of a fixed kind (bool, int or str), holding the
  kind's zero value until a flag writes into it. Several flags may share a cell,
  which is how a long name and its short alias end up setting one value.
- Flag: a named definition (name, usage, default) bound to a cell; converts raw
  strings into the cell's kind.
- FlagSet: a namespace of flags that parses a token list, remembers which flags
  were explicitly set, and keeps whatever it did not consume in `args`.

Token grammar
- '-name' or '--name' (both spellings are the same flag).
- '-name=value' / '--name=value' inline values.
- '-name value' for integer and text flags; boolean flags never consume the next
  token ('-v' means true, '-v=false' is the explicit form).
- parsing stops at the first token that is not flag-shaped ('-' alone included),
  or right after a '--' terminator (which is consumed).

Quick example
    >>> verbose = Cell(bool)
    >>> flags = FlagSet("tool")
    >>> _ = flags.define("verbose", verbose, "print more")
    >>> _ = flags.define("v", verbose, "print more (shorthand)")
    >>> flags.parse(["-v", "build", "-x"])
    >>> verbose.value, flags.args, flags.isset("v"), flags.isset("verbose")
    (True, ['build', '-x'], True, False)
"""
import difflib
import os.path
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .faults import *
from .utils import *

_zeros = {bool: False, int: 0, str: ""}

_truths = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


def _convert(kind, value, /):
    """
    convert a raw token into `kind`; raises ValueError when it does not fit.

    - bool: the usual spellings of true/false (1/0, t/f, true/false in three casings).
    - int: python integer literals, base prefixes included (0x1f, 0o17, 0b101, 1_000);
      ascii only, no surrounding whitespace.
    - str: returned unchanged.
    """
    if kind is bool:
        try:
            return _truths[value]
        except KeyError:
            raise ValueError("invalid syntax") from None
    if kind is int:
        if not value.isascii() or value != value.strip():
            raise ValueError("invalid syntax")
        return int(value, 0)
    return value


class Cell:
    """
    mutable storage slot shared by one or more flags.

    the kind is fixed at construction and the value starts at the kind's zero
    value (False, 0 or ""). flags write converted values into `value`.
    """
    __slots__ = ("kind", "value")

    def __init__(self, kind, /):
        if kind not in _zeros:
            raise TypeError("Cell() argument must be bool, int or str")
        self.kind = kind
        self.value = _zeros[kind]

    def __repr__(self):
        return "Cell(%s, %r)" % (self.kind.__name__, self.value)


class Flag:
    """
    a single flag definition bound to a cell.

    `default` is the value the cell held when the flag was defined; it is only
    informative (shown in usage), nothing ever writes it back.
    """
    name = mirror("name")
    usage = mirror("usage")
    default = mirror("default")

    def __init__(self, name, cell, /, usage=""):
        self._name = name
        self._cell = cell
        self._usage = usage
        self._default = cell.value

    @property
    def kind(self):
        return self._cell.kind

    @property
    def cell(self):
        return self._cell

    def get(self):
        return self._cell.value

    def set(self, value, /):
        self._cell.value = _convert(self._cell.kind, value)

    def __repr__(self):
        return "flag(name=%r, kind=%s, value=%r)" % (self._name, self.kind.__name__, self.get())


class FlagSet:
    """
    an isolated namespace of flags parsed against one slice of the arguments.

    parameters
    - name: str
      the scope name (program name for the global scope, command name otherwise).
    - prog: str (keyword-only)
      label shown in fault headers and usage; defaults to `name`.
    - shell / fancy / colorful: bool (keyword-only)
      runtime rendering options forwarded to every fault (see structflags.faults).

    state
    - formal flags: everything defined through define().
    - actual flags: the subset explicitly set by the last parse().
    - args: the tokens parse() did not consume.
    """
    name = mirror("name")
    prog = mirror("prog")
    args = mirror("args")

    def __init__(self, name="", /, *, prog=Unset, shell=False, fancy=False, colorful=True):
        if not isinstance(name, str):
            raise TypeError("FlagSet() name must be a string")
        self._name = name
        self._prog = coalesce(prog, name)
        self.shell = shell
        self.fancy = fancy
        self.colorful = colorful
        self._formal = {}
        self._actual = {}
        self._args = []

    @property
    def flags(self):
        return tuple(self._formal[name] for name in sorted(self._formal))

    def define(self, name, cell, /, usage=""):
        """
        define a flag called `name` writing into `cell`.

        raises
        - TypeError for a non-string name or a non-Cell storage.
        - InvalidFlagNameError (through trigger) for an empty name, a leading '-'
          or an embedded '='.
        - FlagRedefinedError (through trigger) when the name is already taken.
        """
        if not isinstance(name, str):
            raise TypeError("define() name must be a string")
        if not isinstance(cell, Cell):
            raise TypeError("define() storage must be a Cell")
        if not name or name.startswith("-") or "=" in name:
            return self.trigger(InvalidFlagNameError(
                "%r is not a valid flag name in %r" % (name, self._prog),
                title="invalid flag name",
                code=FaultCode.INVALID_FLAG_NAME,
                name=name,
                hint="flag names and short aliases must not be empty, start with '-' or contain '='",
                docs=getdoc(FaultCode.INVALID_FLAG_NAME),
            ))

        if name in self._formal:
            return self.trigger(FlagRedefinedError(
                "flag -%s is defined more than once in %r" % (name, self._prog),
                title="flag redefined",
                code=FaultCode.FLAG_REDEFINED,
                name=name,
                hint="give the clashing fields distinct names or short aliases",
                docs=getdoc(FaultCode.FLAG_REDEFINED),
            ))

        flag = self._formal[name] = Flag(name, cell, usage)
        return flag

    def lookup(self, name, /):
        return self._formal.get(name)

    def isset(self, name, /):
        return name in self._actual

    def parse(self, tokens, /):
        """
        parse `tokens` (flags only, no program name).

        stops at the first non-flag token or after '--'; the remainder is kept
        in `args`. the first rejected token aborts parsing through trigger().
        """
        self._args = list(tokens)
        for token in self._args:
            if not isinstance(token, str):
                raise TypeError("parse() tokens must be strings")
        while self._parseone():
            pass

    def _parseone(self):
        if not self._args:
            return False

        token = self._args[0]
        if len(token) < 2 or not token.startswith("-"):
            return False

        dashes = 1
        if token[1] == "-":
            dashes += 1
            if len(token) == 2:  # "--" terminates the flags
                del self._args[0]
                return False

        name = token[dashes:]
        if not name or name[0] in "-=":
            return self.trigger(MalformedTokenError(
                "bad flag syntax %r" % token,
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                token=token,
                hint="flags are spelled -name, -name=value or -name value",
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        del self._args[0]
        name, equals, value = name.partition("=")

        try:
            flag = self._formal[name]
        except KeyError:
            if name in ("help", "h"):
                return self.trigger(HelpRequestedError(
                    "help requested",
                    title="help",
                    code=FaultCode.HELP_REQUESTED,
                    docs=getdoc(FaultCode.HELP_REQUESTED),
                ))
            suggestions = difflib.get_close_matches(name, self._formal.keys(), 5)
            try:
                hint = "did you mean -%s? run '%s -h' to see all flags" % (suggestions[0], self._prog)
            except IndexError:
                hint = "run '%s -h' to see all flags" % self._prog
            return self.trigger(UnknownFlagError(
                "flag provided but not defined: -%s" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                name=name,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_FLAG),
            ))

        if flag.kind is bool:
            if not equals:
                value = "true"
        elif not equals:
            if not self._args:
                return self.trigger(MissingFlagValueError(
                    "flag needs an argument: -%s" % name,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    name=name,
                    hint="pass a value after the flag (for example: -%s=<value>)" % name,
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))
            value = self._args.pop(0)

        try:
            flag.set(value)
        except ValueError:
            kind = "boolean" if flag.kind is bool else "integer" if flag.kind is int else "text"
            return self.trigger(InvalidFlagValueError(
                "invalid %s value %r for flag -%s" % (kind, value, name),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                name=name,
                value=value,
                hint="-%s expects %s %s value" % (name, "an" if kind == "integer" else "a", kind),
                docs=getdoc(FaultCode.INVALID_VALUE),
            ))

        self._actual[name] = flag
        return True

    def trigger(self, fault, /, **options):
        """
        surface `fault` with this scope's runtime options.

        the usage is printed first in shell mode, and for a help request in
        every mode, so the fault is shown right under the list of valid flags.
        """
        if self.shell or isinstance(fault, HelpRequestedError):
            self.usage()
        trigger(fault, **options, prog=self._prog, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def usage(self):
        """
        Render the flags of this scope to stderr.

        Flags sharing a cell (a long name and its short alias) are listed on one
        row. Palette keys: usage-label, program-name, flag-name, kind, description,
        default, panel-title. Define __styles__ in __main__ to override any entry.
        """
        console = Console(stderr=True)
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "flag-name": "bold #22C55E",  # GREEN for flag names
            "kind": "bold #FFD600",  # AMBER for value kinds
            "description": "#9CA3AF",  # Muted gray
            "default": "italic #737373",  # Dim footer gray
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = getattr(__import__("__main__"), "__prog__", self._prog) or os.path.basename(sys.argv[0])
        head = Text.assemble(text("usage: ", "usage-label"), text(prog, "program-name"), " [flags]")

        rows = {}
        for flag in self.flags:
            rows.setdefault(id(flag.cell), []).append(flag)

        table = Table(box=None, show_header=False, padding=(0, 2))
        for flags in rows.values():
            flags.sort(key=lambda x: (-len(x.name), x.name))
            names = Text(" | ").join(text("-" + flag.name, "flag-name") for flag in flags)
            kind = flags[0].kind
            if kind is not bool:
                names = Text.assemble(names, " ", text("<%s>" % ("int" if kind is int else "string"), "kind"))
            description = text(flags[0].usage, "description")
            if flags[0].default:
                description = Text.assemble(description, " ", text("(default %r)" % flags[0].default, "default"))
            table.add_row(names, description)

        if self.fancy:
            console.print(Panel(Group(head, table), title=text(prog, "panel-title"), title_align="left"))
        else:
            console.print(Group(head, table))

    def __repr__(self):
        return "flagset(name=%r, flags=%r)" % (self._name, sorted(self._formal))


__all__ = (
    "Cell",
    "Flag",
    "FlagSet",
)
