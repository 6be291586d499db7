"""
structflags faults (errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by
  domain (entry point, schema setup, flag parsing, help).
- FlagsException: base type carrying a message plus options; knows how to render
  itself with rich in a short, lowercased and actionable way.
- trigger(): central entry point to surface a fault (raise, or render and exit
  when running as a shell tool).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- NoArgumentsProvidedError: the argument vector is empty.
- InvalidSchemaRootError: the schema is not a dataclass instance.
- FlagRedefinedError: two fields derive the same flag name in one scope.
- InvalidFlagNameError: a field derives a name no token could spell (empty,
  leading '-' or embedded '=').
- UnderlyingParseError and its children: whatever the flag set rejects while
  parsing (malformed token, unknown flag, missing or invalid value, help).

Integration
- The flag set and the parser build faults and call trigger(fault, **ctx).
- In non-shell mode faults are raised; in shell mode they are rendered on
  stderr and the process exits.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - entry point (1110x): NO_ARGUMENTS, INVALID_SCHEMA_ROOT
    - schema setup (1111x): FLAG_REDEFINED, INVALID_FLAG_NAME
    - flag parsing (1112x): MALFORMED_TOKEN, UNKNOWN_FLAG, MISSING_VALUE, INVALID_VALUE
    - help (1113x): HELP_REQUESTED

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- entry point errors (1110x) ---
    NO_ARGUMENTS                = 11101
    INVALID_SCHEMA_ROOT         = 11102

    # --- schema setup errors (1111x) ---
    FLAG_REDEFINED              = 11111
    INVALID_FLAG_NAME           = 11112

    # --- flag parsing errors (1112x) ---
    MALFORMED_TOKEN             = 11121
    UNKNOWN_FLAG                = 11122
    MISSING_VALUE               = 11123
    INVALID_VALUE               = 11124

    # --- help (1113x) ---
    HELP_REQUESTED              = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_defaults = {
    "prog": "",
    "title": "",
    "hint": "",
    "code": Unset,
    "shell": False,
    "fancy": False,
    "colorful": True,
}


class FlagsException(Exception):
    __status__ = 2

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(_defaults | options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.options["colorful"]:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options["code"]
        prog = text(getattr(main, "__prog__", self.options["prog"]), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not Unset else "-", styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message if self.message is not Unset else "", styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint")))

        if self.options["fancy"]:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        sys.exit(self.__status__)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoArgumentsProvidedError(FlagsException): ...
class InvalidSchemaRootError(FlagsException): ...
class FlagRedefinedError(FlagsException): ...
class InvalidFlagNameError(FlagsException): ...


class UnderlyingParseError(FlagsException): ...
class MalformedTokenError(UnderlyingParseError): ...
class UnknownFlagError(UnderlyingParseError): ...
class MissingFlagValueError(UnderlyingParseError): ...
class InvalidFlagValueError(UnderlyingParseError): ...


class HelpRequestedError(UnderlyingParseError):
    __status__ = 0

    def __trigger__(self) -> None:
        # usage has already been printed by the flag set
        if not self.options["shell"]:
            raise self from None
        sys.exit(self.__status__)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagsException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise the fault is raised.

    typical options
    - prog, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to keep (e.g., token/name/value).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlagsException",
    "NoArgumentsProvidedError",
    "InvalidSchemaRootError",
    "FlagRedefinedError",
    "InvalidFlagNameError",
    "UnderlyingParseError",
    "MalformedTokenError",
    "UnknownFlagError",
    "MissingFlagValueError",
    "InvalidFlagValueError",
    "HelpRequestedError",
    "FaultCode",
    "trigger",
    "getdoc",
)
