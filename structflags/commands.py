"""
structflags command routing: find the active command and the tokens it owns.

The command line is expected as

    <program> [global flags] [command] [command flags]

identify_command() picks the command token, command_args() cuts the slice of
tokens that follows it.
"""


def identify_command(commands, args, /):
    """
    return the first non-flag token of `args` that names a known command.

    - tokens starting with '-' are skipped, never matched.
    - matching is exact and case-sensitive (command names are registered lower-cased).
    - returns "" when no token matches; that is a valid state, not an error.

    example
        >>> identify_command({"foo", "bar"}, ["-d", "foo", "-a", "x"])
        'foo'
    """
    for arg in args:
        if arg.startswith("-"):
            continue
        if arg in commands:
            return arg
    return ""


def command_args(command, args, /):
    """
    return the tokens strictly after the first literal occurrence of `command`.

    an empty `command`, or one that does not occur in `args`, yields [].

    example
        >>> command_args("foo", ["-d", "foo", "-a", "x"])
        ['-a', 'x']
    """
    if not command:
        return []
    args = list(args)
    try:
        return args[args.index(command) + 1:]
    except ValueError:
        return []


__all__ = (
    "identify_command",
    "command_args",
)
