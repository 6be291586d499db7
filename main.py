from dataclasses import dataclass, field

from rich.pretty import pprint

from structflags import *


@dataclass
class Foo:
    aaa: str = field(default="", metadata={"short": "a", "usage": "first foo value"})
    bbb: str = field(default="", metadata={"short": "b", "usage": "second foo value"})


@dataclass
class Bar:
    ccc: bool = field(default=False, metadata={"short": "c", "usage": "toggle bar"})


@dataclass
class Schema:
    debug: bool = field(default=False, metadata={"short": "d", "usage": "enable debug output"})
    number: int = field(default=0, metadata={"short": "n", "usage": "how many times"})
    message: str = field(default="", metadata={"short": "m", "usage": "what to say"})
    foo: Foo = field(default_factory=Foo)
    bar: Bar = field(default_factory=Bar)


if __name__ == '__main__':
    # e.g. python main.py -debug -n 123 -m "something here" foo -a beepboop -b 666
    schema = Schema()
    parse(schema, shell=True, fancy=True)
    pprint(schema)
