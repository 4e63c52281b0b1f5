import sys

from rich.pretty import pprint

from argentum import *


@method("Version", cancel=CancelMode.ABORT)
def version():
    print(__version__)


schema = ArgumentSchema(
    positional("Source", 0, required=True),
    multi("Tag", short="t", separator=","),
    dictionary("Define", short="D"),
    switch("Verbose", short="v"),
    version,
    options=ParseOptions(posix=True, auto_help=True),
)


if __name__ == '__main__':
    sys.exit(invoke(schema, callback=pprint))
