from rich.pretty import pprint

from optkit import *

options = Options("main", "optkit demo", shell=True)
options.add_options()(
    "h,help", "print this help"
)(
    "d,debug", "enable debugging"
)(
    "file", "file to read", value(str)
)(
    "args", "extra arguments", value(list[str])
)
options.parse_positional("file", "args")


if __name__ == '__main__':
    result = options.parse()
    if result.count("help"):
        options.print_help()
    else:
        pprint(result)
