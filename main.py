from rich.pretty import pprint

from argsmith import *

parser = (
    Parser("find duplicate files.", colorful=True)
    .argument(Argument.boolean("verbose", "V", "verbose execution"))
    .argument(Argument.string("path", "f", True, "directory to examine"))
    .argument(Argument.integer("depth", "d", False, "maximum recursion depth"))
    .argument(Argument.boolean("json", None, "format output as json"))
    .argument(Argument.boolean("csv", None, "format output as csv"))
    .group(Group.exclusive("format", False, {"json", "csv"}))
    .group(Group.conditional("detail", False, {"depth"}, {"verbose"}))
)


if __name__ == '__main__':
    arguments = parser.parse()
    pprint(arguments)
    pprint(arguments.get("depth", int, 8))
