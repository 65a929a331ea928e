from rich.pretty import pprint

from keelson import *

program = Program("example", "Split strings and greet people", version="1.0.0")
program.version_option("--version", "Show version information")
program.help_option("-h, --help", "Show help for command")

split = program.command("split", "Split a string")
split.argument("<string>", "String to split")
split.option("-s, --separator [char]", "Separator character", ",")
split.option("--first", "Return only the first element")


@split.action
def _(args):
    parts = args.argument("string").split(args.option("separator"))
    pprint(parts[0] if args.flag("first") else parts)
    return 0


@command
def greet(args):
    """Greet someone"""
    name = args.argument("name")
    print(f"Hello, {name}{"!" if args.flag("excited") else "."}")
    return 0


greet.argument("[name]", "Who to greet", "world")
greet.option("-e, --excited", "Add some enthusiasm")

program.add(greet)
program.add(helper())


if __name__ == '__main__':
    program.main()
