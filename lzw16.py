import sys

from colorama import just_fix_windows_console

from lzwkit import dump, lzw

commands = {
    "lzw": lzw.main,
    "dump": dump.main,
}


def run() -> int:
    if len(sys.argv) < 2 or sys.argv[1] not in commands:
        print(f"Please specify a script to execute: [{', '.join([k for k in commands.keys()])}]")
        return 1
    just_fix_windows_console()
    return commands[sys.argv[1]](sys.argv[2:])


if __name__ == "__main__":
    sys.exit(run())
