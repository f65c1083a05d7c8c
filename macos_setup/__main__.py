from __future__ import annotations

import sys

from macos_setup.main import customize_system_main, install_software_main


def main(argv: list[str] | None = None) -> int:
    # `python -m macos_setup software|system [flags]`
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "system":
        return customize_system_main(args[1:])
    if args and args[0] == "software":
        args = args[1:]
    return install_software_main(args)


if __name__ == "__main__":
    raise SystemExit(main())
