"""Languages command: list the known comment syntaxes."""

import argparse

from ..output import print_languages


def cmd_languages(args: argparse.Namespace) -> int:
    print_languages(args.workspace_config.languages)
    return 0
