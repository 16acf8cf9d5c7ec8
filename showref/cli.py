"""CLI: argparse, option normalization and the single fatal-error exit point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import default_abbrev, parse_abbrev
from .constants import ABBREV_FULL
from .errors import FatalError, ShowRefError
from .repo import Repository
from .show_ref import ShowRefOptions, dispatch

USAGE = (
    "showref [-q | --quiet] [--verify] [--head] [-d | --dereference]\n"
    "               [-s | --hash[=<n>]] [--abbrev[=<n>]] [--tags]\n"
    "               [--heads] [--] [<pattern>...]\n"
    "       showref --exclude-existing[=<pattern>]"
)


def _expand_optional_values(argv: Sequence[str]) -> List[str]:
    """Rewrite options whose value is optional and attached into hidden options.

    '--hash=8' and '-s8' become '--hash --hash-digits=8', '--abbrev=6' becomes
    '--abbrev-digits=6' and '--exclude-existing=<p>' becomes
    '--exclude-existing --exclude-existing-pattern=<p>'. The value stays in the
    same word, so one starting with '-' is not read as an option. A detached
    word is never taken as the value: 'showref -s main' keeps 'main' as a pattern.
    """
    out: List[str] = []
    for i, arg in enumerate(argv):
        if arg == "--":
            out.extend(argv[i:])
            break
        if arg.startswith("--hash="):
            out += ["--hash", "--hash-digits=" + arg[len("--hash="):]]
        elif arg.startswith("-s") and len(arg) > 2 and arg[2:].isdigit():
            out += ["--hash", "--hash-digits=" + arg[2:]]
        elif arg.startswith("--abbrev="):
            out.append("--abbrev-digits=" + arg[len("--abbrev="):])
        elif arg.startswith("--exclude-existing="):
            out += ["--exclude-existing", "--exclude-existing-pattern=" + arg[len("--exclude-existing="):]]
        else:
            out.append(arg)
    return out


class _AbbrevAction(argparse.Action):
    """Record the latest abbreviation flag as (kind, value); a later flag replaces an earlier one."""

    def __init__(self, option_strings, dest, kind, **kwargs) -> None:
        self.kind = kind
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        setattr(namespace, self.dest, (self.kind, values if isinstance(values, str) else None))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="showref",
        usage=USAGE,
        description="List references in a local repository.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("--tags", dest="tags_only", action="store_true", help="Only show tags (can be combined with heads)")
    parser.add_argument("--heads", dest="heads_only", action="store_true", help="Only show heads (can be combined with tags)")
    parser.add_argument("--verify", action="store_true", help="Stricter reference checking, requires exact ref path")
    parser.add_argument("-h", dest="show_head", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--head", dest="show_head", action="store_true", help="Show the HEAD reference, even if it would be filtered out")
    parser.add_argument("-d", "--dereference", action="store_true", help="Dereference tags into object IDs")
    parser.add_argument("-s", "--hash", dest="hash_only", action="store_true", help="Only show SHA1 hash (--hash=<n> for <n> digits)")
    parser.add_argument("--hash-digits", dest="abbrev_setting", action=_AbbrevAction, kind="digits", help=argparse.SUPPRESS)
    parser.add_argument("--abbrev", dest="abbrev_setting", action=_AbbrevAction, kind="default", nargs=0, help="Use abbreviated object names (--abbrev=<n> for <n> digits)")
    parser.add_argument("--abbrev-digits", dest="abbrev_setting", action=_AbbrevAction, kind="digits", help=argparse.SUPPRESS)
    parser.add_argument("--no-abbrev", dest="abbrev_setting", action=_AbbrevAction, kind="full", nargs=0, help="Show full object names")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print results to stdout (useful with --verify)")
    parser.add_argument("--exclude-existing", action="store_true", help="Show refs from stdin that aren't in local repository (--exclude-existing=<pattern> to filter)")
    parser.add_argument("--exclude-existing-pattern", default=None, help=argparse.SUPPRESS)
    parser.add_argument("patterns", nargs="*", help="Patterns (or refs with --verify)")
    return parser


def build_options(args: argparse.Namespace, repo: Repository) -> ShowRefOptions:
    """Turn parsed arguments into ShowRefOptions; the last abbreviation flag given decides."""
    abbrev = ABBREV_FULL
    if args.abbrev_setting is not None:
        kind, value = args.abbrev_setting
        if kind == "digits":
            abbrev = parse_abbrev(value)
        elif kind == "default":
            abbrev = default_abbrev(repo)
    return ShowRefOptions(
        quiet=args.quiet,
        hash_only=args.hash_only,
        dereference=args.dereference,
        abbrev=abbrev,
        show_head=args.show_head,
        heads_only=args.heads_only,
        tags_only=args.tags_only,
        verify=args.verify,
        exclude_existing=args.exclude_existing,
        exclude_pattern=args.exclude_existing_pattern,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    raw_args = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(_expand_optional_values(raw_args))
    try:
        repo = Repository.discover(Path.cwd())
        options = build_options(args, repo)
        return dispatch(repo, options, args.patterns)
    except FatalError as e:
        print(f"fatal: {e}", file=sys.stderr)
        return e.exit_code
    except ShowRefError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
