import argparse
import logging
import sys

from policygate import POLICYGATE_VERSION
from policygate.cli import check
from policygate.cli.exitcodes import EXIT_ENGINE_ERROR


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="policygate", description="Policygate: declarative repository policies for PRs")
    p.add_argument("--version", action="version", version=f"%(prog)s {POLICYGATE_VERSION}")

    sub = p.add_subparsers(dest="cmd", required=True)

    # check
    check_p = sub.add_parser("check", help="Evaluate the repository policy for a pull request.")
    check_p.add_argument("path", nargs="?", default=".", help="Repository checkout root (default: .)")
    check_p.add_argument("--config", default=None, help="Policy file (default: .repo-policy.yml).")
    check_p.add_argument("--title", default=None, help="PR title (default: read from the GitHub event).")
    check_p.add_argument("--lockfile", default=None, help="Lock manifest (default: package-lock.json).")
    check_p.add_argument("--format", choices=["text", "json", "github"], default="text", help="Output format.")
    check_p.add_argument(
        "--fail-on", dest="fail_on", choices=["warn", "error"], default=None, help="Override the fail threshold."
    )
    check_p.add_argument("--comment", action="store_true", help="Create or update the PR comment (needs GITHUB_TOKEN).")
    verbosity = check_p.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Minimal output (summary only).")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Verbose output (include all details).")

    return p


def _configure_logging(verbosity: str) -> None:
    level = {"quiet": logging.ERROR, "verbose": logging.DEBUG}.get(verbosity, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.cmd == "check":
            verbosity = "quiet" if args.quiet else ("verbose" if args.verbose else "normal")
            _configure_logging(verbosity)
            return check.run(
                path=args.path,
                config=args.config,
                title=args.title,
                lockfile=args.lockfile,
                fmt=args.format,
                fail_on=args.fail_on,
                comment=args.comment,
                verbosity=verbosity,
            )

        print("Unknown command.", file=sys.stderr)
        return EXIT_ENGINE_ERROR

    except Exception as e:
        print(f"policygate: error: {e}", file=sys.stderr)
        return EXIT_ENGINE_ERROR


if __name__ == "__main__":
    sys.exit(main())
