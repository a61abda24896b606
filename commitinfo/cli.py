"""Command-line interface for resolving commit metadata during a build."""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import List

from commitinfo.core import diagnostics, reporter, resolver, s3util
from commitinfo.core.config import DEFAULT_CONFIG_NAME, ConfigError, ResolveOptions, load_options

_LOG = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Resolve git commit metadata for a build")
    parser.add_argument("--project-dir", type=pathlib.Path, default=pathlib.Path("."), help="Project directory to resolve metadata for")
    parser.add_argument("--hash-length", type=int, default=None, help="Number of commit hash characters to keep (default 7)")
    parser.add_argument("--no-git", action="store_true", default=None, help="Do not run the git executable; read .git files only")
    parser.add_argument("--skip-status", action="store_true", default=None, help="Do not query branch, status or origin through git")
    parser.add_argument("--git-directory", default=None, help="Name of the git metadata directory (default .git)")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each git command")
    parser.add_argument("--config", type=pathlib.Path, default=None, help=f"Options file (default <project-dir>/{DEFAULT_CONFIG_NAME})")
    parser.add_argument("--out", type=pathlib.Path, help="Write output here instead of standard output")
    parser.add_argument("--format", action="append", choices=list(reporter.SUPPORTED_FORMATS), help="Output format, repeatable (defaults to json)")
    parser.add_argument("--env-prefix", default="", help="Prefix for keys in env output")
    parser.add_argument("--project-file", help="Build file reported as the source of diagnostics")
    parser.add_argument("--s3-bucket", help="Also publish the JSON result to this S3 bucket")
    parser.add_argument("--s3-key", help="Object key for --s3-bucket (defaults to commitinfo/<hash>.json)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging threshold for diagnostics")
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level INFO")
    return parser


def main(argv: List[str] | None = None, prog: str | None = None) -> int:
    parser = build_parser(prog)
    args = parser.parse_args(argv)

    level = "INFO" if args.verbose and args.log_level == "WARNING" else args.log_level
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s %(name)s: %(message)s")

    try:
        options = _load_options(args)
    except ConfigError as exc:
        parser.error(str(exc))

    location = (args.project_file, 0, 0) if args.project_file else None
    result = resolver.resolve(args.project_dir, options, location=location)
    diagnostics.log_diagnostics(result.diagnostics)

    formats = args.format or ["json"]
    if args.out:
        written = reporter.write_outputs(result, args.out, formats, env_prefix=args.env_prefix)
        print("Wrote " + " ".join(f"{fmt.upper()}={path}" for fmt, path in written.items()))
    else:
        for fmt in dict.fromkeys(formats):
            sys.stdout.write(reporter.render(result, fmt, env_prefix=args.env_prefix))
            if fmt == "json":
                sys.stdout.write("\n")

    if args.s3_bucket:
        try:
            s3util.publish_result(args.s3_bucket, args.s3_key, result)
        except Exception as exc:  # noqa: BLE001
            _LOG.warning("Unable to publish commit info to s3://%s: %s", args.s3_bucket, exc)
    # Missing metadata never fails the build.
    return 0


def _load_options(args: argparse.Namespace) -> ResolveOptions:
    config_path: pathlib.Path = args.config or args.project_dir / DEFAULT_CONFIG_NAME
    if args.config and not args.config.exists():
        raise ConfigError(f"Config file {args.config} does not exist")
    options = load_options(config_path)
    return options.merged(
        hash_length=args.hash_length,
        use_external_tool=False if args.no_git else None,
        skip_status=True if args.skip_status else None,
        git_directory=args.git_directory,
        timeout=args.timeout,
    )


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
