#!/usr/bin/env python3
"""Command-line entry point for changelog-env.

Commands:
  run         Run the "Changelog to ENV" step against a build directory
  configure   Persist the global step options
  check-name  Validate a step name the way the configuration form does
"""

import argparse
import functools
import logging
import sys
import traceback
from pathlib import Path

from .build_step import BuildContext, registry, run_steps
from .changelog_step import STEP_NAME
from .config import (
  CHANGELOG_ENV_VAR,
  CHANGELOG_FILE_NAME,
  AppConfig,
  ConfigStorage,
  GlobalConfig,
  configure,
  load_global_config,
)
from .env_action import write_env_file
from .exceptions import ChangelogEnvError, get_exit_code
from .git_source import write_changelog_from_repo
from .validation import check_name

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="changelog-env",
    description="Inject a build's changelog into the environment as $CHANGELOG",
  )
  parser.add_argument(
    "--config-dir", type=Path, help="Directory holding the global configuration"
  )
  parser.add_argument("--log-level", default=AppConfig.LOG_LEVEL, help="Logging level")
  subparsers = parser.add_subparsers(dest="command", required=True)

  run = subparsers.add_parser("run", help="Run the changelog step for a build")
  run.add_argument("--build-dir", type=Path, required=True, help="Build directory")
  run.add_argument("--name", required=True, help="Name greeted in the build log")
  run.add_argument(
    "--env-file",
    type=Path,
    default=Path(AppConfig.ENV_FILE) if AppConfig.ENV_FILE else None,
    help="Dotenv file receiving the injected variables",
  )
  run.add_argument(
    "--french",
    action=argparse.BooleanOptionalAction,
    default=None,
    help="Override the global greeting language for this run",
  )
  run.add_argument(
    "--strict",
    action="store_true",
    help="Fail on message lines that precede any committer line",
  )
  run.add_argument(
    "--fail-on-unavailable",
    action="store_true",
    help="Fail instead of continuing when the changelog can't be read",
  )
  run.add_argument(
    "--from-repo", type=Path, help=f"Generate {CHANGELOG_FILE_NAME} from this git repository"
  )
  run.add_argument(
    "--rev-range", default="HEAD", help="Revisions to include with --from-repo"
  )

  conf = subparsers.add_parser("configure", help="Persist global options")
  conf.add_argument(
    "--french",
    action=argparse.BooleanOptionalAction,
    required=True,
    help="Greet in French",
  )

  check = subparsers.add_parser("check-name", help="Validate a step name")
  check.add_argument("value", help="Name to check")

  return parser


def run_command(args: argparse.Namespace) -> int:
  storage = ConfigStorage(config_dir=args.config_dir)
  global_config = load_global_config(storage)
  if args.french is not None:
    global_config = GlobalConfig(use_french=args.french)

  build_dir = args.build_dir.resolve()
  if args.from_repo:
    write_changelog_from_repo(args.from_repo, build_dir / CHANGELOG_FILE_NAME, args.rev_range)

  step = registry.create(
    STEP_NAME,
    name=args.name,
    global_config=global_config,
    strict=args.strict,
    fail_on_unavailable=args.fail_on_unavailable,
  )
  context = BuildContext(build_dir=build_dir, log=functools.partial(print, file=sys.stderr))
  results = run_steps([step], context)

  if not all(result.success for result in results):
    failed = results[-1]
    if failed.error:
      logger.error(f"[{failed.error.source}] {failed.error.name}: {failed.error.description}")
    return 1

  if CHANGELOG_ENV_VAR not in context.env:
    return 0

  if args.env_file:
    write_env_file(args.env_file, {CHANGELOG_ENV_VAR: context.env[CHANGELOG_ENV_VAR]})
    logger.info(f"Wrote {CHANGELOG_ENV_VAR} to {args.env_file}")
  else:
    print(context.env[CHANGELOG_ENV_VAR])
  return 0


def configure_command(args: argparse.Namespace) -> int:
  storage = ConfigStorage(config_dir=args.config_dir)
  config = configure({"useFrench": args.french}, storage)
  print(f"✓ use_french = {config.use_french} ({storage.config_file})")
  return 0


def check_name_command(args: argparse.Namespace) -> int:
  result = check_name(args.value)
  print(f"{result.kind}: {result.message}" if result.message else result.kind)
  return 2 if result.is_error else 0


COMMANDS = {
  "run": run_command,
  "configure": configure_command,
  "check-name": check_name_command,
}


def main(argv: list[str] | None = None) -> int:
  """Main entry point."""
  parser = build_parser()
  args = parser.parse_args(argv)

  logging.basicConfig(
    level=args.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
  )

  try:
    return COMMANDS[args.command](args)
  except ChangelogEnvError as e:
    logger.error(f"[{e.source}] {e.name}: {e.description}")
    return get_exit_code(e.source)
  except Exception as e:
    logger.error(f"Unexpected error running {args.command}: {e}")
    traceback.print_exc()
    return 1


if __name__ == "__main__":
  sys.exit(main())
