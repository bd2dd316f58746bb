"""Command-line entrypoint for commit line statistics."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from commit_stats.classify import ClassifierRegistry, build_classifier_registry
from commit_stats.config import CliOverrides, StatsConfig, load_effective_config
from commit_stats.logging import JsonlStatsLogger, StatsEvent, sanitize_metadata, utc_timestamp
from commit_stats.repository import GitObjectStore
from commit_stats.stats import (
    CancellationToken,
    CommitStatsCalculator,
    ObjectResolutionError,
    Stats,
    StatsCancelledError,
)

NO_PARENT_MESSAGE = "no parent: statistics unavailable"
_TEXT_ROWS = (("Code", "code"), ("Comment", "comment"), ("Blank", "blank"), ("Total", "total"))


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for startup configuration."""
    parser = argparse.ArgumentParser(prog="commit-stats")
    parser.add_argument("revisions", nargs="*", default=["HEAD"])
    parser.add_argument("--repo-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--format", choices=("text", "json"), required=False, default="text")
    parser.add_argument("--by-file", action="store_true")
    parser.add_argument(
        "--deleted-lines-as-deletions", choices=("true", "false"), required=False, default=None
    )
    parser.add_argument("--max-workers", type=int, required=False, default=None)
    parser.add_argument("--binary-sniff-bytes", type=int, required=False, default=None)
    parser.add_argument("--no-log", action="store_true")
    parser.add_argument("--recent", type=int, required=False, default=None)
    parser.add_argument("--since", required=False, default=None)
    return parser


class StatsRunner:
    """Compute stats for revisions and wrap each result in a response envelope."""

    def __init__(
        self,
        config: StatsConfig,
        store: GitObjectStore,
        log_enabled: bool = True,
        token: CancellationToken | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._registry: ClassifierRegistry = build_classifier_registry(config.classifiers)
        self._logger = (
            JsonlStatsLogger(path=config.data_dir / "stats.jsonl") if log_enabled else None
        )
        self._token = token or CancellationToken()

    def close(self) -> None:
        """Release repository resources."""
        self._store.close()

    def run(self, revision: str, by_file: bool = False) -> dict[str, object]:
        """Compute stats for one revision and return a response envelope.

        ``BASE..REV`` compares REV against BASE instead of its first parent;
        either side defaults to HEAD when omitted.
        """
        profile: dict[str, object] = {}
        calculator = CommitStatsCalculator(
            store=self._store,
            registry=self._registry,
            filters=self._config.filters,
            options=self._config.stats,
            token=self._token,
        )
        base: str | None = None
        target = revision
        try:
            if ".." in revision:
                base_rev, _, target = revision.partition("..")
                base = self._store.resolve_commit(base_rev or "HEAD")
            commit = self._store.resolve_commit(target or "HEAD")
            file_stats = calculator.do_by_file(commit, base=base, profile=profile)
        except ObjectResolutionError as error:
            response = self.error_response(revision, "OBJECT_RESOLUTION", str(error))
            self.log_result(revision, response, profile)
            return response
        except StatsCancelledError as error:
            response = self.error_response(revision, "CANCELLED", str(error))
            self.log_result(revision, response, profile)
            return response

        result: dict[str, object] | None = None
        if file_stats is not None:
            total = Stats()
            for item in file_stats:
                total.sum(item.stats)
            result = {"stats": total.to_dict()}
            if by_file:
                result["files"] = [item.to_dict() for item in file_stats]
        response = self.success_response(commit, result, base=base)
        self.log_result(commit, response, profile)
        return response

    @staticmethod
    def success_response(
        commit: str,
        result: dict[str, object] | None,
        base: str | None = None,
    ) -> dict[str, object]:
        """Build success envelope; a null result marks a root commit."""
        response: dict[str, object] = {"commit": commit, "ok": True, "result": result}
        if base is not None:
            response["base"] = base
        return response

    @staticmethod
    def error_response(commit: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "commit": commit,
            "ok": False,
            "result": {},
            "error": {"code": code, "message": message},
        }

    def log_result(
        self,
        commit: str,
        response: dict[str, object],
        profile: dict[str, object],
    ) -> None:
        """Log one sanitized computation event."""
        if self._logger is None:
            return
        error_code: str | None = None
        error_payload = response.get("error")
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str):
                error_code = code_value
        metadata: dict[str, object] = dict(profile)
        result = response.get("result")
        if isinstance(result, dict) and isinstance(result.get("stats"), dict):
            metadata["stats"] = result["stats"]
        base = response.get("base")
        if isinstance(base, str):
            metadata["base"] = base
        event = StatsEvent(
            timestamp=utc_timestamp(),
            commit=commit,
            ok=bool(response.get("ok", False)),
            error_code=error_code,
            metadata=sanitize_metadata(metadata),
        )
        self._logger.append(event)


def create_runner(
    repo_root: str,
    cli_overrides: CliOverrides | None = None,
    log_enabled: bool = True,
) -> StatsRunner:
    """Create a configured runner over the repository at repo_root."""
    config = load_effective_config(repo_root=Path(repo_root).resolve(), overrides=cli_overrides)
    store = GitObjectStore.open(config.repo_root)
    return StatsRunner(config=config, store=store, log_enabled=log_enabled)


def render_text(response: dict[str, object]) -> str:
    """Render one response envelope as a plain text block."""
    lines = [f"commit {response.get('commit')}"]
    base = response.get("base")
    if isinstance(base, str):
        lines.append(f"base {base}")
    error = response.get("error")
    if isinstance(error, dict):
        lines.append(f"error [{error.get('code')}]: {error.get('message')}")
        return "\n".join(lines) + "\n"
    result = response.get("result")
    if not isinstance(result, dict):
        lines.append(NO_PARENT_MESSAGE)
        return "\n".join(lines) + "\n"
    files = result.get("files")
    if isinstance(files, list):
        for item in files:
            stats = item["stats"]["total"]
            language = item.get("language") or "-"
            lines.append(
                f"  {item['action']:<6} {item['path']} ({language}) "
                f"+{stats['additions']}/-{stats['deletions']}"
            )
    stats_payload = result["stats"]
    for label, key in _TEXT_ROWS:
        kind = stats_payload[key]
        lines.append(f"{label} (+{kind['additions']}/-{kind['deletions']})")
    lines.append(f"Files ({stats_payload['files']})")
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the commit-stats command."""
    out = out_stream or sys.stdout
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    deleted_lines_as_deletions: bool | None = None
    if args.deleted_lines_as_deletions == "true":
        deleted_lines_as_deletions = True
    if args.deleted_lines_as_deletions == "false":
        deleted_lines_as_deletions = False
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        binary_sniff_bytes=args.binary_sniff_bytes,
        deleted_lines_as_deletions=deleted_lines_as_deletions,
        max_workers=args.max_workers,
    )
    if args.recent is not None:
        return _show_recent(args.repo_root, overrides, args.recent, args.since, args.format, out)

    try:
        runner = create_runner(
            repo_root=args.repo_root, cli_overrides=overrides, log_enabled=not args.no_log
        )
    except ValueError as error:
        _emit(out, args.format, StatsRunner.error_response("", "INVALID_CONFIG", str(error)))
        return 1
    except ObjectResolutionError as error:
        _emit(out, args.format, StatsRunner.error_response("", "OBJECT_RESOLUTION", str(error)))
        return 1

    exit_code = 0
    try:
        for revision in args.revisions:
            response = runner.run(revision, by_file=args.by_file)
            if not response["ok"]:
                exit_code = 1
            _emit(out, args.format, response)
    finally:
        runner.close()
    return exit_code


def _show_recent(
    repo_root: str,
    overrides: CliOverrides,
    limit: int,
    since: str | None,
    output_format: str,
    out: TextIO,
) -> int:
    """Print recent logged computations, oldest first."""
    try:
        config = load_effective_config(repo_root=Path(repo_root).resolve(), overrides=overrides)
    except ValueError as error:
        _emit(out, output_format, StatsRunner.error_response("", "INVALID_CONFIG", str(error)))
        return 1
    events = JsonlStatsLogger(path=config.data_dir / "stats.jsonl").read(since=since, limit=limit)
    for event in events:
        if output_format == "json":
            out.write(f"{json.dumps(event, sort_keys=True)}\n")
            continue
        status = "ok" if event.get("ok") else event.get("error_code")
        out.write(f"{event.get('timestamp')} {event.get('commit')} {status}\n")
    out.flush()
    return 0


def _emit(out: TextIO, output_format: str, response: dict[str, object]) -> None:
    if output_format == "json":
        out.write(f"{json.dumps(response, sort_keys=True)}\n")
    else:
        out.write(render_text(response))
    out.flush()


if __name__ == "__main__":
    raise SystemExit(main())
