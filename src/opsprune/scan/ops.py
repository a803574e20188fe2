"""Usage scan entry point: project -> UsageMap."""

from __future__ import annotations

import time
from collections.abc import Sequence
from pathlib import Path

import structlog

from opsprune.config.models import ScanConfig
from opsprune.parsing import TreeSitterParser
from opsprune.project import ImportPathResolver, load_tsconfig, matches_any
from opsprune.scan.calls import iter_operation_calls
from opsprune.scan.clients import ClientMatcher, ClientResolver
from opsprune.scan.models import FileAnalysis
from opsprune.usage import UsageMap, build_usage_map

log = structlog.get_logger(__name__)


def scan_usage(
    tsconfig_path: Path | str,
    include_globs: Sequence[str] | None = None,
    *,
    config: ScanConfig | None = None,
) -> UsageMap:
    """Scan a TypeScript project for ``client.models.<Model>.<op>()`` calls.

    Args:
        tsconfig_path: Project configuration file; its include/exclude/files
            define the project, its baseUrl/paths drive import resolution.
        include_globs: Restrict call extraction to matching files. Relative
            globs match paths relative to the tsconfig directory. Defaults to
            ``config.include``. Export discovery always covers every file.
        config: Scanner configuration (factory names, typed-client opt-in).

    Returns:
        UsageMap with sorted, duplicate-free operations per model.

    Raises:
        ProjectError: If the tsconfig is missing or malformed.
    """
    config = config or ScanConfig()
    start = time.perf_counter()

    tsconfig = load_tsconfig(tsconfig_path)
    project_files = tsconfig.source_files()
    globs = list(include_globs) if include_globs else config.include
    targets = [p for p in project_files if matches_any(p, globs, tsconfig.root_dir)]
    log.info(
        "scan_started",
        tsconfig=str(tsconfig.path),
        project_files=len(project_files),
        target_files=len(targets),
    )

    parser = TreeSitterParser()
    resolver = ClientResolver(
        ClientMatcher(config.client_factories, config.client_type_names),
        parser,
        ImportPathResolver(
            project_files,
            base_url=tsconfig.base_url,
            paths=tsconfig.paths,
            paths_base=tsconfig.paths_base,
        ),
    )

    # Phase 1: parse every file once, build the global export table
    analyses: dict[Path, FileAnalysis] = {}
    for path in project_files:
        try:
            parsed = parser.parse(path)
        except OSError as e:
            log.warning("scan_file_unreadable", path=str(path), error=str(e))
            continue
        analyses[path] = resolver.analyze(parsed)
        log.debug("scan_file_parsed", path=str(path), errors=parsed.error_count)
    exports = resolver.discover_exports(analyses.values())

    # Phase 2: per-file resolution and extraction
    pairs: list[tuple[str, str]] = []
    for path in targets:
        analysis = analyses.get(path)
        if analysis is None:
            continue
        clients = resolver.resolve_file(analysis, exports)
        for call in iter_operation_calls(analysis.parsed.root_node, clients, path):
            log.debug(
                "operation_call_found",
                path=str(path),
                line=call.line,
                model=call.model,
                operation=call.operation,
            )
            pairs.append((call.model, call.operation))

    usage = build_usage_map(pairs)
    log.info(
        "scan_completed",
        models=len(usage),
        calls=len(pairs),
        exports=sum(len(v) for v in exports.values()),
        elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return usage
