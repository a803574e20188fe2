"""Client-reference resolution.

Determines, per source file, the set of local identifiers that denote a
generated data client. Identity is inferred purely from syntactic shape:

- a variable initialised by a direct call to a client factory
  (``const client = generateClient<Schema>()``)
- a function with any ``return <factory call>`` anywhere in its body, and
  every variable initialised by calling such a function (``await`` allowed)
- named imports of either of the above, resolved through the exporting
  file's ``export`` statements (aliases and re-exports included)
- optionally, variables and parameters annotated with a configured client
  type (``client: V6Client<Schema>``)

Resolution runs in two phases: exports of every project file are collected
first, then each file's imports are resolved against that global table.
This is a heuristic: it can both miss clients (destructuring, reassignment,
scoping) and over-match shadowed names.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from opsprune.parsing import (
    ParseResult,
    TreeSitterParser,
    call_callee_name,
    node_text,
    unquote,
    unwrap_parens,
    walk,
)
from opsprune.project import ImportPathResolver
from opsprune.scan.models import ClientKind, ClientReference, ExportedClient, FileAnalysis

log = structlog.get_logger(__name__)

_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
_FUNCTION_EXPRESSIONS = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
_VARIABLE_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})
_PARAMETERS = frozenset({"required_parameter", "optional_parameter"})


def _first_expression(node: Any) -> Any:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


class ClientMatcher:
    """Syntactic predicates for client-producing code."""

    def __init__(self, factories: Iterable[str], type_names: Iterable[str] = ()) -> None:
        self.factories = frozenset(factories)
        self.type_names = frozenset(type_names)

    def is_factory_call(self, node: Any) -> bool:
        return call_callee_name(unwrap_parens(node)) in self.factories

    def returns_client(self, function: Any) -> bool:
        """True if ANY return statement in the body returns a factory call.

        Nested functions are searched too, which over-approximates.
        """
        body = function.child_by_field_name("body")
        if body is None:
            return False
        if body.type != "statement_block":
            # Arrow function with an expression body
            return self.is_factory_call(body)
        for node in walk(body):
            if node.type == "return_statement":
                expr = _first_expression(node)
                if expr is not None and self.is_factory_call(expr):
                    return True
        return False

    def local_matches(self, root: Any) -> tuple[set[str], set[str]]:
        """Direct in-file matches: (client variables, client functions)."""
        variables: set[str] = set()
        functions: set[str] = set()
        for node in walk(root):
            if node.type == "variable_declarator":
                name = node.child_by_field_name("name")
                value = node.child_by_field_name("value")
                if name is None or name.type != "identifier" or value is None:
                    continue
                value = unwrap_parens(value)
                if self.is_factory_call(value):
                    variables.add(node_text(name))
                elif value.type in _FUNCTION_EXPRESSIONS and self.returns_client(value):
                    functions.add(node_text(name))
            elif node.type in _FUNCTION_DECLARATIONS:
                name = node.child_by_field_name("name")
                if name is not None and self.returns_client(node):
                    functions.add(node_text(name))
        return variables, functions

    def typed_clients(self, root: Any) -> set[str]:
        """Variables and parameters annotated with a configured client type."""
        if not self.type_names:
            return set()
        names: set[str] = set()
        for node in walk(root):
            if node.type == "variable_declarator":
                name = node.child_by_field_name("name")
            elif node.type in _PARAMETERS:
                name = node.child_by_field_name("pattern")
            else:
                continue
            if name is None or name.type != "identifier":
                continue
            if self._annotated_type(node.child_by_field_name("type")) in self.type_names:
                names.add(node_text(name))
        return names

    @staticmethod
    def _annotated_type(annotation: Any) -> str | None:
        """``V6Client`` for ``: V6Client<Schema>`` or ``: api.V6Client``."""
        if annotation is None:
            return None
        type_node = _first_expression(annotation)
        if type_node is not None and type_node.type == "generic_type":
            type_node = type_node.child_by_field_name("name")
        if type_node is None or type_node.type not in ("type_identifier", "nested_type_identifier"):
            return None
        return node_text(type_node).rsplit(".", 1)[-1]


class ClientResolver:
    """Two-phase client resolution over a whole project.

    Usage::

        resolver = ClientResolver(matcher, parser, import_resolver)
        analyses = [resolver.analyze(parser.parse(p)) for p in project_files]
        exports = resolver.discover_exports(analyses)
        clients = resolver.resolve_file(analyses[0], exports)
    """

    def __init__(
        self,
        matcher: ClientMatcher,
        parser: TreeSitterParser,
        import_resolver: ImportPathResolver,
    ) -> None:
        self._matcher = matcher
        self._parser = parser
        self._import_resolver = import_resolver

    def analyze(self, parsed: ParseResult) -> FileAnalysis:
        variables, functions = self._matcher.local_matches(parsed.root_node)
        return FileAnalysis(
            path=parsed.path,
            parsed=parsed,
            imports=self._parser.extract_imports(parsed),
            variables=variables,
            functions=functions,
        )

    # ----- Phase 1: export discovery -----

    def discover_exports(
        self, analyses: Iterable[FileAnalysis]
    ) -> dict[Path, list[ExportedClient]]:
        """Global export table: defining file -> exported clients."""
        table: dict[Path, list[ExportedClient]] = {}
        for analysis in analyses:
            exports = self.file_exports(analysis)
            if exports:
                table[analysis.path] = exports
                for exported in exports:
                    log.debug(
                        "client_export_found",
                        path=str(analysis.path),
                        local=exported.local_name,
                        exported=exported.exported_name,
                        kind=exported.kind,
                    )
        return table

    def file_exports(self, analysis: FileAnalysis) -> list[ExportedClient]:
        exports: list[ExportedClient] = []

        def _record(local: str, exported: str) -> None:
            kind = self._kind_of(analysis, local)
            if kind is not None:
                exports.append(ExportedClient(analysis.path, local, exported, kind))

        for stmt in analysis.parsed.root_node.named_children:
            if stmt.type != "export_statement":
                continue
            if stmt.child_by_field_name("source") is not None:
                # export { x } from './other' forwards another module's binding
                continue
            is_default = any(child.type == "default" for child in stmt.children)

            declaration = stmt.child_by_field_name("declaration")
            if declaration is not None:
                if declaration.type in _VARIABLE_DECLARATIONS:
                    for declarator in declaration.named_children:
                        name = declarator.child_by_field_name("name")
                        if declarator.type == "variable_declarator" and name is not None:
                            _record(node_text(name), node_text(name))
                elif declaration.type in _FUNCTION_DECLARATIONS:
                    name = declaration.child_by_field_name("name")
                    if name is not None:
                        _record(node_text(name), "default" if is_default else node_text(name))
                continue

            value = stmt.child_by_field_name("value")
            if value is not None and is_default:
                value = unwrap_parens(value)
                if value.type == "identifier":
                    _record(node_text(value), "default")
                elif self._matcher.is_factory_call(value):
                    exports.append(ExportedClient(analysis.path, "default", "default", "variable"))
                elif value.type in _FUNCTION_EXPRESSIONS and self._matcher.returns_client(value):
                    name = value.child_by_field_name("name")
                    local = node_text(name) if name is not None else "default"
                    exports.append(ExportedClient(analysis.path, local, "default", "function"))
                continue

            for clause in stmt.named_children:
                if clause.type != "export_clause":
                    continue
                for spec in clause.named_children:
                    if spec.type != "export_specifier":
                        continue
                    name = spec.child_by_field_name("name")
                    alias = spec.child_by_field_name("alias")
                    if name is None:
                        continue
                    local = unquote(node_text(name))
                    _record(local, unquote(node_text(alias)) if alias is not None else local)

        return exports

    @staticmethod
    def _kind_of(analysis: FileAnalysis, local: str) -> ClientKind | None:
        if local in analysis.variables:
            return "variable"
        if local in analysis.functions:
            return "function"
        return None

    # ----- Phase 2: per-file resolution -----

    def resolve_file(
        self,
        analysis: FileAnalysis,
        exports: dict[Path, list[ExportedClient]],
    ) -> set[str]:
        """All local identifiers denoting a client in this file."""
        variables = set(analysis.variables)
        functions = set(analysis.functions)

        for imp in analysis.imports:
            if imp.type_only or imp.imported_name == "*":
                continue
            target = self._import_resolver.resolve(imp.source_literal, analysis.path)
            if target is None:
                # Unresolvable (npm package, missing file): skipped
                continue
            for exported in exports.get(target, ()):
                if exported.exported_name != imp.imported_name:
                    continue
                if exported.kind == "variable":
                    variables.add(imp.local_name)
                else:
                    functions.add(imp.local_name)

        if functions:
            variables |= self._factory_results(analysis.parsed.root_node, functions)
        variables |= self._matcher.typed_clients(analysis.parsed.root_node)

        if variables:
            log.debug("file_clients_resolved", path=str(analysis.path), clients=sorted(variables))
        return variables

    @staticmethod
    def _factory_results(root: Any, functions: set[str]) -> set[str]:
        """Variables initialised by ``fn(...)`` or ``await fn(...)`` for a client function."""
        names: set[str] = set()
        for node in walk(root):
            if node.type != "variable_declarator":
                continue
            name = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if name is None or name.type != "identifier" or value is None:
                continue
            value = unwrap_parens(value)
            if value.type == "await_expression":
                inner = _first_expression(value)
                value = unwrap_parens(inner) if inner is not None else value
            if call_callee_name(value) in functions:
                names.add(node_text(name))
        return names

    def client_references(
        self,
        analysis: FileAnalysis,
        exports: dict[Path, list[ExportedClient]],
    ) -> list[ClientReference]:
        """``resolve_file`` as sorted (file, identifier) pairs."""
        return [
            ClientReference(analysis.path, name)
            for name in sorted(self.resolve_file(analysis, exports))
        ]
