"""Usage scanner: client-reference resolution and operation-call extraction."""

from opsprune.scan.calls import iter_operation_calls
from opsprune.scan.clients import ClientMatcher, ClientResolver
from opsprune.scan.models import ClientReference, ExportedClient, FileAnalysis, OperationCall
from opsprune.scan.ops import scan_usage

__all__ = [
    "ClientMatcher",
    "ClientReference",
    "ClientResolver",
    "ExportedClient",
    "FileAnalysis",
    "OperationCall",
    "iter_operation_calls",
    "scan_usage",
]
