from typing import Dict, FrozenSet, Optional, Sequence

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)


# ASGI send/receive spans emitted once per body chunk
CHUNK_EVENT_TYPES = frozenset({"http.request", "http.response.body"})


class ChunkSpanFilter(SpanExporter):
    """Exporter wrapper dropping per-chunk spans of relayed request and response bodies."""

    def __init__(
        self, exporter: SpanExporter, dropped: FrozenSet[str] = CHUNK_EVENT_TYPES
    ):
        self._exporter = exporter
        self._dropped = dropped

    def _keep(self, span: ReadableSpan) -> bool:
        attributes = span.attributes or {}
        return attributes.get("asgi.event.type") not in self._dropped

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        kept = [span for span in spans if self._keep(span)]
        if not kept:
            return SpanExportResult.SUCCESS
        return self._exporter.export(kept)

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


def _parse_headers(raw: str) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for entry in raw.split(","):
        key, sep, value = entry.partition("=")
        if sep and key.strip():
            headers[key.strip()] = value.strip()
    return headers


def configure_tracing(
    service_name: str, otlp_endpoint: Optional[str], otlp_headers: str = ""
) -> TracerProvider:
    """Install the process tracer provider, exporting over OTLP when an endpoint is set."""
    tracer_provider = TracerProvider(
        resource=Resource.create({"service.name": service_name})
    )
    if otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(
            endpoint=otlp_endpoint, headers=_parse_headers(otlp_headers) or None
        )
        tracer_provider.add_span_processor(
            BatchSpanProcessor(ChunkSpanFilter(otlp_exporter))
        )
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider
