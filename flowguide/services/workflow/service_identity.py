"""Identify the external service behind each build step.

Usage statistics group steps by the service they talk to. Most node types
name their service directly (``n8n-nodes-base.googleSheets`` is
``google-sheets``); generic HTTP request nodes are classified by the host in
their ``url`` parameter instead.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from flowguide.services.workflow.preprocessor import is_annotation_type
from flowguide.services.workflow.types import RealStep, Step

HTTP_REQUEST_NODE_TYPE = "n8n-nodes-base.httpRequest"
GENERIC_HTTP_SERVICE = "http-request"

_URL_HOST_RE = re.compile(r"https?://([^/{\s]+)")
_BARE_HOST_RE = re.compile(r"^([^/{\s]+)")
_HOST_PREFIX_RE = re.compile(r"^(api\.|www\.|m\.)")
_HOST_SUFFIX_RE = re.compile(r"\.com$|\.io$|\.net$|\.org$")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")

_KNOWN_HOST_SERVICES: tuple[tuple[str, str], ...] = (
    ("googleapis", "google-apis"),
    ("openai", "openai"),
    ("anthropic", "anthropic"),
    ("elevenlabs", "elevenlabs"),
)


@dataclass(frozen=True, slots=True)
class ServiceInfo:
    """Service a step talks to."""

    service_name: str
    host_identifier: str | None
    node_type: str


@dataclass(frozen=True, slots=True)
class ServiceUsage:
    """How many steps of one workflow use a service."""

    service_name: str
    host_identifier: str | None
    node_type: str
    count: int


def node_type_to_service_name(node_type: str) -> str:
    """``n8n-nodes-base.googleSheets`` -> ``google-sheets``."""
    name = node_type.rsplit(".", 1)[-1] or node_type
    return _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower()


def extract_host(url: object) -> str | None:
    """Host of an HTTP node URL, tolerating ``=`` expression prefixes."""
    if not isinstance(url, str) or not url:
        return None
    clean = url[1:] if url.startswith("=") else url
    match = _URL_HOST_RE.search(clean) or _BARE_HOST_RE.match(clean)
    return match.group(1) if match else None


def service_from_host(host: str) -> str:
    """``api.openai.com`` -> ``openai``, ``api.hedra.com`` -> ``hedra``."""
    name = _HOST_SUFFIX_RE.sub("", _HOST_PREFIX_RE.sub("", host))
    for marker, service in _KNOWN_HOST_SERVICES:
        if marker in name:
            return service
    return name.split(".")[-1] or name


def identify_service(step: RealStep) -> ServiceInfo:
    """Classify the service used by ``step``."""
    node_type = step.type
    if node_type == HTTP_REQUEST_NODE_TYPE:
        host = extract_host(step.node.parameters.get("url"))
        return ServiceInfo(
            service_name=service_from_host(host) if host else GENERIC_HTTP_SERVICE,
            host_identifier=host,
            node_type=node_type,
        )
    return ServiceInfo(
        service_name=node_type_to_service_name(node_type),
        host_identifier=None,
        node_type=node_type,
    )


def summarize_service_usage(steps: Sequence[Step]) -> list[ServiceUsage]:
    """Count service usage across a build order.

    Return steps and annotation nodes are skipped. Entries keep the order in
    which each ``(service_name, host_identifier)`` pair first appears.
    """
    counts: dict[tuple[str, str | None], ServiceUsage] = {}
    for step in steps:
        if not isinstance(step, RealStep) or is_annotation_type(step.type):
            continue
        info = identify_service(step)
        key = (info.service_name, info.host_identifier)
        current = counts.get(key)
        counts[key] = ServiceUsage(
            service_name=info.service_name,
            host_identifier=info.host_identifier,
            node_type=info.node_type if current is None else current.node_type,
            count=1 if current is None else current.count + 1,
        )
    return list(counts.values())


__all__ = [
    "GENERIC_HTTP_SERVICE",
    "HTTP_REQUEST_NODE_TYPE",
    "ServiceInfo",
    "ServiceUsage",
    "extract_host",
    "identify_service",
    "node_type_to_service_name",
    "service_from_host",
    "summarize_service_usage",
]
