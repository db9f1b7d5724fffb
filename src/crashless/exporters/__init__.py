"""Failure exporters: named observers shared by every middleware installation."""

from crashless.exporters.registry import (
    ExporterRegistry,
    Observer,
    RequestMeta,
    exporter_registry,
    register_exporter,
)

__all__ = ["ExporterRegistry", "Observer", "RequestMeta", "exporter_registry", "register_exporter"]
