"""Probes: versioned checks executed on plugins, and the engine running them."""

from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.engine import ProbeBatchResult, ProbeEngine, order_probes
from pluginhealth.probes.registry import default_probes

__all__ = [
    "Probe",
    "ProbeBatchResult",
    "ProbeContext",
    "ProbeEngine",
    "default_probes",
    "order_probes",
]
