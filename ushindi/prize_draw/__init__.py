"""Winner reveal sequencing and results export."""

from .export import ResultsExporter, build_results_document, export_filename
from .sequencer import DrawSequencer, RevealStep, StepPhase, build_reveal_steps

__all__ = [
    "DrawSequencer",
    "RevealStep",
    "StepPhase",
    "build_reveal_steps",
    "ResultsExporter",
    "build_results_document",
    "export_filename",
]
