from .transform import FileOutcome, TransformReport, TransformRunner

__all__ = ["FileOutcome", "TransformReport", "TransformRunner"]
