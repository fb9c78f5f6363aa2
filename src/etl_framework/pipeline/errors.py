"""Errors raised while declaring a pipeline."""


class PipelineDefinitionError(ValueError):
    """Raised when steps or validators are declared inconsistently."""
