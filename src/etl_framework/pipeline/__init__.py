"""
Pipeline Package - Orchestration.

Components:
    - PipelineBuilder: Declares ordered steps and their validators
    - Pipeline: Run loop, error-strategy dispatch, per-step timing
    - EtlRunner / run_etl: Fixed extract-transform-load sequence

The pipeline is responsible for:
    - Invoking each step through the retry executor
    - Routing step output through its validator
    - Collecting errors or halting, per the error strategy
    - Recording one timing per step and per validation

Design Principles:
    - All collaborators injected via constructor
    - Run state is private to one run; nothing escapes ``run`` as an exception
"""

from etl_framework.pipeline.builder import PipelineBuilder
from etl_framework.pipeline.errors import PipelineDefinitionError
from etl_framework.pipeline.etl import EtlRunner, run_etl
from etl_framework.pipeline.orchestrator import Pipeline, normalize_invalid_items

__all__ = [
    "EtlRunner",
    "Pipeline",
    "PipelineBuilder",
    "PipelineDefinitionError",
    "normalize_invalid_items",
    "run_etl",
]
