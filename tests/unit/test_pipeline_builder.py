"""
Unit Tests for PipelineBuilder.

Test Aspects Covered:
    ✅ Business Logic: Declaration order, validator resolution
    ✅ Error Handling: Duplicate/empty/reserved names, metric key clashes, orphan validators
"""

from __future__ import annotations

import pytest

from etl_framework.domain.entities import Step
from etl_framework.domain.value_objects import Ok
from etl_framework.pipeline.builder import PipelineBuilder
from etl_framework.pipeline.errors import PipelineDefinitionError
from etl_framework.pipeline.orchestrator import Pipeline


def identity(value):
    return Ok(value)


class TestPipelineBuilder:
    """Test cases for step registration."""

    def test_keeps_declaration_order(self) -> None:
        pipeline = (
            PipelineBuilder("ordered")
            .add_step("extract", identity)
            .add_step("transform", identity)
            .add_step("load", identity)
            .build()
        )

        assert pipeline.step_names == ["extract", "transform", "load"]
        assert pipeline.name == "ordered"

    def test_steps_are_immutable(self) -> None:
        pipeline = PipelineBuilder().add_step("extract", identity).build()

        assert isinstance(pipeline.steps, tuple)
        with pytest.raises(Exception):  # FrozenInstanceError
            pipeline.steps[0].name = "other"

    def test_decorator_uses_function_name(self) -> None:
        builder = PipelineBuilder()

        @builder.step()
        def extract(_):
            return Ok([])

        @builder.step(name="custom")
        def something(_):
            return Ok([])

        assert builder.build().step_names == ["extract", "custom"]

    def test_validator_resolved_at_build(self) -> None:
        """
        SCENARIO: Validator declared after its step via decorator
        EXPECTED: Attached to that step only
        """
        builder = PipelineBuilder()
        builder.add_step("extract", identity)
        builder.add_step("load", identity)

        @builder.validator("extract")
        def validate_extract(data):
            return Ok(data)

        steps = builder.build().steps

        assert steps[0].validator is validate_extract
        assert steps[1].validator is None

    def test_validator_passed_inline(self) -> None:
        step = (
            PipelineBuilder().add_step("extract", identity, validator=identity).build().steps[0]
        )

        assert step.has_validator
        assert step.validation_metric == "extract_validation"

    def test_rejects_duplicate_step(self) -> None:
        builder = PipelineBuilder().add_step("extract", identity)

        with pytest.raises(PipelineDefinitionError):
            builder.add_step("extract", identity)

    def test_rejects_empty_name(self) -> None:
        with pytest.raises(PipelineDefinitionError):
            PipelineBuilder().add_step("", identity)

    def test_rejects_validator_for_undeclared_step(self) -> None:
        builder = PipelineBuilder().add_step("extract", identity)
        builder.validator("load")(identity)

        with pytest.raises(PipelineDefinitionError, match="load"):
            builder.build()

    def test_rejects_second_validator(self) -> None:
        builder = PipelineBuilder().add_step("extract", identity, validator=identity)

        with pytest.raises(PipelineDefinitionError):
            builder.validator("extract")(identity)

    def test_empty_pipeline_builds(self) -> None:
        assert PipelineBuilder().build().steps == ()

    def test_rejects_step_named_like_validation_metric(self) -> None:
        """
        SCENARIO: Step "load" has a validator, a later step is "load_validation"
        EXPECTED: Build fails instead of the two timings sharing one metric key
        """
        builder = (
            PipelineBuilder()
            .add_step("load", identity, validator=identity)
            .add_step("load_validation", identity)
        )

        with pytest.raises(PipelineDefinitionError, match="load_validation"):
            builder.build()

    def test_validation_metric_name_is_free_without_validator(self) -> None:
        pipeline = (
            PipelineBuilder()
            .add_step("load", identity)
            .add_step("load_validation", identity)
            .build()
        )

        assert len(pipeline.run(1).metrics) == 2

    def test_rejects_reserved_name(self) -> None:
        """
        SCENARIO: Step named "default"
        EXPECTED: Rejected, since "default_retry" is the policy for every step
        """
        with pytest.raises(PipelineDefinitionError, match="reserved"):
            PipelineBuilder().add_step("default", identity)


class TestPipelineConstructor:
    """Test that direct construction applies the same name checks."""

    @pytest.mark.parametrize(
        "steps",
        [
            [Step("extract", identity), Step("extract", identity)],
            [Step("", identity)],
            [Step("default", identity)],
            [Step("load", identity, identity), Step("load_validation", identity)],
        ],
    )
    def test_rejects_clashing_steps(self, steps) -> None:
        with pytest.raises(PipelineDefinitionError):
            Pipeline("direct", steps)

    def test_accepts_valid_steps(self) -> None:
        pipeline = Pipeline("direct", [Step("extract", identity), Step("load", identity)])

        assert pipeline.run(3).value == 3
