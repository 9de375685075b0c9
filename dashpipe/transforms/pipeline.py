"""Transform pipeline executor applying stages in a fixed order."""

import logging
from typing import Any

from dashpipe.core.exceptions import TransformError
from dashpipe.core.rows import Row
from dashpipe.models.transform_config import TransformConfig
from dashpipe.transforms.registry import Stage, get_stage

logger = logging.getLogger(__name__)

# Aggregation must see filtered and sorted rows. When both aggregations and
# groupBy are set, the single aggregate row is grouped afterwards.
STAGE_ORDER: tuple[str, ...] = ("filter", "sort", "aggregate", "group", "paginate")


class TransformPipeline:
    """Executes the configured stages on a row list.

    Stages run in ``STAGE_ORDER`` regardless of the order of keys in the
    config. A failing stage aborts the whole run; no partial result is
    returned.
    """

    def __init__(self, config: TransformConfig):
        """Initialize pipeline with transform configuration.

        Args:
            config: TransformConfig selecting the stages to apply.
        """
        self._config = config

    def stages(self) -> list[tuple[str, Stage]]:
        """Return the enabled stages in execution order."""
        enabled = []
        for stage_type in STAGE_ORDER:
            stage = get_stage(stage_type, self._config)
            if stage is not None:
                enabled.append((stage_type, stage))
        return enabled

    def apply(self, rows: Any) -> list[Row]:
        """Apply all enabled stages sequentially to rows.

        Args:
            rows: List of row mappings.

        Returns:
            Transformed rows (a single summary row after aggregation).

        Raises:
            TransformError: If the input is not a list of rows or a stage fails.
        """
        current = self._validate_rows(rows)

        for stage_type, stage in self.stages():
            current = self._apply_stage(current, stage_type, stage)
            logger.debug(
                f"Stage '{stage_type}' produced {len(current)} rows",
                extra={"context": {"stage": stage_type}},
            )

        return current

    def _apply_stage(self, rows: list[Row], stage_type: str, stage: Stage) -> list[Row]:
        try:
            return stage.apply(rows)
        except TransformError:
            raise
        except Exception as e:
            raise TransformError(
                f"Transform failed at stage '{stage_type}'",
                context={"stage_type": stage_type, "error": str(e)},
            ) from e

    def _validate_rows(self, rows: Any) -> list[Row]:
        if not isinstance(rows, list):
            raise TransformError(
                "Transform input must be a list of rows",
                context={"input_type": type(rows).__name__},
            )
        for row_index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise TransformError(
                    f"Row {row_index} is not an object",
                    context={"row_index": row_index, "row_type": type(row).__name__},
                )
        return list(rows)
