"""Group stage: partition rows by the value of one column."""

from typing import Optional

from dashpipe.core.rows import Row
from dashpipe.core.type_mapping import MISSING, to_text
from dashpipe.models.transform_config import TransformConfig
from dashpipe.transforms.registry import register_stage


class GroupStage:
    """Emits ``{group_by: key, items: [...], count: n}`` per distinct key.

    Keys are the text form of the column value; groups appear in the order
    their key was first seen.
    """

    def __init__(self, group_by: str):
        self._group_by = group_by

    def apply(self, rows: list[Row]) -> list[Row]:
        groups: dict[str, list[Row]] = {}
        for row in rows:
            key = to_text(row.get(self._group_by, MISSING))
            groups.setdefault(key, []).append(row)

        return [
            {self._group_by: key, "items": items, "count": len(items)}
            for key, items in groups.items()
        ]


@register_stage("group")
def create_group_stage(config: TransformConfig) -> Optional[GroupStage]:
    """Factory for GroupStage."""
    if not config.group_by:
        return None
    return GroupStage(config.group_by)
