"""Filter button rows for a stats response.

One row per filter dimension, one button per value. The button for the
currently selected value is disabled, every other button carries the trigger
token for the state it leads to. The same rows are sent twice per render
cycle: optimistically when a trigger is accepted, then with the final result.

A paginated view also gets a navigation row::

    [≪] [◀] [▶] [≫] [find me]

First/last only appear once there are more than two pages. Buttons that
would not move are disabled; "find me" is always live.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config.filters import (
    PAGE_FIRST_ACTION,
    PAGE_LAST_ACTION,
    PAGE_NEXT_ACTION,
    PAGE_PREV_ACTION,
)
from ..state.filters import PageDimension, ViewState
from .filters import FilterStateCodec


@dataclass(frozen=True, slots=True)
class Control:
    custom_id: str
    label: str
    disabled: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {"custom_id": self.custom_id, "label": self.label, "disabled": self.disabled}


ControlRow = tuple[Control, ...]


def _page_row(
    codec: FilterStateCodec,
    dimension: PageDimension,
    filter_state: ViewState,
    context_id: str,
    page_count: int,
) -> ControlRow:
    last = max(1, page_count)
    page = dimension.clamp(getattr(filter_state, dimension.name), last)
    targets: list[tuple[str, int, bool]] = []
    if last > 2:
        targets.append((PAGE_FIRST_ACTION, 1, page <= 1))
    targets.append((PAGE_PREV_ACTION, max(1, page - 1), page <= 1))
    targets.append((PAGE_NEXT_ACTION, min(last, page + 1), page >= last))
    if last > 2:
        targets.append((PAGE_LAST_ACTION, last, page >= last))
    targets.append((dimension.find_action, page, False))

    labels = dimension.labels or {}
    return tuple(
        Control(
            custom_id=codec.encode(
                filter_state.replace(dimension.name, target),
                context_id,
                action=action,
            ),
            label=labels.get(action, action),
            disabled=disabled,
        )
        for action, target, disabled in targets
    )


def build_control_rows(
    codec: FilterStateCodec,
    filter_state: ViewState,
    context_id: str,
    *,
    page_count: int = 1,
) -> list[ControlRow]:
    """Build the button rows for ``filter_state`` within ``context_id``.

    ``page_count`` only matters for views with a page dimension.

    Raises:
        ValueError: If a button id cannot be encoded (see FilterStateCodec.encode).
    """
    rows: list[ControlRow] = []
    for dimension in codec.dimensions:
        if isinstance(dimension, PageDimension):
            rows.append(_page_row(codec, dimension, filter_state, context_id, page_count))
            continue
        selected = getattr(filter_state, dimension.name)
        row = tuple(
            Control(
                custom_id=codec.encode(
                    filter_state.replace(dimension.name, value),
                    context_id,
                    action=dimension.action,
                ),
                label=dimension.labels.get(value.value, value.value),
                disabled=value == selected,
            )
            for value in dimension.enum
        )
        rows.append(row)
    return rows


def rows_to_payload(rows: list[ControlRow]) -> list[list[dict[str, Any]]]:
    return [[control.to_payload() for control in row] for row in rows]


__all__ = ["Control", "ControlRow", "build_control_rows", "rows_to_payload"]
