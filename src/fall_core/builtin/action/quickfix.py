"""
Quickfix action.

Populates the host's quickfix list from the selected (or, without an
explicit selection, the filtered) items.
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...abort import abortable
from ...action import Action, define_action
from ...host import setqflist
from ...item import IdItem

logger = logging.getLogger(__name__)


class QuickfixAction(str, Enum):
    """How `setqflist` modifies the quickfix list."""
    APPEND = "a"
    REPLACE = "r"
    REFILL = "f"
    SET = " "


class QuickfixOptions(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    what: Dict[str, Any] = Field(default_factory=dict, description="Extra list attributes such as id, idx, nr, title")
    action: QuickfixAction = Field(default=QuickfixAction.SET, description="How the list is modified")
    after: Optional[str] = Field(None, description="Command executed after the list was updated")
    continue_: bool = Field(default=False, alias="continue", description="Keep the picker open afterwards")

    @field_validator("action", mode="before")
    @classmethod
    def _accept_action_names(cls, v: Any) -> Any:
        if isinstance(v, str) and v.upper() in QuickfixAction.__members__:
            return QuickfixAction[v.upper()]
        return v


def to_quickfix_entry(detail: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build one quickfix entry from an item detail.

    `bufname` takes precedence over `path`. Keys without a value are left out.
    """
    filename = detail["bufname"] if "bufname" in detail else detail.get("path")
    column = detail.get("column")
    length = detail.get("length")
    entry = {
        "filename": filename,
        "lnum": detail.get("line"),
        "col": column,
        "end_col": column + length if column and length else None,
        "text": detail.get("context"),
    }
    return {k: v for k, v in entry.items() if v is not None}


def quickfix(
    options: Optional[Union[QuickfixOptions, Mapping[str, Any]]] = None,
    **kwargs: Any,
) -> Action:
    """
    Create an action that populates the quickfix list with the items.

    Options can be given as a QuickfixOptions, a mapping, or keyword arguments
    (`what`, `action`, `after`, `continue_`). Keyword arguments override the
    fields of `options`.
    """
    if options is None:
        options = QuickfixOptions(**kwargs)
    else:
        if not isinstance(options, QuickfixOptions):
            options = QuickfixOptions.model_validate(options)
        if kwargs:
            overrides = QuickfixOptions(**kwargs).model_dump(exclude_unset=True)
            options = options.model_copy(update=overrides)
    what = dict(options.what)
    action = options.action.value
    after = options.after or ""
    keep_open = options.continue_

    async def invoke(host, params, *, signal=None):
        source: List[IdItem] = (
            params.selected_items if params.selected_items is not None else params.filtered_items
        )
        items = [to_quickfix_entry(item.detail) for item in source]

        if signal is not None:
            signal.throw_if_aborted()
        await abortable(setqflist(host, [], action, {**what, "items": items}), signal)
        logger.debug(f"Quickfix list updated with {len(items)} items (action={action!r})")

        if after:
            if signal is not None:
                signal.throw_if_aborted()
            await abortable(host.cmd(after), signal)
        if keep_open:
            return True
        return None

    return define_action(invoke)


default_quickfix_actions: Dict[str, Action] = {
    "quickfix": quickfix(continue_=True),
    "quickfix:copen": quickfix(after="copen"),
}
