"""
Tag Selector

Holds the category tags offered when composing a post: the full list, the
subset the current user may pick, and the current selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Optional, Tuple

from config import settings
from state.observable import MutableState
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TagSelectionState:
    tags: Tuple[str, ...] = ()
    enabled_tags: Tuple[str, ...] = ()
    selected_tags: FrozenSet[str] = frozenset()


class TagSelector:
    """Selection state for the post composer's tag sheet."""

    def __init__(self, tags: Optional[Iterable[str]] = None, enabled_tags: Optional[Iterable[str]] = None):
        all_tags = tuple(tags if tags is not None else settings.DEFAULT_POST_TAGS)
        enabled = enabled_tags if enabled_tags is not None else settings.DEFAULT_ENABLED_TAGS
        self._state: MutableState[TagSelectionState] = MutableState(
            TagSelectionState(tags=all_tags, enabled_tags=tuple(t for t in enabled if t in all_tags)),
            name="tag selection state",
        )

    @property
    def state(self) -> TagSelectionState:
        return self._state.value

    def subscribe(self, callback: Callable[[TagSelectionState], None],
                  emit_current: bool = True) -> Callable[[], None]:
        return self._state.subscribe(callback, emit_current=emit_current)

    def toggle_tag(self, tag: str) -> None:
        """Select or deselect a tag. Tags the user may not pick are ignored."""
        if tag not in self.state.enabled_tags:
            logger.debug(f"Ignoring toggle of disabled tag {tag!r}")
            return
        selected = self.state.selected_tags
        self._state.update(selected_tags=selected - {tag} if tag in selected else selected | {tag})

    def clear_selection(self) -> None:
        self._state.update(selected_tags=frozenset())

    def set_tags(self, tags: Iterable[str], enabled_tags: Iterable[str]) -> None:
        """Replace the offered tags; the selection is reset."""
        all_tags = tuple(tags)
        self._state.set(TagSelectionState(
            tags=all_tags,
            enabled_tags=tuple(t for t in enabled_tags if t in all_tags),
            selected_tags=frozenset(),
        ))
