"""
Selection set for one editing session.

The selection only changes through the named operations below;
classification reads it but never writes it.
"""

from typing import Iterable, Iterator
import structlog

logger = structlog.get_logger(__name__)


class SelectionSet:
    """
    Set of chosen item ids.

    Order is irrelevant and an id can only be present once.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __repr__(self) -> str:
        return f"SelectionSet({sorted(self._ids)!r})"

    def snapshot(self) -> frozenset[str]:
        """Immutable copy of the current selection."""
        return frozenset(self._ids)

    # ===================
    # SINGLE ITEM
    # ===================

    def toggle(self, item_id: str) -> bool:
        """
        Add the id if absent, remove it if present.

        Returns:
            True if the id is selected after the call
        """
        if item_id in self._ids:
            self._ids.discard(item_id)
            return False
        self._ids.add(item_id)
        return True

    # ===================
    # BULK
    # ===================

    def toggle_group(self, ids: Iterable[str]) -> bool:
        """
        All-or-none toggle of a group.

        Decided on the membership before the call: when every id is already
        selected all of them are removed, otherwise all of them are added.
        An empty group changes nothing.

        Returns:
            True if the group is selected after the call
        """
        group = list(dict.fromkeys(ids))
        if not group:
            return False

        all_selected = all(i in self._ids for i in group)
        if all_selected:
            self._ids.difference_update(group)
        else:
            self._ids.update(group)

        logger.debug("selection_group_toggled", size=len(group), selected=not all_selected)
        return not all_selected

    def toggle_all(self, ids: Iterable[str]) -> bool:
        """
        Select-all checkbox: clear when everything in ids is selected,
        otherwise select exactly ids.

        Returns:
            True if the ids are selected after the call
        """
        ids = set(ids)
        if ids and ids <= self._ids:
            self.clear()
            return False
        self.select_all(ids)
        return bool(ids)

    def select_all(self, ids: Iterable[str]) -> None:
        """Replace the selection with ids."""
        self._ids = set(ids)

    def clear(self) -> None:
        """Empty the selection."""
        self._ids = set()

    def retain(self, ids: Iterable[str]) -> int:
        """
        Drop selected ids that are not in ids.

        Called by the session after the source collection changes.

        Returns:
            Number of ids dropped
        """
        keep = set(ids)
        before = len(self._ids)
        self._ids &= keep
        return before - len(self._ids)
