"""Selection tracker - highlight, quick explanation and deep-dive for one chat view."""

import logging

from kgchat.config import settings
from kgchat.dispatch import TooltipCache
from kgchat.graph.branching import Branch, BranchManager

logger = logging.getLogger(__name__)


class SelectionTracker:
    """
    Interaction state of one chat view bound to a node.

    A selection can either be explained in a tooltip (modifier chord) or
    turned into a deep-dive branch. Only one of the two affordances is shown
    at a time: the tooltip while it is open, the deep-dive button otherwise.
    """

    def __init__(
        self,
        node_id: str,
        tooltips: TooltipCache,
        branches: BranchManager,
        preview_length: int | None = None,
    ) -> None:
        self.node_id = node_id
        self.tooltips = tooltips
        self.branches = branches
        self.preview_length = preview_length or settings.deep_dive_preview_length

        self.selection: str | None = None
        self.tooltip_visible = False
        self.tooltip_text = ""
        self._tooltip_loading = False

    @property
    def tooltip_loading(self) -> bool:
        """True while the open tooltip is waiting for its explanation."""
        return self._tooltip_loading

    @property
    def deep_dive_label(self) -> str | None:
        """Button caption for the current selection, None without one."""
        if self.selection is None:
            return None
        preview = self.selection[: self.preview_length]
        if len(self.selection) > self.preview_length:
            preview += "..."
        return f'Deep dive: "{preview}"'

    def select(self, text: str) -> None:
        """Record a new selection; blank text clears instead."""
        text = (text or "").strip()
        if not text:
            self.clear()
            return
        self.selection = text
        self.tooltip_visible = False
        self.tooltip_text = ""
        self._tooltip_loading = False

    def clear(self) -> None:
        self.selection = None
        self.tooltip_visible = False
        self.tooltip_text = ""
        self._tooltip_loading = False

    def dismiss_tooltip(self) -> None:
        """Close the tooltip and drop the selection it explained."""
        self.clear()

    async def modifier_chord(self) -> str | None:
        """Alt/Meta pressed: explain the selection unless already explaining.

        Returns:
            The explanation, or None when nothing was fetched
        """
        if self.selection is None or self.tooltip_visible:
            return None

        term = self.selection
        self.tooltip_visible = True
        self.tooltip_text = ""
        self._tooltip_loading = True

        explanation = await self.tooltips.explain(term)

        # The user may have moved on while the lookup was pending
        if self.selection == term and self.tooltip_visible:
            self.tooltip_text = explanation
            self._tooltip_loading = False
        return explanation

    def deep_dive(self) -> Branch | None:
        """Branch from the current selection and reset the view's selection."""
        if self.selection is None:
            return None
        branch = self.branches.create_branch(self.node_id, self.selection)
        self.clear()
        return branch
