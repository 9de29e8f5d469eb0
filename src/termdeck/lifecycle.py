"""Lazy restoration of a project's sub-tabs on first visit."""

from __future__ import annotations

import logging

from .models import Initialized, Project, SubTab, Uninitialized
from .subtabs import SubTabManager

LOG = logging.getLogger(__name__)


def default_subtab_name(number: int) -> str:
    return f"Tab {number}"


class ProjectLifecycle:
    """Turns ``Uninitialized`` projects into ``Initialized`` ones.

    Restoring spawns one terminal per saved placeholder, in saved order.
    A project without placeholders gets a single ``"Tab 1"`` at its root.
    """

    def __init__(self, subtabs: SubTabManager) -> None:
        self._subtabs = subtabs

    def ensure_initialized(self, project: Project) -> bool:
        """Initialize ``project`` if needed; returns whether it transitioned."""

        state = project.state
        if not isinstance(state, Uninitialized):
            return False

        placeholders = list(state.placeholders)
        saved_active = state.saved_active_index
        project.state = Initialized()

        if not placeholders:
            self._subtabs.create(project, default_subtab_name(1), project.path)
            project.subtab_counter = 1
            LOG.info("Initialized %s with a fresh sub-tab", project.name)
            return True

        restored: list[SubTab] = [
            self._subtabs.create(project, saved.name, saved.working_dir)
            for saved in placeholders
        ]
        project.subtab_counter = len(restored)
        if 0 <= saved_active < len(restored):
            self._subtabs.activate(restored[saved_active], persist=False)
        LOG.info("Restored %d sub-tab(s) for %s", len(restored), project.name)
        return True

    def add_subtab(self, project: Project) -> SubTab:
        """Explicit "new tab" request.

        On an uninitialized project with placeholders, the saved tabs are
        restored first and the new tab is appended after them. Without
        placeholders, initialization itself yields the one new tab.
        """

        if not project.initialized:
            had_placeholders = bool(project.placeholders)
            self.ensure_initialized(project)
            if not had_placeholders:
                subtab = project.active_subtab
                assert subtab is not None
                return subtab

        project.subtab_counter += 1
        return self._subtabs.create(
            project, default_subtab_name(project.subtab_counter), project.path
        )
