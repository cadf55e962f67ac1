"""Project context and filesystem core for the plandex CLI."""

from .context import ProjectContext, initialise_context
from .plans import PlanSelection, PlanStateError, load_current_plan, save_current_plan
from .project import CONTROL_DIR_NAME, find_control_directory, find_or_create_control_directory

__all__ = [
    "CONTROL_DIR_NAME",
    "PlanSelection",
    "PlanStateError",
    "ProjectContext",
    "find_control_directory",
    "find_or_create_control_directory",
    "initialise_context",
    "load_current_plan",
    "save_current_plan",
]
