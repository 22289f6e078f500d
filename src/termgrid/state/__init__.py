"""List view state: the coordinator and the shared footer help context."""

from termgrid.state.coordinator import ListSnapshot, ListStateCoordinator
from termgrid.state.footer_help import FooterHelpContext

__all__ = ["FooterHelpContext", "ListSnapshot", "ListStateCoordinator"]
