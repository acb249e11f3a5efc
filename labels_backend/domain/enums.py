"""
labels_backend.domain.enums — All enumerations used across the backend.

Keep this module import-clean (stdlib only).
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Labeled object kinds
# ---------------------------------------------------------------------------

class ObjectType(str, Enum):
    """
    Kinds of documents a label can be attached to.  Used as the discriminator
    for both reference resolution and edit-permission dispatch.
    """
    ALERT             = "alert"
    ATTRIBUTION_GROUP = "attribution_group"
    ATTRIBUTION       = "attribution"
    BUDGET            = "budget"
    METRIC            = "metric"
    REPORT            = "report"


# ---------------------------------------------------------------------------
# Label palette
# ---------------------------------------------------------------------------

class LabelColor(str, Enum):
    """The closed palette a label color must come from."""
    LIGHT_BLUE = "#BEE1F5"
    BLUE       = "#A8C7FA"
    TEAL       = "#B8E4DE"
    GREEN      = "#C6E8C4"
    LIME       = "#E2EFB5"
    YELLOW     = "#FDF0B5"
    ORANGE     = "#FCD9B6"
    RED        = "#F9C9C5"
    PINK       = "#F7CFE3"
    PURPLE     = "#DCCDF3"
    GREY       = "#DADCE0"


# ---------------------------------------------------------------------------
# Collaborator roles (Access model)
# ---------------------------------------------------------------------------

class CollaboratorRole(str, Enum):
    OWNER  = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def can_edit(self) -> bool:
        return self in (CollaboratorRole.OWNER, CollaboratorRole.EDITOR)
