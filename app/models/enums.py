"""
Enums and constants for the application.
"""
from enum import Enum


class IntegrationType(str, Enum):
    """Direction of data flow for an integration."""
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"


class IntegrationName(str, Enum):
    """
    Integrations with a registered export client.

    Integration rows store the name as a plain string, so a row may carry a
    name that is not listed here; the client registry rejects those.
    """
    READWISE = "READWISE"
    POCKET = "POCKET"


class HighlightType(str, Enum):
    """Kinds of annotations a user can attach to a library item."""
    HIGHLIGHT = "HIGHLIGHT"
    NOTE = "NOTE"
    REDACTION = "REDACTION"
