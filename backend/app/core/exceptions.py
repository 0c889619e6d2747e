class StartupDetectiveError(Exception):
    """Base exception for StartupDetective application."""

    pass


class SchemaError(StartupDetectiveError):
    """Raised when a category schema is malformed."""

    pass


class UnknownCanvasError(StartupDetectiveError):
    """Raised when a canvas name has no registered category schema."""

    def __init__(self, canvas: str):
        self.canvas = canvas
        super().__init__(f"Unknown canvas '{canvas}'")


class UnknownCategoryError(StartupDetectiveError):
    """Raised when a category key is not part of the board's schema."""

    def __init__(self, category: str, canvas: str):
        self.category = category
        self.canvas = canvas
        super().__init__(f"Unknown category '{category}' for canvas '{canvas}'")


class BoardNotMountedError(StartupDetectiveError):
    """Raised when a board has not been mounted for an idea/canvas pair."""

    def __init__(self, idea_id: str, canvas: str):
        self.idea_id = idea_id
        self.canvas = canvas
        super().__init__(f"No '{canvas}' board mounted for idea '{idea_id}'")


class WorkflowSessionNotFoundError(StartupDetectiveError):
    """Raised when a guided workflow session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Workflow session '{session_id}' not found")
