class ContentError(Exception):
    """
    A broken world definition: bad map, dangling id, malformed content file.
    Carries every issue found so an author can fix them in one pass.
    """

    def __init__(self, issues):
        if isinstance(issues, str):
            issues = [issues]
        self.issues = list(issues)
        super().__init__(self.report())

    def report(self):
        return "\n\n".join(self.issues)


class SaveStateError(ContentError):
    """A save file that cannot be read back or does not fit the loaded world."""
