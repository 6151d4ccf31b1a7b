from __future__ import annotations


class RuleTableError(Exception):
    """Raised when a rule table document cannot be loaded."""


class RuleTableReferenceError(RuleTableError):
    """Raised when rule data references unknown countries, blocs or visa classes."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__(f"Rule table has {len(self.problems)} dangling reference(s): {self.problems}")


class RuleTableConflictError(RuleTableError):
    """Raised when rule data declares the same identity twice."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__(f"Rule table has {len(self.problems)} conflict(s): {self.problems}")
