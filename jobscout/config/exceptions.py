"""Configuration errors."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when the YAML file or the environment cannot be turned into a valid configuration.

    ``errors`` holds one line per invalid field and ``suggestions`` holds hints
    for fixing them; both are rendered into the exception text so the CLI can
    print it as is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self.render())

    def render(self) -> str:
        lines = [self.message]
        if self.errors:
            lines.append("\nValidation Errors:")
            lines.extend(f"  {number}. {error}" for number, error in enumerate(self.errors, 1))
        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
