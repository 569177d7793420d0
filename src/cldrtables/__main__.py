"""Allow ``python -m cldrtables``."""

from cldrtables.cli import app

app()
