"""Package initialization for luminance-connector.

Having this file allows relative imports (e.g. `from .models import ...`) to
resolve under tooling (mypy/ruff) and supports the CLI usage pattern
`python -m luminance_connector build`.
"""

__all__ = []
