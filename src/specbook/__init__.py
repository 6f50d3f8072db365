"""specbook -- Turn an OpenAPI 3.x spec into a tag-organized GitBook bundle.

This package reads a single OpenAPI document (JSON or YAML, local file,
remote URL or stdin), groups its operations by tag, renders one markdown
page per tag and packages everything into a zip archive that GitBook can
import directly.

Typical workflow::

    specbook build openapi.yaml -o docs.zip   # produce the bundle
    specbook inspect tags openapi.yaml        # preview the pages

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
