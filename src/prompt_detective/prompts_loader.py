"""Load prompt templates from the packaged YAML file."""

from pathlib import Path
from typing import Dict, Optional

import yaml

from prompt_detective.core.logging import get_logger

logger = get_logger(__name__)

PROMPTS_PATH = Path(__file__).parent / "prompts" / "prompt_templates.yaml"

TEMPLATE_NAMES = ("case", "audit_case", "rectification_options", "verdict", "mentor_feedback")


def load_prompts(version_key: Optional[str] = None, path: Path = PROMPTS_PATH) -> Dict[str, str]:
    """Load one template version as a ``{name: template}`` dict."""
    if not path.exists():
        raise FileNotFoundError(f"Could not find prompt file: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    versions = data.get("versions", {})
    version_key = version_key or data.get("default_version")
    templates = versions.get(version_key)
    if not templates:
        raise KeyError(
            f"Version '{version_key}' not found in {path.name}. Available: {list(versions)}"
        )

    missing = [name for name in TEMPLATE_NAMES if name not in templates]
    if missing:
        raise KeyError(f"Version '{version_key}' is missing templates: {missing}")

    logger.info(f"Loaded prompt templates: {version_key}")
    return {name: templates[name] for name in TEMPLATE_NAMES}
