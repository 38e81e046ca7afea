"""
Built-in rule document.

``DEFAULT_RULES`` is the document used when no rules file is supplied, and
the base every loaded document is merged over: a file only has to state the
values it changes.
"""

from __future__ import annotations

from pathlib import Path

from catering_kernel.domain.rules import RuleConfiguration

DEFAULT_RULES = RuleConfiguration()

#: YAML rendition of ``DEFAULT_RULES`` shipped with the package.
DEFAULT_RULES_PATH = Path(__file__).parent / "sets" / "default_rules.yaml"
