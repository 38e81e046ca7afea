"""
catering_config -- single public entrypoint for business rules.

Responsibility:
    Provides the way to obtain the rule document at runtime through
    ``get_active_rules()``. Engines never read files or environment
    variables; they receive the ``RuleConfiguration`` this package returns.

Architecture position:
    Configuration -- YAML-driven rules, load-time review. Sits above
    ``catering_kernel`` and below ``catering_services``. Neither the kernel
    nor the engines import from ``catering_config``.

Invariants enforced:
    - Partial documents: a rules file is merged over ``DEFAULT_RULES``.
    - Review, not rejection: validator findings are logged as warnings and
      never stop the document from being used.
    - Checksum pinning: when an ``APPROVED_CHECKSUM`` file sits next to the
      rules file, the loaded document must match it.

Failure modes:
    - ``FileNotFoundError`` -- the requested rules file does not exist.
    - ``yaml.YAMLError`` -- the rules file is not valid YAML.
    - ``RuleConfigurationError`` -- the document root or a section is not a
      mapping.
    - ``RuleIntegrityError`` -- checksum mismatch against an approved pin.

Audit relevance:
    Every successful ``get_active_rules()`` call emits a
    ``CATERING_RULES_TRACE`` log entry with the document checksum and
    warning count, tying each calculation back to the rules that priced it.
"""

from __future__ import annotations

from pathlib import Path

from catering_config.defaults import DEFAULT_RULES, DEFAULT_RULES_PATH
from catering_config.integrity import RuleIntegrityError, verify_checksum_pin
from catering_config.loader import (
    compute_checksum,
    load_rules_file,
    merge_rule_overrides,
    rules_from_dict,
    rules_to_dict,
)
from catering_config.validator import RuleValidationResult, validate_rules
from catering_kernel.domain.rules import RuleConfiguration
from catering_kernel.logging_config import get_logger

_logger = get_logger("config")

__all__ = [
    "DEFAULT_RULES",
    "DEFAULT_RULES_PATH",
    "RuleIntegrityError",
    "RuleValidationResult",
    "compute_checksum",
    "get_active_rules",
    "load_rules_file",
    "merge_rule_overrides",
    "rules_from_dict",
    "rules_to_dict",
    "validate_rules",
]


def get_active_rules(rules_path: Path | str | None = None) -> RuleConfiguration:
    """The public rules entrypoint.

    Guarantees:
        - The returned document has been reviewed; each finding is logged
          at WARNING level.
        - When loaded from a file with an ``APPROVED_CHECKSUM`` pin beside
          it, the checksum has been verified.
        - A ``CATERING_RULES_TRACE`` log entry is emitted on every
          successful call.

    Non-goals:
        - No caching across calls; callers hold the returned document for
          as long as they need it.

    Args:
        rules_path: YAML rules file. ``None`` returns ``DEFAULT_RULES``.

    Raises:
        FileNotFoundError: If ``rules_path`` does not exist.
        RuleConfigurationError: If the document is structurally unusable.
        RuleIntegrityError: If a pin exists and does not match.
    """
    if rules_path is None:
        rules = DEFAULT_RULES
        source = "<defaults>"
    else:
        rules = load_rules_file(Path(rules_path))
        source = str(rules_path)

    checksum = compute_checksum(rules)
    if rules_path is not None:
        verify_checksum_pin(Path(rules_path), checksum)

    validation = validate_rules(rules)
    for warning in validation.warnings:
        _logger.warning(
            "rules_review_warning",
            extra={"source": source, "warning": warning},
        )

    _logger.info(
        "CATERING_RULES_TRACE",
        extra={
            "trace_type": "CATERING_RULES_TRACE",
            "source": source,
            "checksum": checksum,
            "profile_count": len(rules.staffing.profiles),
            "owner_count": len(rules.profit_distribution.owners),
            "warning_count": len(validation.warnings),
        },
    )
    return rules
