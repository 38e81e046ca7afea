"""
Typed Exception Hierarchy for the Catering Kernel.

The calculation engines do not raise on well-typed input: they normalize
(division guards, fallback staffing, zero-priced missing catalog items)
instead of failing. Exceptions exist only at the boundaries where raw data
is turned into typed documents -- the rule loader and input parsing.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CateringKernelError (base)
    |
    +-- ConfigurationError
    |   +-- RuleConfigurationError
    |
    +-- InputError
        +-- UnknownEventCategoryError
        +-- UnknownPricingSlotError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | RULE_CONFIGURATION_INVALID  | Rule document root/section not a mapping
----------------|-----------------------------|-----------------------------------------
Input           | UNKNOWN_EVENT_CATEGORY      | Category string cannot be interpreted
                | UNKNOWN_PRICING_SLOT        | Pricing slot string cannot be interpreted

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        rules = get_active_rules(path)
    except RuleConfigurationError as e:
        log.error("rules_rejected", extra={"code": e.code, "section": e.section})

Policy inconsistencies (equity not summing to 100, gratuity splits not
summing to 100) are NOT errors. They surface as advisory warnings from
``catering_config.validator`` and on ``EventFinancials.warnings``.
"""


class CateringKernelError(Exception):
    """
    Base exception for all catering kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "CATERING_KERNEL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CateringKernelError):
    """Base for rule-document errors."""

    code: str = "CONFIGURATION_ERROR"


class RuleConfigurationError(ConfigurationError):
    """The rule document is structurally unusable.

    Raised when the document root, or one of its sections, is not a
    mapping. Individual bad values never raise: they are stripped and the
    default is used instead.
    """

    code: str = "RULE_CONFIGURATION_INVALID"

    def __init__(self, section: str, reason: str):
        self.section = section
        self.reason = reason
        super().__init__(f"Invalid rule configuration section '{section}': {reason}")


# =============================================================================
# Input Errors
# =============================================================================


class InputError(CateringKernelError):
    """Base for errors turning raw records into engine inputs."""

    code: str = "INPUT_ERROR"


class UnknownEventCategoryError(InputError):
    """Event category string is not one the engine knows."""

    code: str = "UNKNOWN_EVENT_CATEGORY"

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown event category: {category!r}")


class UnknownPricingSlotError(InputError):
    """Pricing slot string is neither primary nor secondary."""

    code: str = "UNKNOWN_PRICING_SLOT"

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"Unknown pricing slot: {slot!r}")
