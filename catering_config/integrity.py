"""
Rules Integrity -- checksum pinning for approved rule documents.

When the directory holding a rules file also contains an
``APPROVED_CHECKSUM`` file, the checksum of the loaded document must match
the pinned value. This stops an approved pricing/pay document from being
edited without the pin being re-approved.

The pin file is a single line: the SHA-256 hex string produced by
``catering_config.loader.compute_checksum``.

If no ``APPROVED_CHECKSUM`` file exists, the check is skipped (draft
workflow).
"""

from __future__ import annotations

from pathlib import Path

from catering_kernel.exceptions import ConfigurationError

PINFILE_NAME = "APPROVED_CHECKSUM"


class RuleIntegrityError(ConfigurationError):
    """Loaded rule document checksum does not match the approved pin.

    Attributes:
        rules_path: The rules file that was loaded.
        expected: The pinned (approved) checksum.
        actual: The computed checksum.
        pin_path: Path to the ``APPROVED_CHECKSUM`` file.
    """

    code: str = "RULE_INTEGRITY_MISMATCH"

    def __init__(self, rules_path: Path, expected: str, actual: str, pin_path: Path):
        self.rules_path = rules_path
        self.expected = expected
        self.actual = actual
        self.pin_path = pin_path
        super().__init__(
            f"Rules integrity check failed for '{rules_path}': "
            f"pinned checksum {expected[:16]}... != "
            f"computed checksum {actual[:16]}... "
            f"(pin file: {pin_path})"
        )


def read_pinned_checksum(rules_dir: Path) -> str | None:
    """Return the pinned checksum, or None if no pin file exists."""
    pin_path = rules_dir / PINFILE_NAME
    if not pin_path.is_file():
        return None
    return pin_path.read_text().strip()


def verify_checksum_pin(rules_path: Path, checksum: str) -> None:
    """Verify ``checksum`` against the pin beside ``rules_path``.

    No-op if no pin file exists.

    Raises:
        RuleIntegrityError: If a pin exists and the checksum differs.
    """
    rules_dir = Path(rules_path).parent
    pinned = read_pinned_checksum(rules_dir)
    if pinned is None:
        return

    if checksum != pinned:
        raise RuleIntegrityError(
            rules_path=Path(rules_path),
            expected=pinned,
            actual=checksum,
            pin_path=rules_dir / PINFILE_NAME,
        )
