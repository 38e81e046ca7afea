#!/usr/bin/env python3
"""
Approve a rules file by writing its checksum to APPROVED_CHECKSUM.

Usage:
    python scripts/approve_rules.py [rules_file]

If no file is given, defaults to catering_config/sets/default_rules.yaml.

The script:
  1. Loads the rules file (merged over the built-in defaults)
  2. Reviews it and prints every warning
  3. Writes the document checksum to APPROVED_CHECKSUM beside the file

The pin is a separate artifact from the rules file: editing the file
without re-running approval makes get_active_rules() raise
RuleIntegrityError.
"""

import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from catering_config.integrity import PINFILE_NAME
from catering_config.loader import compute_checksum, load_rules_file
from catering_config.validator import validate_rules


def approve(rules_path: Path) -> str:
    """Load, review, and write the pin file.

    Returns the checksum that was written.
    """
    print(f"Loading rules from: {rules_path}")
    rules = load_rules_file(rules_path)
    checksum = compute_checksum(rules)
    print(f"  profiles:  {len(rules.staffing.profiles)}")
    print(f"  owners:    {len(rules.profit_distribution.owners)}")
    print(f"  checksum:  {checksum}")

    print("Reviewing...")
    result = validate_rules(rules)
    if not result.is_valid:
        print("REVIEW FAILED:")
        for err in result.errors:
            print(f"  ERROR: {err}")
        sys.exit(1)
    for w in result.warnings:
        print(f"  WARNING: {w}")

    pin_path = rules_path.parent / PINFILE_NAME
    pin_path.write_text(checksum + "\n")
    print(f"Wrote {pin_path}")
    return checksum


def main():
    if len(sys.argv) > 1:
        target = Path(sys.argv[1])
    else:
        target = ROOT / "catering_config" / "sets" / "default_rules.yaml"

    if not target.is_file():
        print(f"Error: rules file not found: {target}", file=sys.stderr)
        sys.exit(1)

    approve(target)
    print("Done. Rules are now pinned.")


if __name__ == "__main__":
    main()
