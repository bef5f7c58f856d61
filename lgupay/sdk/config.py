"""Configuration for LGU Payroll.

Payroll rules (contribution rates, caps, withholding brackets, allowance
amounts) live in versioned YAML tables, one file per effective period:

    payroll-rules/2018.yaml
    payroll-rules/2023.yaml

Rules directory resolution:
1. LGU_PAYROLL_RULES_PATH environment variable (if set)
2. payroll-rules/ shipped inside the lgupay package

Table selection for a pay period uses the table with the latest
effective_date on or before the period's pay date (end date if no pay date).

Logging follows the LOG_LEVEL environment variable (default INFO).
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .exceptions import RulesNotFoundError, RulesValidationError, format_validation_error
from .taxes.schemas import PayrollRules

logger = logging.getLogger(__name__)

APP_NAME = "lgu-payroll"
RULES_PATH_ENV = "LGU_PAYROLL_RULES_PATH"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from `level` or the LOG_LEVEL environment variable."""
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(log_level)


def get_rules_dir() -> Path:
    """Get the payroll rules directory path.

    Resolution order:
    1. LGU_PAYROLL_RULES_PATH environment variable
    2. payroll-rules/ inside the installed package

    Returns:
        Path to the rules directory (may not exist when overridden)
    """
    env_path = os.environ.get(RULES_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path(__file__).parent.parent / "payroll-rules"  # sdk -> lgupay


def list_rule_versions() -> list[str]:
    """Get sorted list of available rule table versions (file stems)."""
    rules_dir = get_rules_dir()
    if not rules_dir.is_dir():
        raise RulesNotFoundError(f"Payroll rules directory not found: {rules_dir}")
    return sorted(p.stem for p in rules_dir.glob("*.yaml"))


def _read_rules_file(path: Path) -> PayrollRules:
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulesValidationError(f"Invalid payroll rules {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise RulesValidationError(f"Invalid payroll rules {path.name}: expected a mapping")

    # version defaults to the file stem; YAML may hand back an int for "2023"
    data["version"] = str(data.get("version", path.stem))

    try:
        return PayrollRules.model_validate(data)
    except ValidationError as e:
        raise RulesValidationError(
            f"Invalid payroll rules {path.name}: {format_validation_error(e)}"
        ) from e


def load_payroll_rules(version: str) -> PayrollRules:
    """Load and validate one rule table from payroll-rules/<version>.yaml.

    Raises:
        RulesNotFoundError: If the directory or the version's file is missing.
        RulesValidationError: If the file fails schema validation.
    """
    rules_dir = get_rules_dir()
    rules_file = rules_dir / f"{version}.yaml"
    if not rules_file.exists():
        available = ", ".join(list_rule_versions()) or "none"
        raise RulesNotFoundError(
            f"Payroll rules not found for version {version}: {rules_file} "
            f"(available: {available})"
        )
    rules = _read_rules_file(rules_file)
    logger.debug(f"Loaded payroll rules {rules.version} (effective {rules.effective_date})")
    return rules


def load_all_payroll_rules() -> list[PayrollRules]:
    """Load every rule table, sorted by effective date (oldest first)."""
    versions = list_rule_versions()
    if not versions:
        raise RulesNotFoundError(f"No payroll rule tables in {get_rules_dir()}")
    tables = [load_payroll_rules(v) for v in versions]
    return sorted(tables, key=lambda r: r.effective_date)


def resolve_payroll_rules(on_date: date) -> PayrollRules:
    """Pick the rule table in effect on `on_date`.

    Uses the table with the greatest effective_date <= on_date. Dates before
    every table fall back to the earliest table with a warning.
    """
    tables = load_all_payroll_rules()
    effective = [t for t in tables if t.effective_date <= on_date]
    if effective:
        return effective[-1]

    earliest = tables[0]
    logger.warning(
        f"No payroll rules effective on {on_date}; "
        f"using earliest table {earliest.version} (effective {earliest.effective_date})"
    )
    return earliest
