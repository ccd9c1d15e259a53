#!/usr/bin/env python3
"""Check the structure of config.example.yaml without loading the environment."""

import yaml
from pathlib import Path

VALID_MODES = ["TEST", "PROD"]


def verify_config_structure(config_file: Path = Path("config.example.yaml")) -> bool:
    """Verify the example config has the expected layout."""
    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        print(f"✗ Failed to parse {config_file}: {e}")
        return False

    if not isinstance(config, dict):
        print(f"✗ {config_file} must contain a mapping")
        return False

    errors = []

    notification = config.get("notification")
    if not isinstance(notification, dict):
        errors.append("Missing or invalid 'notification' section")
        notification = {}

    for key in ("mode", "sender_address"):
        if key not in notification:
            errors.append(f"notification missing key: {key}")

    mode = str(notification.get("mode", "")).upper()
    if mode and mode not in VALID_MODES:
        errors.append(f"notification.mode must be one of {VALID_MODES}, got: {mode}")

    active_list = "test_recipients" if mode == "TEST" else "prod_recipients"
    if mode in VALID_MODES and not notification.get(active_list):
        errors.append(f"notification.{active_list} is empty in {mode} mode")

    forms = config.get("forms", [])
    if not isinstance(forms, list):
        errors.append("'forms' must be a list")
        forms = []
    for idx, form in enumerate(forms):
        if not isinstance(form, dict):
            errors.append(f"Form {idx} is not a dictionary")
            continue
        for key in ("form_id", "title"):
            if key not in form:
                errors.append(f"Form {idx} missing key: {key}")

    for key in ("email", "logging", "advanced"):
        if key in config and not isinstance(config[key], dict):
            errors.append(f"'{key}' must be of type dict")

    if errors:
        print(f"✗ {config_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"✓ {config_file} structure is valid")
    print(f"  - Mode: {mode}")
    print(f"  - {len(notification.get('test_recipients') or [])} test recipients")
    print(f"  - {len(notification.get('prod_recipients') or [])} production recipients")
    print(f"  - {len(forms)} forms configured")
    return True


if __name__ == "__main__":
    import sys
    success = verify_config_structure()
    sys.exit(0 if success else 1)
