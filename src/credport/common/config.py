# src/credport/common/config.py

import os
from pathlib import Path

APP_NAME = "credport"
APP_VERSION = "1.0.0"

# Every extension a source may declare
RECOGNIZED_EXTENSIONS = frozenset({".csv", ".json", ".1pux", ".xml"})

# Version string written into JSON exports
EXPORT_VERSION = "1.0"
EXPORT_FILENAME_PREFIX = "credport-export"

# Passwords shorter than this get a non-fatal warning during validation
WEAK_PASSWORD_LENGTH = 8

# Import options preselected by the front end
DEFAULT_SKIP_DUPLICATES = True
DEFAULT_UPDATE_EXISTING = False
DEFAULT_VALIDATE_URLS = True
DEFAULT_IMPORT_NOTES = True

VAULT_ENV_VAR = "CREDPORT_VAULT"
CONFIG_DIR_NAME = ".credport"
DEFAULT_VAULT_FILE = "vault.json"


def vault_path() -> Path:
    """Location of the local credential store, honouring CREDPORT_VAULT."""
    override = os.environ.get(VAULT_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME / DEFAULT_VAULT_FILE
