"""Built-in defaults — the lowest-precedence layer of every merge."""

from __future__ import annotations

from typing import Any

CURRENT_VERSION = "0.7.0-20260204"

DEFAULT_BLOCK_MESSAGE = (
    "Accessing {file} is not allowed. Environment files containing secrets are protected. "
    "Explain to the user why you want to access this .env file, and if changes are needed "
    "ask the user to make them. "
    "Only .env.example, .env.sample, or .env.test files can be accessed."
)

DEFAULT_DOCUMENT: dict[str, Any] = {
    "version": CURRENT_VERSION,
    "enabled": True,
    "features": {
        "protectEnvFiles": True,
        "permissionGate": True,
        "enforcePackageManager": False,
    },
    "packageManager": {
        "selected": "npm",
    },
    "envFiles": {
        "protectedPatterns": [
            {"pattern": ".env"},
            {"pattern": ".env.local"},
            {"pattern": ".env.production"},
            {"pattern": ".env.prod"},
            {"pattern": ".dev.vars"},
        ],
        "allowedPatterns": [
            {"pattern": "*.example.env"},
            {"pattern": "*.sample.env"},
            {"pattern": "*.test.env"},
            {"pattern": ".env.example"},
            {"pattern": ".env.sample"},
            {"pattern": ".env.test"},
        ],
        "protectedDirectories": [],
        "protectedTools": ["read", "write", "edit", "bash", "grep", "find", "ls"],
        "onlyBlockIfExists": True,
        "blockMessage": DEFAULT_BLOCK_MESSAGE,
    },
    "permissionGate": {
        "patterns": [
            {"pattern": "rm -rf", "description": "recursive force delete"},
            {"pattern": "sudo", "description": "superuser command"},
            {"pattern": "dd if=", "description": "disk write operation"},
            {"pattern": "mkfs.", "description": "filesystem format"},
            {"pattern": "chmod -R 777", "description": "insecure recursive permissions"},
            {"pattern": "chown -R", "description": "recursive ownership change"},
        ],
        "useBuiltinMatchers": True,
        "requireConfirmation": True,
        "allowedPatterns": [],
        "autoDenyPatterns": [],
    },
}
