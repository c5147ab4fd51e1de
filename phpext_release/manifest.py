from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from . import actions
from .errors import (
    InvalidExtensionNameError,
    InvalidManifestTypeError,
    ManifestInvalidError,
    ManifestMissingError,
    NameMissingError,
)
from .models import EXTENSION_TYPES, ExtensionIdentity, Manifest

MANIFEST_FILENAME = "composer.json"

# Same grammar PIE applies in ExtensionName::normaliseFromString.
EXTENSION_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]+$")

EXT_PREFIX = "ext-"

# `jq -r` printed this for absent keys; composer.json files generated by
# scripts sometimes carry it as a literal.
NULL_MARKER = "null"


def _manifest_schema() -> Dict[str, Any]:
    # Only the keys read here are constrained; everything else in composer.json is ignored.
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "type": {"type": ["string", "null"]},
            "name": {"type": ["string", "null"]},
            "php-ext": {
                "type": ["object", "null"],
                "properties": {
                    "extension-name": {"type": ["string", "null"]},
                },
            },
        },
    }


def _blank(value: Optional[str]) -> bool:
    v = str(value or "").strip()
    return v == "" or v == NULL_MARKER


def decode_manifest(data: Any) -> Manifest:
    """Validate a parsed composer.json document and keep the fields we use."""
    try:
        jsonschema.validate(instance=data, schema=_manifest_schema())
    except jsonschema.ValidationError as e:
        raise ManifestInvalidError(f"{MANIFEST_FILENAME} has an unexpected shape: {e.message}") from e

    php_ext = data.get("php-ext") or {}
    ext_name = php_ext.get("extension-name")
    return Manifest(
        type=str(data.get("type") or "").strip(),
        name=str(data.get("name") or "").strip(),
        extension_name=None if ext_name is None else str(ext_name).strip(),
    )


def load_manifest(work_dir: Path) -> Manifest:
    path = Path(work_dir) / MANIFEST_FILENAME
    if not path.exists():
        raise ManifestMissingError(f"{MANIFEST_FILENAME} not found. This does not appear to be a PIE package.")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestInvalidError(f"{MANIFEST_FILENAME} is not valid JSON: {e}") from e
    return decode_manifest(data)


def validate_extension_name(candidate: str) -> str:
    name = str(candidate)
    if name.startswith(EXT_PREFIX):
        name = name[len(EXT_PREFIX):]

    if not EXTENSION_NAME_RE.match(name):
        raise InvalidExtensionNameError(
            f'Invalid extension name: "{name}" - must be alphanumeric/underscores only.'
        )
    return name


def resolve_identity(manifest: Manifest) -> ExtensionIdentity:
    """Derive the extension short name from a decoded manifest.

    php-ext.extension-name wins when set; otherwise the package part of
    `vendor/package` is used. A leading "ext-" is dropped before validation.
    """
    if manifest.type not in EXTENSION_TYPES:
        raise InvalidManifestTypeError(
            f'{MANIFEST_FILENAME} type must be "php-ext" or "php-ext-zend", but "{manifest.type}" was found.'
        )

    candidate = manifest.extension_name
    if _blank(candidate):
        actions.info(".php-ext.extension-name not found in composer.json, falling back to package name...")
        if _blank(manifest.name):
            raise NameMissingError(
                'Could not determine extension name: both ."php-ext"."extension-name" and .name '
                f"are missing in {MANIFEST_FILENAME}"
            )
        candidate = manifest.name.split("/")[-1]

    return ExtensionIdentity(name=validate_extension_name(str(candidate)))


def determine_extension_identity(work_dir: Path) -> ExtensionIdentity:
    actions.info(f"Detecting extension name from {MANIFEST_FILENAME}...")
    return resolve_identity(load_manifest(work_dir))
