from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema
import yaml

from .errors import ConfigError
from .github.releases import DEFAULT_API_URL

ACTION_FILENAME = "action.yml"

INPUT_RELEASE_TAG = "release-tag"
INPUT_CONFIGURE_FLAGS = "configure-flags"
INPUT_GITHUB_TOKEN = "github-token"

# Used when action.yml cannot be found (e.g. an installed wheel run outside Actions).
BUILTIN_INPUTS: Dict[str, Dict[str, Any]] = {
    INPUT_RELEASE_TAG: {"required": True},
    INPUT_CONFIGURE_FLAGS: {"required": False, "default": ""},
    INPUT_GITHUB_TOKEN: {"required": True},
}


@dataclass(frozen=True)
class InputSpec:
    name: str
    required: bool = False
    default: str = ""


@dataclass(frozen=True)
class ActionInputs:
    release_tag: str
    configure_flags: str = ""
    github_token: str = ""
    repository: str = ""
    api_url: str = DEFAULT_API_URL


def _action_schema() -> Dict[str, Any]:
    input_obj = {
        "type": ["object", "null"],
        "properties": {
            "description": {"type": "string"},
            "required": {"type": "boolean"},
            "default": {"type": ["string", "number", "boolean"]},
        },
    }
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["inputs"],
        "properties": {
            "inputs": {"type": "object", "additionalProperties": input_obj},
        },
    }


def resolve_action_path(cli_path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the action.yml declaring inputs and defaults.

    Precedence:
      1) CLI flag --action-file
      2) PHPEXT_RELEASE_ACTION_FILE
      3) $GITHUB_ACTION_PATH/action.yml
      4) action.yml next to this package (source checkout)
    """
    env_map = env if env is not None else os.environ
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()

    env_path = str(env_map.get("PHPEXT_RELEASE_ACTION_FILE", "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve()

    action_dir = str(env_map.get("GITHUB_ACTION_PATH", "") or "").strip()
    if action_dir:
        return (Path(action_dir) / ACTION_FILENAME).resolve()

    return (Path(__file__).resolve().parents[1] / ACTION_FILENAME).resolve()


def _is_expression(value: str) -> bool:
    # `${{ github.token }}` only means something to the Actions runner.
    return "${{" in value


def load_input_specs(path: Optional[Path]) -> Dict[str, InputSpec]:
    raw: Dict[str, Any] = dict(BUILTIN_INPUTS)
    if path is not None and path.exists():
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        try:
            jsonschema.validate(instance=data, schema=_action_schema())
        except jsonschema.ValidationError as e:
            raise ConfigError(f"{path} schema validation failed: {e.message}") from e
        raw = data["inputs"]

    out: Dict[str, InputSpec] = {}
    for name, spec in raw.items():
        spec = spec or {}
        default = spec.get("default")
        default_s = "" if default is None else str(default)
        if _is_expression(default_s):
            default_s = ""
        out[str(name)] = InputSpec(name=str(name), required=bool(spec.get("required", False)), default=default_s)
    return out


def input_env_var(name: str) -> str:
    """INPUT_<NAME> as the Actions runner exports it: upper-cased, spaces to underscores."""
    return "INPUT_" + str(name).replace(" ", "_").upper()


def get_input(
    spec: InputSpec,
    cli_value: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    env_map = env if env is not None else os.environ
    if cli_value is not None and str(cli_value).strip():
        return str(cli_value).strip()

    value = str(env_map.get(input_env_var(spec.name), "") or "").strip()
    if not value:
        value = spec.default.strip()
    if spec.required and not value:
        raise ConfigError(f"Input required and not supplied: {spec.name}")
    return value


def resolve_repository(cli_value: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> str:
    env_map = env if env is not None else os.environ
    repo = str(cli_value or "").strip() or str(env_map.get("GITHUB_REPOSITORY", "") or "").strip()
    if not repo:
        raise ConfigError("GITHUB_REPOSITORY is not set (expected 'owner/repo').")
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        raise ConfigError(f"Invalid repository {repo!r} (expected 'owner/repo').")
    return repo


def load_inputs(
    *,
    release_tag: Optional[str] = None,
    configure_flags: Optional[str] = None,
    github_token: Optional[str] = None,
    repository: Optional[str] = None,
    action_file: Optional[str] = None,
    require_github: bool = True,
    env: Optional[Mapping[str, str]] = None,
) -> ActionInputs:
    """Resolve every input: CLI value, then INPUT_* env var, then action.yml default.

    With require_github=False the token and repository are optional, for runs
    that never reach the release API.
    """
    env_map = env if env is not None else os.environ
    specs = load_input_specs(resolve_action_path(action_file, env_map))

    def spec_for(name: str, *, optional: bool = False) -> InputSpec:
        spec = specs.get(name)
        if spec is None:
            builtin = BUILTIN_INPUTS[name]
            spec = InputSpec(name=name, required=bool(builtin.get("required")), default=str(builtin.get("default", "")))
        if optional:
            return InputSpec(name=spec.name, required=False, default=spec.default)
        return spec

    tag = get_input(spec_for(INPUT_RELEASE_TAG), release_tag, env_map)
    flags = get_input(spec_for(INPUT_CONFIGURE_FLAGS), configure_flags, env_map)
    token = get_input(spec_for(INPUT_GITHUB_TOKEN, optional=not require_github), github_token, env_map)

    repo = ""
    if require_github:
        repo = resolve_repository(repository, env_map)
    elif repository or env_map.get("GITHUB_REPOSITORY"):
        repo = str(repository or env_map.get("GITHUB_REPOSITORY") or "").strip()

    api_url = str(env_map.get("GITHUB_API_URL", "") or "").strip() or DEFAULT_API_URL

    return ActionInputs(
        release_tag=tag,
        configure_flags=flags,
        github_token=token,
        repository=repo,
        api_url=api_url,
    )
