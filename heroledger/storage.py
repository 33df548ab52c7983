from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from pydantic import ValidationError

from heroledger.errors import CharacterFileError
from heroledger.logging import get_logger
from heroledger.models.character import Character

log = get_logger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
CHARACTER_SCHEMA = SCHEMA_DIR / "character.schema.json"


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_yaml(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _validate_jsonschema(obj: Any, schema_path: Path = CHARACTER_SCHEMA) -> None:
    schema = _read_json(schema_path)
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(obj), key=lambda e: list(e.path))
    if errors:
        lines = []
        for e in errors[:5]:
            ptr = "/" + "/".join([str(p) for p in e.path])
            lines.append(f"- {ptr}: {e.message}")
        more = "" if len(errors) <= 5 else f" (+{len(errors)-5} more)"
        raise CharacterFileError("JSON Schema validation failed:\n" + "\n".join(lines) + more)


def _migrate_legacy(data: dict) -> dict:
    # early saves kept a single class name and level instead of class entries
    if "class" in data and "classes" not in data:
        klass = data.pop("class")
        if klass:
            data["classes"] = [{"class_name": klass, "level": data.get("level", 1)}]
    if "race" in data and "species" not in data:
        data["species"] = data.pop("race")
    return data


def character_to_dict(character: Character) -> dict:
    return character.model_dump(mode="json")


def character_from_dict(data: dict) -> Character:
    data = _migrate_legacy(dict(data))
    _validate_jsonschema(data)
    try:
        return Character.model_validate(data)
    except ValidationError as e:
        raise CharacterFileError(str(e.errors(include_url=False)))


def save_character(character: Character, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = character_to_dict(character)
    if path.suffix.lower() in (".yaml", ".yml"):
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    log.debug("saved %s to %s", character.name, path)
    return path


def load_character(path: Path) -> Character:
    """Load a character sheet; a file that doesn't exist yet yields a fresh character."""
    path = Path(path)
    if not path.exists():
        log.info("no character at %s, starting a new one", path)
        return Character()
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = _read_yaml(path)
        else:
            data = _read_json(path)
    except (ValueError, yaml.YAMLError) as e:
        raise CharacterFileError(f"cannot parse {path}: {e}")
    if not isinstance(data, dict):
        raise CharacterFileError(f"{path} does not contain a character record")
    return character_from_dict(data)


__all__ = ["load_character", "save_character", "character_to_dict", "character_from_dict", "CharacterFileError"]
