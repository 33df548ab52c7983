import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_DIR = Path.home() / ".heroledger"
CONFIG_PATH = CONFIG_DIR / "config.json"
PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


def config_path() -> Path:
    env = os.getenv("HEROLEDGER_CONFIG")
    return Path(env).expanduser() if env else CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or config_path()
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}


def save_config(cfg: Dict[str, Any], path: Optional[Path] = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    return path


def resolve_data_dir(override: Optional[Path] = None) -> Path:
    """
    Where the rule tables live. Precedence: override > env > config > packaged data.
    """
    if override is not None:
        return Path(override)
    env = os.getenv("HEROLEDGER_DATA_DIR")
    if env:
        return Path(env)
    cfg = load_config().get("data_dir")
    if cfg:
        return Path(cfg).expanduser()
    return PACKAGE_DATA_DIR


def resolve_dice_seed(override: Optional[int] = None) -> Optional[int]:
    if override is not None:
        return override
    env = os.getenv("HEROLEDGER_SEED")
    if env is not None and env.strip():
        return int(env)
    seed = load_config().get("seed")
    return int(seed) if seed is not None else None
