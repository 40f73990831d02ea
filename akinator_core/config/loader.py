"""Akinator Core — Завантаження конфігурації"""
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from akinator_core.errors import ConfigError
from .settings import EngineConfig


logger = logging.getLogger(__name__)


def save_yaml(config: EngineConfig, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False,
                       allow_unicode=True, sort_keys=False)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def save_config(config: EngineConfig, path: Union[str, Path]) -> None:
    """Зберегти конфігурацію (YAML або JSON за розширенням)"""
    path = Path(path)
    if path.suffix == ".json":
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    else:
        save_yaml(config, path)


def parse_config(raw: Dict[str, Any], source: str = "<dict>") -> EngineConfig:
    """
    Провалідувати словник конфігурації.

    Raises:
        ConfigError: невідомі ключі, значення поза межами, інвертована смуга,
            відсутній параметр покриття для обраного режиму
    """
    if not isinstance(raw, dict):
        raise ConfigError("очікується словник верхнього рівня", source)
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(str(e), source) from e


def load_config(path: Union[str, Path]) -> EngineConfig:
    """
    Завантажити та суворо провалідувати конфігурацію.

    Процес не повинен стартувати з невалідною конфігурацією,
    тому будь-яка проблема перетворюється на ConfigError.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError("файл не знайдено", str(path))

    try:
        if path.suffix == ".json":
            raw = json.loads(path.read_text(encoding="utf-8"))
        else:
            raw = load_yaml(path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"не вдалося розібрати файл: {e}", str(path)) from e

    config = parse_config(raw, str(path))
    logger.info(f"Конфігурацію завантажено: {path} ({config.version})")
    return config
