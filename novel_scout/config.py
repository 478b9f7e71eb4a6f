# === FILE: novel_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации сборки книги NovelScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from novel_scout.errors import ConfigError
from novel_scout.utils import default_concurrency, normalize_base_url

__all__ = ["FailurePolicy", "BuildConfig", "load_config", "DEFAULT_CONFIG_PATH"]


class FailurePolicy(str, Enum):
    """What the collector does when it reaches a failed chapter."""

    ABORT = "abort"
    SKIP = "skip"


class BuildConfig(BaseModel):
    """Конфигурация для одного запуска сборки книги."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = Field(..., description="URL оглавления новеллы.")
    site: Optional[str] = Field(None, description="Имя стратегии извлечения; по умолчанию выбирается по домену.")
    concurrency: int = Field(default_factory=default_concurrency, ge=1, description="Макс. число параллельных загрузок.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("NovelScout/0.1", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx/429 и сетевых ошибках.")
    rate_limit: Optional[float] = Field(None, gt=0, description="Лимит запросов в секунду (None: без лимита).")
    failure_policy: FailurePolicy = Field(FailurePolicy.ABORT, description="abort: прервать сборку; skip: пропустить главу.")
    sanitizer: Literal["soup", "prettier"] = Field("soup", description="Нормализатор разметки глав.")
    output: Path = Field(Path("output.epub"), description="Путь к итоговому EPUB.")
    language: str = Field("en", min_length=2, description="Язык книги (dc:language).")

    @field_validator("base_url", mode="before")
    def _normalize_base_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return normalize_base_url(v)
            except ConfigError as exc:
                raise ValueError(str(exc)) from exc
        return v

    @field_validator("site", mode="before")
    def _lower_site(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _read_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path)
    if suffix == ".json":
        return _read_json(path)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> BuildConfig:
    """
    Читает YAML или JSON, накладывает *overrides* (значения None игнорируются)
    и возвращает проверенный объект BuildConfig.

    Явно указанный, но отсутствующий файл вызывает FileNotFoundError. Если *path*
    не задан, используется configs/default.yaml при его наличии.
    """
    data: dict[str, Any] = {}
    if path is None:
        if DEFAULT_CONFIG_PATH.is_file():
            data = _read_file(DEFAULT_CONFIG_PATH)
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        data = _read_file(path_obj)

    data.update({k: v for k, v in overrides.items() if v is not None})
    return BuildConfig(**data)
