# === FILE: novel_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа NovelScout для командной строки.

Команды:
  build URL   Скачать новеллу по URL оглавления и собрать EPUB
  sites       Показать поддерживаемые сайты
  config      Показать итоговую конфигурацию

Общие опции:
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  novel-scout build https://boxnovel.com/novel/some-novel --concurrency 4 -o some-novel.epub
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from novel_scout import __version__
from novel_scout.config import FailurePolicy, load_config
from novel_scout.engine import build_book
from novel_scout.errors import NovelScoutError
from novel_scout.extractor import available_sites
from novel_scout.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


def _config_or_exit(config_path, **overrides):
    try:
        return load_config(config_path, **overrides)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f"Ошибка загрузки конфигурации: {e}")


def _config_options(func):
    """Options shared by ``build`` and ``config``."""
    options = [
        click.option(
            "--config", "-c", "config_path",
            default=None,
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="YAML/JSON конфиг (по умолчанию configs/default.yaml, если есть).",
        ),
        click.option("--site", "-s", default=None, help="Стратегия извлечения (см. `sites`)."),
        click.option("--concurrency", "-k", type=click.IntRange(min=1), default=None, help="Макс. число параллельных загрузок."),
        click.option(
            "--output", "-o",
            default=None,
            type=click.Path(dir_okay=False, writable=True, path_type=Path),
            help="Куда записать EPUB.",
        ),
        click.option(
            "--on-chapter-error", "failure_policy",
            type=click.Choice([p.value for p in FailurePolicy]),
            default=None,
            help="abort: прервать сборку; skip: пропустить главу.",
        ),
        click.option("--sanitizer", type=click.Choice(["soup", "prettier"]), default=None, help="Нормализатор разметки."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="NovelScout, version %(version)s")
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Уровень логирования",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Путь к файлу логов (stdout, если не указан)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    help="Строка формата для логов",
)
@click.pass_context
def cli(ctx, log_level, log_file, log_format):
    """NovelScout: web novel → EPUB."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)


@cli.command("build", context_settings=CONTEXT_SETTINGS)
@click.argument("url")
@_config_options
@click.option(
    "--report", "-r", "report_path",
    default=None,
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Путь для сохранения JSON-отчёта о сборке.",
)
def build(url, config_path, site, concurrency, output, failure_policy, sanitizer, report_path):
    """Скачать главы по URL оглавления и собрать EPUB."""
    cfg = _config_or_exit(
        config_path,
        base_url=url,
        site=site,
        concurrency=concurrency,
        output=output,
        failure_policy=failure_policy,
        sanitizer=sanitizer,
    )
    click.echo(f"Building {cfg.base_url} -> {cfg.output}")
    try:
        report = asyncio.run(build_book(cfg))
    except (NovelScoutError, OSError) as e:
        print_error(f"Ошибка сборки: {e}")

    click.echo(f"EPUB: {report.output} ({report.chapters_written} chapters)")
    if report.skipped:
        click.secho(f"Skipped chapters: {', '.join(str(i) for i in report.skipped)}", fg="yellow", err=True)

    if report_path:
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            report_path.write_text(report.json(pretty=True), encoding="utf-8")
        except OSError as e:
            print_error(f"Не удалось сохранить отчёт: {e}")
        click.echo(f"JSON report: {report_path}")


@cli.command("sites", context_settings=CONTEXT_SETTINGS)
def sites():
    """Показать зарегистрированные стратегии извлечения."""
    for entry in available_sites():
        click.echo(f"{entry.name:<12} {', '.join(entry.hosts)}")


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.argument("url")
@_config_options
def show_config(url, config_path, site, concurrency, output, failure_policy, sanitizer):
    """Показать итоговую конфигурацию в JSON."""
    cfg = _config_or_exit(
        config_path,
        base_url=url,
        site=site,
        concurrency=concurrency,
        output=output,
        failure_policy=failure_policy,
        sanitizer=sanitizer,
    )
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
