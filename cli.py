# cli.py

"""
Запуск NovelScout без установки пакета.

Пример запуска:
    python cli.py build https://boxnovel.com/novel/some-novel -o some-novel.epub
"""
from novel_scout.cli import cli

if __name__ == "__main__":
    cli()
