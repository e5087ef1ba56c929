#!/usr/bin/env python3
"""
Скрипт для проверки базы знаний виджета.
Запуск: python scripts/explore_knowledge_base.py [--coverage]
"""

import sys
import os
import argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rich.console import Console
from rich.table import Table

from knowledge import KnowledgeMatcher


console = Console()


# Типичные вопросы посетителей сайта
SAMPLE_QUERIES = [
    ("שלום", "שלום"),
    ("בוקר טוב לכולם", "בוקר טוב"),
    ("ספר לי על Be Fiber", "Be Fiber"),
    ("מה זה mesh?", "Mesh"),
    ("יש לכם אינטרנט סיבים?", "סיבים"),
    ("אני מחפש עבודה מהבית", "עבודה מהבית"),
    ("האם הנתב טוב לגיימינג", "גיימינג"),
    ("איך מגישים פנייה", "פנייה"),
    ("0521234567", "05"),
    ("מזג האוויר מחר", None),
]


def show_structure(matcher: KnowledgeMatcher):
    """Таблица записей базы"""
    table = Table(title="📊 База знаний")
    table.add_column("#", justify="right")
    table.add_column("Keyword")
    table.add_column("Confidence", justify="right")
    table.add_column("Tags")
    table.add_column("Voice")

    for i, entry in enumerate(matcher.kb.snapshot(), 1):
        keyword = entry.keyword
        if matcher.normalizer.normalize(keyword) in matcher.function_words:
            keyword += " [dim](function)[/dim]"
        table.add_row(
            str(i),
            keyword,
            f"{entry.confidence:.2f}",
            ", ".join(entry.tags),
            "✓" if entry.voice_url else "",
        )

    console.print(table)


def show_coverage(matcher: KnowledgeMatcher) -> int:
    """Прогон типичных вопросов; возвращает число промахов"""
    table = Table(title="🔎 Покрытие типичных вопросов")
    table.add_column("Query")
    table.add_column("Expected")
    table.add_column("Matched")
    table.add_column("Confidence", justify="right")
    table.add_column("")

    misses = 0
    for query, expected in SAMPLE_QUERIES:
        result = matcher.query(query)
        ok = result.matched_keyword == expected
        if not ok:
            misses += 1
        table.add_row(
            query,
            expected or "—",
            result.matched_keyword or "—",
            f"{result.confidence:.2f}",
            "[green]✓[/green]" if ok else "[red]✗[/red]",
        )

    console.print(table)
    console.print(f"Промахов: {misses}/{len(SAMPLE_QUERIES)}")
    return misses


def run_interactive(matcher: KnowledgeMatcher):
    """Интерактивный режим тестирования"""
    console.rule("ИНТЕРАКТИВНЫЙ РЕЖИМ")
    console.print("Введите вопрос посетителя. Команды: /stats, /quit")

    while True:
        try:
            query = console.input("[bold]Вопрос:[/bold] ").strip()
        except (KeyboardInterrupt, EOFError):
            break

        if not query:
            continue
        if query == "/quit":
            break
        if query == "/stats":
            stats = matcher.get_stats()
            console.print(f"Записей: {stats['totalEntries']}")
            console.print(stats["tagCounts"])
            continue

        result = matcher.query(query)
        console.print(f"  keyword:    {result.matched_keyword or '—'}")
        if result.score is not None:
            console.print(f"  score:      {result.score:.3f}")
        console.print(f"  confidence: {result.confidence:.2f}")
        console.print(f"  tags:       {', '.join(result.tags)}")
        console.print(f"  answer:     {result.answer}\n")


def main():
    parser = argparse.ArgumentParser(description="Проверка базы знаний виджета")
    parser.add_argument("--coverage", action="store_true", help="только прогон покрытия")
    args = parser.parse_args()

    matcher = KnowledgeMatcher()
    show_structure(matcher)
    misses = show_coverage(matcher)

    if args.coverage:
        sys.exit(1 if misses else 0)

    run_interactive(matcher)


if __name__ == "__main__":
    main()
