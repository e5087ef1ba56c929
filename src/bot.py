"""
Консольный чат — тот же путь ответа, что и у виджета, без браузера
"""

from typing import Dict

from answer_client import AnswerService, AnswerServiceError, build_answer_service
from knowledge import KnowledgeMatcher


class WidgetBot:
    def __init__(self, service: AnswerService):
        self.service = service
        self.matcher = service.matcher

    def process(self, user_message: str) -> Dict:
        """Обработать сообщение"""
        return self.service.ask(user_message, session_id="console")

    def add(self, command_args: str) -> str:
        """/add <keyword> | <answer>"""
        keyword, sep, answer = command_args.partition("|")
        keyword, answer = keyword.strip(), answer.strip()
        if not sep or not keyword or not answer:
            return "Формат: /add <keyword> | <answer>"
        try:
            self.matcher.add_entry(keyword, answer)
        except ValueError as e:
            return f"[Ошибка: {e}]"
        return f"[Добавлено: {keyword}]"


def run_interactive(bot: WidgetBot):
    """Интерактивный режим"""
    print("\n" + "="*50)
    print("Hebrew Chat Widget")
    print("Команды: /stats /keywords /add <keyword> | <answer> /quit")
    print("="*50 + "\n")

    while True:
        try:
            user_input = input("Вы: ").strip()

            if not user_input:
                continue

            if user_input == "/quit":
                break

            if user_input == "/stats":
                stats = bot.matcher.get_stats()
                print(f"\nЗаписей: {stats['totalEntries']}")
                print(f"Теги: {stats['tagCounts']}\n")
                continue

            if user_input == "/keywords":
                print("\n" + ", ".join(bot.matcher.list_keywords()) + "\n")
                continue

            if user_input.startswith("/add"):
                print(bot.add(user_input[len("/add"):]) + "\n")
                continue

            try:
                result = bot.process(user_input)
            except AnswerServiceError as e:
                print(f"[Ошибка: {e.message}]\n")
                continue
            meta = result["meta"]

            print(f"Бот: {result['answer']}")
            print(f"  [{meta['id']}] confidence={meta['confidence']} tags={meta['tags']}")
            if result["audioUrl"]:
                print(f"  audio: {result['audioUrl']}")
            print()

        except KeyboardInterrupt:
            print("\n\nלהתראות!")
            break


if __name__ == "__main__":
    bot = WidgetBot(build_answer_service(KnowledgeMatcher()))

    run_interactive(bot)
