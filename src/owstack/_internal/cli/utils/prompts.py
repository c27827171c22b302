from rich.markup import escape
from rich.prompt import Prompt

from owstack._internal.cli.utils.common import console
from owstack._internal.core.services.prompts import Prompter


class ConsolePrompter(Prompter):
    def ask(self, prompt: str, password: bool = False) -> str:
        return Prompt.ask(
            f"[code]?[/] {escape(prompt)}",
            console=console,
            password=password,
            default="",
            show_default=False,
        )

    def say(self, message: str) -> None:
        console.print(escape(message))
