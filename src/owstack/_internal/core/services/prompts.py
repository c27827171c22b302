from abc import ABC, abstractmethod
from typing import Optional

from owstack._internal.core.consts import IDENTITIES_DONE_TOKEN
from owstack._internal.core.errors import ConfigError, InputValidationError
from owstack._internal.core.models.configurator import (
    ServerIdentities,
    ServerIdentity,
    TopologyChoice,
)
from owstack._internal.utils.network import is_valid_server_name


class Prompter(ABC):
    """
    Line-oriented operator input.
    """

    @abstractmethod
    def ask(self, prompt: str, password: bool = False) -> str:
        pass

    @abstractmethod
    def say(self, message: str) -> None:
        pass


def ask_storage_root(prompter: Prompter, default: str) -> Optional[str]:
    prompter.say("Enter the root path for Docker volumes (absolute path).")
    prompter.say(f"Leave empty to use {default} as the root path.")
    return prompter.ask(f"Root path for volumes (default: {default})")


def validate_server_name(name: str) -> ServerIdentity:
    if not is_valid_server_name(name):
        raise InputValidationError(f"Invalid domain or IP address: {name!r}")
    return ServerIdentity(name=name)


def collect_server_identities(prompter: Prompter) -> ServerIdentities:
    prompter.say("Enter your domain names or IP addresses (e.g. chat.example.com or 192.168.1.1).")
    prompter.say("The first valid entry will be the main domain.")
    prompter.say("Any additional valid entries will redirect to the main domain.")
    prompter.say(f"Type '{IDENTITIES_DONE_TOKEN}' when you are finished.")
    identities = []
    while True:
        line = prompter.ask(f"Domain or IP (or '{IDENTITIES_DONE_TOKEN}' to finish)").strip()
        if line == IDENTITIES_DONE_TOKEN:
            break
        if not line:
            prompter.say("Input cannot be empty. Please try again.")
            continue
        try:
            identity = validate_server_name(line)
            if identity in identities:
                raise InputValidationError(f"Already added: {identity.name}")
        except InputValidationError as e:
            prompter.say(f"{e}. Please enter a valid domain or IP.")
            continue
        identities.append(identity)
        prompter.say(f"Accepted: {identity.name}")
    if not identities:
        raise ConfigError("No valid domains or IP addresses entered")
    return ServerIdentities(primary=identities[0], secondary=identities[1:])


def ask_yes_no(prompter: Prompter, prompt: str) -> bool:
    """
    Asks until the answer starts with `y` or `n`. A blank answer means no.
    """
    while True:
        answer = prompter.ask(f"{prompt} (y/N)").strip().lower()
        if not answer or answer.startswith("n"):
            return False
        if answer.startswith("y"):
            return True
        prompter.say("Invalid input. Please enter 'y' or 'n'.")


def collect_upstream_api_choice(prompter: Prompter, choices: TopologyChoice) -> TopologyChoice:
    if not ask_yes_no(prompter, "Enable OpenAI API?"):
        return choices.update(upstream_api_enabled=False)
    api_key = prompter.ask("OpenAI API key (leave empty for placeholder)", password=True)
    return choices.update(upstream_api_enabled=True, upstream_api_key=api_key.strip() or None)


def collect_tls_choice(prompter: Prompter, choices: TopologyChoice) -> TopologyChoice:
    return choices.update(tls_enabled=ask_yes_no(prompter, "Enable HTTPS?"))
