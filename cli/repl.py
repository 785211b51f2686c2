"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    close_shell,
    connect,
    default_config_path,
    handle_cd,
    handle_cp,
    handle_link,
    handle_list,
    handle_mkdir,
    handle_mv,
    handle_put,
    handle_pwd,
    handle_rename,
    handle_rm,
)
from cli.completer import TeldriveCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    TOKEN_PROMPT,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    ChangeDirCommand,
    CopyCommand,
    LinkCommand,
    ListCommand,
    MakeDirCommand,
    MoveCommand,
    PutCommand,
    PwdCommand,
    RemoveCommand,
    RenameCommand,
)
from cli.parser import ParseError, parse_command
from teldrive.config import Config
from teldrive.exceptions import TeldriveError

HANDLERS = {
    ListCommand: handle_list,
    ChangeDirCommand: handle_cd,
    PwdCommand: handle_pwd,
    MakeDirCommand: handle_mkdir,
    PutCommand: handle_put,
    MoveCommand: handle_mv,
    RenameCommand: handle_rename,
    CopyCommand: handle_cp,
    RemoveCommand: handle_rm,
    LinkCommand: handle_link,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj)


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=TeldriveCompleter(), history=history, style=STYLE
    )

    def ask_token() -> str:
        return PromptSession().prompt(TOKEN_PROMPT, is_password=True)

    try:
        shell = connect(Config(default_config_path()), ask_token=ask_token)
    except TeldriveError as e:
        print(f"Error: could not connect to Teldrive: {e}")
        return
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
        return

    clear_screen()
    show_welcome()

    try:
        while True:
            try:
                prompt = PROMPT_TEXT.format(path=shell.pwd())
                user_input = session.prompt([("class:prompt", prompt)])

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome()
                    continue

                cmd_obj = parse_command(user_input)
                result = dispatch_command(cmd_obj)
                print(result)

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break
    finally:
        close_shell()
