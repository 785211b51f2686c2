"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["ls", "cd", "pwd", "mkdir", "put", "mv", "rename", "cp", "rm", "link", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2AABEE bold",
        "command": "#0088ff bold",
    }
)

TELEGRAM_BLUE = "\033[38;2;42;171;238m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{TELEGRAM_BLUE}
 ████████╗███████╗██╗     ██████╗ ██████╗ ██╗██╗   ██╗███████╗
 ╚══██╔══╝██╔════╝██║     ██╔══██╗██╔══██╗██║██║   ██║██╔════╝
    ██║   █████╗  ██║     ██║  ██║██████╔╝██║██║   ██║█████╗
    ██║   ██╔══╝  ██║     ██║  ██║██╔══██╗██║╚██╗ ██╔╝██╔══╝
    ██║   ███████╗███████╗██████╔╝██║  ██║██║ ╚████╔╝ ███████╗
    ╚═╝   ╚══════╝╚══════╝╚═════╝ ╚═╝  ╚═╝╚═╝  ╚═══╝  ╚══════╝
{RESET}"""

WELCOME_TITLE = "Teldrive shell - chunked uploads to your drive"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "teldrive:{path}> "
TOKEN_PROMPT = "Access token: "

CONFIG_ENV_VAR = "TELDRIVE_CONFIG"
CONFIG_DIR_NAME = ".teldrive"

HELP_TEXT = """Available commands:
  ls                          List the current folder
  cd <folder|..|/>            Change folder
  pwd                         Show the current folder
  mkdir <name>                Create a folder
  put <local-file>...         Upload local files into the current folder
  mv <name> <folder|..>       Move an entry into another folder
  rename <name> <new-name>    Rename an entry
  cp <name> <folder|..>       Copy an entry into another folder
  rm <name>...                Delete entries
  link <name>                 Print the download link of a file
  clear                       Clear screen and redisplay welcome message
  help                        Show this help
  exit                        Exit the shell

Names refer to entries of the current folder; quote names with spaces.
Examples:
  mkdir backups
  cd backups
  put ~/videos/talk.mp4 "notes 2024.txt"
  rename talk.mp4 keynote.mp4
  mv keynote.mp4 ..
  link keynote.mp4"""
