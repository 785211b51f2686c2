"""Command handler functions for CLI operations."""

import asyncio
import os
from pathlib import Path
from typing import Callable, Optional

from common.logging_config import get_logger
from common.types import Folder, RemoteObject
from cli.constants import CONFIG_DIR_NAME, CONFIG_ENV_VAR
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
from cli.utils import UploadProgress, format_entry, format_file_size
from teldrive.config import Config
from teldrive.exceptions import NotFoundError, TeldriveError
from teldrive.registry import create_driver, register_default_drivers
from teldrive.storage import TeldriveStorage
from teldrive.streams import FileStream

logger = get_logger(__name__)


class Shell:
    """
    Interactive session state: the storage, its event loop and the current folder path.

    The storage's HTTP client is bound to one event loop, so every
    coroutine runs on the loop owned by this shell.
    """

    def __init__(self, storage: TeldriveStorage, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.storage = storage
        self.loop = loop or asyncio.new_event_loop()
        self.path: list[Folder] = []

    def run(self, coro):
        """Run a coroutine to completion; Ctrl-C cancels it before re-raising."""
        task = self.loop.create_task(coro)
        try:
            return self.loop.run_until_complete(task)
        except KeyboardInterrupt:
            task.cancel()
            self.loop.run_until_complete(asyncio.gather(task, return_exceptions=True))
            raise

    @property
    def cwd(self) -> Folder:
        return self.path[-1] if self.path else self.storage.root

    def pwd(self) -> str:
        return "/" + "/".join(folder.name for folder in self.path)

    def resolve(self, name: str) -> RemoteObject:
        """Find an entry of the current folder by name."""
        for obj in self.run(self.storage.list(self.cwd)):
            if obj.name == name:
                return obj
        raise NotFoundError(f"{name}: no such file or folder in {self.pwd()}")

    def resolve_folder(self, name: str) -> tuple[Folder, list[Folder]]:
        """
        Resolve a folder reference relative to the current folder.

        Returns:
            The folder and the path leading to it
        """
        if name == "/":
            return self.storage.root, []
        if name == "..":
            parent_path = self.path[:-1]
            return (parent_path[-1] if parent_path else self.storage.root), parent_path
        obj = self.resolve(name)
        if not isinstance(obj, Folder):
            raise NotFoundError(f"{name}: not a folder")
        return obj, self.path + [obj]

    def close(self) -> None:
        """Drop the storage and close the event loop."""
        try:
            self.run(self.storage.drop())
        finally:
            self.loop.close()


_shell: Optional[Shell] = None


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / CONFIG_DIR_NAME / 'config.json'


def connect(config: Config, ask_token: Optional[Callable[[], str]] = None) -> Shell:
    """
    Open the global Shell, asking for an access token when none is configured.

    A token entered at the prompt is saved to the config file only once
    the server has accepted it.

    Args:
        config: Driver configuration
        ask_token: Returns the access token typed by the user

    Returns:
        Shell instance

    Raises:
        AuthError: If no token is available or the server rejects it
    """
    global _shell
    if _shell is not None:
        return _shell

    prompted = False
    if not config.get_cookie() and ask_token is not None:
        token = ask_token().strip()
        if token:
            config.set_cookie(token)
            prompted = True

    register_default_drivers()
    storage = create_driver("teldrive", config)
    shell = Shell(storage)
    try:
        shell.run(storage.init())
    except BaseException:
        shell.loop.close()
        raise

    if prompted:
        config.save()
        logger.info(f"Access token saved to {config.config_path}")
    _shell = shell
    return _shell


def get_shell() -> Shell:
    """
    Get or create the global Shell, initializing the storage on first use.

    Returns:
        Shell instance
    """
    if _shell is None:
        logger.debug("Creating new Shell instance")
        return connect(Config(default_config_path()))
    return _shell


def close_shell() -> None:
    global _shell
    if _shell is not None:
        _shell.close()
        _shell = None


def _error(e: Exception) -> str:
    logger.debug(f"Command failed: {type(e).__name__}: {e}")
    return f"Error: {e}"


def handle_list(cmd: ListCommand, shell: Optional[Shell] = None) -> str:
    """
    Handle 'ls' command.

    Args:
        cmd: ListCommand
        shell: Optional Shell for dependency injection (testing)

    Returns:
        Formatted listing or error message
    """
    shell = shell or get_shell()
    try:
        entries = shell.run(shell.storage.list(shell.cwd))
    except TeldriveError as e:
        return _error(e)
    if not entries:
        return f"{shell.pwd()} is empty."
    lines = [f"{shell.pwd()} ({len(entries)} entries):"]
    lines.extend(format_entry(obj) for obj in entries)
    return '\n'.join(lines)


def handle_cd(cmd: ChangeDirCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        _, path = shell.resolve_folder(cmd.target)
    except TeldriveError as e:
        return _error(e)
    shell.path = path
    return shell.pwd()


def handle_pwd(cmd: PwdCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    return shell.pwd()


def handle_mkdir(cmd: MakeDirCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        folder = shell.run(shell.storage.make_dir(shell.cwd, cmd.name))
    except TeldriveError as e:
        return _error(e)
    return f"Created folder: {folder.name} (ID: {folder.id[:8]}...)"


def handle_put(cmd: PutCommand, shell: Optional[Shell] = None) -> str:
    """
    Handle 'put' command: upload each local file into the current folder.

    Args:
        cmd: PutCommand with local paths
        shell: Optional Shell for dependency injection (testing)

    Returns:
        One result line per file
    """
    logger.info(f"Executing put command: {len(cmd.local_paths)} file(s)")
    shell = shell or get_shell()
    results = []

    for local_path in cmd.local_paths:
        path = Path(local_path).expanduser()
        if not path.is_file():
            results.append(f"Error: Not a file: {local_path}")
            continue

        try:
            with FileStream.from_path(path) as stream:
                progress = UploadProgress(stream.name, stream.size)
                committed = shell.run(shell.storage.put(shell.cwd, stream, progress))
        except TeldriveError as e:
            results.append(f"Error uploading {local_path}: {e}")
            continue
        except OSError as e:
            results.append(f"Error reading {local_path}: {e}")
            continue

        results.append(
            f"Uploaded: {committed.name} (ID: {committed.id[:8]}..., Size: {format_file_size(committed.size)})"
        )

    return '\n'.join(results)


def handle_mv(cmd: MoveCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        obj = shell.resolve(cmd.name)
        destination, _ = shell.resolve_folder(cmd.destination)
        shell.run(shell.storage.move(obj, destination))
    except TeldriveError as e:
        return _error(e)
    return f"Moved: {obj.name} -> {cmd.destination}"


def handle_rename(cmd: RenameCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        obj = shell.resolve(cmd.name)
        renamed = shell.run(shell.storage.rename(obj, cmd.new_name))
    except TeldriveError as e:
        return _error(e)
    return f"Renamed: {cmd.name} -> {renamed.name}"


def handle_cp(cmd: CopyCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        obj = shell.resolve(cmd.name)
        destination, _ = shell.resolve_folder(cmd.destination)
        copied = shell.run(shell.storage.copy(obj, destination))
    except TeldriveError as e:
        return _error(e)
    return f"Copied: {obj.name} -> {cmd.destination} (ID: {copied.id[:8]}...)"


def handle_rm(cmd: RemoveCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    results = []
    for name in cmd.names:
        try:
            obj = shell.resolve(name)
            shell.run(shell.storage.remove(obj))
        except TeldriveError as e:
            results.append(_error(e))
            continue
        results.append(f"Deleted: {name}")
    return '\n'.join(results)


def handle_link(cmd: LinkCommand, shell: Optional[Shell] = None) -> str:
    shell = shell or get_shell()
    try:
        obj = shell.resolve(cmd.name)
    except TeldriveError as e:
        return _error(e)
    if obj.is_dir:
        return f"Error: {cmd.name} is a folder"
    return shell.storage.get_link(obj)
