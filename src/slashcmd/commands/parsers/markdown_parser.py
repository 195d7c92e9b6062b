"""
Markdown (prose) command parser.

Layout of a markdown command file:

- first ``# `` heading: command name (sanitized), falling back to the file name
- first ``## `` heading or plain line outside fences: description
- first non-empty ```bash / ```sh / ```shell block: shell template

Files without a shell block become prompt commands that forward the whole
document to the AI.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from slashcmd.commands.file_io import read_text_async
from slashcmd.commands.naming import sanitize_command_name
from slashcmd.commands.parsers.base import CommandFileParser
from slashcmd.commands.types import (
    SHELL_TOOL_NAME,
    SHORTHAND_ARGS_PLACEHOLDER,
    AiPromptActionReturn,
    CommandContext,
    CommandSourceFormat,
    ToolActionReturn,
)
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

FENCE = "```"
SHELL_FENCE_TAGS = ("bash", "sh", "shell")

MARKDOWN_CATEGORY = "markdown"
MARKDOWN_TAGS = ("markdown", "custom")


@dataclass
class MarkdownDocument:
    """Fields extracted from a markdown command file."""

    title: str = ""
    description: str = ""
    shell_command: str = ""


def _is_shell_fence(line: str) -> bool:
    return any(line.startswith(FENCE + tag) for tag in SHELL_FENCE_TAGS)


def parse_markdown_document(content: str) -> MarkdownDocument:
    """
    Extract title, description and shell template from markdown text.

    Scanning for the description stops at the end of the first non-empty
    shell block. Lines inside fenced blocks never become the description.
    """
    document = MarkdownDocument()
    lines = content.split("\n")

    for line in lines:
        stripped = line.strip()
        if stripped.startswith("# "):
            document.title = stripped[2:].strip()
            break

    in_shell_block = False
    in_other_block = False
    block_lines: list[str] = []

    for line in lines:
        stripped = line.strip()

        if in_other_block:
            if stripped == FENCE:
                in_other_block = False
            continue

        if in_shell_block:
            if stripped == FENCE:
                block = "\n".join(block_lines).strip()
                if block:
                    document.shell_command = block
                    break
                in_shell_block = False
                block_lines = []
            else:
                block_lines.append(line)
            continue

        if _is_shell_fence(stripped):
            in_shell_block = True
            continue
        if stripped.startswith(FENCE):
            in_other_block = True
            continue

        if not document.description:
            if stripped.startswith("## "):
                document.description = stripped[3:].strip()
            elif stripped and not stripped.startswith("#"):
                document.description = stripped

    return document


def make_markdown_shell_action(shell_command: str, project_root: Path | None):
    """Action dispatching the shell template with ``{{args}}`` substituted."""

    def action(context: CommandContext, args: str) -> ToolActionReturn:
        root = context.services.project_root or project_root
        return ToolActionReturn(
            tool_name=SHELL_TOOL_NAME,
            tool_args={
                "command": shell_command.replace(SHORTHAND_ARGS_PLACEHOLDER, args or ""),
                "cwd": str(root) if root else os.getcwd(),
            },
        )

    return action


def make_prompt_action(content: str):
    """Action forwarding the document (plus any user text) as an AI prompt."""

    def action(context: CommandContext, args: str) -> AiPromptActionReturn:
        prompt = content.strip()
        if args and args.strip():
            prompt = f"{prompt}\n\n{args.strip()}"
        return AiPromptActionReturn(content=prompt)

    return action


class MarkdownCommandParser(CommandFileParser):
    """Parses ``.md`` / ``.markdown`` command files."""

    source_format = CommandSourceFormat.MARKDOWN

    async def parse(self, path: Path, project_root: Path | None = None) -> Any | None:
        try:
            content = await read_text_async(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("command_file_read_failed", file=str(path), error=str(e))
            return None

        filename = path.stem
        document = parse_markdown_document(content)

        name = sanitize_command_name(document.title) or sanitize_command_name(filename)
        if not name:
            logger.warning(
                "command_name_unresolved",
                file=str(path),
                title=document.title,
                reason="heading and file name are empty after sanitization",
            )
            return None

        metadata: dict[str, Any] = {
            "category": MARKDOWN_CATEGORY,
            "tags": list(MARKDOWN_TAGS),
            "can_execute_shell": bool(document.shell_command),
        }

        if document.shell_command:
            action = make_markdown_shell_action(document.shell_command, project_root)
        else:
            action = make_prompt_action(content)

        return {
            "name": name,
            "description": document.description or document.title or f"Command from {filename}",
            "action": action,
            "metadata": metadata,
        }
