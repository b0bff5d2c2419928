from __future__ import annotations

from typing import Dict, Optional

# Fence tags that differ from the Pygments lexer name rich's Syntax expects.
LEXER_ALIASES: Dict[str, str] = {
    "js": "javascript",
    "jsx": "jsx",
    "ts": "typescript",
    "tsx": "tsx",
    "py": "python",
    "python3": "python",
    "rb": "ruby",
    "kt": "kotlin",
    "rs": "rust",
    "c++": "cpp",
    "objc": "objective-c",
    "objective-c": "objective-c",
    "cs": "csharp",
    "c#": "csharp",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
    "yml": "yaml",
    "md": "markdown",
    "dockerfile": "docker",
    "mermaid": "text",
}


def lexer_name(language: Optional[str]) -> str:
    if not language:
        return "text"
    tag = language.strip().lower()
    return LEXER_ALIASES.get(tag, tag or "text")
