"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOCGEN_ prefix (e.g., DOCGEN_OUTPUT_FILE=api.md).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOCGEN_ prefix.

    Examples:
        DOCGEN_CONTROL_FILE=docs.docgen
        DOCGEN_MAX_ALIAS_DEPTH=32
        DOCGEN_PLUGIN_SUFFIXES='[".py"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Bootstrap configuration
    control_file: str = Field(
        default=".docgen",
        description="Name of the control document looked up in the input directory",
    )

    output_file: str = Field(
        default="index.md",
        description="Name of the generated document inside the output directory",
    )

    commands_subdir: str = Field(
        default="commands",
        description="Subdirectory of the output directory holding plugin commands",
    )

    # Lexical configuration
    line_comment: str = Field(
        default="//",
        description="Two-character opener of a line comment",
    )

    block_comment_open: str = Field(
        default="/*",
        description="Two-character opener of a block comment",
    )

    block_comment_close: str = Field(
        default="*/",
        description="Two-character closer of a block comment",
    )

    command_marker: str = Field(
        default="@",
        description="Character introducing an in-comment command",
    )

    meta_marker: str = Field(
        default="@@",
        description="Marker opening and closing a control document meta-command",
    )

    doc_open: str = Field(
        default="DOC",
        description="Command name that opens a documentation region",
    )

    doc_close: str = Field(
        default="END",
        description="Command name that closes a documentation region",
    )

    # Interpreter configuration
    max_alias_depth: int = Field(
        default=256,
        description="Maximum nesting of alias expansions before the expansion is refused",
    )

    plugin_suffixes: List[str] = Field(
        default_factory=lambda: [".pyc", ".py", ".so"],
        description="Plugin artifact suffixes, tried in order",
    )

    native_suffix: str = Field(
        default=".so",
        description="Suffix of plugin artifacts loaded as native shared libraries",
    )

    plugin_header: str = Field(
        default="# Generated by docgen from a NEW_COMMAND meta-command.",
        description="First line written into synthesized plugin sources",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: exit non-zero when any diagnostic was reported",
    )

    def pluginDir_resolve(self, outputdir: Path) -> Path:
        """
        Directory holding plugin artifacts for a given output directory.

        Example:
            >>> AppSettings().pluginDir_resolve(Path("docs"))
            PosixPath('docs/commands')
        """
        return Path(outputdir) / self.commands_subdir

    def pluginArtifact_candidates(self, outputdir: Path, name: str) -> List[Path]:
        """
        Candidate artifact paths for a command, in lookup order.

        Args:
            outputdir: Output directory of the run
            name: Command name (e.g. "TEST_CMD")

        Returns:
            One path per configured suffix, e.g.
            [docs/commands/TEST_CMD.pyc, docs/commands/TEST_CMD.py,
             docs/commands/TEST_CMD.so]
        """
        plugin_dir = self.pluginDir_resolve(outputdir)
        return [plugin_dir / f"{name}{suffix}" for suffix in self.plugin_suffixes]


# Singleton instance - import this in your code
appsettings = AppSettings()
