"""
Compiler for docgen control documents

Transforms a control document (.docgen) into the final output document by
executing its meta-commands and copying every other line verbatim.
"""

import glob
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..models.parser import MetaCommand
from ..models.source import SourceUnit, Diagnostic, DiagnosticKind
from .interpreter import Interpreter
from .log import LOG
from .parser import Parser
from .textops import markdown_simplify, wrapper_strip, quotes_strip


class Compiler:
    """
    Compiles a control document to one output document

    Responsibilities:
    - Copy plain control document lines to the output
    - Execute meta-commands (NEW_COMMAND, NEW_ALIAS, PROCESS_SOURCES,
      INSERT_SECTION)
    - Append the main section and normalize blank lines
    - Write the result
    """

    def __init__(
        self,
        source: str,
        output_dir: str,
        input_dir: str = ".",
        output_file: Optional[str] = None,
        verbosity: int = 1,
        settings: Optional[Any] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            source: Control document text
            output_dir: Directory for the generated document and plugins
            input_dir: Directory source patterns are resolved against
            output_file: Generated document name (default from settings)
            verbosity: Output verbosity level (0-3)
            settings: AppSettings override (default: application settings)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.source = source
        self.output_dir = Path(output_dir)
        self.input_dir = Path(input_dir)
        self.output_file = output_file or settings.output_file
        self.verbosity = verbosity

        self.interpreter = Interpreter(outputdir=self.output_dir, settings=settings)
        self.output: List[str] = []
        self.source_count = 0

        self.meta_commands: Dict[str, Callable[[MetaCommand], None]] = {
            'NEW_COMMAND': self.newCommand_execute,
            'PROCESS_SOURCES': self.processSources_execute,
            'INSERT_SECTION': self.insertSection_execute,
            'NEW_ALIAS': self.newAlias_execute,
        }

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Diagnostics of the whole run"""
        return self.interpreter.diagnostics

    def compile(self) -> Dict[str, Any]:
        """
        Generate and write the output document

        Returns:
            dict with compilation results and statistics
        """
        LOG("Starting generation...", level=2)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        document = self.document_build()

        output_file = self.output_dir / self.output_file
        output_file.write_text(document, encoding='utf-8')
        LOG(f"Wrote {output_file}", level=2)

        return {
            'status': True,
            'output_file': str(output_file),
            'source_count': self.source_count,
            'section_count': len(self.interpreter.sections.names),
            'diagnostics': list(self.diagnostics),
        }

    def document_build(self) -> str:
        """
        Run the control document and return the final text

        Plain lines are kept verbatim; the main section follows everything
        else. Runs of blank lines are collapsed and the result trimmed.
        """
        for item in Parser(self.source, self.settings.meta_marker).parse():
            if isinstance(item, MetaCommand):
                self.meta_execute(item)
            else:
                self.output.append(item + '\n')

        self.output.append(markdown_simplify(self.interpreter.sections.main))
        return markdown_simplify(''.join(self.output)).strip()

    def meta_execute(self, command: MetaCommand) -> None:
        """Dispatch one meta-command"""
        LOG(f"Line {command.start_line}: {command.name}({', '.join(command.arguments)})", level=3)
        handler = self.meta_commands.get(command.name)
        if handler is None:
            self.diagnostic_add(f"Unknown command {command.name}", command, DiagnosticKind.UNRESOLVED)
            return
        handler(command)

    def diagnostic_add(self, message: str, command: MetaCommand, kind: DiagnosticKind) -> None:
        """Report a problem with a meta-command"""
        where = f"{self.settings.control_file}:{command.start_line}"
        self.interpreter.diagnostic_add(Diagnostic(kind, message, where))

    def newCommand_execute(self, command: MetaCommand) -> None:
        """
        Handle NEW_COMMAND(name, body) / NEW_COMMAND(name, imports, body)

        Writes the plugin source and builds its artifact.
        """
        args = command.arguments
        if len(args) not in (2, 3):
            self.diagnostic_add("NEW_COMMAND requires 2 or 3 arguments", command, DiagnosticKind.ARITY)
            return
        name = args[0]
        if not name.isidentifier():
            self.diagnostic_add(f"Invalid command name '{name}'", command, DiagnosticKind.SYNTAX)
            return
        imports, body = (args[1], args[2]) if len(args) == 3 else ("", args[1])
        self.interpreter.plugins.command_create(name, body, imports)

    def sources_find(self, patterns: List[str]) -> List[Path]:
        """
        Expand glob patterns relative to the input directory

        '**' matches across directories. Each pattern's matches are sorted;
        a file matched by several patterns is returned once.
        """
        found: List[Path] = []
        seen = set()
        for pattern in patterns:
            pattern = quotes_strip(pattern)
            if not pattern:
                continue
            for match in sorted(glob.glob(pattern, root_dir=self.input_dir, recursive=True)):
                path = self.input_dir / match
                if path.is_file() and path not in seen:
                    seen.add(path)
                    found.append(path)
        return found

    def processSources_execute(self, command: MetaCommand) -> None:
        """Handle PROCESS_SOURCES(patterns...) - document every matching file"""
        sources = self.sources_find(command.arguments)
        if not sources:
            patterns = ', '.join(command.arguments)
            self.diagnostic_add(f"No sources found for {patterns}", command, DiagnosticKind.UNRESOLVED)
            return

        for path in sources:
            LOG(f"Processing {path}", level=1)
            text = path.read_text(encoding='utf-8', errors='replace')
            self.interpreter.source_process(SourceUnit(text=text, name=str(path)), real_source=True)
            self.source_count += 1

    def insertSection_execute(self, command: MetaCommand) -> None:
        """Handle INSERT_SECTION(name) - splice a named section here"""
        if len(command.arguments) != 1:
            self.diagnostic_add("INSERT_SECTION requires 1 argument", command, DiagnosticKind.ARITY)
            return
        name = quotes_strip(command.arguments[0])
        text = self.interpreter.sections.section_get(name)
        if text is None:
            self.diagnostic_add(f"Section {name} not found", command, DiagnosticKind.UNRESOLVED)
            return
        self.output.append(markdown_simplify(text))
        self.output.append('\n\n')

    def newAlias_execute(self, command: MetaCommand) -> None:
        """Handle NEW_ALIAS(name, template)"""
        if len(command.arguments) != 2:
            self.diagnostic_add("NEW_ALIAS requires 2 arguments", command, DiagnosticKind.ARITY)
            return
        self.interpreter.alias_register(command.arguments[0], wrapper_strip(command.arguments[1]))
