"""
Command interpreter

Runs source units through the comment scanner and executes the commands
found inside documentation regions (@DOC ... @END), routing emitted text
into the section store.

Dispatch order for a command name:
1. The S_ prefix marks the command for whitespace simplification
2. Built-ins from the CommandRegistry
3. Aliases registered with NEW_ALIAS
4. Plugin commands found by the PluginBridge

Alias expansion does not recurse on the Python call stack. Walking a unit
is a generator yielding work items; an alias yields RecurseIntoUnit with a
synthetic unit, and source_process() pushes a new walker for it onto an
explicit stack. Text always reaches the current section in document order.

Example:
    >>> interp = Interpreter(outputdir=Path("docs"))
    >>> interp.source_process(SourceUnit("/* @DOC @FUNC_NAME @END */ int add(int a)", "m.c"))
    >>> interp.sections.main
    ' add '
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ..models.commands import SIMPLIFY_PREFIX
from ..models.parser import CommandMatch
from ..models.source import (
    SourceUnit,
    CommentSpan,
    CommandInvocation,
    CommandResult,
    Diagnostic,
    DiagnosticKind,
    RawText,
    RecurseIntoUnit,
    WorkItem,
)
from .commands import CommandRegistry
from .log import LOG, DIAGNOSTIC
from .parser import body_tokenize
from .plugins import PluginBridge
from .scanner import comments_scan, nextComment_find
from .sections import SectionStore
from .textops import whitespace_simplify


class Interpreter:
    """
    Context for one documentation run

    Attributes:
        sections: Output buffers shared by every processed unit
        aliases: Alias name -> template text
        commands: Built-in command registry
        plugins: Plugin bridge for unknown commands
        diagnostics: Everything reported so far, in order
    """

    def __init__(
        self,
        outputdir: Path = Path("docs"),
        settings: Optional[Any] = None,
        registry: Optional[CommandRegistry] = None,
        sections: Optional[SectionStore] = None,
    ) -> None:
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.commands = registry or CommandRegistry()
        self.sections = sections or SectionStore()
        self.plugins = PluginBridge(outputdir, settings)
        self.aliases: Dict[str, str] = {}
        self.diagnostics: List[Diagnostic] = []

    def alias_register(self, name: str, template: str) -> None:
        """Register or overwrite an alias"""
        if name in self.aliases:
            LOG(f"Redefining alias {name}", level=2)
        self.aliases[name] = template

    def diagnostic_add(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic and report it on the error channel"""
        self.diagnostics.append(diagnostic)
        DIAGNOSTIC(diagnostic)

    def source_process(self, unit: SourceUnit, real_source: bool = True) -> None:
        """
        Run a unit through the scanner and interpreter

        Args:
            unit: Source text and its name
            real_source: True for files on disk. The current section is
                         reset to main after every comment of a real source,
                         so a SECTION never leaks into the next comment or
                         file. Synthetic alias units keep the section.

        Each stack entry is (walker, collector, owns_collector). A walker
        whose collector is not None emits into that list instead of the
        section store; the entry that owns it writes the simplified text
        out when its walker is exhausted.
        """
        stack: List[Tuple[Iterator[WorkItem], Optional[List[str]], bool]] = [
            (self.unit_walk(unit, real_source), None, False)
        ]

        def text_emit(text: str) -> None:
            collector = stack[-1][1] if stack else None
            if collector is None:
                self.sections.write(text)
            else:
                collector.append(text)

        while stack:
            walker, collector, owned = stack[-1]
            try:
                item = next(walker)
            except StopIteration:
                stack.pop()
                if owned:
                    text_emit(whitespace_simplify(''.join(collector)))
                continue

            if isinstance(item, RawText):
                text_emit(item.text)
            elif isinstance(item, RecurseIntoUnit):
                if len(stack) > self.settings.max_alias_depth:
                    self.diagnostic_add(Diagnostic(
                        DiagnosticKind.UNRESOLVED,
                        f"Alias expansion deeper than {self.settings.max_alias_depth} levels, skipped",
                        unit.name,
                    ))
                    continue
                child_collector = [] if item.simplify else collector
                stack.append((self.unit_walk(item.unit, real_source=False), child_collector, item.simplify))

    def unit_walk(self, unit: SourceUnit, real_source: bool) -> Iterator[WorkItem]:
        """
        Yield the work items produced by every comment of a unit

        Commands run lazily as the driver pulls items, so a SECTION switch
        takes effect exactly between the texts around it.
        """
        comments = comments_scan(unit.text, self.settings)
        LOG(f"{unit.name or '<alias>'}: {len(comments)} comments", level=3)

        for comment in comments:
            yield from self.comment_walk(comment, unit)
            if real_source:
                self.sections.main_select()

    def comment_walk(self, comment: CommentSpan, unit: SourceUnit) -> Iterator[WorkItem]:
        """Interpret one comment body, honoring @DOC / @END regions"""
        in_doc = False

        for token in body_tokenize(comment.body, self.settings.command_marker):
            if not isinstance(token, CommandMatch):
                if in_doc:
                    yield RawText(token)
                continue

            if token.name == self.settings.doc_open:
                in_doc = True
            elif token.name == self.settings.doc_close:
                in_doc = False
            elif in_doc:
                invocation = CommandInvocation(
                    name=token.name,
                    arguments=token.arguments,
                    comment=comment,
                    source=unit,
                )
                outcome = self.invocation_dispatch(invocation)
                if isinstance(outcome, RecurseIntoUnit):
                    yield outcome
                else:
                    for diagnostic in outcome.diagnostics:
                        self.diagnostic_add(diagnostic)
                    if outcome.text:
                        yield RawText(outcome.text)

    def invocation_dispatch(self, invocation: CommandInvocation) -> Union[CommandResult, RecurseIntoUnit]:
        """
        Execute one command

        Returns:
            CommandResult for built-ins and plugins (already simplified when
            requested), RecurseIntoUnit for aliases (simplified by the driver)
        """
        name = invocation.name.strip()
        if name.startswith(SIMPLIFY_PREFIX):
            name = name[len(SIMPLIFY_PREFIX):]
            invocation.simplify = True
        invocation.name = name

        handler = self.commands.get(name)
        if handler is not None:
            outcome = handler(invocation, self)
        elif name in self.aliases:
            return RecurseIntoUnit(self.alias_expand(invocation), simplify=invocation.simplify)
        else:
            outcome = self.plugins.command_invoke(
                name, invocation.following, invocation.arguments, invocation.source.name
            )

        if isinstance(outcome, CommandResult) and invocation.simplify:
            outcome.text = whitespace_simplify(outcome.text)
        return outcome

    def alias_expand(self, invocation: CommandInvocation) -> SourceUnit:
        """
        Build the synthetic unit for an alias invocation

        The alias template becomes a documentation region in a block
        comment on a single line, followed directly by the real source up to
        the next comment. The template's commands see the same code a built-in
        would, and the region emits what the template written inline emits.
        """
        text = invocation.source.text
        start = invocation.comment.end_offset
        end = nextComment_find(text, start, self.settings)
        open_marker = self.settings.block_comment_open
        close_marker = self.settings.block_comment_close
        marker = self.settings.command_marker

        synthetic = (
            f"{open_marker} {marker}{self.settings.doc_open} "
            f"{self.aliases[invocation.name]} "
            f"{marker}{self.settings.doc_close} {close_marker}"
            f"{text[start:end]}"
        )
        LOG(f"Expanding alias {invocation.name}", level=3)
        return SourceUnit(text=synthetic, name=invocation.source.name)
