"""
Plugin commands

A plugin command is an artifact stored in the commands directory of the
output directory (see AppSettings.pluginDir_resolve) and named after the
command it implements. Two kinds of artifact are understood, looked up in
the order of AppSettings.plugin_suffixes.

Python modules (NAME.pyc, NAME.py) define, at module level, a function with
exactly the command's name:

    def NAME(code: str, args: List[str]) -> str

Native shared libraries (NAME.so, see AppSettings.native_suffix) export an
unmangled C symbol with exactly the command's name:

    const char *NAME(const char *code, const char *const *args, size_t nargs);

All strings are UTF-8 and NUL-terminated, and `args` holds `nargs` entries
followed by a NULL pointer. The returned string is copied before the library
is unloaded, so it may live in a static buffer; NULL means no output. Any
language able to export a C function can provide such a library.

`code` is the source text following the documenting comment and `args` the
command's arguments. The returned text is emitted like any built-in's.

Python plugins are either written by hand or synthesized from a NEW_COMMAND
meta-command, in which case the source is byte-compiled into a .pyc
artifact. Nothing is preloaded: an artifact is looked up the first time an
unknown command is used, loaded, called once and released again.
"""

import sys
import ctypes
import _ctypes
import textwrap
import importlib.util
import py_compile
from pathlib import Path
from typing import Any, List, Optional

from ..models.source import CommandResult, DiagnosticKind
from .log import LOG
from .textops import wrapper_strip


def pluginSource_synthesize(name: str, body: str, imports: str = "", header: str = "") -> str:
    """
    Build the source of a plugin module from a NEW_COMMAND body

    Args:
        name: Command name; becomes the function name
        body: Function body, optionally wrapped in (), {}, [] or quotes
        imports: Extra module-level lines (imports, helpers)
        header: First line of the module

    Returns:
        Python source defining `def NAME(code, args):`

    Example:
        >>> print(pluginSource_synthesize("UPPER", "{return code.upper()}"))
        from typing import List
        <BLANKLINE>
        <BLANKLINE>
        def UPPER(code: str, args: List[str]) -> str:
            return code.upper()
        <BLANKLINE>
    """
    function_body = textwrap.dedent(wrapper_strip(body).strip('\n')).rstrip()
    if not function_body.strip():
        function_body = "return ''"
    module_imports = textwrap.dedent(wrapper_strip(imports).strip('\n')).rstrip() if imports else ""

    lines = []
    if header:
        lines.append(header)
    lines.append("from typing import List")
    if module_imports:
        lines.append(module_imports)
    lines.append("")
    lines.append("")
    lines.append(f"def {name}(code: str, args: List[str]) -> str:")
    lines.append(textwrap.indent(function_body, "    "))
    return '\n'.join(lines) + '\n'


def plugin_build(source_path: Path, artifact_path: Path) -> bool:
    """
    Byte-compile a plugin source into its artifact

    Build problems are logged and otherwise ignored; the unbuildable
    command surfaces later as an unresolved command.

    Returns:
        True if the artifact was written
    """
    try:
        py_compile.compile(str(source_path), cfile=str(artifact_path), doraise=True)
    except py_compile.PyCompileError as e:
        LOG(f"Plugin build failed for {source_path.name}: {e.msg}", level=1)
        return False
    LOG(f"Built plugin artifact {artifact_path}", level=2)
    return True


def library_release(library: ctypes.CDLL) -> None:
    """Unload a native plugin library loaded with ctypes"""
    if sys.platform == "win32":
        _ctypes.FreeLibrary(library._handle)
    else:
        _ctypes.dlclose(library._handle)


class PluginBridge:
    """
    Resolves unknown command names against the plugin directory

    Attributes:
        outputdir: Output directory whose commands/ subdirectory is searched
        settings: AppSettings supplying directory name and artifact suffixes
    """

    def __init__(self, outputdir: Path, settings: Optional[Any] = None) -> None:
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.outputdir = Path(outputdir)
        self.settings = settings

    @property
    def plugin_dir(self) -> Path:
        """Directory holding plugin sources and artifacts"""
        return self.settings.pluginDir_resolve(self.outputdir)

    def artifact_resolve(self, name: str) -> Optional[Path]:
        """First existing artifact for a command, or None"""
        for candidate in self.settings.pluginArtifact_candidates(self.outputdir, name):
            if candidate.is_file():
                return candidate
        return None

    def command_create(self, name: str, body: str, imports: str = "") -> Path:
        """
        Synthesize, write and build a plugin command

        An artifact left by an earlier build is removed first, so a body
        that no longer compiles never runs the previous version.

        Returns:
            Path of the written plugin source
        """
        self.plugin_dir.mkdir(parents=True, exist_ok=True)
        source_path = self.plugin_dir / f"{name}.py"
        artifact_path = self.plugin_dir / f"{name}.pyc"
        artifact_path.unlink(missing_ok=True)
        source_path.write_text(
            pluginSource_synthesize(name, body, imports, self.settings.plugin_header),
            encoding='utf-8',
        )
        LOG(f"Wrote plugin source {source_path}", level=2)
        plugin_build(source_path, artifact_path)
        return source_path

    def command_invoke(self, name: str, code: str, args: List[str], where: str = "") -> CommandResult:
        """
        Load the artifact for name, call its entry point once, release it

        Args:
            name: Command name, also the exported function name
            code: Source text after the documenting comment
            args: Command arguments
            where: Source name for diagnostics

        Returns:
            CommandResult with the plugin's output. An unknown command, an
            artifact that cannot be loaded or built, and a missing export
            are UNRESOLVED; an exception raised by plugin code is PLUGIN.
        """
        artifact = self.artifact_resolve(name)
        if artifact is None:
            return CommandResult.failure(DiagnosticKind.UNRESOLVED, f"Unknown command {name}", where)
        if artifact.suffix == self.settings.native_suffix:
            return self.nativeCommand_invoke(name, artifact, code, args, where)
        return self.moduleCommand_invoke(name, artifact, code, args, where)

    def moduleCommand_invoke(
        self, name: str, artifact: Path, code: str, args: List[str], where: str
    ) -> CommandResult:
        """Run a Python plugin; the module is registered only for the call"""
        module_name = f"docgen_plugin_{name}"
        spec = importlib.util.spec_from_file_location(module_name, artifact)
        if spec is None or spec.loader is None:
            return CommandResult.failure(
                DiagnosticKind.UNRESOLVED, f"Could not load command {name} from {artifact}", where
            )

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            try:
                spec.loader.exec_module(module)
            except (SyntaxError, ImportError) as e:
                return CommandResult.failure(
                    DiagnosticKind.UNRESOLVED, f"Could not load command {name}: {e}", where
                )
            except Exception as e:
                return CommandResult.failure(
                    DiagnosticKind.PLUGIN, f"Command {name} raised {type(e).__name__} while loading: {e}", where
                )

            entry = getattr(module, name, None)
            if not callable(entry):
                return CommandResult.failure(
                    DiagnosticKind.UNRESOLVED, f"Could not find function {name} in {artifact.name}", where
                )

            LOG(f"Running plugin command {name} from {artifact}", level=3)
            try:
                result = entry(code, list(args))
            except Exception as e:
                return CommandResult.failure(
                    DiagnosticKind.PLUGIN, f"Command {name} raised {type(e).__name__}: {e}", where
                )
            return CommandResult(text="" if result is None else str(result))
        finally:
            sys.modules.pop(module_name, None)
            del module

    def nativeCommand_invoke(
        self, name: str, artifact: Path, code: str, args: List[str], where: str
    ) -> CommandResult:
        """Run a native plugin through its C export; the library is unloaded after the call"""
        try:
            library = ctypes.CDLL(str(artifact.resolve()))
        except OSError as e:
            return CommandResult.failure(
                DiagnosticKind.UNRESOLVED, f"Could not load command {name}: {e}", where
            )

        try:
            try:
                entry = getattr(library, name)
            except AttributeError:
                return CommandResult.failure(
                    DiagnosticKind.UNRESOLVED, f"Could not find function {name} in {artifact.name}", where
                )
            entry.restype = ctypes.c_char_p
            entry.argtypes = [ctypes.c_char_p, ctypes.POINTER(ctypes.c_char_p), ctypes.c_size_t]

            encoded = [arg.encode('utf-8') for arg in args]
            argv = (ctypes.c_char_p * (len(encoded) + 1))(*encoded, None)
            LOG(f"Running native command {name} from {artifact}", level=3)
            result = entry(code.encode('utf-8'), argv, len(encoded))
            return CommandResult(text=(result or b"").decode('utf-8', errors='replace'))
        finally:
            library_release(library)
