"""Parser for the go.mod module manifest.

Only the parts of the grammar needed to locate a dependency are modelled:
the main module path, ``require``, ``replace`` and ``exclude`` directives.
Other directives are syntax-checked and dropped.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from . import errors

VERBS = frozenset({"module", "go", "toolchain", "require", "replace", "exclude", "retract", "godebug"})
BLOCK_VERBS = frozenset({"require", "replace", "exclude", "retract", "godebug"})

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def is_local_path(path):
    """True when a module path names a directory rather than a module."""
    return path.startswith(("/", ".")) or bool(_WINDOWS_DRIVE.match(path))


@dataclass(frozen=True)
class ModuleVersion:
    path: str
    version: str = ""
    dir: Optional[str] = None

    def __str__(self):
        if self.version:
            return f"{self.path}@{self.version}"
        return self.path


@dataclass(frozen=True)
class Require:
    mod: ModuleVersion
    indirect: bool = False


@dataclass(frozen=True)
class Replace:
    old: ModuleVersion
    new: ModuleVersion


@dataclass(frozen=True)
class ModuleGraph:
    module: str
    modroot: str
    go: Optional[str] = None
    requires: Tuple[Require, ...] = field(default_factory=tuple)
    replaces: Tuple[Replace, ...] = field(default_factory=tuple)
    excludes: Tuple[ModuleVersion, ...] = field(default_factory=tuple)

    def find_replace(self, path, version=None):
        """Return the replacement applying to path, or None.

        A replacement pinned to ``version`` wins over one without a version,
        which wins over one pinned to some other version.
        """
        wildcard = other = None
        for replace in self.replaces:
            if replace.old.path != path:
                continue
            if not replace.old.version:
                wildcard = replace
            elif version and replace.old.version == version:
                return replace
            elif other is None:
                other = replace
        return wildcard or other

    def find_require(self, path):
        for require in self.requires:
            if require.mod.path == path:
                return require
        return None


def _tokenize(line, lineno, filename):
    """Split a manifest line into tokens and its trailing comment."""
    tokens = []
    comment = ""
    i, n = 0, len(line)
    while i < n:
        c = line[i]
        if c.isspace():
            i += 1
        elif line.startswith("//", i):
            comment = line[i + 2:].strip()
            break
        elif c in "()":
            tokens.append(c)
            i += 1
        elif line.startswith("=>", i):
            tokens.append("=>")
            i += 2
        elif c == '"':
            j = i + 1
            buf = []
            while j < n and line[j] != '"':
                if line[j] == "\\" and j + 1 < n:
                    buf.append(line[j + 1])
                    j += 2
                    continue
                buf.append(line[j])
                j += 1
            if j >= n:
                raise errors.ManifestParseError("unterminated quoted string", filename, lineno)
            tokens.append("".join(buf))
            i = j + 1
        elif c == "`":
            j = line.find("`", i + 1)
            if j < 0:
                raise errors.ManifestParseError("unterminated raw string", filename, lineno)
            tokens.append(line[i + 1:j])
            i = j + 1
        else:
            j = i
            while (j < n and not line[j].isspace() and line[j] not in '()"`'
                   and not line.startswith("=>", j) and not line.startswith("//", j)):
                j += 1
            tokens.append(line[i:j])
            i = j
    return tokens, comment


class _Parser:

    def __init__(self, modroot, filename):
        self.modroot = modroot
        self.filename = filename
        self.module = None
        self.go = None
        self.requires = []
        self.replaces = []
        self.excludes = []

    def fail(self, message, lineno):
        raise errors.ManifestParseError(message, self.filename, lineno)

    def check_version(self, version, lineno):
        if not re.match(r"^v\d+(\.\d+){0,2}", version):
            self.fail(f"invalid version {version!r}: must be of the form v1.2.3", lineno)

    def apply(self, verb, args, comment, lineno):
        if verb == "module":
            if len(args) != 1:
                self.fail("usage: module module/path", lineno)
            if self.module is not None:
                self.fail("repeated module statement", lineno)
            self.module = args[0]
        elif verb == "go":
            if len(args) != 1:
                self.fail("usage: go 1.23", lineno)
            self.go = args[0]
        elif verb == "toolchain":
            if len(args) != 1:
                self.fail("usage: toolchain name", lineno)
        elif verb in ("require", "exclude"):
            if len(args) != 2:
                self.fail(f"usage: {verb} module/path v1.2.3", lineno)
            self.check_version(args[1], lineno)
            mod = ModuleVersion(args[0], args[1])
            if verb == "require":
                indirect = comment == "indirect" or comment.startswith("indirect;")
                self.requires.append(Require(mod, indirect))
            else:
                self.excludes.append(mod)
        elif verb == "replace":
            self.apply_replace(args, lineno)
        elif verb in ("retract", "godebug"):
            if not args:
                self.fail(f"usage: {verb} ...", lineno)

    def apply_replace(self, args, lineno):
        if "=>" not in args:
            self.fail("usage: replace module/path [v1.2.3] => other/module v1.4\n"
                      "\t or replace module/path [v1.2.3] => ../local/directory", lineno)
        arrow = args.index("=>")
        old, new = args[:arrow], args[arrow + 1:]
        if len(old) not in (1, 2) or len(new) not in (1, 2):
            self.fail("usage: replace module/path [v1.2.3] => other/module v1.4", lineno)
        if len(old) == 2:
            self.check_version(old[1], lineno)
        if len(new) == 1 and not is_local_path(new[0]):
            self.fail("replacement module without version must be directory path "
                      "(rooted or starting with ./ or ../)", lineno)
        if len(new) == 2:
            if is_local_path(new[0]):
                self.fail("replacement module directory path must not have version", lineno)
            self.check_version(new[1], lineno)
        replace = Replace(ModuleVersion(*old), ModuleVersion(*new))
        for existing in self.replaces:
            if existing.old == replace.old:
                self.fail(f"multiple replacements for {replace.old}", lineno)
        self.replaces.append(replace)


def parse(modroot, data, filename="go.mod"):
    """Parse manifest bytes into a ModuleGraph."""
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise errors.ManifestParseError(f"invalid UTF-8: {e}", filename)

    parser = _Parser(modroot, filename)
    block_verb = None
    block_start = 0
    for lineno, line in enumerate(data.splitlines(), 1):
        tokens, comment = _tokenize(line, lineno, filename)
        if not tokens:
            continue
        if block_verb:
            if tokens == [")"]:
                block_verb = None
            elif "(" in tokens or ")" in tokens:
                parser.fail("unexpected parenthesis inside block", lineno)
            else:
                parser.apply(block_verb, tokens, comment, lineno)
            continue

        verb, args = tokens[0], tokens[1:]
        if verb not in VERBS:
            parser.fail(f"unknown directive: {verb}", lineno)
        if args == ["("]:
            if verb not in BLOCK_VERBS:
                parser.fail(f"{verb} does not accept a block", lineno)
            block_verb, block_start = verb, lineno
            continue
        if "(" in args or ")" in args:
            parser.fail("unexpected parenthesis", lineno)
        parser.apply(verb, args, comment, lineno)

    if block_verb:
        parser.fail(f"unterminated {block_verb} block", block_start)
    if parser.module is None:
        raise errors.ManifestParseError("no module declaration", filename)

    return ModuleGraph(
        module=parser.module,
        modroot=modroot,
        go=parser.go,
        requires=tuple(parser.requires),
        replaces=tuple(parser.replaces),
        excludes=tuple(parser.excludes),
    )
