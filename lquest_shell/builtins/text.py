"""Text processing commands"""

import difflib
import re
from typing import List, Optional, Tuple

from ..command_decorators import command
from ..filesystem import FsNode, walk
from ..process import Process
from .helpers import iter_sources, split_lines

_ECHO_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '\\': '\\', 'a': '\a', 'b': '\b', 'v': '\v', 'f': '\f'}


@command(category='Text Ops')
def cmd_echo(process: Process) -> int:
    """
    Echo arguments to stdout

    Usage: echo [-n] [-e | -E] [args...]

    Backslash escapes (\\n, \\t, \\\\) are interpreted unless -E is given.
    """
    args = list(process.args)
    interpret = True
    newline = True
    while args and re.match(r'^-[neE]+$', args[0]):
        if 'n' in args[0]:
            newline = False
        if 'E' in args[0]:
            interpret = False
        elif 'e' in args[0]:
            interpret = True
        args.pop(0)

    text = ' '.join(args)
    if interpret:
        text = re.sub(r'\\(.)', lambda m: _ECHO_ESCAPES.get(m.group(1), m.group(0)), text)
    if newline:
        process.stdout.writeline(text)
    else:
        process.stdout.write(text)
    return 0


# ---------------------------------------------------------------------------
# grep
# ---------------------------------------------------------------------------

class _Matcher:
    """Line matcher built from grep's options"""

    def __init__(self, pattern: str, ignore_case: bool, invert: bool, word: bool,
                 line: bool, extended: bool):
        self.invert = invert
        source = pattern if extended else re.escape(pattern)
        if word:
            source = rf'\b(?:{source})\b'
        if line:
            source = rf'^(?:{source})$'
        self.regex = re.compile(source, re.IGNORECASE if ignore_case else 0)

    def matches(self, line: str) -> bool:
        found = self.regex.search(line) is not None
        return found != self.invert

    def parts(self, line: str) -> List[str]:
        """Matched substrings for ``-o``; nothing when inverted"""
        if self.invert:
            return []
        return [m.group(0) for m in self.regex.finditer(line) if m.group(0)]


def _grep_targets(process: Process, targets: List[str], recursive: bool,
                  quiet_errors: bool) -> List[Tuple[str, FsNode]]:
    expanded = []
    for target in targets:
        node = process.resolve(target)
        if node is None:
            if not quiet_errors:
                process.stderr.writeline(f"grep: {target}: No such file or directory")
            continue
        if node.is_dir:
            if not recursive:
                if not quiet_errors:
                    process.stderr.writeline(f"grep: {target}: Is a directory")
                continue
            expanded.extend((path, n) for path, n in walk(node, target.rstrip('/') or '/')
                            if n.is_file)
        else:
            expanded.append((target, node))
    return expanded


@command(value_options='me', category='Text Ops')
def cmd_grep(process: Process) -> int:
    """
    Search for patterns in files

    Usage: grep [options] PATTERN [file...]

    Options:
        -i    Ignore case
        -v    Select non-matching lines
        -w    Match whole words only
        -x    Match whole lines only
        -o    Print only the matched parts
        -n    Prefix each line with its line number
        -c    Print only a count of matching lines per file
        -l    Print only names of files with matches
        -q    Quiet; exit status only
        -r    Search directories recursively
        -m N  Stop after N matching lines per file
        -E    PATTERN is a regular expression
        -h/-H Suppress/force file name prefixes
        -s    Suppress messages about unreadable files

    Without -E the pattern is a literal string. Reads piped input when no
    file is given. Exit status is 0 on a match, 1 without one, 2 on error.
    """
    params = list(process.params)
    if 'e' in process.values:
        pattern = process.values['e']
    elif params:
        pattern = params.pop(0)
    else:
        return process.error("Usage: grep [OPTION]... PATTERNS [FILE]...", 2)

    max_count = None
    if 'm' in process.values:
        try:
            max_count = int(process.values['m'])
        except ValueError:
            return process.error("grep: invalid max count", 2)

    try:
        matcher = _Matcher(pattern,
                           ignore_case=process.has_flag('i', 'ignore-case'),
                           invert=process.has_flag('v', 'invert-match'),
                           word=process.has_flag('w'),
                           line=process.has_flag('x'),
                           extended=process.has_flag('E', 'P'))
    except re.error:
        return process.error("grep: Invalid regular expression", 2)

    recursive = process.has_flag('r', 'R', 'recursive')
    if not params and recursive and not process.stdin.is_piped:
        params = ['.']

    if params:
        sources = [(path, node.content or '')
                   for path, node in _grep_targets(process, params, recursive,
                                                   process.has_flag('s'))]
    else:
        sources = [('(standard input)', process.stdin.read())]

    if process.has_flag('h'):
        show_name = False
    elif process.has_flag('H'):
        show_name = True
    else:
        show_name = len(sources) > 1

    quiet = process.has_flag('q', 'quiet', 'silent')
    only = process.has_flag('o')
    numbered = process.has_flag('n')
    matched_any = False

    for name, content in sources:
        count = 0
        for idx, line in enumerate(split_lines(content), 1):
            if max_count is not None and count >= max_count:
                break
            if not matcher.matches(line):
                continue
            count += 1
            matched_any = True
            if quiet:
                return 0
            if process.has_flag('l', 'c'):
                continue
            prefix = ''
            if show_name:
                prefix += f"{name}:"
            if numbered:
                prefix += f"{idx}:"
            if only:
                for part in matcher.parts(line):
                    process.stdout.writeline(prefix + part)
            else:
                process.stdout.writeline(prefix + line)

        if process.has_flag('c'):
            process.stdout.writeline(f"{name}:{count}" if show_name else str(count))
        elif process.has_flag('l') and count:
            process.stdout.writeline(name)

    if matched_any:
        return 0
    return 2 if process.stderr.has_errors else 1


# ---------------------------------------------------------------------------
# head / tail
# ---------------------------------------------------------------------------

def _line_count(process: Process) -> Tuple[Optional[str], Optional[str]]:
    """Requested count as written (``-n N`` or ``-N``); second item is an error"""
    raw = process.values.get('n')
    if raw is None:
        for opt in process.options:
            if re.match(r'^-\d+$', opt):
                raw = opt[1:]
    if raw is None:
        return '10', None
    if not re.match(r'^[+-]?\d+$', raw):
        return None, f"{process.command}: invalid number of lines: '{raw}'"
    return raw, None


def _head_tail(process: Process, head: bool) -> int:
    raw, problem = _line_count(process)
    if problem:
        return process.error(problem)

    from_start = not head and raw.startswith('+')
    count = abs(int(raw))
    missing = "{cmd}: cannot open '{name}' for reading: No such file or directory"
    is_dir = "{cmd}: error reading '{name}': Is a directory"
    banner = len(process.params) > 1
    blocks = []

    for name, content in iter_sources(process, process.params, missing, is_dir):
        lines = split_lines(content)
        if head:
            chosen = lines[:count]
        elif from_start:
            chosen = lines[max(count - 1, 0):]
        else:
            chosen = lines[-count:] if count else []
        block = '\n'.join(chosen)
        if banner:
            block = f"==> {name} <==\n{block}" if block else f"==> {name} <=="
        blocks.append(block)

    text = ('\n\n' if banner else '\n').join(blocks)
    if text:
        process.stdout.writeline(text)
    return 1 if process.stderr.has_errors else 0


@command(value_options='n', category='Text Ops')
def cmd_head(process: Process) -> int:
    """
    Output the first part of files

    Usage: head [-n N | -N] [file...]
    """
    return _head_tail(process, head=True)


@command(value_options='n', category='Text Ops')
def cmd_tail(process: Process) -> int:
    """
    Output the last part of files

    Usage: tail [-n N | -N | -n +K] [file...]

    With -n +K, output starts at line K.
    """
    return _head_tail(process, head=False)


# ---------------------------------------------------------------------------
# Counting, sorting and filtering
# ---------------------------------------------------------------------------

def _wc_counts(content: str) -> Tuple[int, int, int]:
    return len(split_lines(content)), len(content.split()), len(content.encode('utf-8'))


@command(category='Text Ops')
def cmd_wc(process: Process) -> int:
    """
    Print line, word, and byte counts

    Usage: wc [-l] [-w] [-c] [file...]
    """
    selected = [flag for flag in ('l', 'w', 'c') if process.has_flag(flag)]
    if not selected:
        selected = ['l', 'w', 'c']
    index = {'l': 0, 'w': 1, 'c': 2}

    def _row(counts, name):
        cols = ' '.join(f"{counts[index[flag]]:>4}" for flag in selected)
        return f"{cols} {name}" if name is not None else cols

    totals = [0, 0, 0]
    rows = 0
    for name, content in iter_sources(process, process.params):
        counts = _wc_counts(content)
        totals = [a + b for a, b in zip(totals, counts)]
        process.stdout.writeline(_row(counts, name))
        rows += 1

    if rows > 1:
        process.stdout.writeline(_row(totals, 'total'))
    return 1 if process.stderr.has_errors else 0


_NUMERIC_PREFIX = re.compile(r'^\s*([+-]?\d+(?:\.\d+)?)')


def _numeric_key(line: str):
    match = _NUMERIC_PREFIX.match(line)
    if match:
        return (0, float(match.group(1)), line)
    return (1, 0.0, line)


@command(category='Text Ops')
def cmd_sort(process: Process) -> int:
    """
    Sort lines of text

    Usage: sort [-n] [-r] [-u] [file...]

    Options:
        -n    Compare by leading number; non-numeric lines go last
        -r    Reverse the result
        -u    Output only the first of equal lines
    """
    lines = []
    for _, content in iter_sources(process, process.params):
        lines.extend(line for line in split_lines(content) if line)

    if process.has_flag('n', 'numeric-sort'):
        lines.sort(key=_numeric_key)
    else:
        lines.sort()
    if process.has_flag('r', 'reverse'):
        lines.reverse()
    if process.has_flag('u', 'unique'):
        seen = set()
        lines = [line for line in lines if not (line in seen or seen.add(line))]

    if lines:
        process.stdout.writeline('\n'.join(lines))
    return 1 if process.stderr.has_errors else 0


@command(category='Text Ops')
def cmd_uniq(process: Process) -> int:
    """
    Collapse adjacent duplicate lines

    Usage: uniq [-c] [-d] [-u] [file]

    Options:
        -c    Prefix lines with their number of occurrences
        -d    Only print duplicated lines
        -u    Only print unique lines
    """
    groups: List[List] = []
    for _, content in iter_sources(process, process.params[:1]):
        for line in split_lines(content):
            if groups and groups[-1][0] == line:
                groups[-1][1] += 1
            else:
                groups.append([line, 1])

    for line, count in groups:
        if process.has_flag('d') and count < 2:
            continue
        if process.has_flag('u') and count > 1:
            continue
        if process.has_flag('c'):
            process.stdout.writeline(f"{count:>7} {line}")
        else:
            process.stdout.writeline(line)
    return 1 if process.stderr.has_errors else 0


def parse_ranges(spec: str) -> List[Tuple[int, Optional[int]]]:
    """
    Parse a cut list such as ``1,3-4,6-``

    Returns:
        List of inclusive 1-based (start, end) ranges; end None means open

    Raises:
        ValueError: the list is malformed
    """
    ranges = []
    for part in spec.split(','):
        if not part:
            raise ValueError(spec)
        if '-' in part:
            start, _, end = part.partition('-')
            lo = int(start) if start else 1
            hi = int(end) if end else None
        else:
            lo = hi = int(part)
        if lo < 1 or (hi is not None and hi < lo):
            raise ValueError(spec)
        ranges.append((lo, hi))
    return ranges


def _select(items: List[str], ranges) -> List[str]:
    chosen = []
    for idx, item in enumerate(items, 1):
        if any(lo <= idx and (hi is None or idx <= hi) for lo, hi in ranges):
            chosen.append(item)
    return chosen


@command(value_options='dfc', category='Text Ops')
def cmd_cut(process: Process) -> int:
    """
    Remove sections from each line

    Usage: cut -f LIST [-d DELIM] [file...]
           cut -c LIST [file...]

    LIST is made of numbers and ranges separated by commas (1,3-4,6-).
    The default delimiter is TAB; lines without it are printed whole.
    """
    by_fields = 'f' in process.values
    spec = process.values.get('f') if by_fields else process.values.get('c')
    if spec is None:
        return process.error("cut: you must specify a list of bytes, characters, or fields")
    try:
        ranges = parse_ranges(spec)
    except ValueError:
        return process.error(f"cut: invalid field value '{spec}'")

    delimiter = process.values.get('d', '\t')
    if len(delimiter) != 1:
        return process.error("cut: the delimiter must be a single character")

    for _, content in iter_sources(process, process.params):
        for line in split_lines(content):
            if not by_fields:
                process.stdout.writeline(''.join(_select(list(line), ranges)))
            elif delimiter not in line:
                process.stdout.writeline(line)
            else:
                process.stdout.writeline(delimiter.join(_select(line.split(delimiter), ranges)))
    return 1 if process.stderr.has_errors else 0


# ---------------------------------------------------------------------------
# awk
# ---------------------------------------------------------------------------

_AWK_PROGRAM = re.compile(r'^\s*\{\s*print(?:\s+(?P<exprs>.*?))?\s*;?\s*\}\s*$', re.DOTALL)
_AWK_TOKEN = re.compile(r'"[^"]*"|\$\w+|,|NF|[^\s,"]+')


def _awk_print(exprs: str):
    """Compile the argument list of ``print`` into a line formatter"""
    tokens = _AWK_TOKEN.findall(exprs or '$0')

    def _value(token: str, fields: List[str], record: str) -> str:
        if token.startswith('"'):
            return token[1:-1].replace('\\t', '\t').replace('\\n', '\n')
        if token == 'NF':
            return str(len(fields))
        if token.startswith('$'):
            ref = token[1:]
            if ref == 'NF':
                index = len(fields)
            elif ref.isdigit():
                index = int(ref)
            else:
                raise ValueError(token)
            if index == 0:
                return record
            return fields[index - 1] if index <= len(fields) else ''
        raise ValueError(token)

    def _format(record: str, fields: List[str]) -> str:
        out = []
        current = ''
        for token in tokens:
            if token == ',':
                out.append(current)
                current = ''
            else:
                current += _value(token, fields, record)
        out.append(current)
        return ' '.join(out)

    # surface bad tokens before any input is read
    _format('', [])
    return _format


@command(value_options='F', category='Text Ops')
def cmd_awk(process: Process) -> int:
    """
    Print selected fields of each line

    Usage: awk [-F SEP] '{print $N, ...}' [file...]

    Only print statements are supported. Arguments may be $0, $N, $NF, NF
    and "quoted text"; commas insert a space.
    """
    if not process.params:
        return process.error("usage: awk [-F fs] 'program' [file ...]", 2)

    program, files = process.params[0], process.params[1:]
    match = _AWK_PROGRAM.match(program)
    try:
        if not match:
            raise ValueError(program)
        formatter = _awk_print(match.group('exprs'))
    except ValueError:
        return process.error(f"awk: syntax error in program: {program}", 2)

    separator = process.values.get('F')
    if separator == '\\t' or separator == 't':
        separator = '\t'

    for _, content in iter_sources(process, files):
        for record in split_lines(content):
            if separator:
                fields = record.split(separator)
            else:
                fields = record.split()
            process.stdout.writeline(formatter(record, fields))
    return 2 if process.stderr.has_errors else 0


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------

def _span(lo: int, hi: int) -> str:
    """1-based line range of a half-open slice"""
    if hi - lo <= 1:
        return str(lo + 1 if hi > lo else lo)
    return f"{lo + 1},{hi}"


def normal_diff(a: List[str], b: List[str]) -> List[str]:
    """Differences between two line lists in diff's normal format"""
    out = []
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            continue
        if tag == 'replace':
            out.append(f"{_span(i1, i2)}c{_span(j1, j2)}")
            out.extend(f"< {line}" for line in a[i1:i2])
            out.append('---')
            out.extend(f"> {line}" for line in b[j1:j2])
        elif tag == 'delete':
            out.append(f"{_span(i1, i2)}d{j1}")
            out.extend(f"< {line}" for line in a[i1:i2])
        else:
            out.append(f"{i1}a{_span(j1, j2)}")
            out.extend(f"> {line}" for line in b[j1:j2])
    return out


@command(category='Text Ops')
def cmd_diff(process: Process) -> int:
    """
    Compare files line by line

    Usage: diff [-q] file1 file2

    Options:
        -q    Report only whether the files differ

    Exit status is 0 when the files are identical, 1 when they differ and
    2 on trouble.
    """
    if len(process.params) < 2:
        if process.params:
            return process.error(f"diff: missing operand after '{process.params[0]}'", 2)
        return process.error("diff: missing operand", 2)

    contents = []
    for name in process.params[:2]:
        if name == '-':
            contents.append(process.stdin.read())
            continue
        node = process.resolve(name)
        if node is None:
            return process.error(f"diff: {name}: No such file or directory", 2)
        if node.is_dir:
            return process.error(f"diff: {name}: Is a directory", 2)
        contents.append(node.content or '')

    left, right = contents
    if left == right:
        return 0
    if process.has_flag('q', 'brief'):
        process.stdout.writeline(f"Files {process.params[0]} and {process.params[1]} differ")
        return 1
    process.stdout.writeline('\n'.join(normal_diff(split_lines(left), split_lines(right))))
    return 1


# ---------------------------------------------------------------------------
# Path strings
# ---------------------------------------------------------------------------

@command(category='Text Ops')
def cmd_basename(process: Process) -> int:
    """
    Strip directory and suffix from a path

    Usage: basename path [suffix]
    """
    if not process.params:
        return process.error("basename: missing operand")

    path = process.params[0]
    stripped = path.rstrip('/')
    if not stripped:
        process.stdout.writeline('/' if path else '')
        return 0
    name = stripped.rsplit('/', 1)[-1]
    if len(process.params) > 1:
        suffix = process.params[1]
        if suffix and name.endswith(suffix) and name != suffix:
            name = name[:-len(suffix)]
    process.stdout.writeline(name)
    return 0


@command(category='Text Ops')
def cmd_dirname(process: Process) -> int:
    """
    Strip the last component from a path

    Usage: dirname path
    """
    if not process.params:
        return process.error("dirname: missing operand")

    for path in process.params:
        stripped = path.rstrip('/')
        if not stripped:
            process.stdout.writeline('/' if path else '.')
            continue
        if '/' not in stripped:
            process.stdout.writeline('.')
            continue
        parent = stripped.rsplit('/', 1)[0].rstrip('/')
        process.stdout.writeline(parent or '/')
    return 0
