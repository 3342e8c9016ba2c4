"""Shell command parser for pipeline syntax"""

from typing import Dict, FrozenSet, List, Optional, Set, Tuple

QUOTES = ('"', "'")
PIPE_CHARS = ('|', '｜')  # ASCII and full-width pipe

Token = Tuple[str, bool]


class Redirection:
    """Represents a redirection operation"""
    def __init__(self, operator: str, target: str):
        self.operator = operator  # '>' or '>>'
        self.target = target      # filename

    @property
    def append(self) -> bool:
        return self.operator == '>>'

    def __eq__(self, other):
        return (isinstance(other, Redirection)
                and (self.operator, self.target) == (other.operator, other.target))

    def __repr__(self):
        return f"Redirection({self.operator} {self.target})"


class ParsedArgs:
    """Options and positional parameters split from a token list"""

    def __init__(self, options: List[str], params: List[str], values: Dict[str, str] = None):
        self.options = options          # raw option tokens, e.g. ['-la', '--all']
        self.params = params            # positional parameters
        self.values = values or {}      # values of value-taking options, e.g. {'m': '3'}
        self.flags = CommandParser.parse_options(options)

    def __repr__(self):
        return f"ParsedArgs(flags={sorted(self.flags)}, values={self.values}, params={self.params})"


class CommandParser:
    """Parse shell command strings into pipeline components"""

    @staticmethod
    def scan(line: str) -> List[Token]:
        """
        Split a command line into tokens, remembering which were quoted

        Inside single or double quotes every character is literal until the
        same quote character closes it. Quote characters are dropped.
        Unquoted whitespace ends a token. There is no escape character.

        Returns:
            List of (text, quoted) tuples
        """
        tokens = []
        current = []
        quote = None
        in_token = False
        quoted = False

        for char in line:
            if quote:
                if char == quote:
                    quote = None
                else:
                    current.append(char)
            elif char in QUOTES:
                quote = char
                in_token = True
                quoted = True
            elif char.isspace():
                if in_token:
                    tokens.append((''.join(current), quoted))
                    current = []
                    in_token = False
                    quoted = False
            else:
                current.append(char)
                in_token = True

        if in_token:
            tokens.append((''.join(current), quoted))
        return tokens

    @staticmethod
    def tokenize(line: str) -> List[str]:
        """
        Split a command line into quote-aware tokens

        Example:
            >>> CommandParser.tokenize('grep "hello world" notes.txt')
            ['grep', 'hello world', 'notes.txt']
        """
        return [text for text, _ in CommandParser.scan(line)]

    @staticmethod
    def _split_unquoted(line: str, separators) -> List[Tuple[str, Optional[str]]]:
        parts = []
        current = []
        quote = None
        pending = None
        i = 0
        while i < len(line):
            char = line[i]
            if quote:
                if char == quote:
                    quote = None
                current.append(char)
                i += 1
                continue
            if char in QUOTES:
                quote = char
                current.append(char)
                i += 1
                continue
            for sep in separators:
                if line.startswith(sep, i):
                    parts.append((''.join(current), pending))
                    current = []
                    pending = sep
                    i += len(sep)
                    break
            else:
                current.append(char)
                i += 1
        parts.append((''.join(current), pending))
        return parts

    @staticmethod
    def split_pipeline(line: str) -> List[str]:
        """
        Split a command line into pipeline stages

        Pipes inside quotes are left alone. Empty stages are dropped.

        Example:
            >>> CommandParser.split_pipeline("cat f | grep 'a|b' | wc -l")
            ['cat f', "grep 'a|b'", 'wc -l']
        """
        stages = [part.strip() for part, _ in CommandParser._split_unquoted(line, PIPE_CHARS)]
        return [stage for stage in stages if stage]

    @staticmethod
    def split_sequence(line: str) -> List[Tuple[str, Optional[str]]]:
        """
        Split a command line on ``;`` and ``&&`` outside quotes

        Returns:
            List of (segment, operator) tuples where operator is the separator
            preceding the segment (None for the first one)
        """
        segments = []
        for part, op in CommandParser._split_unquoted(line, ('&&', ';')):
            part = part.strip()
            if part:
                segments.append((part, op if segments else None))
        return segments

    @staticmethod
    def parse_pipeline(command_line: str) -> List[Tuple[str, List[str]]]:
        """
        Parse a command line into pipeline components

        Args:
            command_line: Command line string (e.g., "cat file.txt | grep pattern | wc -l")

        Returns:
            List of (command, args) tuples

        Example:
            >>> CommandParser.parse_pipeline("cat file.txt | grep pattern")
            [('cat', ['file.txt']), ('grep', ['pattern'])]
        """
        commands = []
        for stage in CommandParser.split_pipeline(command_line):
            tokens = CommandParser.tokenize(stage)
            if tokens:
                commands.append((tokens[0], tokens[1:]))
        return commands

    @staticmethod
    def extract_redirection(tokens: List[Token]) -> Tuple[List[str], Optional[Redirection]]:
        """
        Strip ``>`` / ``>>`` redirections from a scanned stage

        Operators may stand alone (``> out``), prefix the target (``>out``),
        trail an argument (``hi> out``) or sit inside an unquoted token
        (``hi>out``). Quoted tokens are never treated as operators. When
        several redirections are given the last one wins.

        Returns:
            Tuple of (remaining words, redirection or None)

        Raises:
            ValueError: an operator has no target
        """
        words = []
        redirection = None
        i = 0
        while i < len(tokens):
            text, quoted = tokens[i]
            i += 1
            if quoted or '>' not in text:
                words.append(text)
                continue

            pos = text.index('>')
            before = text[:pos]
            if text.startswith('>>', pos):
                operator = '>>'
            else:
                operator = '>'
            after = text[pos + len(operator):]

            if before:
                words.append(before)
            if not after:
                if i >= len(tokens):
                    raise ValueError("syntax error near unexpected token `newline'")
                after = tokens[i][0]
                i += 1
            redirection = Redirection(operator, after)

        return words, redirection

    @staticmethod
    def parse_redirection(command_line: str) -> Tuple[str, Optional[Redirection]]:
        """
        Parse redirection operators of a single stage

        Returns:
            Tuple of (command words joined by spaces, redirection or None)
        """
        words, redirection = CommandParser.extract_redirection(CommandParser.scan(command_line))
        return ' '.join(words), redirection

    @staticmethod
    def parse_options(options: List[str]) -> Set[str]:
        """
        Expand option tokens into a flag set

        ``--long`` adds ``long``; ``-abc`` adds ``a``, ``b`` and ``c``.
        """
        flags = set()
        for opt in options:
            if opt.startswith('--'):
                flags.add(opt[2:])
            elif opt.startswith('-'):
                flags.update(opt[1:])
        return flags

    @staticmethod
    def parse_args(tokens: List[str], value_options: FrozenSet[str] = frozenset()) -> ParsedArgs:
        """
        Separate option tokens from positional parameters

        Any token that starts with ``-`` and is longer than one character is an
        option; a bare ``-`` is a parameter. Short options listed in
        ``value_options`` take a value, either attached (``-m3``, ``-m=3``) or
        from the next token (``-m 3``).

        Args:
            tokens: Argument tokens (without the command name)
            value_options: Short option letters that take a value

        Returns:
            ParsedArgs with options, params and values
        """
        options = []
        params = []
        values = {}
        i = 0
        while i < len(tokens):
            token = tokens[i]
            i += 1
            if not (token.startswith('-') and len(token) > 1):
                params.append(token)
                continue
            if token.startswith('--') or not value_options:
                options.append(token)
                continue

            # walk bundled letters until one of them takes a value
            letters = token[1:]
            for pos, letter in enumerate(letters):
                if letter not in value_options:
                    continue
                rest = letters[pos + 1:]
                if rest.startswith('='):
                    rest = rest[1:]
                if not rest and i < len(tokens):
                    rest = tokens[i]
                    i += 1
                values[letter] = rest
                letters = letters[:pos + 1]
                break
            options.append('-' + letters)

        return ParsedArgs(options, params, values)

    @staticmethod
    def quote_arg(arg: str) -> str:
        """Quote an argument if it contains spaces or special characters"""
        if not arg or ' ' in arg or any(c in arg for c in '|&;<>'):
            if "'" in arg:
                return f'"{arg}"'
            return f"'{arg}'"
        return arg
