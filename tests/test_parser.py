import unittest
from lquest_shell.parser import CommandParser, Redirection

class TestCommandParser(unittest.TestCase):
    def test_parse_pipeline_simple(self):
        cmd = "ls -l"
        expected = [("ls", ["-l"])]
        self.assertEqual(CommandParser.parse_pipeline(cmd), expected)

    def test_parse_pipeline_multiple(self):
        cmd = "cat file.txt | grep pattern | wc -l"
        expected = [
            ("cat", ["file.txt"]),
            ("grep", ["pattern"]),
            ("wc", ["-l"])
        ]
        self.assertEqual(CommandParser.parse_pipeline(cmd), expected)

    def test_parse_pipeline_quoted(self):
        cmd = 'echo "hello world" | grep "world"'
        expected = [
            ("echo", ["hello world"]),
            ("grep", ["world"])
        ]
        self.assertEqual(CommandParser.parse_pipeline(cmd), expected)

    def test_parse_pipeline_empty(self):
        self.assertEqual(CommandParser.parse_pipeline(""), [])
        self.assertEqual(CommandParser.parse_pipeline("   "), [])

    def test_tokenize_quotes(self):
        self.assertEqual(CommandParser.tokenize('grep "hello world" notes.txt'),
                         ['grep', 'hello world', 'notes.txt'])
        self.assertEqual(CommandParser.tokenize("echo 'it is' \"a 'test'\""),
                         ['echo', 'it is', "a 'test'"])
        # quoted empty string is still an argument
        self.assertEqual(CommandParser.tokenize("echo ''"), ['echo', ''])
        # adjacent quoted and unquoted text joins into one token
        self.assertEqual(CommandParser.tokenize('echo pre"fix suf"fix'), ['echo', 'prefix suffix'])

    def test_scan_marks_quoted_tokens(self):
        self.assertEqual(CommandParser.scan("echo '>' x"),
                         [('echo', False), ('>', True), ('x', False)])

    def test_split_pipeline_respects_quotes(self):
        self.assertEqual(CommandParser.split_pipeline("cat f | grep 'a|b' | wc -l"),
                         ['cat f', "grep 'a|b'", 'wc -l'])

    def test_split_pipeline_full_width_pipe(self):
        self.assertEqual(CommandParser.split_pipeline("ls ｜ wc -l"), ['ls', 'wc -l'])

    def test_split_sequence(self):
        self.assertEqual(CommandParser.split_sequence("mkdir proj && cd proj ; pwd"),
                         [('mkdir proj', None), ('cd proj', '&&'), ('pwd', ';')])
        self.assertEqual(CommandParser.split_sequence('echo "a;b" ; ls'),
                         [('echo "a;b"', None), ('ls', ';')])
        self.assertEqual(CommandParser.split_sequence(" ; "), [])

    def test_parse_redirection_stdout(self):
        cmd = "ls > output.txt"
        cleaned, redirection = CommandParser.parse_redirection(cmd)
        self.assertEqual(cleaned, "ls")
        self.assertEqual(redirection, Redirection('>', 'output.txt'))
        self.assertFalse(redirection.append)

    def test_parse_redirection_append(self):
        cmd = "echo hi >> log.txt"
        cleaned, redirection = CommandParser.parse_redirection(cmd)
        self.assertEqual(cleaned, "echo hi")
        self.assertEqual(redirection.operator, '>>')
        self.assertTrue(redirection.append)

    def test_parse_redirection_attached(self):
        for cmd in ("echo hi>out", "echo hi >out", "echo hi> out"):
            cleaned, redirection = CommandParser.parse_redirection(cmd)
            self.assertEqual(cleaned, "echo hi", cmd)
            self.assertEqual(redirection, Redirection('>', 'out'), cmd)

        cleaned, redirection = CommandParser.parse_redirection("echo hi>>log")
        self.assertEqual(cleaned, "echo hi")
        self.assertEqual(redirection, Redirection('>>', 'log'))

    def test_parse_redirection_quoted_operator(self):
        cleaned, redirection = CommandParser.parse_redirection('echo "a > b"')
        self.assertEqual(cleaned, "echo a > b")
        self.assertIsNone(redirection)

    def test_parse_redirection_last_wins(self):
        cleaned, redirection = CommandParser.parse_redirection("echo hi > a > b")
        self.assertEqual(cleaned, "echo hi")
        self.assertEqual(redirection.target, 'b')

    def test_parse_redirection_missing_target(self):
        with self.assertRaises(ValueError):
            CommandParser.parse_redirection("echo hi >")

    def test_parse_options(self):
        self.assertEqual(CommandParser.parse_options(['-la', '--all']), {'l', 'a', 'all'})
        self.assertEqual(CommandParser.parse_options([]), set())

    def test_parse_args_without_value_options(self):
        parsed = CommandParser.parse_args(['-n', '5', 'file'])
        self.assertEqual(parsed.options, ['-n'])
        self.assertEqual(parsed.params, ['5', 'file'])
        self.assertEqual(parsed.values, {})

    def test_parse_args_value_options(self):
        parsed = CommandParser.parse_args(['-n', '5', 'file'], frozenset('n'))
        self.assertEqual(parsed.values, {'n': '5'})
        self.assertEqual(parsed.params, ['file'])
        self.assertIn('n', parsed.flags)

        parsed = CommandParser.parse_args(['-m3', 'x'], frozenset('m'))
        self.assertEqual(parsed.values, {'m': '3'})
        self.assertEqual(parsed.params, ['x'])

        parsed = CommandParser.parse_args(['-im=2', 'pat'], frozenset('m'))
        self.assertEqual(parsed.values, {'m': '2'})
        self.assertEqual(parsed.flags, {'i', 'm'})
        self.assertEqual(parsed.params, ['pat'])

    def test_parse_args_bare_dash_is_param(self):
        parsed = CommandParser.parse_args(['-q', '-', 'b.txt'])
        self.assertEqual(parsed.params, ['-', 'b.txt'])
        self.assertEqual(parsed.flags, {'q'})

    def test_quote_arg(self):
        self.assertEqual(CommandParser.quote_arg('plain'), 'plain')
        self.assertEqual(CommandParser.quote_arg('two words'), "'two words'")
        self.assertEqual(CommandParser.quote_arg(''), "''")


if __name__ == '__main__':
    unittest.main()
