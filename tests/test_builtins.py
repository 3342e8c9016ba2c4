import unittest
from lquest_shell.builtins import BUILTINS
from lquest_shell.config import Config
from lquest_shell.filesystem import resolve
from lquest_shell.layout import build_filesystem
from lquest_shell.process import Process
from lquest_shell.result import ClearScreen, HistoryEntry, OpenEditor

HOME = '/home/student'

SEED = [
    (f'{HOME}/notes.txt', 'hi'),
    (f'{HOME}/list.txt', 'b\na\nb\nc'),
    (f'{HOME}/.profile', 'export PATH'),
    (f'{HOME}/nums.txt', '\n'.join(str(i) for i in range(1, 13))),
    (f'{HOME}/project/a.txt', 'TODO one'),
    (f'{HOME}/project/sub/b.txt', 'TODO two'),
]


def make_config():
    config = Config()
    config.user = 'student'
    config.hostname = 'l-quest'
    config.home = HOME
    return config


class BuiltinTestCase(unittest.TestCase):
    def setUp(self):
        self.config = make_config()
        self.fs = build_filesystem(SEED)

    def create_process(self, command, args, input_data=None, cwd=HOME, old_pwd=None,
                       history=None, piped=False):
        return Process(command, args, self.fs, cwd, stdin=input_data, old_pwd=old_pwd,
                       history=history, executor=BUILTINS[command], config=self.config,
                       piped=piped)

    def run_cmd(self, command, args, input_data=None, **kwargs):
        """Run a handler and carry its filesystem forward"""
        proc = self.create_process(command, args, input_data, **kwargs)
        code = BUILTINS[command](proc)
        self.fs = proc.fs
        return code, proc

    def node(self, path):
        return resolve(self.fs, '/', path)


class TestEcho(BuiltinTestCase):
    def test_echo(self):
        cmd = BUILTINS['echo']

        # Test basic echo
        proc = self.create_process("echo", ["hello", "world"])
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "hello world")

        # Test empty echo
        proc = self.create_process("echo", [])
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "")

    def test_echo_escapes(self):
        cmd = BUILTINS['echo']
        proc = self.create_process("echo", ["a\\nb"])
        cmd(proc)
        self.assertEqual(proc.get_stdout(), "a\nb")

        proc = self.create_process("echo", ["-E", "a\\nb"])
        cmd(proc)
        self.assertEqual(proc.get_stdout(), "a\\nb")

        proc = self.create_process("echo", ["-n", "x"])
        cmd(proc)
        self.assertEqual(proc.get_stdout(), "x")


class TestFileCommands(BuiltinTestCase):
    def test_pwd(self):
        code, proc = self.run_cmd('pwd', [], cwd='/tmp')
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_stdout(), '/tmp')

    def test_ls(self):
        code, proc = self.run_cmd('ls', [])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_stdout(), 'documents  list.txt  notes.txt  nums.txt  project')

        code, proc = self.run_cmd('ls', ['-a'])
        self.assertTrue(proc.get_stdout().startswith('.profile  documents'))

    def test_ls_piped_one_per_line(self):
        code, proc = self.run_cmd('ls', ['project'], piped=True)
        self.assertEqual(proc.get_stdout(), 'a.txt\nsub')

    def test_ls_long(self):
        code, proc = self.run_cmd('ls', ['-l', 'notes.txt'])
        self.assertEqual(code, 0)
        line = proc.get_stdout()
        self.assertTrue(line.startswith('-rw-r--r-- 1 student student     2 '), line)
        self.assertTrue(line.endswith(' notes.txt'), line)

    def test_ls_missing(self):
        code, proc = self.run_cmd('ls', ['nope'])
        self.assertEqual(code, 2)
        self.assertEqual(proc.get_stderr(), "ls: cannot access 'nope': No such file or directory")

    def test_ls_recursive(self):
        code, proc = self.run_cmd('ls', ['-R', 'project'])
        self.assertEqual(proc.get_stdout(), 'project:\na.txt  sub\n\nproject/sub:\nb.txt')

    def test_cd(self):
        code, proc = self.run_cmd('cd', ['documents'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.cwd, f'{HOME}/documents')
        self.assertEqual(proc.to_result().new_cwd, f'{HOME}/documents')

        code, proc = self.run_cmd('cd', [], cwd='/')
        self.assertEqual(proc.cwd, HOME)

        code, proc = self.run_cmd('cd', ['..'], cwd='/')
        self.assertEqual(proc.cwd, '/')

    def test_cd_errors(self):
        code, proc = self.run_cmd('cd', ['notes.txt'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "bash: cd: notes.txt: Not a directory")
        self.assertEqual(proc.cwd, HOME)

        code, proc = self.run_cmd('cd', ['nope'])
        self.assertEqual(proc.get_stderr(), "bash: cd: nope: No such file or directory")

        code, proc = self.run_cmd('cd', ['-'])
        self.assertEqual(proc.get_stderr(), "bash: cd: OLDPWD not set")

    def test_cd_dash(self):
        code, proc = self.run_cmd('cd', ['-'], old_pwd='/tmp')
        self.assertEqual(code, 0)
        self.assertEqual(proc.cwd, '/tmp')
        self.assertEqual(proc.get_stdout(), '/tmp')

    def test_mkdir(self):
        code, proc = self.run_cmd('mkdir', ['a', 'b'])
        self.assertEqual(code, 0)
        self.assertTrue(self.node(f'{HOME}/a').is_dir)
        self.assertTrue(self.node(f'{HOME}/b').is_dir)

    def test_mkdir_errors_continue(self):
        code, proc = self.run_cmd('mkdir', ['documents', 'x/y', 'newdir'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(),
                         "mkdir: cannot create directory 'documents': File exists\n"
                         "mkdir: cannot create directory 'x/y': No such file or directory")
        self.assertTrue(self.node(f'{HOME}/newdir').is_dir)

    def test_mkdir_parents_idempotent(self):
        code, proc = self.run_cmd('mkdir', ['-p', 'a/b/c'])
        self.assertEqual(code, 0)
        before = self.fs
        code, proc = self.run_cmd('mkdir', ['-p', 'a/b/c'])
        self.assertEqual(code, 0)
        self.assertIs(proc.fs, before)

    def test_rmdir(self):
        code, proc = self.run_cmd('rmdir', ['project'])
        self.assertEqual(proc.get_stderr(), "rmdir: failed to remove 'project': Directory not empty")
        self.run_cmd('mkdir', ['empty'])
        code, proc = self.run_cmd('rmdir', ['empty'])
        self.assertEqual(code, 0)
        self.assertIsNone(self.node(f'{HOME}/empty'))

        code, proc = self.run_cmd('rmdir', ['notes.txt', 'nope'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(),
                         "rmdir: failed to remove 'notes.txt': Not a directory\n"
                         "rmdir: failed to remove 'nope': No such file or directory")

    def test_touch(self):
        self.run_cmd('touch', ['notes.txt', 'new.txt'])
        self.assertEqual(self.node(f'{HOME}/notes.txt').content, 'hi')
        self.assertEqual(self.node(f'{HOME}/new.txt').content, '')

    def test_rm_directory_needs_recursive(self):
        original = self.fs
        code, proc = self.run_cmd('rm', ['documents'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "rm: cannot remove 'documents': Is a directory")
        self.assertIs(proc.fs, original)

        code, proc = self.run_cmd('rm', ['-r', 'documents'])
        self.assertEqual(code, 0)
        self.assertIsNone(self.node(f'{HOME}/documents'))

    def test_rm_force_and_root(self):
        code, proc = self.run_cmd('rm', ['nope'])
        self.assertEqual(proc.get_stderr(), "rm: cannot remove 'nope': No such file or directory")
        code, proc = self.run_cmd('rm', ['-f', 'nope'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_output(), '')
        code, proc = self.run_cmd('rm', ['-rf', '/'])
        self.assertEqual(code, 1)
        self.assertIn("dangerous", proc.get_stderr())
        self.assertIsNotNone(self.node('/etc/passwd'))

    def test_cp(self):
        self.run_cmd('cp', ['notes.txt', 'copy.txt'])
        self.assertEqual(self.node(f'{HOME}/copy.txt').content, 'hi')

        code, proc = self.run_cmd('cp', ['documents', 'docs2'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "cp: -r not specified; omitting directory 'documents'")

        code, proc = self.run_cmd('cp', ['-r', 'documents', 'docs2'])
        self.assertEqual(code, 0)
        self.assertEqual(self.node(f'{HOME}/docs2/notes.txt').content, 'Linux is awesome.')

    def test_cp_into_directory(self):
        self.run_cmd('cp', ['notes.txt', 'list.txt', 'documents'])
        self.assertEqual(self.node(f'{HOME}/documents/notes.txt').content, 'hi')
        self.assertEqual(self.node(f'{HOME}/documents/list.txt').content, 'b\na\nb\nc')

        code, proc = self.run_cmd('cp', ['notes.txt', 'list.txt', 'project/a.txt'])
        self.assertEqual(proc.get_stderr(), "cp: target 'project/a.txt' is not a directory")

    def test_mv(self):
        self.run_cmd('mv', ['notes.txt', 'renamed.txt'])
        self.assertIsNone(self.node(f'{HOME}/notes.txt'))
        self.assertEqual(self.node(f'{HOME}/renamed.txt').content, 'hi')

        self.run_cmd('mv', ['list.txt', 'documents'])
        self.assertIsNone(self.node(f'{HOME}/list.txt'))
        self.assertIsNotNone(self.node(f'{HOME}/documents/list.txt'))

    def test_mv_into_itself(self):
        code, proc = self.run_cmd('mv', ['documents', 'documents/sub'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(),
                         "mv: cannot move 'documents' to a subdirectory of itself, 'documents/sub'")

    def test_chmod_octal(self):
        code, proc = self.run_cmd('chmod', ['755', 'notes.txt'])
        self.assertEqual(code, 0)
        self.assertEqual(self.node(f'{HOME}/notes.txt').permissions, '-rwxr-xr-x')

        self.run_cmd('chmod', ['-x', 'notes.txt'])
        self.assertEqual(self.node(f'{HOME}/notes.txt').permissions, '-rw-r--r--')

    def test_chmod_symbolic(self):
        self.run_cmd('chmod', ['u+x', 'notes.txt'])
        self.assertEqual(self.node(f'{HOME}/notes.txt').permissions, '-rwxr--r--')

        self.run_cmd('chmod', ['u=rw,go-r', 'notes.txt'])
        self.assertEqual(self.node(f'{HOME}/notes.txt').permissions, '-rw-------')

        self.run_cmd('chmod', ['700', 'documents'])
        self.assertEqual(self.node(f'{HOME}/documents').permissions, 'drwx------')

    def test_chmod_invalid(self):
        code, proc = self.run_cmd('chmod', ['999', 'notes.txt'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "chmod: invalid mode: '999'")

    def test_ln(self):
        code, proc = self.run_cmd('ln', ['-s', 'notes.txt', 'link'])
        self.assertEqual(code, 0)
        link = self.node(f'{HOME}/link')
        self.assertEqual(link.permissions, 'lrwxrwxrwx')
        self.assertEqual(link.content, '-> notes.txt')

        code, proc = self.run_cmd('file', ['link'])
        self.assertEqual(proc.get_stdout(), 'link: symbolic link to notes.txt')

        code, proc = self.run_cmd('ln', ['notes.txt', 'hard'])
        self.assertEqual(code, 1)

    def test_find(self):
        code, proc = self.run_cmd('find', ['project', '-name', '*.txt'])
        self.assertEqual(proc.get_stdout(), 'project/a.txt\nproject/sub/b.txt')

        code, proc = self.run_cmd('find', ['project', '-type', 'd'])
        self.assertEqual(proc.get_stdout(), 'project\nproject/sub')

        code, proc = self.run_cmd('find', ['project', '-maxdepth', '1'])
        self.assertEqual(proc.get_stdout(), 'project\nproject/a.txt\nproject/sub')

        code, proc = self.run_cmd('find', ['.', '-name', 'a.txt'], cwd=f'{HOME}/project')
        self.assertEqual(proc.get_stdout(), './a.txt')

        code, proc = self.run_cmd('find', ['nope'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "find: 'nope': No such file or directory")

    def test_tree(self):
        code, proc = self.run_cmd('tree', ['project'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_stdout(),
                         'project\n'
                         '├── a.txt\n'
                         '└── sub\n'
                         '    └── b.txt\n'
                         '\n'
                         '1 directory, 2 files')

    def test_tree_hidden_entries(self):
        self.run_cmd('touch', ['project/.hidden'])
        code, proc = self.run_cmd('tree', ['project'])
        self.assertTrue(proc.get_stdout().endswith('1 directory, 2 files'))
        code, proc = self.run_cmd('tree', ['-a', 'project'])
        self.assertIn('├── .hidden', proc.get_stdout())
        self.assertTrue(proc.get_stdout().endswith('1 directory, 3 files'))

    def test_du(self):
        code, proc = self.run_cmd('du', ['-s', 'project'])
        self.assertEqual(proc.get_stdout(), '9\tproject')

        code, proc = self.run_cmd('du', ['project'])
        self.assertEqual(proc.get_stdout(), '5\tproject/sub\n9\tproject')

    def test_stat_and_file(self):
        code, proc = self.run_cmd('stat', ['notes.txt'])
        self.assertIn('Access: (0644/-rw-r--r--)', proc.get_stdout())

        code, proc = self.run_cmd('file', ['notes.txt', 'documents'])
        self.assertEqual(proc.get_stdout(), 'notes.txt: ASCII text\ndocuments: directory')

    def test_cat(self):
        cmd = BUILTINS['cat']
        proc = self.create_process('cat', [], "line1\nline2\n")
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "line1\nline2")

        proc = self.create_process('cat', ['notes.txt'])
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "hi")

    def test_cat_number_continues_across_files(self):
        code, proc = self.run_cmd('cat', ['-n', 'notes.txt', 'list.txt'])
        self.assertEqual(proc.get_stdout(),
                         '     1\thi\n     2\tb\n     3\ta\n     4\tb\n     5\tc')

    def test_cat_errors(self):
        code, proc = self.run_cmd('cat', ['nope', 'notes.txt'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), 'cat: nope: No such file or directory')
        self.assertEqual(proc.get_stdout(), 'hi')

        code, proc = self.run_cmd('cat', ['documents'])
        self.assertEqual(proc.get_stderr(), 'cat: documents: Is a directory')

        code, proc = self.run_cmd('cat', [])
        self.assertEqual(proc.get_stderr(), 'cat: missing operand')

    def test_nano(self):
        code, proc = self.run_cmd('nano', ['notes.txt'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.action, OpenEditor(f'{HOME}/notes.txt', 'hi'))

        code, proc = self.run_cmd('nano', ['new.txt'])
        self.assertEqual(proc.action, OpenEditor(f'{HOME}/new.txt', ''))

        code, proc = self.run_cmd('nano', ['draft.txt'], 'from pipe')
        self.assertEqual(proc.action.seed, 'from pipe')
        self.assertEqual(proc.stdin_content, 'from pipe')

        code, proc = self.run_cmd('nano', ['documents'])
        self.assertEqual(code, 1)
        self.assertIsNone(proc.action)

    def test_tee(self):
        code, proc = self.run_cmd('tee', ['out.txt'], 'x')
        self.assertEqual(proc.get_stdout(), 'x')
        self.assertEqual(self.node(f'{HOME}/out.txt').content, 'x')

        self.run_cmd('tee', ['-a', 'out.txt'], 'y')
        self.assertEqual(self.node(f'{HOME}/out.txt').content, 'x\ny')


class TestTextCommands(BuiltinTestCase):
    def test_grep(self):
        cmd = BUILTINS['grep']
        input_data = "apple\nbanana\ncherry\n"

        # Match found
        proc = self.create_process("grep", ["pp"], input_data)
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "apple")

        # No match
        proc = self.create_process("grep", ["xyz"], input_data)
        self.assertEqual(cmd(proc), 1)
        self.assertEqual(proc.get_stdout(), "")

        # Missing pattern
        proc = self.create_process("grep", [], input_data)
        self.assertEqual(cmd(proc), 2)
        self.assertIn("Usage:", proc.get_stderr())

    def test_grep_ignore_case_in_file(self):
        self.fs = build_filesystem([(f'{HOME}/log.txt', 'Error: boom\nall good')])
        code, proc = self.run_cmd('grep', ['-i', 'ERROR', 'log.txt'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_stdout(), 'Error: boom')

    def test_grep_line_options(self):
        code, proc = self.run_cmd('grep', ['-c', 'b', 'list.txt'])
        self.assertEqual(proc.get_stdout(), '2')
        code, proc = self.run_cmd('grep', ['-n', 'b', 'list.txt'])
        self.assertEqual(proc.get_stdout(), '1:b\n3:b')
        code, proc = self.run_cmd('grep', ['-v', 'b', 'list.txt'])
        self.assertEqual(proc.get_stdout(), 'a\nc')
        code, proc = self.run_cmd('grep', ['-m', '1', 'b', 'list.txt'])
        self.assertEqual(proc.get_stdout(), 'b')
        code, proc = self.run_cmd('grep', ['-E', 'a|c', 'list.txt'])
        self.assertEqual(proc.get_stdout(), 'a\nc')

    def test_grep_word_and_line(self):
        input_data = "cat\nconcatenate\nthe cat sat"
        code, proc = self.run_cmd('grep', ['-w', 'cat'], input_data)
        self.assertEqual(proc.get_stdout(), 'cat\nthe cat sat')
        code, proc = self.run_cmd('grep', ['-x', 'cat'], input_data)
        self.assertEqual(proc.get_stdout(), 'cat')
        code, proc = self.run_cmd('grep', ['-o', '-i', 'CAT'], 'Cat cat')
        self.assertEqual(proc.get_stdout(), 'Cat\ncat')

    def test_grep_literal_by_default(self):
        code, proc = self.run_cmd('grep', ['a.c'], 'abc\na.c')
        self.assertEqual(proc.get_stdout(), 'a.c')

    def test_grep_files(self):
        code, proc = self.run_cmd('grep', ['-l', 'TODO', 'project/a.txt', 'notes.txt'])
        self.assertEqual(proc.get_stdout(), 'project/a.txt')

        code, proc = self.run_cmd('grep', ['-r', 'TODO', 'project'])
        self.assertEqual(proc.get_stdout(), 'project/a.txt:TODO one\nproject/sub/b.txt:TODO two')

        code, proc = self.run_cmd('grep', ['-r', 'TODO', 'project/sub'])
        self.assertEqual(proc.get_stdout(), 'TODO two')
        code, proc = self.run_cmd('grep', ['-rH', 'TODO', 'project/sub'])
        self.assertEqual(proc.get_stdout(), 'project/sub/b.txt:TODO two')
        code, proc = self.run_cmd('grep', ['-rh', 'TODO', 'project'])
        self.assertEqual(proc.get_stdout(), 'TODO one\nTODO two')

        code, proc = self.run_cmd('grep', ['-H', 'pp'], 'apple')
        self.assertEqual(proc.get_stdout(), '(standard input):apple')

        code, proc = self.run_cmd('grep', ['TODO', 'documents'])
        self.assertEqual(code, 2)
        self.assertEqual(proc.get_stderr(), 'grep: documents: Is a directory')

    def test_grep_quiet(self):
        code, proc = self.run_cmd('grep', ['-q', 'hi', 'notes.txt'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_output(), '')

    def test_head_tail(self):
        code, proc = self.run_cmd('head', ['nums.txt'])
        self.assertEqual(proc.get_stdout(), '\n'.join(str(i) for i in range(1, 11)))
        code, proc = self.run_cmd('head', ['-n', '3', 'nums.txt'])
        self.assertEqual(proc.get_stdout(), '1\n2\n3')
        code, proc = self.run_cmd('head', ['-3', 'nums.txt'])
        self.assertEqual(proc.get_stdout(), '1\n2\n3')
        code, proc = self.run_cmd('tail', ['-n', '2', 'nums.txt'])
        self.assertEqual(proc.get_stdout(), '11\n12')
        code, proc = self.run_cmd('tail', ['-n', '+11', 'nums.txt'])
        self.assertEqual(proc.get_stdout(), '11\n12')

    def test_head_banners(self):
        code, proc = self.run_cmd('head', ['-n', '1', 'notes.txt', 'list.txt'])
        self.assertEqual(proc.get_stdout(), '==> notes.txt <==\nhi\n\n==> list.txt <==\nb')

    def test_head_invalid_count(self):
        code, proc = self.run_cmd('head', ['-n', 'abc', 'notes.txt'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), "head: invalid number of lines: 'abc'")

    def test_wc(self):
        cmd = BUILTINS['wc']
        input_data = "one two\nthree\n"
        # 2 lines, 3 words, 14 bytes

        # Default (all)
        proc = self.create_process("wc", [], input_data)
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "   2    3   14")

        # Lines only
        proc = self.create_process("wc", ["-l"], input_data)
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "   2")

        # Files with a total
        proc = self.create_process("wc", ["-l", "notes.txt", "list.txt"])
        self.assertEqual(cmd(proc), 0)
        self.assertEqual(proc.get_stdout(), "   1 notes.txt\n   4 list.txt\n   5 total")

    def test_sort(self):
        code, proc = self.run_cmd('sort', ['list.txt'])
        self.assertEqual(proc.get_stdout(), 'a\nb\nb\nc')
        code, proc = self.run_cmd('sort', ['-r', 'list.txt'])
        self.assertEqual(proc.get_stdout(), 'c\nb\nb\na')
        code, proc = self.run_cmd('sort', ['-u', 'list.txt'])
        self.assertEqual(proc.get_stdout(), 'a\nb\nc')
        code, proc = self.run_cmd('sort', ['-n'], '10\n9\nx\n100')
        self.assertEqual(proc.get_stdout(), '9\n10\n100\nx')

    def test_uniq(self):
        input_data = "a\na\nb\na"
        code, proc = self.run_cmd('uniq', [], input_data)
        self.assertEqual(proc.get_stdout(), 'a\nb\na')
        code, proc = self.run_cmd('uniq', ['-c'], input_data)
        self.assertEqual(proc.get_stdout(), '      2 a\n      1 b\n      1 a')
        code, proc = self.run_cmd('uniq', ['-d'], input_data)
        self.assertEqual(proc.get_stdout(), 'a')

    def test_cut(self):
        input_data = "a:b:c\nd:e:f"
        code, proc = self.run_cmd('cut', ['-d', ':', '-f', '2'], input_data)
        self.assertEqual(proc.get_stdout(), 'b\ne')
        code, proc = self.run_cmd('cut', ['-d:', '-f1,3'], input_data)
        self.assertEqual(proc.get_stdout(), 'a:c\nd:f')
        code, proc = self.run_cmd('cut', ['-d', ':', '-f', '2-'], input_data)
        self.assertEqual(proc.get_stdout(), 'b:c\ne:f')
        code, proc = self.run_cmd('cut', ['-c', '1-2'], 'hello')
        self.assertEqual(proc.get_stdout(), 'he')

        code, proc = self.run_cmd('cut', [], input_data)
        self.assertEqual(code, 1)

    def test_awk(self):
        input_data = "alice 30\nbob 25"
        code, proc = self.run_cmd('awk', ['{print $1}'], input_data)
        self.assertEqual(proc.get_stdout(), 'alice\nbob')
        code, proc = self.run_cmd('awk', ['{print $2, $1}'], input_data)
        self.assertEqual(proc.get_stdout(), '30 alice\n25 bob')
        code, proc = self.run_cmd('awk', ['{print $1 "-" $NF}'], input_data)
        self.assertEqual(proc.get_stdout(), 'alice-30\nbob-25')
        code, proc = self.run_cmd('awk', ['-F', ':', '{print $2}'], 'a:b:c')
        self.assertEqual(proc.get_stdout(), 'b')

    def test_awk_unsupported_program(self):
        code, proc = self.run_cmd('awk', ['BEGIN { x = 1 }'], 'a')
        self.assertEqual(code, 2)
        self.assertIn('syntax error', proc.get_stderr())

    def test_diff(self):
        self.fs = build_filesystem([
            (f'{HOME}/a', 'x\ny\nz'),
            (f'{HOME}/b', 'x\nY\nz'),
            (f'{HOME}/c', 'x\ny\nz'),
        ])
        code, proc = self.run_cmd('diff', ['a', 'b'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stdout(), '2c2\n< y\n---\n> Y')

        code, proc = self.run_cmd('diff', ['a', 'c'])
        self.assertEqual(code, 0)
        self.assertEqual(proc.get_output(), '')

        code, proc = self.run_cmd('diff', ['-q', 'a', 'b'])
        self.assertEqual(proc.get_stdout(), 'Files a and b differ')

        code, proc = self.run_cmd('diff', ['a', 'nope'])
        self.assertEqual(code, 2)

    def test_diff_insert_and_delete(self):
        self.fs = build_filesystem([(f'{HOME}/short', 'x'), (f'{HOME}/long', 'x\ny')])
        code, proc = self.run_cmd('diff', ['short', 'long'])
        self.assertEqual(proc.get_stdout(), '1a2\n> y')
        code, proc = self.run_cmd('diff', ['long', 'short'])
        self.assertEqual(proc.get_stdout(), '2d1\n< y')

    def test_basename_dirname(self):
        code, proc = self.run_cmd('basename', ['/a/b/c.txt', '.txt'])
        self.assertEqual(proc.get_stdout(), 'c')
        code, proc = self.run_cmd('dirname', ['/a/b/c'])
        self.assertEqual(proc.get_stdout(), '/a/b')
        code, proc = self.run_cmd('dirname', ['c'])
        self.assertEqual(proc.get_stdout(), '.')
        code, proc = self.run_cmd('dirname', ['/a'])
        self.assertEqual(proc.get_stdout(), '/')


class TestSystemCommands(BuiltinTestCase):
    def test_identity(self):
        code, proc = self.run_cmd('whoami', [])
        self.assertEqual(proc.get_stdout(), 'student')
        code, proc = self.run_cmd('hostname', [])
        self.assertEqual(proc.get_stdout(), 'l-quest')
        code, proc = self.run_cmd('id', [])
        self.assertIn('uid=1000(student)', proc.get_stdout())
        code, proc = self.run_cmd('uname', [])
        self.assertEqual(proc.get_stdout(), 'Linux')
        code, proc = self.run_cmd('uname', ['-a'])
        self.assertTrue(proc.get_stdout().startswith('Linux l-quest '))

    def test_date_format(self):
        code, proc = self.run_cmd('date', ['+%Y'])
        self.assertRegex(proc.get_stdout(), r'^\d{4}$')

    def test_ps(self):
        code, proc = self.run_cmd('ps', ['aux'])
        self.assertTrue(proc.get_stdout().startswith('USER'))
        self.assertIn('nginx: master process', proc.get_stdout())

    def test_kill(self):
        code, proc = self.run_cmd('kill', ['99999'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), 'bash: kill: (99999) - No such process')
        code, proc = self.run_cmd('kill', ['1'])
        self.assertIn('Operation not permitted', proc.get_stderr())
        code, proc = self.run_cmd('pkill', ['nginx'])
        self.assertEqual(code, 0)

    def test_systemctl(self):
        code, proc = self.run_cmd('systemctl', ['status', 'nginx'])
        self.assertEqual(code, 0)
        self.assertIn('active (running)', proc.get_stdout())

        code, proc = self.run_cmd('systemctl', ['status', 'mysql'])
        self.assertEqual(code, 3)
        self.assertIn('inactive (dead)', proc.get_stdout())

        code, proc = self.run_cmd('systemctl', ['status', 'foo'])
        self.assertEqual(code, 4)
        self.assertEqual(proc.get_stderr(), 'Unit foo.service could not be found.')

        code, proc = self.run_cmd('systemctl', ['is-active', 'ssh.service'])
        self.assertEqual(proc.get_stdout(), 'active')

    def test_apt(self):
        code, proc = self.run_cmd('apt', ['install', 'nosuchpkg'])
        self.assertEqual(code, 100)
        self.assertEqual(proc.get_stderr(), 'E: Unable to locate package nosuchpkg')

        code, proc = self.run_cmd('apt-get', ['install', 'htop'])
        self.assertEqual(code, 0)
        self.assertIn('Setting up htop', proc.get_stdout())

    def test_nginx(self):
        code, proc = self.run_cmd('nginx', ['-t'])
        self.assertEqual(code, 0)
        self.assertIn('syntax is ok', proc.get_stdout())

    def test_crontab(self):
        code, proc = self.run_cmd('crontab', ['-l'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), 'no crontab for student')

        code, proc = self.run_cmd('crontab', [], '0 * * * * backup')
        self.assertEqual(code, 0)
        code, proc = self.run_cmd('crontab', ['-l'])
        self.assertEqual(proc.get_stdout(), '0 * * * * backup')

        code, proc = self.run_cmd('crontab', ['-e'])
        self.assertEqual(proc.action,
                         OpenEditor('/var/spool/cron/crontabs/student', '0 * * * * backup'))

    def test_man(self):
        code, proc = self.run_cmd('man', ['ls'])
        self.assertEqual(code, 0)
        self.assertTrue(proc.get_stdout().startswith('NAME\n       ls - list directory contents'))

        code, proc = self.run_cmd('man', ['nosuch'])
        self.assertEqual(proc.get_stderr(), 'No manual entry for nosuch')

    def test_help(self):
        code, proc = self.run_cmd('help', [])
        output = proc.get_stdout()
        for heading in ('File Ops:', 'Text Ops:', 'Archives:', 'System/Info:'):
            self.assertIn(heading, output)
        self.assertIn('tar', output)

    def test_clear(self):
        code, proc = self.run_cmd('clear', [])
        self.assertEqual(proc.action, ClearScreen())
        self.assertEqual(proc.get_output(), '')

    def test_history(self):
        history = [HistoryEntry('ls', '', '/'), {'command': 'pwd'}]
        code, proc = self.run_cmd('history', [], history=history)
        self.assertEqual(proc.get_stdout(), '    1  ls\n    2  pwd')
        code, proc = self.run_cmd('history', ['1'], history=history)
        self.assertEqual(proc.get_stdout(), '    2  pwd')

    def test_sudo(self):
        code, proc = self.run_cmd('sudo', ['mkdir', '/opt/app'])
        self.assertEqual(code, 0)
        self.assertTrue(self.node('/opt/app').is_dir)

        code, proc = self.run_cmd('sudo', ['nosuch'])
        self.assertEqual(code, 1)
        self.assertEqual(proc.get_stderr(), 'sudo: nosuch: command not found')


if __name__ == '__main__':
    unittest.main()
