"""System, service and session commands

None of these touch a real system; they answer from fixed tables that
describe one small Ubuntu-like server.
"""

import textwrap
from datetime import datetime, timezone
from typing import Dict, List, Mapping

from ..command_decorators import CATEGORIES, CommandMetadata, command
from ..filesystem import lookup, remove_node, split_path, write_file
from ..process import Process
from ..result import ClearScreen, OpenEditor
from .helpers import human_readable_size

KERNEL_RELEASE = '5.15.0-91-generic'
MACHINE = 'x86_64'

# pid, ppid, user, %cpu, %mem, vsz, rss, tty, stat, command
PROCESS_TABLE = [
    (1, 0, 'root', 0.0, 0.6, 167744, 11520, '?', 'Ss', '/sbin/init'),
    (412, 1, 'root', 0.0, 0.1, 6896, 2944, '?', 'Ss', '/usr/sbin/cron -f'),
    (530, 1, 'root', 0.0, 0.4, 15432, 8960, '?', 'Ss', 'sshd: /usr/sbin/sshd -D'),
    (612, 1, 'root', 0.0, 0.1, 55220, 1640, '?', 'Ss', 'nginx: master process /usr/sbin/nginx'),
    (613, 612, 'www-data', 0.0, 0.3, 55880, 5412, '?', 'S', 'nginx: worker process'),
    (1000, 530, 'root', 0.0, 0.5, 17056, 10752, '?', 'Ss', 'sshd: student [priv]'),
    (1001, 1000, '$USER', 0.0, 0.2, 8960, 5504, 'pts/0', 'Ss', '-bash'),
]

# name: (description, running, enabled)
SERVICES = {
    'nginx': ('A high performance web server and a reverse proxy server', True, True),
    'ssh': ('OpenBSD Secure Shell server', True, True),
    'cron': ('Regular background program processing daemon', True, True),
    'apache2': ('The Apache HTTP Server', False, False),
    'mysql': ('MySQL Community Server', False, False),
    'docker': ('Docker Application Container Engine', False, False),
}

PACKAGES = {
    'apache2': '2.4.52-1ubuntu4.7',
    'bash': '5.1-6ubuntu1',
    'coreutils': '8.32-4.1ubuntu1',
    'cron': '3.0pl1-137ubuntu3',
    'curl': '7.81.0-1ubuntu1.15',
    'docker.io': '24.0.5-0ubuntu1~22.04.1',
    'git': '1:2.34.1-1ubuntu1.10',
    'htop': '3.0.5-7build2',
    'mysql-server': '8.0.35-0ubuntu0.22.04.1',
    'nano': '6.2-1',
    'nginx': '1.18.0-6ubuntu14.4',
    'openssh-server': '1:8.9p1-3ubuntu0.6',
    'python3': '3.10.6-1~22.04',
    'tree': '2.0.2-1',
    'unzip': '6.0-26ubuntu3.1',
    'vim': '2:8.2.3995-1ubuntu2.15',
    'zip': '3.0-12build2',
}
INSTALLED = {'bash', 'coreutils', 'cron', 'nano', 'nginx', 'openssh-server', 'python3',
             'unzip', 'zip'}

NGINX_CONF = '/etc/nginx/nginx.conf'
NGINX_SIGNALS = ('stop', 'quit', 'reopen', 'reload')
CRONTAB_DIR = '/var/spool/cron/crontabs'
CRONTAB_TEMPLATE = (
    "# Edit this file to introduce tasks to be run by cron.\n"
    "#\n"
    "# m h  dom mon dow   command\n"
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _processes(process: Process):
    for row in PROCESS_TABLE:
        user = process.config.user if row[2] == '$USER' else row[2]
        yield row[:2] + (user,) + row[3:]


# ---------------------------------------------------------------------------
# Processes
# ---------------------------------------------------------------------------

@command()
def cmd_ps(process: Process) -> int:
    """
    Report a snapshot of the current processes

    Usage: ps [aux | -ef]
    """
    style = ''.join(process.params) + ''.join(process.flags)
    rows = list(_processes(process))

    if 'e' in style and 'f' in style:
        process.stdout.writeline("UID          PID    PPID  C STIME TTY          TIME CMD")
        for pid, ppid, user, _, _, _, _, tty, _, cmd in rows:
            process.stdout.writeline(f"{user:<8} {pid:>7} {ppid:>7}  0 10:00 {tty:<8} 00:00:00 {cmd}")
        process.stdout.writeline(
            f"{process.config.user:<8} {1002:>7} {1001:>7}  0 10:05 pts/0    00:00:00 ps -ef")
        return 0

    if 'a' in style or 'x' in style:
        process.stdout.writeline(
            "USER         PID %CPU %MEM    VSZ   RSS TTY      STAT START   TIME COMMAND")
        for pid, _, user, cpu, mem, vsz, rss, tty, stat, cmd in rows:
            process.stdout.writeline(
                f"{user:<10} {pid:>5} {cpu:>4} {mem:>4} {vsz:>6} {rss:>5} {tty:<8} "
                f"{stat:<4} 10:00   0:00 {cmd}")
        process.stdout.writeline(
            f"{process.config.user:<10} {1002:>5}  0.0  0.1  10072  3340 pts/0    "
            f"R+   10:05   0:00 ps aux")
        return 0

    process.stdout.writeline("    PID TTY          TIME CMD")
    process.stdout.writeline("   1001 pts/0    00:00:00 bash")
    process.stdout.writeline("   1002 pts/0    00:00:00 ps")
    return 0


@command()
def cmd_top(process: Process) -> int:
    """
    Display a snapshot of system tasks

    Usage: top
    """
    now = _now()
    rows = list(_processes(process))
    process.stdout.writeline(
        f"top - {now:%H:%M:%S} up 3 days,  4:12,  1 user,  load average: 0.08, 0.03, 0.01")
    process.stdout.writeline(
        f"Tasks: {len(rows) + 1:>3} total,   1 running, {len(rows):>3} sleeping,   0 stopped,   0 zombie")
    process.stdout.writeline(
        "%Cpu(s):  0.3 us,  0.2 sy,  0.0 ni, 99.5 id,  0.0 wa,  0.0 hi,  0.0 si,  0.0 st")
    process.stdout.writeline(
        "MiB Mem :   1987.6 total,    812.4 free,    402.1 used,    773.1 buff/cache")
    process.stdout.writeline(
        "MiB Swap:   1024.0 total,   1024.0 free,      0.0 used.   1420.3 avail Mem")
    process.stdout.writeline('')
    process.stdout.writeline(
        "    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND")
    for pid, _, user, cpu, mem, vsz, rss, _, stat, cmd in rows:
        name = cmd.split()[0].lstrip('-').split('/')[-1].rstrip(':')
        process.stdout.writeline(
            f"{pid:>7} {user:<9} 20   0 {vsz:>7} {rss:>6} {rss // 2:>6} {stat[0]} "
            f"{cpu:>5} {mem:>5}   0:00.00 {name}")
    return 0


@command()
def cmd_pstree(process: Process) -> int:
    """
    Display running processes as a tree

    Usage: pstree
    """
    process.stdout.writeline('\n'.join([
        "systemd─┬─cron",
        "        ├─nginx───nginx",
        "        └─sshd───sshd───bash───pstree",
    ]))
    return 0


def _known_pid(process: Process, pid: int) -> bool:
    return pid == 1002 or any(row[0] == pid for row in PROCESS_TABLE)


@command(value_options='sn')
def cmd_kill(process: Process) -> int:
    """
    Send a signal to a process

    Usage: kill [-s SIGNAL | -SIGNAL] PID...
           kill -l
    """
    if process.has_flag('l'):
        process.stdout.writeline(
            " 1) SIGHUP\t 2) SIGINT\t 3) SIGQUIT\t 9) SIGKILL\t15) SIGTERM\t18) SIGCONT\t19) SIGSTOP")
        return 0
    if not process.params:
        return process.error("kill: usage: kill [-s sigspec | -n signum | -sigspec] pid | "
                             "jobspec ... or kill -l [sigspec]", 2)

    exit_code = 0
    for target in process.params:
        if not target.isdigit():
            process.stderr.writeline(f"bash: kill: {target}: arguments must be process or job IDs")
            exit_code = 1
            continue
        pid = int(target)
        if not _known_pid(process, pid):
            process.stderr.writeline(f"bash: kill: ({pid}) - No such process")
            exit_code = 1
        elif pid < 1001:
            process.stderr.writeline(f"bash: kill: ({pid}) - Operation not permitted")
            exit_code = 1
    return exit_code


@command()
def cmd_pkill(process: Process) -> int:
    """
    Signal processes by name

    Usage: pkill [-SIGNAL] NAME
    """
    if not process.params:
        return process.error("pkill: no matching criteria specified\n"
                             "Try `pkill --help' for more information.", 2)

    pattern = process.params[0]
    if any(pattern in row[-1] for row in _processes(process)):
        return 0
    return 1


# ---------------------------------------------------------------------------
# Machine information
# ---------------------------------------------------------------------------

@command()
def cmd_uptime(process: Process) -> int:
    """
    Tell how long the system has been running

    Usage: uptime
    """
    process.stdout.writeline(
        f" {_now():%H:%M:%S} up 3 days,  4:12,  1 user,  load average: 0.08, 0.03, 0.01")
    return 0


@command()
def cmd_free(process: Process) -> int:
    """
    Display amount of free and used memory

    Usage: free [-h]
    """
    # kibibytes: total, used, free, shared, buff/cache, available
    mem = (2035300, 411748, 831896, 1204, 791656, 1454328)
    swap = (1048572, 0, 1048572)

    if process.has_flag('h', 'human'):
        def fmt(kib):
            text = human_readable_size(kib * 1024)
            return text + 'i' if text[-1].isalpha() else text + 'B'

        mem_cols = [fmt(v) for v in mem]
        swap_cols = [fmt(v) for v in swap]
    else:
        mem_cols = [str(v) for v in mem]
        swap_cols = [str(v) for v in swap]

    process.stdout.writeline(
        "               total        used        free      shared  buff/cache   available")
    process.stdout.writeline("Mem:    " + ''.join(f"{col:>12}" for col in mem_cols))
    process.stdout.writeline("Swap:   " + ''.join(f"{col:>12}" for col in swap_cols))
    return 0


@command()
def cmd_uname(process: Process) -> int:
    """
    Print system information

    Usage: uname [-a] [-s] [-n] [-r] [-m]
    """
    fields = {
        's': 'Linux',
        'n': process.config.hostname,
        'r': KERNEL_RELEASE,
        'v': '#101-Ubuntu SMP Tue Nov 14 13:30:08 UTC 2023',
        'm': MACHINE,
    }
    if process.has_flag('a', 'all'):
        selected = ['s', 'n', 'r', 'v', 'm']
        tail = [MACHINE, MACHINE, 'GNU/Linux']
    else:
        selected = [key for key in fields if process.has_flag(key)] or ['s']
        tail = []
    process.stdout.writeline(' '.join([fields[key] for key in selected] + tail))
    return 0


@command()
def cmd_df(process: Process) -> int:
    """
    Report file system disk space usage

    Usage: df [-h]
    """
    if process.has_flag('h', 'human-readable'):
        process.stdout.writeline('\n'.join([
            "Filesystem      Size  Used Avail Use% Mounted on",
            "/dev/sda1       7.8G  3.9G  3.9G  50% /",
            "tmpfs           100M     0  100M   0% /dev/shm",
        ]))
    else:
        process.stdout.writeline('\n'.join([
            "Filesystem     1K-blocks    Used Available Use% Mounted on",
            "/dev/sda1        8192000 4096000   4096000  50% /",
            "tmpfs             102400       0    102400   0% /dev/shm",
        ]))
    return 0


# ---------------------------------------------------------------------------
# Identity and time
# ---------------------------------------------------------------------------

@command()
def cmd_whoami(process: Process) -> int:
    """
    Print effective user name

    Usage: whoami
    """
    process.stdout.writeline(process.config.user)
    return 0


@command()
def cmd_id(process: Process) -> int:
    """
    Print user and group identity

    Usage: id
    """
    user = process.config.user
    if user == 'root':
        process.stdout.writeline("uid=0(root) gid=0(root) groups=0(root)")
    else:
        process.stdout.writeline(
            f"uid=1000({user}) gid=1000({user}) groups=1000({user}),27(sudo)")
    return 0


@command()
def cmd_groups(process: Process) -> int:
    """
    Print the groups a user is in

    Usage: groups
    """
    user = process.config.user
    process.stdout.writeline('root' if user == 'root' else f"{user} sudo")
    return 0


@command()
def cmd_hostname(process: Process) -> int:
    """
    Show the system's host name

    Usage: hostname
    """
    process.stdout.writeline(process.config.hostname)
    return 0


@command()
def cmd_date(process: Process) -> int:
    """
    Print the system date and time

    Usage: date [+FORMAT]

    FORMAT uses strftime directives, e.g. date +%Y-%m-%d
    """
    now = _now()
    formats = [p for p in process.params if p.startswith('+')]
    if formats:
        process.stdout.writeline(now.strftime(formats[0][1:]))
    elif process.params:
        return process.error(f"date: invalid date '{process.params[0]}'")
    else:
        process.stdout.writeline(f"{now:%a %b} {now.day:>2} {now:%H:%M:%S} UTC {now:%Y}")
    return 0


# ---------------------------------------------------------------------------
# Services and packages
# ---------------------------------------------------------------------------

def _unit(name: str) -> str:
    return name[:-len('.service')] if name.endswith('.service') else name


def _service_status(process: Process, name: str) -> int:
    description, running, enabled = SERVICES[name]
    state = 'enabled' if enabled else 'disabled'
    lines = [
        f"{'●' if running else '○'} {name}.service - {description}",
        f"     Loaded: loaded (/lib/systemd/system/{name}.service; {state}; vendor preset: enabled)",
    ]
    if running:
        lines.append("     Active: active (running) since Mon 2024-05-06 10:00:01 UTC; 3 days ago")
        lines.append(f"   Main PID: {next((r[0] for r in PROCESS_TABLE if name in r[-1]), 1)}")
    else:
        lines.append("     Active: inactive (dead)")
    process.stdout.writeline('\n'.join(lines))
    return 0 if running else 3


@command()
def cmd_systemctl(process: Process) -> int:
    """
    Control the service manager

    Usage: systemctl [status|start|stop|restart|reload|enable|disable|is-active] SERVICE
           systemctl list-units

    Services: nginx, ssh, cron (running); apache2, mysql, docker (inactive).
    """
    if not process.params or process.params[0] == 'list-units':
        process.stdout.writeline(
            "  UNIT                 LOAD   ACTIVE   SUB     DESCRIPTION")
        for name, (description, running, _) in sorted(SERVICES.items()):
            active, sub = ('active', 'running') if running else ('inactive', 'dead')
            process.stdout.writeline(
                f"  {name + '.service':<20} loaded {active:<8} {sub:<7} {description}")
        return 0

    verb = process.params[0]
    names = [_unit(name) for name in process.params[1:]]
    if verb not in ('status', 'start', 'stop', 'restart', 'reload', 'enable', 'disable',
                    'is-active', 'is-enabled'):
        return process.error(f'Unknown command verb {verb}.')
    if not names:
        if verb == 'status':
            return _list_status(process)
        return process.error("Too few arguments.")

    exit_code = 0
    for name in names:
        if name not in SERVICES:
            if verb == 'status':
                process.stderr.writeline(f"Unit {name}.service could not be found.")
                exit_code = 4
            elif verb in ('is-active', 'is-enabled'):
                process.stdout.writeline('inactive' if verb == 'is-active' else 'not-found')
                exit_code = 3 if verb == 'is-active' else 1
            else:
                process.stderr.writeline(
                    f"Failed to {verb} {name}.service: Unit {name}.service not found.")
                exit_code = 5
            continue

        _, running, enabled = SERVICES[name]
        if verb == 'status':
            exit_code = max(exit_code, _service_status(process, name))
        elif verb == 'is-active':
            process.stdout.writeline('active' if running else 'inactive')
            exit_code = exit_code if running else 3
        elif verb == 'is-enabled':
            process.stdout.writeline('enabled' if enabled else 'disabled')
            exit_code = exit_code if enabled else 1
        elif verb == 'enable' and not enabled:
            process.stdout.writeline(
                f"Created symlink /etc/systemd/system/multi-user.target.wants/{name}.service "
                f"→ /lib/systemd/system/{name}.service.")
        elif verb == 'disable' and enabled:
            process.stdout.writeline(
                f"Removed /etc/systemd/system/multi-user.target.wants/{name}.service.")
    return exit_code


def _list_status(process: Process) -> int:
    process.stdout.writeline(f"● {process.config.hostname}")
    process.stdout.writeline("    State: running")
    process.stdout.writeline(f"    Units: {len(SERVICES)} loaded")
    return 0


def _apt_install(process: Process, packages: List[str]) -> int:
    missing = [pkg for pkg in packages if pkg not in PACKAGES]
    process.stdout.writeline("Reading package lists... Done")
    process.stdout.writeline("Building dependency tree... Done")
    process.stdout.writeline("Reading state information... Done")
    if missing:
        return process.error(f"E: Unable to locate package {missing[0]}", 100)

    new = [pkg for pkg in packages if pkg not in INSTALLED]
    for pkg in packages:
        if pkg in INSTALLED:
            process.stdout.writeline(f"{pkg} is already the newest version ({PACKAGES[pkg]}).")
    if new:
        process.stdout.writeline("The following NEW packages will be installed:")
        process.stdout.writeline("  " + ' '.join(new))
    process.stdout.writeline(
        f"0 upgraded, {len(new)} newly installed, 0 to remove and 0 not upgraded.")
    for pkg in new:
        process.stdout.writeline(f"Unpacking {pkg} ({PACKAGES[pkg]}) ...")
        process.stdout.writeline(f"Setting up {pkg} ({PACKAGES[pkg]}) ...")
    return 0


def _apt_remove(process: Process, packages: List[str]) -> int:
    process.stdout.writeline("Reading package lists... Done")
    process.stdout.writeline("Building dependency tree... Done")
    for pkg in packages:
        if pkg not in PACKAGES:
            return process.error(f"E: Unable to locate package {pkg}", 100)
    removed = [pkg for pkg in packages if pkg in INSTALLED]
    for pkg in packages:
        if pkg not in INSTALLED:
            process.stdout.writeline(f"Package '{pkg}' is not installed, so not removed")
    if removed:
        process.stdout.writeline("The following packages will be REMOVED:")
        process.stdout.writeline("  " + ' '.join(removed))
    process.stdout.writeline(
        f"0 upgraded, 0 newly installed, {len(removed)} to remove and 0 not upgraded.")
    for pkg in removed:
        process.stdout.writeline(f"Removing {pkg} ({PACKAGES[pkg]}) ...")
    return 0


def _apt(process: Process) -> int:
    if not process.params:
        process.stdout.writeline(f"{process.command} 2.4.11 (amd64)")
        process.stdout.writeline(f"Usage: {process.command} [options] command")
        return 1

    sub, packages = process.params[0], process.params[1:]
    if sub == 'update':
        process.stdout.writeline('\n'.join([
            "Hit:1 http://archive.ubuntu.com/ubuntu jammy InRelease",
            "Get:2 http://archive.ubuntu.com/ubuntu jammy-updates InRelease [119 kB]",
            "Get:3 http://security.ubuntu.com/ubuntu jammy-security InRelease [110 kB]",
            "Fetched 229 kB in 1s (229 kB/s)",
            "Reading package lists... Done",
        ]))
        return 0
    if sub == 'upgrade':
        process.stdout.writeline("Reading package lists... Done")
        process.stdout.writeline("Building dependency tree... Done")
        process.stdout.writeline("Calculating upgrade... Done")
        process.stdout.writeline("0 upgraded, 0 newly installed, 0 to remove and 0 not upgraded.")
        return 0
    if sub == 'install':
        return _apt_install(process, packages)
    if sub in ('remove', 'purge'):
        return _apt_remove(process, packages)
    if sub == 'list':
        only_installed = process.has_flag('installed')
        process.stdout.writeline("Listing... Done")
        for pkg in sorted(PACKAGES):
            if only_installed and pkg not in INSTALLED:
                continue
            suffix = ' [installed]' if pkg in INSTALLED else ''
            process.stdout.writeline(f"{pkg}/jammy-updates {PACKAGES[pkg]} amd64{suffix}")
        return 0
    if sub == 'search':
        if not packages:
            return process.error("E: You must give at least one search pattern", 100)
        process.stdout.writeline("Sorting... Done")
        process.stdout.writeline("Full Text Search... Done")
        for pkg in sorted(PACKAGES):
            if packages[0] in pkg:
                process.stdout.writeline(f"{pkg}/jammy-updates {PACKAGES[pkg]} amd64")
        return 0
    return process.error(f"E: Invalid operation {sub}", 100)


@command()
def cmd_apt(process: Process) -> int:
    """
    Package manager

    Usage: apt update | upgrade | install PKG... | remove PKG... | list [--installed] | search TERM
    """
    return _apt(process)


@command()
def cmd_apt_get(process: Process) -> int:
    """
    Package manager (low-level interface)

    Usage: apt-get update | upgrade | install PKG... | remove PKG...
    """
    return _apt(process)


@command(value_options='s')
def cmd_nginx(process: Process) -> int:
    """
    Control the nginx web server

    Usage: nginx [-t] [-v] [-s stop|quit|reopen|reload]

    Options:
        -t    Test the configuration file
        -v    Show the version
        -s    Send a signal to the master process
    """
    if process.has_flag('v', 'V'):
        process.stdout.writeline("nginx version: nginx/1.18.0 (Ubuntu)")
        return 0
    if process.has_flag('t'):
        conf = lookup(process.fs, split_path(NGINX_CONF))
        if conf is None or conf.is_dir:
            process.stderr.writeline(
                f'nginx: [emerg] open() "{NGINX_CONF}" failed (2: No such file or directory)')
            return process.error(f"nginx: configuration file {NGINX_CONF} test failed")
        if (conf.content or '').count('{') != (conf.content or '').count('}'):
            process.stderr.writeline(
                f'nginx: [emerg] unexpected end of file, expecting "}}" in {NGINX_CONF}')
            return process.error(f"nginx: configuration file {NGINX_CONF} test failed")
        process.stdout.writeline(f"nginx: the configuration file {NGINX_CONF} syntax is ok")
        process.stdout.writeline(f"nginx: configuration file {NGINX_CONF} test is successful")
        return 0
    if 's' in process.values:
        signal = process.values['s']
        if signal not in NGINX_SIGNALS:
            return process.error(f'nginx: invalid option: "-s {signal}"')
        return 0
    return process.error(
        "nginx: [emerg] bind() to 0.0.0.0:80 failed (98: Address already in use)")


@command()
def cmd_crontab(process: Process) -> int:
    """
    Maintain the user's crontab

    Usage: crontab -l | -e | -r | FILE

    Options:
        -l    Display the current crontab
        -e    Edit the current crontab
        -r    Remove the current crontab
    """
    user = process.config.user
    path = f"{CRONTAB_DIR}/{user}"
    current = lookup(process.fs, split_path(path))

    if process.has_flag('l'):
        if current is None:
            return process.error(f"no crontab for {user}")
        if current.content:
            process.stdout.writeline(current.content.rstrip('\n'))
        return 0
    if process.has_flag('e'):
        seed = (current.content or '') if current is not None else CRONTAB_TEMPLATE
        process.action = OpenEditor(path, seed)
        return 0
    if process.has_flag('r'):
        if current is None:
            return process.error(f"no crontab for {user}")
        process.fs = remove_node(process.fs, path)
        return 0

    if process.params and process.params[0] != '-':
        source = process.resolve(process.params[0])
        if source is None or source.is_dir:
            return process.error(f"{process.params[0]}: No such file or directory")
        content = source.content or ''
    elif process.stdin.is_piped:
        content = process.stdin.read()
    else:
        return process.error("crontab: usage error: file name must be specified for replace")

    process.fs = write_file(process.fs, '/', path, content, create_parents=True)
    return 0


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

def _builtins() -> Dict:
    from . import BUILTINS
    return BUILTINS


@command()
def cmd_man(process: Process) -> int:
    """
    Show the manual page of a command

    Usage: man COMMAND
    """
    if not process.params:
        return process.error("What manual page do you want?\nFor example, try 'man man'.")

    name = process.params[0]
    handler = _builtins().get(name)
    if handler is None or not handler.__doc__:
        return process.error(f"No manual entry for {name}")

    doc = textwrap.dedent(handler.__doc__).strip('\n')
    summary, _, body = doc.partition('\n')
    lines = [
        "NAME",
        f"       {name} - {summary.strip()[:1].lower()}{summary.strip()[1:]}",
    ]
    if body.strip():
        lines.append('')
        lines.append("DESCRIPTION")
        lines.extend(('       ' + line).rstrip() for line in body.strip('\n').splitlines())
    process.stdout.writeline('\n'.join(lines))
    return 0


@command()
def cmd_help(process: Process) -> int:
    """
    List the available commands

    Usage: help
    """
    grouped = {category: [] for category in CATEGORIES}
    for name, handler in sorted(_builtins().items()):
        grouped[CommandMetadata.of(handler).category].append(name)

    lines = ["Available commands:"]
    for category in CATEGORIES:
        lines.append('')
        lines.append(f"{category}:")
        lines.extend(textwrap.wrap(', '.join(grouped[category]), width=72,
                                   initial_indent='  ', subsequent_indent='  '))
    lines.append('')
    lines.append("Try 'man <command>' for more information.")
    process.stdout.writeline('\n'.join(lines))
    return 0


@command()
def cmd_clear(process: Process) -> int:
    """
    Clear the terminal screen

    Usage: clear
    """
    process.action = ClearScreen()
    return 0


@command()
def cmd_history(process: Process) -> int:
    """
    Display the command history

    Usage: history [N]
    """
    entries = []
    for entry in process.history:
        if isinstance(entry, Mapping):
            entries.append(entry.get('command', ''))
        else:
            entries.append(entry.command)

    start = 0
    if process.params:
        if not process.params[0].isdigit():
            return process.error(f"bash: history: {process.params[0]}: numeric argument required")
        start = max(len(entries) - int(process.params[0]), 0)

    for number, text in enumerate(entries[start:], start + 1):
        process.stdout.writeline(f"{number:>5}  {text}")
    return 0


@command()
def cmd_sudo(process: Process) -> int:
    """
    Execute a command as another user

    Usage: sudo COMMAND [args...]
    """
    if not process.args:
        return process.error("usage: sudo -h | -K | -k | -V\n"
                             "usage: sudo [-u user] command [arg ...]")

    from . import get_builtin
    from ..dispatcher import make_process

    if get_builtin(process.args[0]) is None:
        return process.error(f"sudo: {process.args[0]}: command not found")

    inner = make_process(process.args[0], process.args[1:], process.fs, process.cwd,
                         stdin=process.stdin.get_value(), old_pwd=process.old_pwd,
                         history=process.history, config=process.config, piped=process.piped)
    # share the buffer so output and errors keep their order and kind
    inner.stdout = process.stdout
    inner.stderr = process.stderr
    result = inner.execute()
    if result.new_fs is not None:
        process.fs = result.new_fs
    if result.new_cwd is not None:
        process.cwd = result.new_cwd
    process.action = result.action
    process.stdin_content = result.stdin_content
    if result.is_async:
        process.mark_async(result.async_type, result.async_targets)
    return result.exit_code
