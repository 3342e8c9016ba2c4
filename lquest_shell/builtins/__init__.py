"""Built-in command registry"""

from .archives import cmd_tar, cmd_unzip, cmd_zip
from .files import (
    cmd_cat,
    cmd_cd,
    cmd_chmod,
    cmd_cp,
    cmd_du,
    cmd_file,
    cmd_find,
    cmd_less,
    cmd_ln,
    cmd_ls,
    cmd_mkdir,
    cmd_mv,
    cmd_nano,
    cmd_pwd,
    cmd_rm,
    cmd_rmdir,
    cmd_stat,
    cmd_tee,
    cmd_touch,
    cmd_tree,
)
from .system import (
    cmd_apt,
    cmd_apt_get,
    cmd_clear,
    cmd_crontab,
    cmd_date,
    cmd_df,
    cmd_free,
    cmd_groups,
    cmd_help,
    cmd_history,
    cmd_hostname,
    cmd_id,
    cmd_kill,
    cmd_man,
    cmd_nginx,
    cmd_pkill,
    cmd_ps,
    cmd_pstree,
    cmd_sudo,
    cmd_systemctl,
    cmd_top,
    cmd_uname,
    cmd_uptime,
    cmd_whoami,
)
from .text import (
    cmd_awk,
    cmd_basename,
    cmd_cut,
    cmd_diff,
    cmd_dirname,
    cmd_echo,
    cmd_grep,
    cmd_head,
    cmd_sort,
    cmd_tail,
    cmd_uniq,
    cmd_wc,
)

BUILTINS = {
    # file ops
    'pwd': cmd_pwd,
    'ls': cmd_ls,
    'cd': cmd_cd,
    'mkdir': cmd_mkdir,
    'rmdir': cmd_rmdir,
    'touch': cmd_touch,
    'cat': cmd_cat,
    'rm': cmd_rm,
    'cp': cmd_cp,
    'mv': cmd_mv,
    'ln': cmd_ln,
    'chmod': cmd_chmod,
    'find': cmd_find,
    'tree': cmd_tree,
    'du': cmd_du,
    'stat': cmd_stat,
    'file': cmd_file,
    'less': cmd_less,
    'nano': cmd_nano,
    'tee': cmd_tee,
    # text ops
    'echo': cmd_echo,
    'grep': cmd_grep,
    'head': cmd_head,
    'tail': cmd_tail,
    'wc': cmd_wc,
    'sort': cmd_sort,
    'uniq': cmd_uniq,
    'cut': cmd_cut,
    'awk': cmd_awk,
    'diff': cmd_diff,
    'basename': cmd_basename,
    'dirname': cmd_dirname,
    # archives
    'tar': cmd_tar,
    'zip': cmd_zip,
    'unzip': cmd_unzip,
    # system / info
    'ps': cmd_ps,
    'top': cmd_top,
    'uptime': cmd_uptime,
    'free': cmd_free,
    'uname': cmd_uname,
    'df': cmd_df,
    'id': cmd_id,
    'groups': cmd_groups,
    'whoami': cmd_whoami,
    'hostname': cmd_hostname,
    'date': cmd_date,
    'kill': cmd_kill,
    'pkill': cmd_pkill,
    'systemctl': cmd_systemctl,
    'apt': cmd_apt,
    'apt-get': cmd_apt_get,
    'nginx': cmd_nginx,
    'crontab': cmd_crontab,
    'pstree': cmd_pstree,
    'man': cmd_man,
    'help': cmd_help,
    'clear': cmd_clear,
    'history': cmd_history,
    'sudo': cmd_sudo,
}


def get_builtin(command: str):
    """Get a built-in command executor"""
    return BUILTINS.get(command)
