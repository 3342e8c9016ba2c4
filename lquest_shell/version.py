"""Version information for lquest-shell"""

__version__ = "1.0.0"


def get_version_string():
    return f"lquest-shell {__version__}"
