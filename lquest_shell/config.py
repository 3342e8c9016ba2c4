"""Configuration management for lquest-shell"""

import os


class Config:
    """Configuration for the virtual shell"""

    def __init__(self):
        self.user = os.getenv('LQUEST_USER', 'student')
        self.hostname = os.getenv('LQUEST_HOSTNAME', 'l-quest')
        self.home = os.getenv('LQUEST_HOME', f'/home/{self.user}')
        # Seconds the CLI spends rendering zip/unzip progress
        self.async_duration = float(os.getenv('LQUEST_ASYNC_DURATION', '2.0'))
        self.log_level = os.getenv('LQUEST_LOG_LEVEL', 'WARNING')
        self.history_file = os.getenv(
            'LQUEST_HISTFILE',
            os.path.join(os.path.expanduser("~"), ".lquest_shell_history")
        )

    @classmethod
    def from_env(cls):
        """Create configuration from environment variables"""
        return cls()

    @classmethod
    def from_args(cls, user: str = None, home: str = None, log_level: str = None,
                  async_duration: float = None):
        """Create configuration from command line arguments"""
        config = cls()
        if user:
            config.user = user
            if not home and 'LQUEST_HOME' not in os.environ:
                config.home = f'/home/{user}'
        if home:
            config.home = home
        if log_level:
            config.log_level = log_level
        if async_duration is not None:
            config.async_duration = async_duration
        return config

    def __repr__(self):
        return f"Config(user={self.user}, home={self.home}, hostname={self.hostname})"


DEFAULT_CONFIG = Config()
