# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env file.
#   Provides typed config objects to the reader and the MySQL beacon.
#
# CLASSES:
# --------
# - ReaderConfig (dataclass)
#     encoding: str              (default "utf-8")
#     verbose: bool              (default False)  print recorded errors
#     max_source_failures: int   (default 10)     consecutive failed pulls
#                                                 before a source is treated
#                                                 as exhausted
#
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "beacon_db")
#     beacons_table: str (default "beacons")
#     links_table: str   (default "links")
#
# - AppConfig (dataclass)
#     reader: ReaderConfig
#     mysql: MySQLConfig
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from beacon.config import get_config
#   config = get_config()
#   print(config.reader.encoding)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


TRUE_VARIANTS = {"1", "true", "yes", "on"}


@dataclass
class ReaderConfig:
    """Options for reading link dumps from a line source."""
    encoding: str = "utf-8"
    verbose: bool = False
    max_source_failures: int = 10


@dataclass
class MySQLConfig:
    """MySQL database configuration for stored beacons."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "beacon_db"
    beacons_table: str = "beacons"
    links_table: str = "links"


@dataclass
class AppConfig:
    """Main application configuration."""
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    mysql: MySQLConfig = field(default_factory=MySQLConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUE_VARIANTS


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    reader_config = ReaderConfig(
        encoding=os.getenv("BEACON_ENCODING", "utf-8"),
        verbose=_env_flag("BEACON_VERBOSE"),
        max_source_failures=int(os.getenv("BEACON_MAX_SOURCE_FAILURES", "10"))
    )

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "beacon_db"),
        beacons_table=os.getenv("BEACON_META_TABLE", "beacons"),
        links_table=os.getenv("BEACON_LINKS_TABLE", "links")
    )

    _config_instance = AppConfig(
        reader=reader_config,
        mysql=mysql_config
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached singleton so the next get_config() re-reads the env."""
    global _config_instance
    _config_instance = None
