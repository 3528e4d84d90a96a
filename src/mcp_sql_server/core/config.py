"""Configuration management for MCP SQL Server."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# 載入 .env 檔案，支援多種路徑策略（不覆蓋既有環境變數）
_env_loaded = False

env_file = os.getenv('ENV_FILE_PATH')
if env_file and Path(env_file).exists():
    load_dotenv(env_file, override=False)
    _env_loaded = True
else:
    possible_paths = [
        Path.cwd() / '.env',  # 當前工作目錄
        Path(__file__).parent.parent.parent.parent / '.env',  # 專案根目錄
    ]
    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(str(env_path), override=False)
            _env_loaded = True
            break

if not _env_loaded:
    load_dotenv()

DEFAULT_MSSQL_DRIVER = "ODBC Driver 18 for SQL Server"


def detect_mssql_driver() -> str:
    """檢測系統可用的 MSSQL ODBC 驅動程式

    Returns:
        str: 可用的驅動程式名稱，優先順序：Driver 18 > Driver 17 > Driver 13
    """
    try:
        import pyodbc
        available_drivers = pyodbc.drivers()
    except Exception:
        # pyodbc 或 unixODBC 不可用，使用預設值
        return DEFAULT_MSSQL_DRIVER

    preferred_drivers = [
        "ODBC Driver 18 for SQL Server",
        "ODBC Driver 17 for SQL Server",
        "ODBC Driver 13 for SQL Server",
    ]
    for driver in preferred_drivers:
        if driver in available_drivers:
            return driver

    for driver in available_drivers:
        if "SQL Server" in driver:
            return driver

    return DEFAULT_MSSQL_DRIVER


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag, honouring only the non-default spelling."""
    value = os.getenv(name)
    if value is None:
        return default
    if default:
        return value.strip().lower() != "false"
    return value.strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {value!r}",
            details={"variable": name}
        ) from None


def _odbc_value(value: str) -> str:
    """Quote an ODBC connection string value when it contains delimiters."""
    if any(char in value for char in ";{}=") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value


class DatabaseConfig(BaseModel):
    """SQL Server connection configuration."""

    server: str = Field(default="localhost", description="Database server hostname or IP")
    port: int = Field(default=1433, description="Database server port")
    database: str = Field(description="Database name")
    username: str = Field(description="Database username")
    password: str = Field(default="", description="Database password")
    encrypt: bool = Field(default=True, description="Require TLS encryption")
    trust_server_certificate: bool = Field(default=False, description="Trust self-signed server certificates")
    driver: str = Field(default=DEFAULT_MSSQL_DRIVER, description="ODBC driver for SQL Server")
    timeout: int = Field(default=30, description="Login timeout in seconds")

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create configuration from environment variables.

        Raises:
            ConfigurationError: If DB_DATABASE or DB_USER is missing, or a
                numeric variable cannot be parsed.
        """
        database = os.getenv("DB_DATABASE") or os.getenv("DB_NAME") or ""
        username = os.getenv("DB_USER") or ""

        if not database:
            raise ConfigurationError("DB_DATABASE environment variable is required")
        if not username:
            raise ConfigurationError("DB_USER environment variable is required")

        # 優先使用環境變數，沒有則自動檢測驅動程式
        driver = os.getenv("MSSQL_DRIVER") or detect_mssql_driver()

        return cls(
            server=os.getenv("DB_HOST") or "localhost",
            port=_env_int("DB_PORT", 1433),
            database=database,
            username=username,
            password=os.getenv("DB_PASSWORD", ""),
            encrypt=_env_flag("DB_ENCRYPT", True),
            trust_server_certificate=_env_flag("DB_TRUST_SERVER_CERTIFICATE", False),
            driver=driver,
            timeout=_env_int("DB_TIMEOUT", 30)
        )

    def get_connection_string(self) -> str:
        """Generate ODBC connection string for SQL Server."""
        parts = [
            "DRIVER={" + self.driver.replace("}", "}}") + "}",
            f"SERVER={_odbc_value(f'{self.server},{self.port}')}",
            f"DATABASE={_odbc_value(self.database)}",
            f"UID={_odbc_value(self.username)}",
            f"PWD={_odbc_value(self.password)}",
            f"Encrypt={'yes' if self.encrypt else 'no'}",
            f"TrustServerCertificate={'yes' if self.trust_server_certificate else 'no'}",
        ]
        return ";".join(parts)

    def describe(self) -> str:
        """Return a credential-free description for logs."""
        return f"{self.server}:{self.port}/{self.database}"


class AppConfig(BaseModel):
    """Application configuration combining all configs."""

    database: DatabaseConfig
    server_name: str = Field(default="mcp-sql-server", description="MCP server name identifier")
    tool_prefix: str = Field(default="", description="Optional prefix for MCP tool names")
    log_level: str = Field(default="INFO", description="Logging level")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create full application configuration from environment variables."""
        return cls(
            database=DatabaseConfig.from_env(),
            server_name=os.getenv("MCP_SERVER_NAME", "mcp-sql-server"),
            tool_prefix=os.getenv("TOOL_PREFIX", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )
