"""
配置模块

提供引擎、服务与日志的配置管理。
"""

import os
from dataclasses import dataclass
from typing import Optional
from enum import Enum


class LogLevel(str, Enum):
    """日志级别"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class EngineSettings:
    """引擎设置（各步骤参数缺省时的默认值）"""
    # 自动化会话端点（浏览器 CDP 地址）
    webdriver_url: str = "http://localhost:9222"
    default_page_url: str = "https://www.wikipedia.org/wiki/Red_panda"
    default_input_text: str = "red panda"
    # 每秒触发
    default_cron: str = "* * * * * *"
    # 单次运行最多执行的步骤数
    max_steps: int = 1000
    # 外部抓取超时（秒）
    fetch_timeout: float = 5.0


@dataclass
class ServerSettings:
    """服务器设置"""
    host: str = "127.0.0.1"
    port: int = 8080
    reload: bool = False


@dataclass
class LogSettings:
    """日志设置"""
    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s [%(levelname)s] %(message)s"
    date_format: str = "%H:%M:%S"
    file_path: Optional[str] = None


@dataclass
class AppConfig:
    """应用配置"""
    engine: EngineSettings = None
    server: ServerSettings = None
    log: LogSettings = None

    def __post_init__(self):
        self.engine = self.engine or EngineSettings()
        self.server = self.server or ServerSettings()
        self.log = self.log or LogSettings()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """从环境变量加载配置"""
        defaults = EngineSettings()

        # 引擎配置
        engine = EngineSettings(
            webdriver_url=os.getenv("TASKFLOW_WEBDRIVER_URL", defaults.webdriver_url),
            default_page_url=os.getenv("TASKFLOW_DEFAULT_PAGE_URL", defaults.default_page_url),
            default_input_text=os.getenv("TASKFLOW_DEFAULT_INPUT", defaults.default_input_text),
            default_cron=os.getenv("TASKFLOW_DEFAULT_CRON", defaults.default_cron),
            max_steps=int(os.getenv("TASKFLOW_MAX_STEPS", str(defaults.max_steps))),
            fetch_timeout=float(os.getenv("TASKFLOW_FETCH_TIMEOUT", str(defaults.fetch_timeout))),
        )

        # 服务器配置
        server = ServerSettings(
            host=os.getenv("SERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("SERVER_PORT", "8080")),
            reload=os.getenv("SERVER_RELOAD", "false").lower() == "true",
        )

        # 日志配置
        log = LogSettings(
            level=LogLevel(os.getenv("LOG_LEVEL", "INFO").upper()),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

        return cls(engine=engine, server=server, log=log)

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "engine": {
                "webdriver_url": self.engine.webdriver_url,
                "default_page_url": self.engine.default_page_url,
                "default_input_text": self.engine.default_input_text,
                "default_cron": self.engine.default_cron,
                "max_steps": self.engine.max_steps,
                "fetch_timeout": self.engine.fetch_timeout,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "reload": self.server.reload,
            },
            "log": {
                "level": self.log.level.value,
                "file_path": self.log.file_path,
            },
        }


# 全局配置实例
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """设置全局配置"""
    global _config
    _config = config


def reset_config() -> None:
    """重置配置"""
    global _config
    _config = None


__all__ = [
    "EngineSettings",
    "ServerSettings",
    "LogSettings",
    "LogLevel",
    "AppConfig",
    "get_config",
    "set_config",
    "reset_config",
]
