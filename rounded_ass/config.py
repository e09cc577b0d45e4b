"""
配置管理系统

RenderOptions 是调用方提供的覆盖项（None 表示自动推导），在 __post_init__ 中完成
数值范围校验；核心计算假设所有数值都已通过校验（非负）。
"""
import re
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict, fields

from .exceptions import ConfigError

logger = logging.getLogger("rounded_ass.config")

_HEX_COLOR_PATTERN = re.compile(r"^[0-9A-Fa-f]{6}$")

SUPPORTED_FORMATS = ("srt", "vtt")

DEFAULT_FONT_SIZE = 48


def _normalize_hex(name: str, value: str) -> str:
    """校验并规范化 RRGGBB 颜色值（允许 # 前缀）"""
    if not isinstance(value, str):
        raise ConfigError(f"{name} 必须是 6 位十六进制颜色值，当前: {value!r}")
    value = value.strip().lstrip("#")
    if not _HEX_COLOR_PATTERN.match(value):
        raise ConfigError(f"{name} 必须是 6 位十六进制颜色值，当前: {value!r}")
    return value.upper()


@dataclass
class RenderOptions:
    """渲染选项（调用方覆盖项 + 默认值）"""
    font: Optional[str] = None               # None = 按书写系统自动选择
    font_size: Optional[int] = DEFAULT_FONT_SIZE  # None = 画布高度 / 20
    text_color: str = "FFFFFF"               # RRGGBB
    bg_color: str = "000000"                 # RRGGBB
    bg_alpha: int = 80                       # 0 = 不透明, 255 = 全透明
    padding_x: int = 20
    padding_y: int = 10
    radius: Optional[float] = None           # None = 按背景框尺寸自动推导
    min_width_ratio: float = 0.0
    max_width_ratio: float = 1.0
    disable_min_width: bool = True
    margin_bottom: Optional[int] = None      # None = 按画布高度自动推导
    use_exact_measure: bool = True
    measure_command: str = "ass-measure"
    subtitle_format: Optional[str] = None    # None = 按文件扩展名推断

    def __post_init__(self):
        self.text_color = _normalize_hex("text_color", self.text_color)
        self.bg_color = _normalize_hex("bg_color", self.bg_color)

        if self.font is not None and not str(self.font).strip():
            raise ConfigError("font 不能为空字符串")
        if self.font_size is not None and self.font_size <= 0:
            raise ConfigError(f"font_size 必须为正数，当前: {self.font_size}")
        if not 0 <= self.bg_alpha <= 255:
            raise ConfigError(f"bg_alpha 必须在 0-255 之间，当前: {self.bg_alpha}")
        if self.padding_x < 0 or self.padding_y < 0:
            raise ConfigError(
                f"padding 不能为负数，当前: x={self.padding_x}, y={self.padding_y}"
            )
        if self.radius is not None and self.radius < 0:
            raise ConfigError(f"radius 不能为负数，当前: {self.radius}")
        if self.margin_bottom is not None and self.margin_bottom < 0:
            raise ConfigError(f"margin_bottom 不能为负数，当前: {self.margin_bottom}")
        for name in ("min_width_ratio", "max_width_ratio"):
            ratio = getattr(self, name)
            if not 0.0 <= ratio <= 1.0:
                raise ConfigError(f"{name} 必须在 0-1 之间，当前: {ratio}")
        if self.min_width_ratio > self.max_width_ratio:
            raise ConfigError(
                f"min_width_ratio ({self.min_width_ratio}) 不能大于 "
                f"max_width_ratio ({self.max_width_ratio})"
            )
        if self.subtitle_format is not None:
            self.subtitle_format = self.subtitle_format.lower().lstrip(".")
            if self.subtitle_format not in SUPPORTED_FORMATS:
                raise ConfigError(
                    f"subtitle_format 必须是 {SUPPORTED_FORMATS} 之一，当前: {self.subtitle_format}"
                )

    def merged(self, overrides: Dict[str, Any]) -> "RenderOptions":
        """返回应用了覆盖项的新实例（未知键报错）"""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"未知的渲染选项: {sorted(unknown)}")
        data = asdict(self)
        data.update(overrides)
        return RenderOptions(**data)


@dataclass
class ProbeConfig:
    """视频尺寸探测配置"""
    ffprobe_path: str = "ffprobe"
    default_width: int = 1920
    default_height: int = 1080
    timeout: Optional[float] = 30.0

    def __post_init__(self):
        if self.default_width <= 0 or self.default_height <= 0:
            raise ConfigError(
                f"默认画布尺寸必须为正数，当前: {self.default_width}x{self.default_height}"
            )


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = "INFO"
    file: Optional[str] = None
    format: Optional[str] = None

    def __post_init__(self):
        level = str(self.level).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"无效的日志级别: {self.level}")
        self.level = level


@dataclass
class Config:
    """主配置类"""
    render: RenderOptions = field(default_factory=RenderOptions)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Config':
        """从YAML文件加载配置"""
        path = Path(yaml_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"配置文件不存在: {yaml_path}")
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"配置文件格式错误（顶层必须是映射）: {yaml_path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """从字典创建配置（缺失的段使用默认值）"""
        try:
            render = RenderOptions(**(data.get('render') or {}))
            probe = ProbeConfig(**(data.get('probe') or {}))
            logging_config = LoggingConfig(**(data.get('logging') or {}))
        except TypeError as e:
            raise ConfigError(f"配置项无效: {e}", original_error=e) from e
        return cls(render=render, probe=probe, logging=logging_config)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)

    def to_yaml(self, yaml_path: str) -> None:
        """保存为YAML文件"""
        path = Path(yaml_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True, default_flow_style=False, sort_keys=False)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    加载配置
    优先级：指定路径 > ./config/config.yaml > ./config/default.yaml > 项目默认配置 > 内置默认值
    """
    if config_path:
        return Config.from_yaml(config_path)

    # 尝试用户自定义配置
    local_config = Path("config/config.yaml")
    if local_config.exists():
        return Config.from_yaml(str(local_config))

    # 使用默认配置文件
    default_config = Path("config/default.yaml")
    if default_config.exists():
        return Config.from_yaml(str(default_config))

    # 尝试项目目录的默认配置
    project_default = Path(__file__).parent.parent / "config" / "default.yaml"
    if project_default.exists():
        return Config.from_yaml(str(project_default))

    logger.debug("未找到配置文件，使用内置默认配置")
    return Config()
