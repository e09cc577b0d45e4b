"""
字幕文件解析

- 编码回退链：UTF-8 → Latin-1 → Windows-1252（每次回退记录警告）
- SRT：序号 / 时间轴 / 文本块，空行分隔
- VTT：WEBVTT 头、可选的 cue 标识、时间轴 / 文本块；NOTE/STYLE/REGION 块被丢弃
- 文本中的换行转换为 ASS 强制换行 \\N，<i>/<b>/<u> 转换为 ASS 覆盖标签
"""
import html
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..exceptions import DecodingExhausted, EmptyInput, UnsupportedFormat
from ..models import Cue, SubtitleFormat
from ..utils.logger import setup_logger

logger = setup_logger("subtitle_parser")

ENCODING_FALLBACKS = ("utf-8", "latin-1", "cp1252")

ASS_LINE_BREAK = "\\N"

_TIMESTAMP = r"(?:(\d+):)?(\d{1,2}):(\d{1,2})[.,](\d{1,3})"
_TIME_RANGE_PATTERN = re.compile(rf"^\s*{_TIMESTAMP}\s*-->\s*{_TIMESTAMP}")
_BLOCK_SPLIT_PATTERN = re.compile(r"\n\s*\n")
_VTT_METADATA_BLOCKS = ("NOTE", "STYLE", "REGION")

# <i>, <b>, <u>（VTT 允许 <i.class> 形式）
_STYLE_TAG_PATTERN = re.compile(r"<(/?)([ibu])(?:\.[^<>\n]*)?>", re.IGNORECASE)
# 只匹配已知标签形状（不跨行、不嵌套 <），正文中的 < / > 原样保留
_ANY_TAG_PATTERN = re.compile(
    r"</?(?:c|v|lang|ruby|rt|font|span)(?:[.\s][^<>\n]*)?>"
    r"|<\d{1,2}:[\d:.]+>",  # VTT 卡拉OK 时间戳
    re.IGNORECASE,
)


def decode_subtitle_bytes(data: bytes) -> Tuple[str, str]:
    """按编码回退链解码字节

    Args:
        data: 原始文件字节

    Returns:
        (解码后的文本, 使用的编码)

    Raises:
        DecodingExhausted: 所有候选编码均失败
    """
    last_error: Optional[Exception] = None
    for i, encoding in enumerate(ENCODING_FALLBACKS):
        try:
            content = data.decode(encoding)
        except UnicodeDecodeError as e:
            last_error = e
            if i + 1 < len(ENCODING_FALLBACKS):
                logger.warning(
                    f"字幕文件不是 {encoding} 编码，回退到 {ENCODING_FALLBACKS[i + 1]}"
                )
            continue
        if i > 0:
            logger.warning(f"字幕文件使用 {encoding} 编码解码")
        return content.lstrip("\ufeff"), encoding

    raise DecodingExhausted(
        f"无法解码字幕文件（已尝试 {', '.join(ENCODING_FALLBACKS)}）",
        original_error=last_error,
    )


def parse_timestamp(hours: Optional[str], minutes: str, seconds: str, millis: str) -> float:
    """时间戳各部分转换为秒（小时可省略，毫秒不足三位时右侧补零）"""
    total = (
        int(hours or 0) * 3600
        + int(minutes) * 60
        + int(seconds)
        + int(millis.ljust(3, "0")) / 1000
    )
    return round(total, 3)


def convert_markup(text: str, unescape: bool = False) -> str:
    """将字幕文本转换为 ASS 文本

    - <i>/<b>/<u> → {\\i1}/{\\i0} 等
    - 其余已知标签（<c>、<v>、<font>、<span>、<lang>、<ruby>、卡拉OK 时间戳）直接移除，
      正文中不构成标签的 < 和 > 原样保留
    - 换行 → \\N
    """
    text = _STYLE_TAG_PATTERN.sub(
        lambda m: f"{{\\{m.group(2).lower()}{0 if m.group(1) else 1}}}", text
    )
    text = _ANY_TAG_PATTERN.sub("", text)
    if unescape:
        text = html.unescape(text)
    lines = [line.strip() for line in text.split("\n")]
    return ASS_LINE_BREAK.join(line for line in lines if line)


class SubtitleParser:
    """SRT / VTT 字幕解析器"""

    def parse_file(
        self,
        file_path: Union[str, Path],
        subtitle_format: Optional[str] = None,
    ) -> List[Cue]:
        """读取并解析字幕文件

        Args:
            file_path: 字幕文件路径
            subtitle_format: "srt" | "vtt"，为 None 时按扩展名推断

        Raises:
            FileNotFoundError: 文件不存在
            UnsupportedFormat: 格式不支持
            EmptyInput: 没有解析出字幕
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        fmt = detect_format(path, subtitle_format)
        content, encoding = decode_subtitle_bytes(path.read_bytes())
        logger.debug(f"解析 {fmt.value.upper()} 文件: {path} (编码: {encoding})")
        return self.parse(content, fmt)

    def parse_bytes(self, data: bytes, subtitle_format: Union[str, SubtitleFormat]) -> List[Cue]:
        content, _ = decode_subtitle_bytes(data)
        return self.parse(content, subtitle_format)

    def parse(self, content: str, subtitle_format: Union[str, SubtitleFormat]) -> List[Cue]:
        """解析已解码的字幕文本

        Returns:
            按开始时间排序的 Cue 列表（序号从 1 开始）

        Raises:
            EmptyInput: 没有解析出字幕
        """
        fmt = _coerce_format(subtitle_format)
        content = content.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff")

        if fmt is SubtitleFormat.VTT:
            raw_cues = self._parse_vtt_blocks(content)
        else:
            raw_cues = self._parse_srt_blocks(content)

        cues = self._finalize(raw_cues)
        if not cues:
            raise EmptyInput(f"No subtitles found in the {fmt.value.upper()} file")

        logger.debug(f"解析到 {len(cues)} 条字幕")
        return cues

    def _parse_srt_blocks(self, content: str) -> List[Tuple[float, float, str]]:
        raw_cues = []
        for block in _BLOCK_SPLIT_PATTERN.split(content.strip()):
            cue = self._parse_block(block.split("\n"), unescape=False)
            if cue is not None:
                raw_cues.append(cue)
        return raw_cues

    def _parse_vtt_blocks(self, content: str) -> List[Tuple[float, float, str]]:
        blocks = _BLOCK_SPLIT_PATTERN.split(content.strip())
        if blocks and blocks[0].startswith("WEBVTT"):
            blocks = blocks[1:]
        else:
            logger.warning("VTT 文件缺少 WEBVTT 头，继续尝试解析")

        raw_cues = []
        for block in blocks:
            lines = block.split("\n")
            if lines[0].split(" ", 1)[0].strip() in _VTT_METADATA_BLOCKS:
                continue
            cue = self._parse_block(lines, unescape=True)
            if cue is not None:
                raw_cues.append(cue)
        return raw_cues

    @staticmethod
    def _parse_block(lines: List[str], unescape: bool) -> Optional[Tuple[float, float, str]]:
        """解析单个块：时间轴行位于第 1 行或第 2 行（前面是序号 / cue 标识）"""
        for timing_index in range(min(2, len(lines))):
            match = _TIME_RANGE_PATTERN.match(lines[timing_index])
            if match:
                break
        else:
            return None

        parts = match.groups()
        start = parse_timestamp(*parts[:4])
        end = parse_timestamp(*parts[4:])
        text = convert_markup("\n".join(lines[timing_index + 1:]), unescape=unescape)
        return start, end, text

    @staticmethod
    def _finalize(raw_cues: List[Tuple[float, float, str]]) -> List[Cue]:
        """丢弃空文本，修正 end < start，按开始时间稳定排序并编号"""
        kept = []
        for start, end, text in raw_cues:
            if not text:
                continue
            if end < start:
                logger.warning(f"字幕结束时间早于开始时间 ({start:.3f} > {end:.3f})，已修正")
                end = start
            kept.append((start, end, text))

        kept.sort(key=lambda item: item[0])
        return [
            Cue(index=i, start=start, end=end, text=text)
            for i, (start, end, text) in enumerate(kept, start=1)
        ]


def _coerce_format(subtitle_format: Union[str, SubtitleFormat]) -> SubtitleFormat:
    if isinstance(subtitle_format, SubtitleFormat):
        return subtitle_format
    try:
        return SubtitleFormat(str(subtitle_format).lower().lstrip("."))
    except ValueError as e:
        raise UnsupportedFormat(
            f"Input file must be .srt or .vtt format. Got: {subtitle_format}",
            original_error=e,
        ) from e


def detect_format(file_path: Union[str, Path], subtitle_format: Optional[str] = None) -> SubtitleFormat:
    """确定字幕格式：显式指定优先，否则按扩展名推断"""
    if subtitle_format:
        return _coerce_format(subtitle_format)
    suffix = Path(file_path).suffix.lower()
    if not suffix:
        raise UnsupportedFormat(f"无法从文件名推断字幕格式: {file_path}")
    return _coerce_format(suffix)


def parse_subtitle_file(file_path: Union[str, Path], subtitle_format: Optional[str] = None) -> List[Cue]:
    """便捷函数：解析字幕文件"""
    return SubtitleParser().parse_file(file_path, subtitle_format)
