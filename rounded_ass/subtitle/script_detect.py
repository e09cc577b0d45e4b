"""
书写系统检测

按固定优先级检查 Unicode 区间（CJK → 阿拉伯文 → 希伯来文），首个命中即返回，
不按字符数量统计；都未命中时归为拉丁文。
"""
import re

from ..models import Script

# 检测顺序即优先级
_SCRIPT_PATTERNS = (
    (Script.CJK, re.compile(r"[\u3000-\u9fff\uf900-\ufaff]")),  # CJK 符号、假名、汉字、兼容汉字
    (Script.ARABIC, re.compile(r"[\u0600-\u06ff]")),  # 阿拉伯文
    (Script.HEBREW, re.compile(r"[\u0590-\u05ff]")),  # 希伯来文
)

RTL_SCRIPTS = frozenset({Script.ARABIC, Script.HEBREW})


def detect_script(text: str) -> Script:
    """检测文本的书写系统"""
    for script, pattern in _SCRIPT_PATTERNS:
        if pattern.search(text):
            return script
    return Script.LATIN


def is_rtl(script: Script) -> bool:
    """是否为从右到左书写的文字"""
    return script in RTL_SCRIPTS
