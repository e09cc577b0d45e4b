"""书写系统检测单元测试"""

import pytest

from rounded_ass.models import Script
from rounded_ass.subtitle.script_detect import detect_script, is_rtl


class TestDetectScript:

    @pytest.mark.parametrize("text, expected", [
        ("Hello world", Script.LATIN),
        ("", Script.LATIN),
        ("你好，世界", Script.CJK),
        ("こんにちは", Script.CJK),
        ("مرحبا", Script.ARABIC),
        ("שלום", Script.HEBREW),
    ])
    def test_single_script(self, text, expected):
        assert detect_script(text) is expected

    def test_first_match_wins(self):
        """按固定优先级返回，不按字符数量统计"""
        assert detect_script("Hello 你") is Script.CJK
        assert detect_script("שלום שלום שלום 你") is Script.CJK
        assert detect_script("שלום مرحبا") is Script.ARABIC

    def test_latin_mixed_with_hebrew(self):
        assert detect_script("Shalom שלום") is Script.HEBREW


class TestIsRtl:

    def test_rtl_scripts(self):
        assert is_rtl(Script.ARABIC)
        assert is_rtl(Script.HEBREW)

    def test_ltr_scripts(self):
        assert not is_rtl(Script.CJK)
        assert not is_rtl(Script.LATIN)
