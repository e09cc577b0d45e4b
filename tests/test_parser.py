"""字幕解析单元测试：编码回退、SRT/VTT 块解析、标签转换、排序与空输入"""

import logging

import pytest

from rounded_ass.exceptions import DecodingExhausted, EmptyInput, UnsupportedFormat
from rounded_ass.models import SubtitleFormat
from rounded_ass.subtitle import parser as parser_module
from rounded_ass.subtitle.parser import (
    SubtitleParser,
    convert_markup,
    decode_subtitle_bytes,
    detect_format,
    parse_subtitle_file,
    parse_timestamp,
)


SRT_SAMPLE = """1
00:00:01,000 --> 00:00:02,000
Hello

2
00:00:02,050 --> 00:00:03,000
World
second line
"""

VTT_SAMPLE = """WEBVTT
Kind: captions

NOTE this is a comment
spanning two lines

STYLE
::cue { color: red }

intro
00:01.000 --> 00:02.500 align:center
<v Roger>Hello &amp; welcome</v>

00:00:03.000 --> 00:00:04.000
<i>Bye</i>
"""


@pytest.fixture
def parser():
    return SubtitleParser()


class TestDecode:
    """编码回退链"""

    def test_utf8(self):
        text, encoding = decode_subtitle_bytes("héllo".encode("utf-8"))
        assert text == "héllo"
        assert encoding == "utf-8"

    def test_strip_bom(self):
        text, _ = decode_subtitle_bytes(b"\xef\xbb\xbf1\n")
        assert text == "1\n"

    def test_fallback_to_latin1_with_warning(self, caplog):
        """非 UTF-8 字节回退到 latin-1，并记录警告"""
        with caplog.at_level(logging.WARNING, logger="rounded_ass"):
            text, encoding = decode_subtitle_bytes(b"caf\xe9")
        assert encoding == "latin-1"
        assert text == "café"
        assert any("latin-1" in r.getMessage() for r in caplog.records)

    def test_all_encodings_fail(self, monkeypatch):
        """所有候选编码都失败时抛出 DecodingExhausted"""
        monkeypatch.setattr(parser_module, "ENCODING_FALLBACKS", ("utf-8", "ascii"))
        with pytest.raises(DecodingExhausted) as exc_info:
            decode_subtitle_bytes(b"\xff\xfe\xfa")
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


class TestTimestamp:

    def test_full(self):
        assert parse_timestamp("01", "02", "03", "456") == 3723.456

    def test_without_hours(self):
        assert parse_timestamp(None, "01", "02", "500") == 62.5

    def test_short_millis(self):
        """毫秒不足三位时右侧补零"""
        assert parse_timestamp("0", "00", "01", "5") == 1.5


class TestMarkup:
    """标签转换"""

    def test_style_tags_to_overrides(self):
        assert convert_markup("<i>a</i> <b>b</b> <u>c</u>") == "{\\i1}a{\\i0} {\\b1}b{\\b0} {\\u1}c{\\u0}"

    def test_other_tags_removed(self):
        assert convert_markup('<font color="red">red</font>') == "red"

    def test_vtt_class_and_voice(self):
        assert convert_markup("<v Bob><i.loud>Hi</i></v>", unescape=True) == "{\\i1}Hi{\\i0}"

    def test_line_breaks(self):
        assert convert_markup("line one\n  line two  \n") == "line one\\Nline two"

    def test_unescape_only_when_requested(self):
        assert convert_markup("a &amp; b") == "a &amp; b"
        assert convert_markup("a &amp; b", unescape=True) == "a & b"

    def test_literal_angle_brackets_kept(self):
        """正文中的 < 和 > 不是标签，原样保留且不吞掉换行"""
        assert convert_markup("if a < b\nthen b > a wins") == "if a < b\\Nthen b > a wins"

    def test_literal_brackets_in_srt_cue(self, parser):
        content = "1\n00:00:01,000 --> 00:00:02,000\nif a < b\nthen b > a wins\n"
        cues = parser.parse(content, "srt")
        assert cues[0].text == "if a < b\\Nthen b > a wins"

    def test_unknown_tag_shape_kept(self):
        assert convert_markup("<3 you> and <cat>") == "<3 you> and <cat>"

    def test_vtt_timestamp_and_class_tags_removed(self):
        text = "<c.yellow>Never</c> <00:00:01.500>gonna <lang en>give</lang>"
        assert convert_markup(text, unescape=True) == "Never gonna give"


class TestSrt:

    def test_parse_basic(self, parser):
        cues = parser.parse(SRT_SAMPLE, "srt")
        assert len(cues) == 2
        assert cues[0].index == 1
        assert cues[0].start == 1.0
        assert cues[0].end == 2.0
        assert cues[0].text == "Hello"
        assert cues[1].text == "World\\Nsecond line"

    def test_crlf(self, parser):
        cues = parser.parse(SRT_SAMPLE.replace("\n", "\r\n"), SubtitleFormat.SRT)
        assert [c.text for c in cues] == ["Hello", "World\\Nsecond line"]

    def test_invalid_blocks_skipped(self, parser):
        content = "garbage block\n\n" + SRT_SAMPLE
        assert len(parser.parse(content, "srt")) == 2

    def test_sorted_and_reindexed(self, parser):
        """按开始时间排序后重新编号"""
        content = (
            "1\n00:00:05,000 --> 00:00:06,000\nlater\n\n"
            "2\n00:00:01,000 --> 00:00:02,000\nearlier\n"
        )
        cues = parser.parse(content, "srt")
        assert [c.text for c in cues] == ["earlier", "later"]
        assert [c.index for c in cues] == [1, 2]

    def test_empty_text_dropped(self, parser):
        content = (
            "1\n00:00:01,000 --> 00:00:02,000\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\n<font></font>\n\n"
            "3\n00:00:05,000 --> 00:00:06,000\nkept\n"
        )
        cues = parser.parse(content, "srt")
        assert [c.text for c in cues] == ["kept"]
        assert cues[0].index == 1

    def test_end_before_start_clamped(self, parser):
        content = "1\n00:00:05,000 --> 00:00:04,000\nbackwards\n"
        cues = parser.parse(content, "srt")
        assert cues[0].end == cues[0].start == 5.0

    def test_empty_input(self, parser):
        with pytest.raises(EmptyInput, match="No subtitles found in the SRT file"):
            parser.parse("", "srt")


class TestVtt:

    def test_parse_with_metadata_blocks(self, parser):
        """NOTE/STYLE 块被跳过，cue 标识和 cue 设置被忽略"""
        cues = parser.parse(VTT_SAMPLE, "vtt")
        assert len(cues) == 2
        assert cues[0].start == 1.0
        assert cues[0].end == 2.5
        assert cues[0].text == "Hello & welcome"
        assert cues[1].text == "{\\i1}Bye{\\i0}"

    def test_missing_header_warns(self, parser, caplog):
        with caplog.at_level(logging.WARNING, logger="rounded_ass"):
            cues = parser.parse("00:00:01.000 --> 00:00:02.000\nHi\n", "vtt")
        assert cues[0].text == "Hi"
        assert any("WEBVTT" in r.getMessage() for r in caplog.records)

    def test_header_only(self, parser):
        with pytest.raises(EmptyInput, match="VTT"):
            parser.parse("WEBVTT\n\n", "vtt")


class TestFormat:

    def test_detect_by_extension(self):
        assert detect_format("movie.SRT") is SubtitleFormat.SRT
        assert detect_format("movie.vtt") is SubtitleFormat.VTT

    def test_explicit_format_wins(self):
        assert detect_format("movie.txt", "vtt") is SubtitleFormat.VTT

    def test_unsupported(self):
        with pytest.raises(UnsupportedFormat, match="Input file must be .srt or .vtt format"):
            detect_format("movie.ass")

    def test_no_extension(self):
        with pytest.raises(UnsupportedFormat):
            detect_format("movie")


class TestParseFile:

    def test_parse_file(self, tmp_path):
        path = tmp_path / "sample.srt"
        path.write_bytes(SRT_SAMPLE.encode("utf-8"))
        cues = parse_subtitle_file(path)
        assert len(cues) == 2

    def test_parse_latin1_file(self, tmp_path):
        path = tmp_path / "latin.srt"
        path.write_bytes("1\n00:00:01,000 --> 00:00:02,000\ncafé\n".encode("latin-1"))
        cues = parse_subtitle_file(path)
        assert cues[0].text == "café"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_subtitle_file(tmp_path / "missing.srt")

    def test_parse_bytes(self, parser):
        data = "WEBVTT\n\n00:01.000 --> 00:02.000\nnaïve\n".encode("cp1252")
        cues = parser.parse_bytes(data, "vtt")
        assert [c.text for c in cues] == ["naïve"]
