"""视频尺寸探测单元测试（ffprobe 通过 mock 替代）"""

import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from rounded_ass.exceptions import CanvasProbeFailed
from rounded_ass.media.probe import FFprobeCanvasProbe, resolve_canvas_size
from rounded_ass.models import CanvasSize, DEFAULT_CANVAS


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "video.mp4"
    path.write_bytes(b"\x00")
    return path


class TestFFprobeCanvasProbe:

    def test_parse_dimensions(self, video):
        with patch("rounded_ass.media.probe.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="1280x720\n")
            canvas = FFprobeCanvasProbe("/opt/ffprobe")(video)

        assert canvas == CanvasSize(1280, 720)
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "/opt/ffprobe"
        assert cmd[cmd.index("-show_entries") + 1] == "stream=width,height"
        assert cmd[cmd.index("-of") + 1] == "csv=s=x:p=0"
        assert cmd[-1] == str(video)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CanvasProbeFailed):
            FFprobeCanvasProbe().probe(tmp_path / "missing.mp4")

    def test_ffprobe_error(self, video):
        with patch("rounded_ass.media.probe.subprocess.run",
                   side_effect=subprocess.CalledProcessError(1, "ffprobe")):
            with pytest.raises(CanvasProbeFailed) as exc_info:
                FFprobeCanvasProbe().probe(video)
        assert isinstance(exc_info.value.original_error, subprocess.CalledProcessError)

    def test_ffprobe_not_installed(self, video):
        with patch("rounded_ass.media.probe.subprocess.run", side_effect=FileNotFoundError("ffprobe")):
            with pytest.raises(CanvasProbeFailed):
                FFprobeCanvasProbe().probe(video)

    @pytest.mark.parametrize("stdout", ["", "N/A", "0x720"])
    def test_unparseable_output(self, video, stdout):
        with patch("rounded_ass.media.probe.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout=stdout)
            with pytest.raises(CanvasProbeFailed):
                FFprobeCanvasProbe().probe(video)


class TestResolveCanvasSize:

    def test_no_video_uses_default(self):
        probe = MagicMock()
        assert resolve_canvas_size(None, probe) == DEFAULT_CANVAS
        probe.assert_not_called()

    def test_probe_called_once(self):
        probe = MagicMock(return_value=CanvasSize(3840, 2160))
        assert resolve_canvas_size("movie.mkv", probe) == CanvasSize(3840, 2160)
        probe.assert_called_once_with("movie.mkv")

    def test_failure_falls_back_with_warning(self, caplog):
        probe = MagicMock(side_effect=CanvasProbeFailed("no video stream"))
        with caplog.at_level(logging.WARNING, logger="rounded_ass"):
            canvas = resolve_canvas_size("movie.mkv", probe, CanvasSize(1280, 720))
        assert canvas == CanvasSize(1280, 720)
        messages = [r.getMessage() for r in caplog.records]
        assert any("Could not get video dimensions" in m for m in messages)
        assert any("Using default dimensions: 1280x720" in m for m in messages)
