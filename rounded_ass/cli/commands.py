"""
命令行接口实现
"""
from pathlib import Path
from typing import Any, Dict, Optional

import click
from tabulate import tabulate

from .. import __version__
from ..config import Config, RenderOptions, load_config
from ..converter import RoundedAssConverter
from ..exceptions import RoundedAssError
from ..media.probe import FFprobeCanvasProbe
from ..models import CanvasSize, ConversionReport
from .logger import setup_logger


def get_config(config_path: Optional[str] = None) -> Config:
    """加载配置（指定路径 > ./config/config.yaml > ./config/default.yaml > 内置默认值）"""
    return load_config(config_path)


def _settings_table(
    options: RenderOptions,
    explicit: Dict[str, Any],
    report: ConversionReport,
) -> str:
    """生成已生效配置的表格（区分用户指定 / 默认 / 自动推导）"""
    def source(key: str) -> str:
        return "user specified" if key in explicit else "default"

    rows = [
        ["Font", report.resolved["font"][0], report.resolved["font"][1]],
        ["Font size", f"{report.font_size}px", report.resolved["font_size"][1]],
        ["Text color", f"#{options.text_color}", source("text_color")],
        ["Background color", f"#{options.bg_color}", source("bg_color")],
        ["Background alpha", options.bg_alpha, source("bg_alpha")],
        ["Horizontal padding", f"{options.padding_x}px", source("padding_x")],
        ["Vertical padding", f"{options.padding_y}px", source("padding_y")],
        ["Border radius", report.resolved["radius"][0], report.resolved["radius"][1]],
        ["Width ratio", f"{options.min_width_ratio}-{options.max_width_ratio}",
         "user specified" if {"min_width_ratio", "max_width_ratio"} & set(explicit) else "default"],
        ["Bottom margin", f"{report.margin_bottom}px", report.resolved["margin_bottom"][1]],
        ["Canvas", str(report.canvas), ""],
        ["Script", report.predominant_script.value, "detected"],
        ["Dimensions", f"{report.measured_count} measured, {report.estimated_count} estimated", ""],
    ]
    return tabulate(rows, headers=["Setting", "Value", "Source"], tablefmt="simple")


@click.group()
@click.version_option(__version__, prog_name="rounded-ass")
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='配置文件路径')
@click.pass_context
def cli(ctx, config):
    """rounded-ass - 生成带圆角背景框的 ASS 字幕"""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config


@cli.command()
@click.option('--output', '-o', default='config/config.yaml', help='输出配置文件路径')
def init(output):
    """初始化配置文件"""
    try:
        Config().to_yaml(output)
    except OSError as e:
        click.echo(f"✗ 创建配置文件失败: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"✓ 已创建默认配置文件: {output}")


@cli.command()
@click.argument('subtitle_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('video_file', required=False, type=click.Path())
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='输出 ASS 文件（默认 <字幕文件名>.ass）')
@click.option('--font', '-f', help='字体名称（不指定则按书写系统自动选择）')
@click.option('--font-size', '-s', type=click.IntRange(min=1), help='字号（默认 48）')
@click.option('--auto-font-size', is_flag=True, help='字号按画布高度 / 20 自动推导')
@click.option('--text-color', help='文字颜色 RRGGBB')
@click.option('--bg-color', help='背景颜色 RRGGBB')
@click.option('--opacity', 'bg_alpha', type=click.IntRange(0, 255), help='背景透明度 0-255（0 = 不透明）')
@click.option('--padding-x', type=click.IntRange(min=0), help='水平内边距 (px)')
@click.option('--padding-y', type=click.IntRange(min=0), help='垂直内边距 (px)')
@click.option('--radius', type=click.FloatRange(min=0), help='圆角半径 (px，不指定则自动推导)')
@click.option('--min-width-ratio', type=click.FloatRange(0, 1), help='背景框最小宽度占画布比例')
@click.option('--enable-min-width', is_flag=True, help='启用最小宽度限制')
@click.option('--width-ratio', 'max_width_ratio', type=click.FloatRange(0, 1), help='背景框最大宽度占画布比例')
@click.option('--margin-bottom', type=click.IntRange(min=0), help='底边距 (px，不指定则自动推导)')
@click.option('--format', 'subtitle_format', type=click.Choice(['srt', 'vtt']), help='字幕格式（默认按扩展名推断）')
@click.option('--measure/--no-measure', 'use_exact_measure', default=None, help='是否使用外部精确测量')
@click.option('--measure-command', help='外部测量程序（默认 ass-measure）')
@click.option('--verbose', '-v', is_flag=True, help='输出详细日志')
@click.pass_context
def convert(ctx, subtitle_file, video_file, output, auto_font_size, enable_min_width, verbose, **options):
    """将 SRT/VTT 字幕转换为带圆角背景的 ASS 字幕"""
    try:
        config = get_config(ctx.obj.get('config_path'))
        logger = setup_logger(
            level='DEBUG' if verbose else config.logging.level,
            log_file=config.logging.file,
            log_format=config.logging.format,
        )

        # 只覆盖显式指定的选项
        explicit = {key: value for key, value in options.items() if value is not None}
        if auto_font_size:
            explicit['font_size'] = None
        if enable_min_width:
            explicit['disable_min_width'] = False
        render_options = config.render.merged(explicit)

        converter = RoundedAssConverter(
            render_options,
            probe=FFprobeCanvasProbe(config.probe.ffprobe_path, config.probe.timeout),
            default_canvas=CanvasSize(config.probe.default_width, config.probe.default_height),
        )
        report = converter.convert_file(subtitle_file, video_file, output)
    except (RoundedAssError, FileNotFoundError) as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise SystemExit(1)

    if verbose:
        click.echo(_settings_table(render_options, explicit, report))
    logger.debug(f"{report.cue_count} subtitles written")
    click.echo(f"✓ ASS file created: {Path(report.output_path)}")
