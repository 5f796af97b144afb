"""Built-in slip templates.

A template is a theme plus the static fragments drawn before any recognized
text. The ``kasikorn`` layout was designed on an 800x1200 canvas; its
positions are stored as percentages so it scales with the canvas policy.
"""
from __future__ import annotations

from errors import ConfigError
from schemas import FixedSize, FontSizeClass, GradientStop, HorizontalRule, Template, TextFragment, ThemeSpec

DESIGN_WIDTH = 800
DESIGN_HEIGHT = 1200


def _label(text: str, px: float, py: float, size: FontSizeClass, align: str = "left") -> TextFragment:
	return TextFragment(
		text=text,
		x=px / DESIGN_WIDTH * 100,
		y=py / DESIGN_HEIGHT * 100,
		font_size_class=size,
		align=align,
	)


def _rule(py: float) -> HorizontalRule:
	return HorizontalRule(y=py / DESIGN_HEIGHT * 100, inset_px=50, color="#ffffff", opacity=0.3)


AURORA = Template(
	name="aurora",
	theme=ThemeSpec(
		gradient_stops=[GradientStop(offset=0.0, color="#7c3aed"), GradientStop(offset=1.0, color="#c026d3")],
		direction="diagonal",
		texture_line_spacing_px=20,
		texture_opacity=0.05,
	),
)

KASIKORN = Template(
	name="kasikorn",
	theme=ThemeSpec(
		gradient_stops=[GradientStop(offset=0.0, color="#a8305a"), GradientStop(offset=1.0, color="#7b3897")],
		direction="diagonal",
		texture_line_spacing_px=20,
		texture_opacity=0.05,
		rules=[_rule(230), _rule(350), _rule(660)],
	),
	canvas=FixedSize(width=DESIGN_WIDTH, height=DESIGN_HEIGHT),
	fragments=[
		_label("KASIKORN BANK", 400, 160, FontSizeClass.LARGE, "center"),
		_label("จาก (From)", 60, 280, FontSizeClass.MEDIUM),
		_label("ผู้ส่ง (Sender)", 60, 315, FontSizeClass.LARGE),
		_label("→", 400, 315, FontSizeClass.LARGE, "center"),
		_label("ถึง (To)", 740, 280, FontSizeClass.MEDIUM, "right"),
		_label("ผู้รับ (Receiver)", 740, 315, FontSizeClass.LARGE, "right"),
		_label("เลขที่อ้างอิง (Reference)", 60, 400, FontSizeClass.MEDIUM),
		_label("XXXXXXXXXX", 60, 430, FontSizeClass.LARGE),
		_label("จำนวนเงิน (Amount)", 60, 480, FontSizeClass.MEDIUM),
		_label("฿ X,XXX.XX", 60, 520, FontSizeClass.LARGE),
		_label("ค่าธรรมเนียม (Fee)", 60, 580, FontSizeClass.MEDIUM),
		_label("฿ 0.00", 60, 610, FontSizeClass.LARGE),
		_label("สแกนตรวจสอบสลิป", 400, 960, FontSizeClass.SMALL, "center"),
	],
)

TEMPLATES: dict[str, Template] = {template.name: template for template in (AURORA, KASIKORN)}
DEFAULT_TEMPLATE = AURORA.name


def get_template(name: str) -> Template:
	try:
		return TEMPLATES[name]
	except KeyError:
		raise ConfigError("UnknownTemplate", f"{name!r} (available: {', '.join(sorted(TEMPLATES))})") from None
