"""Terminal report rendering using Jinja2 templates.

Templates live in ``cveinfo/templates/``.  Severity labels and the CVE
header are coloured with ANSI escapes when ``color`` is set (the CLI sets
it when stdout is a terminal).
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import TrackerInfo, VulnerabilityRecord

_TEMPLATES_DIR = Path(__file__).parent / "templates"

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
UNDERLINE = "\x1b[4m"

# 24-bit foreground colours
GREEN = "\x1b[38;2;0;128;0m"
ORANGE = "\x1b[38;2;255;165;0m"
RED = "\x1b[38;2;255;0;0m"
CYAN = "\x1b[38;2;0;255;255m"

SEVERITY_STYLES = {
    "LOW": GREEN,
    "MEDIUM": ORANGE,
    "HIGH": RED,
    "CRITICAL": BOLD + RED,
}


def style_severity(severity: str, color: bool = False) -> str:
    """Colour a CVSS severity label; unknown labels are left plain."""
    style = SEVERITY_STYLES.get(severity)
    if not color or not style:
        return severity
    return f"{style}{severity}{RESET}"


def style_header(cve_id: str, color: bool = False) -> str:
    if not color:
        return cve_id
    return f"{UNDERLINE}{CYAN}{cve_id}{RESET}"


def _environment(color: bool) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(default_for_string=False, default=False),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["severity"] = lambda s: style_severity(s, color)
    env.filters["cve_header"] = lambda s: style_header(s, color)
    return env


def render_description(record: VulnerabilityRecord, no_cvss: bool = False, color: bool = False) -> str:
    """Render a CVE's description and CVSS block.

    Args:
        record: Vulnerability data to render.
        no_cvss: Skip the ``CVSS:`` block.
        color: Emit ANSI colour escapes.

    Returns:
        Rendered text, newline-terminated.
    """
    template = _environment(color).get_template("description.txt.j2")
    return template.render(record=record, show_cvss=not no_cvss and record.has_cvss)


def render_tracker_info(infos: list[TrackerInfo], color: bool = False) -> str:
    """Render per-package, per-release patch status.

    Returns:
        Rendered text; empty string when ``infos`` is empty.
    """
    template = _environment(color).get_template("tracker.txt.j2")
    return template.render(infos=infos)
