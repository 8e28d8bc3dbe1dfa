"""
Multi-format export service for changelog-digest.

Renders a categorized digest as Markdown, HTML, or JSON.
"""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from typing import Optional

from core.types import Digest, ExportOptions, OutputFormat
from core.config import ChangelogDigestConfig, get_config

logger = logging.getLogger(__name__)

EMPTY_DIGEST_TEXT = "No notable changes in this period."
FOOTER_TEXT = "Generated with changelog-digest"


class Exporter:
    """
    Service for rendering digests in multiple formats.
    """

    def __init__(self, config: Optional[ChangelogDigestConfig] = None):
        """
        Initialize the exporter.

        Args:
            config: Configuration instance. If None, uses global config.
        """
        self.config = config if config is not None else get_config()
        logger.debug(f"Exporter initialized (default format: {self.config.export.default_format})")

    def default_options(self) -> ExportOptions:
        return ExportOptions(
            format=self.config.export.default_format,
            audience=self.config.digest.audience,
            title=self.config.export.title,
        )

    def export(self, digest: Digest, options: Optional[ExportOptions] = None) -> str:
        """
        Render a digest to the format named in the options.

        Args:
            digest: Digest to render
            options: Export options. If None, uses configured defaults.

        Returns:
            Formatted string content
        """
        if options is None:
            options = self.default_options()

        logger.info(f"Exporting digest to {options.format} format")

        if options.format is OutputFormat.HTML:
            return self.to_html(digest, options)
        if options.format is OutputFormat.JSON:
            return self.to_json(digest, options)
        return self.to_markdown(digest, options)

    def to_markdown(self, digest: Digest, options: ExportOptions) -> str:
        """
        Render a digest as Markdown.

        Only sections with items get a heading.
        """
        lines: list[str] = []

        lines.append(f"# {options.title}")
        lines.append("")
        lines.append(f"**Period:** {digest.date_range}")
        lines.append(f"**Audience:** {options.audience.value}")
        lines.append("")

        if digest.is_empty:
            lines.append(EMPTY_DIGEST_TEXT)
            lines.append("")

        for section in digest.sections:
            if section.is_empty:
                continue
            lines.append(f"## {section.title}")
            lines.append("")
            for item in section.items:
                lines.append(f"- {item}")
            lines.append("")

        lines.append("---")
        lines.append("")
        lines.append(f"*{FOOTER_TEXT}*")

        logger.debug(f"Generated Markdown export ({len(lines)} lines)")
        return "\n".join(lines) + "\n"

    def to_html(self, digest: Digest, options: ExportOptions) -> str:
        """
        Render a digest as a standalone HTML page.

        All digest text is escaped.
        """
        body: list[str] = []
        body.append(f"<h1>{html.escape(options.title)}</h1>")
        body.append('<div class="header-info">')
        body.append(f"<p><strong>Period:</strong> {html.escape(str(digest.date_range))}</p>")
        body.append(f"<p><strong>Audience:</strong> {html.escape(options.audience.value)}</p>")
        body.append("</div>")

        if digest.is_empty:
            body.append(f"<p>{EMPTY_DIGEST_TEXT}</p>")

        for section in digest.sections:
            if section.is_empty:
                continue
            body.append(f'<h2 class="{section.category.value}">{html.escape(section.title)}</h2>')
            body.append("<ul>")
            for item in section.items:
                body.append(f"  <li>{html.escape(item)}</li>")
            body.append("</ul>")

        body.append("<hr>")
        body.append(f"<p><em>{FOOTER_TEXT}</em></p>")
        html_body = "\n".join(body)

        page = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(options.title)} - {html.escape(str(digest.date_range))}</title>
    <style>
        :root {{
            --bg-color: #ffffff;
            --text-color: #24292e;
            --border-color: #e1e4e8;
            --header-bg: #f6f8fa;
        }}

        @media (prefers-color-scheme: dark) {{
            :root {{
                --bg-color: #0d1117;
                --text-color: #c9d1d9;
                --border-color: #30363d;
                --header-bg: #161b22;
            }}
        }}

        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Noto Sans', Helvetica, Arial, sans-serif;
            line-height: 1.6;
            color: var(--text-color);
            background-color: var(--bg-color);
            max-width: 900px;
            margin: 0 auto;
            padding: 20px;
        }}

        h1 {{ font-size: 2em; border-bottom: 1px solid var(--border-color); padding-bottom: 0.3em; }}
        h2 {{ font-size: 1.5em; border-bottom: 1px solid var(--border-color); padding-bottom: 0.3em; }}

        ul {{ padding-left: 2em; }}
        li {{ margin-top: 0.25em; }}

        hr {{
            height: 0.25em;
            padding: 0;
            margin: 24px 0;
            background-color: var(--border-color);
            border: 0;
        }}

        .header-info {{
            background-color: var(--header-bg);
            padding: 16px;
            border-radius: 6px;
            margin-bottom: 24px;
        }}
    </style>
</head>
<body>
{html_body}
</body>
</html>
"""

        logger.debug("Generated HTML export")
        return page

    def to_json(self, digest: Digest, options: ExportOptions) -> str:
        """
        Render a digest as JSON.

        All four categories are always present.
        """
        data = {
            "title": options.title,
            "period": {
                "start": digest.date_range.start,
                "end": digest.date_range.end,
            },
            "audience": options.audience.value,
            "sections": {
                section.category.value: list(section.items) for section in digest.sections
            },
        }

        logger.debug(f"Generated JSON export ({digest.total_items} items)")
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    def save_to_file(
        self,
        digest: Digest,
        output_path: Path,
        options: Optional[ExportOptions] = None,
    ) -> Path:
        """
        Render a digest and save it to a file.

        Args:
            digest: Digest to render
            output_path: Destination file
            options: Export options. If None, uses configured defaults.

        Returns:
            Resolved path of the saved file
        """
        content = self.export(digest, options)

        output_path = Path(output_path).expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info(f"Export saved to: {output_path}")

        return output_path
