# toprompt/core/formatting.py
"""
Renders a FileCollection into the final bundle string, either as Markdown
(heading plus fenced code block per file) or as <file> elements.
"""
from typing import Iterable, List
from xml.sax.saxutils import escape
import structlog

from toprompt.config.settings import OutputFormat
from toprompt.core.processing import FileRecord

log = structlog.get_logger(__name__)

XML_ROOT_TAG = "files"
XML_FILE_TAG = "file"


def fence_for(content: str) -> str:
    # the fence must be longer than any backtick run already in the content.
    backtick_seq = "```"
    while backtick_seq in content:
        backtick_seq += "`"
    return backtick_seq


def _with_trailing_newline(content: str) -> str:
    if not content or content.endswith("\n"):
        return content
    return content + "\n"


def format_markdown_record(record: FileRecord) -> str:
    fence = fence_for(record.content)
    body = _with_trailing_newline(record.content)
    return f"# {record.display_path}\n{fence}{record.language_tag}\n{body}{fence}"


def escape_xml_content(content: str) -> str:
    # only a closing file tag inside the content could end the element early.
    return content.replace(f"</{XML_FILE_TAG}", f"&lt;/{XML_FILE_TAG}")


def format_xml_record(record: FileRecord) -> str:
    path_attr = escape(record.display_path, {'"': "&quot;"})
    return f'<{XML_FILE_TAG} path="{path_attr}">{escape_xml_content(record.content)}</{XML_FILE_TAG}>'


def format_markdown(records: Iterable[FileRecord]) -> str:
    sections = [format_markdown_record(r) for r in records]
    if not sections:
        return ""
    return "\n\n".join(sections) + "\n"


def format_xml(records: Iterable[FileRecord], wrap: bool = True) -> str:
    sections: List[str] = [format_xml_record(r) for r in records]
    if wrap:
        sections = [f"<{XML_ROOT_TAG}>", *sections, f"</{XML_ROOT_TAG}>"]
    if not sections:
        return ""
    return "\n".join(sections) + "\n"


def format_bundle(records: Iterable[FileRecord], output_format: OutputFormat = OutputFormat.MARKDOWN) -> str:
    """Renders records in order; an empty input gives an empty or near-empty bundle."""
    records = list(records)
    log.debug("formatting_bundle", output_format=output_format.value, files=len(records))
    if output_format == OutputFormat.XML:
        return format_xml(records)
    return format_markdown(records)
