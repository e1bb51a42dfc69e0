"""Catalog of the supported output formats."""

from models import OutputFormat, OutputFormatSpec
from prompts import JSON_EXTRACT_PROMPT, KEY_VALUE_PAIRS_PROMPT, SUMMARY_PROMPT


class UnknownFormat(Exception):
    """Requested output format is not in the catalog."""


OUTPUT_FORMATS: tuple[OutputFormatSpec, ...] = (
    OutputFormatSpec(
        id=OutputFormat.SUMMARY,
        label="Summary",
        prompt_base=SUMMARY_PROMPT,
        requires_structured_output=False,
    ),
    OutputFormatSpec(
        id=OutputFormat.JSON_EXTRACT,
        label="JSON Structure",
        prompt_base=JSON_EXTRACT_PROMPT,
        requires_structured_output=True,
    ),
    OutputFormatSpec(
        id=OutputFormat.KEY_VALUE_PAIRS,
        label="Key-Value Pairs",
        prompt_base=KEY_VALUE_PAIRS_PROMPT,
        requires_structured_output=False,
    ),
)

_BY_ID: dict[str, OutputFormatSpec] = {spec.id.value: spec for spec in OUTPUT_FORMATS}


def lookup(format_id: OutputFormat | str) -> OutputFormatSpec:
    key = format_id.value if isinstance(format_id, OutputFormat) else format_id
    spec = _BY_ID.get(key)
    if spec is None:
        raise UnknownFormat("Invalid output format selected.")
    return spec
