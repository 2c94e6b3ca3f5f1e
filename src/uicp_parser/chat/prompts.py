import json

from ..models.catalog import Catalog
from ..parsing.extractor import BLOCK_TAG, FENCE_CHAR


BLOCK_SYNTAX_PROMPT = """You can show rich UI components by writing UICP blocks in your reply.

Block syntax:
{fence}{tag}
{{"id": "<component id>", "payload": {{...}}}}
{fence}

Rules:
- Only use component ids listed below.
- The payload MUST contain every required field with the declared type.
- Enum fields MUST use one of the listed values.
- Write normal text before and after the block; never explain the block syntax to the user.
- Never put three backticks inside a block.
"""


def build_catalog_prompt(catalog: Catalog) -> str:
    """Builds the system prompt section describing the block syntax and catalog."""
    lines = [
        BLOCK_SYNTAX_PROMPT.format(fence=FENCE_CHAR * 3, tag=BLOCK_TAG),
        f"Available components (catalog {catalog.version}):",
    ]
    for component in catalog.components:
        header = f"- {component.id}"
        if component.category:
            header += f" [{component.category}]"
        if component.description:
            header += f": {component.description}"
        lines.append(header)
        for name, spec in component.input_schema.items():
            field_line = f"    - {name} ({spec.type.value}"
            field_line += ", required)" if spec.required else ")"
            if spec.enum_values is not None:
                field_line += f" one of {json.dumps(spec.enum_values)}"
            if spec.description:
                field_line += f": {spec.description}"
            lines.append(field_line)
        if component.example is not None:
            lines.append(f"    example payload: {json.dumps(component.example)}")
    return "\n".join(lines)
