"""Markdown rendering of structured answer blocks."""
from typing import Sequence

from models.answer import AnswerBlock, BlockKind


def render_block(block: AnswerBlock) -> str:
    """Render a single block as markdown."""
    if block.kind == BlockKind.HEADING:
        return f"## {block.text}"
    if block.kind == BlockKind.EXCERPT:
        return f'**{block.index}. From "{block.document_name}":**\n\n{block.text}'
    if block.kind == BlockKind.RULE:
        return "---"
    if block.kind == BlockKind.BULLETS:
        bullets = "\n".join(f"• {item}" for item in block.items)
        return f"**{block.text}**\n\n{bullets}" if block.text else bullets
    if block.kind == BlockKind.NOTE:
        return f"**Note:** {block.text}"
    return block.text


def render_markdown(blocks: Sequence[AnswerBlock]) -> str:
    """Render blocks as markdown separated by blank lines."""
    return "\n\n".join(render_block(block) for block in blocks)
