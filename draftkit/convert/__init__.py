from draftkit.convert.builder import ContentBlocksBuilder, ConvertedBlocks
from draftkit.convert.convert import convert_from_html_to_content_blocks

__all__ = ["ContentBlocksBuilder", "ConvertedBlocks", "convert_from_html_to_content_blocks"]
