from draftkit.transaction.insert_text import get_op, insert_text_into_content_state

__all__ = ["get_op", "insert_text_into_content_state"]
