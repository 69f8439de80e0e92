import re

# -- block types --
UNSTYLED = "unstyled"
CODE_BLOCK = "code-block"
ATOMIC = "atomic"

# -- entity types and mutability --
LINK = "LINK"
IMAGE = "IMAGE"
FILE = "FILE"
TABLE = "TABLE"
MUTABLE = "MUTABLE"
IMMUTABLE = "IMMUTABLE"

# -- inline styles --
BOLD = "BOLD"
CODE = "CODE"
HIGHLIGHT = "HIGHLIGHT"
ITALIC = "ITALIC"
STRIKETHROUGH = "STRIKETHROUGH"
UNDERLINE = "UNDERLINE"

HTML_TAG_TO_INLINE_STYLE = {
    "b": BOLD,
    "code": CODE,
    "del": STRIKETHROUGH,
    "em": ITALIC,
    "i": ITALIC,
    "s": STRIKETHROUGH,
    "strike": STRIKETHROUGH,
    "strong": BOLD,
    "u": UNDERLINE,
    "mark": HIGHLIGHT,
}

# -- https://developer.mozilla.org/en-US/docs/Web/CSS/font-weight --
BOLD_VALUES = ("bold", "bolder", "500", "600", "700", "800", "900")
NOT_BOLD_VALUES = ("light", "lighter", "normal", "100", "200", "300", "400")

# -- attribute whitelists for entity data --
ANCHOR_ATTRIBUTES = ("className", "href", "rel", "target", "title")
IMAGE_ATTRIBUTES = ("alt", "className", "height", "src", "width")
FILE_ATTRIBUTES = ("type", "objectkey", "bucketname", "name", "size")

LINK_SCHEMES = ("http", "https", "mailto", "tel")

# -- single character anchoring an image, file or table entity in the text. A space or a newline
# -- would be trimmed away.
ENTITY_PLACEHOLDER = "\U0001F4F7"

LIST_ITEM_DEPTH_CLASSES = {
    **{f"depth{depth}": depth for depth in range(5)},
    **{f"public-DraftStyleDefault-depth{depth}": depth for depth in range(5)},
}

# -- nodes with these classes are editor chrome, never content --
SKIPPED_NODE_CLASSES = ("brick-code-block-toolbar", "not-display-enter")

FILE_ENTITY_TITLE = "file-entity"
TABLE_CELL_CLASS = "brick-table-td"
CELL_EDITOR_ROOT_CLASS = "DraftEditor-root"
DEFAULT_COLUMN_WIDTH = 100

MULTI_BLOCK_RE = re.compile(r"multi-(h[\d])?-?([\w]+)?")

# -- used for removing funky characters from pasted HTML --
NBSP = "&nbsp;"
SPACE = " "
REGEX_CR = re.compile("\r")
REGEX_LF = re.compile("\n")
REGEX_LEADING_LF = re.compile("^\n")
REGEX_NBSP = re.compile(NBSP)
REGEX_CARRIAGE = re.compile("&#13;?")
REGEX_ZWS = re.compile("&#8203;?")
