"""Common literal values used across pagewright.

These constants keep buffer sizes, directive names, and file suffixes
centralized so the pipeline, configuration loader, and tests import the same
values without drifting. Intended for internal use within the pagewright
package.

Examples
--------
>>> from pagewright import _constants
>>> _constants.DEFAULT_OUTPUT_CAPACITY > _constants.DEFAULT_INPUT_CAPACITY
True
>>> sorted(_constants.ASSET_ANCHORS)
['scripts', 'styles']
"""

DEFAULT_INPUT_CAPACITY = 1024 * 1024
DEFAULT_OUTPUT_CAPACITY = 4 * 1024 * 1024
DEFAULT_MAX_DEPTH = 16
DEFAULT_PYGMENTS_STYLE = "monokai"

CONTENT_DIRECTIVE = "content"
COMPONENT_DIRECTIVE = "component"
STYLES_ANCHOR = "styles"
SCRIPTS_ANCHOR = "scripts"
ASSET_ANCHORS = frozenset({STYLES_ANCHOR, SCRIPTS_ANCHOR})

HIGHLIGHT_CSS_SLOT = "highlight_css"
TEMPLATE_KEY = "template"
COMPONENT_SUFFIX = ".py"
PAGE_SUFFIX = ".md"
OUTPUT_SUFFIX = ".html"
