"""Interactive time-series graphs rendered to SVG iframe pages."""

from .dataset import Annotation, Dataset, DatasetRegistry, Point, load_registry, name_from_query, parse_registry
from .errors import DatasetNotFoundError, DegenerateScaleError, GraphError, MalformedPointError
from .page import iframe_tag, render_location, render_page, render_site, render_svg
from .render import ChartRenderer, Layout, RenderContext, render_chart
from .scale import LinearScale, build_scales
from .surface import DrawingSurface, SvgSurface
from .ticks import Granularity, choose_granularity, plan_ticks

__version__ = '0.1.0'
