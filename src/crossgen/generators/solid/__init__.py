"""SolidJS backend."""

from crossgen.generators.solid.blocks import block_to_solid as block_to_solid
from crossgen.generators.solid.blocks import (
	collect_class_string as collect_class_string,
)
from crossgen.generators.solid.generator import (
	SolidGenerator as SolidGenerator,
)
from crossgen.generators.solid.generator import (
	add_provider_components as add_provider_components,
)
from crossgen.generators.solid.generator import collect_imports as collect_imports
from crossgen.generators.solid.generator import (
	component_to_solid as component_to_solid,
)
from crossgen.generators.solid.generator import (
	process_dynamic_components as process_dynamic_components,
)
from crossgen.generators.solid.options import SolidOptions as SolidOptions
from crossgen.generators.solid.state import get_state as get_state
from crossgen.generators.solid.state import update_state_code as update_state_code
from crossgen.generators.solid.styles import collect_css as collect_css
