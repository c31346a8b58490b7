"""Target backends. Importing a backend module registers it."""

from crossgen.generators.base import GENERATOR_REGISTRY as GENERATOR_REGISTRY
from crossgen.generators.base import Generator as Generator
from crossgen.generators.base import get_generator as get_generator
from crossgen.generators.base import merge_options as merge_options
from crossgen.generators.base import register_generator as register_generator
from crossgen.generators.solid import SolidGenerator as SolidGenerator
from crossgen.generators.solid import component_to_solid as component_to_solid
