"""Compile framework-neutral component IR into target framework source code."""

# Errors
from crossgen.errors import CodegenError as CodegenError
from crossgen.errors import FormatterError as FormatterError
from crossgen.errors import IRValidationError as IRValidationError
from crossgen.errors import UnsupportedFeatureError as UnsupportedFeatureError

# Formatting
from crossgen.formatting import Formatter as Formatter
from crossgen.formatting import PrettierFormatter as PrettierFormatter
from crossgen.formatting import identity_formatter as identity_formatter

# Generators
from crossgen.generators import SolidGenerator as SolidGenerator
from crossgen.generators import component_to_solid as component_to_solid
from crossgen.generators import get_generator as get_generator

# IR
from crossgen.ir import Binding as Binding
from crossgen.ir import Component as Component
from crossgen.ir import ComponentContext as ComponentContext
from crossgen.ir import ComponentImport as ComponentImport
from crossgen.ir import ContextGet as ContextGet
from crossgen.ir import ContextSet as ContextSet
from crossgen.ir import ElementNode as ElementNode
from crossgen.ir import ForNode as ForNode
from crossgen.ir import ForScope as ForScope
from crossgen.ir import Hook as Hook
from crossgen.ir import Hooks as Hooks
from crossgen.ir import Node as Node
from crossgen.ir import ShowNode as ShowNode
from crossgen.ir import StateValue as StateValue
from crossgen.ir import TextNode as TextNode
from crossgen.ir import component_from_json as component_from_json
from crossgen.ir import component_to_json as component_to_json
from crossgen.ir import text as text
from crossgen.ir import text_expr as text_expr

# Plugins
from crossgen.plugins import Plugin as Plugin
from crossgen.plugins import plugin as plugin
