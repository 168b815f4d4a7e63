"""Generate JavaScript source from nested form trees."""

# Configuration
from jsforms.config import EmitConfig as EmitConfig

# Emission
from jsforms.emitter import SPECIAL_FORMS as SPECIAL_FORMS
from jsforms.emitter import Emitter as Emitter
from jsforms.emitter import js as js
from jsforms.emitter import statement as statement
from jsforms.emitter import valid_identifier as valid_identifier

# Errors
from jsforms.errors import ExpansionError as ExpansionError
from jsforms.errors import InvalidIdentifier as InvalidIdentifier
from jsforms.errors import JsFormsError as JsFormsError
from jsforms.errors import MalformedForm as MalformedForm
from jsforms.errors import MalformedTry as MalformedTry
from jsforms.errors import TemplateError as TemplateError
from jsforms.errors import UnknownForm as UnknownForm
from jsforms.errors import UnsupportedArity as UnsupportedArity

# Custom forms
from jsforms.macros import DEFAULT_REGISTRY as DEFAULT_REGISTRY
from jsforms.macros import FormRegistry as FormRegistry
from jsforms.macros import deftemplate as deftemplate
from jsforms.macros import expand as expand
from jsforms.macros import expand_once as expand_once
from jsforms.macros import jsmacro as jsmacro
from jsforms.macros import register_custom_form as register_custom_form

# Nodes
from jsforms.nodes import Form as Form
from jsforms.nodes import Keyword as Keyword
from jsforms.nodes import MapLit as MapLit
from jsforms.nodes import Node as Node
from jsforms.nodes import Sym as Sym
from jsforms.nodes import Vector as Vector
from jsforms.nodes import form as form
from jsforms.nodes import kw as kw
from jsforms.nodes import obj as obj
from jsforms.nodes import show as show
from jsforms.nodes import sym as sym
from jsforms.nodes import vec as vec

# Hoisting
from jsforms.scope import HoistingContext as HoistingContext

# Templates
from jsforms.template import Hole as Hole
from jsforms.template import fill as fill
from jsforms.template import fragment as fragment
from jsforms.template import hole as hole
from jsforms.template import splice as splice
