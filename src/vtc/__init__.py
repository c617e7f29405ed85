"""Template-to-render-function compiler."""

# AST
from vtc.ast import AttributeNode as AttributeNode
from vtc.ast import CommentNode as CommentNode
from vtc.ast import ConstantType as ConstantType
from vtc.ast import DirectiveNode as DirectiveNode
from vtc.ast import ElementNode as ElementNode
from vtc.ast import ElementType as ElementType
from vtc.ast import ForNode as ForNode
from vtc.ast import IfBranchNode as IfBranchNode
from vtc.ast import IfNode as IfNode
from vtc.ast import InterpolationNode as InterpolationNode
from vtc.ast import Node as Node
from vtc.ast import NodeType as NodeType
from vtc.ast import RootNode as RootNode
from vtc.ast import SimpleExpressionNode as SimpleExpressionNode
from vtc.ast import SourceLocation as SourceLocation
from vtc.ast import TextNode as TextNode

# Codegen
from vtc.codegen import CodegenResult as CodegenResult
from vtc.codegen import generate as generate

# Compile
from vtc.compile import base_compile as base_compile
from vtc.compile import get_base_transform_preset as get_base_transform_preset

# Errors
from vtc.errors import CompilerError as CompilerError
from vtc.errors import ErrorCodes as ErrorCodes
from vtc.errors import create_compiler_error as create_compiler_error

# Options
from vtc.options import CompilerOptions as CompilerOptions

# Parser
from vtc.parser import TextMode as TextMode
from vtc.parser import base_parse as base_parse

# Runtime helpers
from vtc.runtime_helpers import RuntimeHelper as RuntimeHelper

# Shared
from vtc.shared import PatchFlags as PatchFlags
from vtc.shared import SlotFlags as SlotFlags

# Transform
from vtc.transform import DirectiveTransformResult as DirectiveTransformResult
from vtc.transform import TransformContext as TransformContext
from vtc.transform import transform as transform
