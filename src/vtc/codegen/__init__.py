from vtc.codegen.codegen import CodegenContext as CodegenContext
from vtc.codegen.codegen import CodegenResult as CodegenResult
from vtc.codegen.codegen import generate as generate
