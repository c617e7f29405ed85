import pytest
from vtc import CompilerError, CompilerOptions, RootNode, TransformContext


@pytest.fixture
def errors() -> list[CompilerError]:
	return []


@pytest.fixture
def context(errors: list[CompilerError]) -> TransformContext:
	"""A transform context over an empty root, collecting errors into ``errors``."""
	return TransformContext(RootNode(), CompilerOptions(on_error=errors.append))
